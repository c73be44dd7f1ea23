import logging
from typing import List, Dict, Any, Sequence, Tuple, Union

from ingredient_mining.preprocessing.transactions import (
    load_table, resolve_usage_frame, transactions_from_frame
)
from ingredient_mining.rule_mining.apriori_miner import AprioriMiner
from ingredient_mining.rule_mining.base import AssociationMiner, Transaction
from ingredient_mining.postprocessing.rule import filter_rules, filter_rules_by_pattern, filter_itemsets

from .config import DataConfig, RuleMiningConfig, FilterConfig, PatternFilterConfig

logger = logging.getLogger(__name__)

_ITEMSET_METRICS = ('support', 'count')


def load_data(config: DataConfig) -> List[Transaction]:
    """
    Load usage history into transactions.

    With an ingredient catalogue, ``item_col`` holds ingredient ids that are
    resolved to names. Without one, ``item_col`` already holds names.
    """
    usage_df = load_table(config.history_path)
    if config.ingredients_path:
        ingredients_df = load_table(config.ingredients_path)
        return resolve_usage_frame(
            usage_df, ingredients_df,
            id_col=config.record_col,
            ingredient_id_col=config.item_col
        )
    return transactions_from_frame(usage_df, id_col=config.record_col, item_col=config.item_col)


def create_miner(config: RuleMiningConfig, transactions: Sequence[Transaction]) -> AssociationMiner:
    miner_type = config.miner_type.lower()
    cfg = config.miner_config

    if miner_type == 'apriori':
        miner_cls = AprioriMiner
    elif miner_type == 'mlxtend':
        from ingredient_mining.rule_mining.mlxtend_miner import MLxtendMiner
        miner_cls = MLxtendMiner
    else:
        raise ValueError(f"Unknown miner type: {miner_type}")

    return miner_cls(
        transactions,
        min_support=cfg.min_support,
        min_confidence=cfg.min_confidence,
        max_itemset_size=cfg.max_itemset_size,
        min_transactions=cfg.min_transactions
    )


def apply_filters(
    data: List,
    filters: List[Union[FilterConfig, PatternFilterConfig]],
    mode: str = 'rules'
) -> List:
    """
    Apply filters in order.

    Itemsets only take support/count metric filters; pattern filters apply
    to rules alone.
    """
    if not filters:
        return data

    result = data
    for f in filters:
        if isinstance(f, PatternFilterConfig):
            if mode == 'rules':
                result = filter_rules_by_pattern(
                    result,
                    antecedent_contains=f.antecedent_contains,
                    consequent_contains=f.consequent_contains,
                    antecedent_excludes=f.antecedent_excludes,
                    consequent_excludes=f.consequent_excludes,
                    match_any=f.match_any
                )
        elif mode == 'rules':
            result = filter_rules(result, criterion=f.metric, threshold=f.threshold)
        elif f.metric in _ITEMSET_METRICS:
            result, _ = filter_itemsets(result, criterion=f.metric, threshold=f.threshold)

    return result


def run_rule_mining(
    transactions: Sequence[Transaction],
    config: RuleMiningConfig
) -> Tuple[Dict[str, List], Dict[str, Any]]:
    """
    Run itemset and/or rule mining according to ``config.mode``.

    Raises:
        InsufficientDataError: fewer transactions than the miner accepts
        ValueError: unknown miner type or mode
    """
    mode = config.mode
    if mode not in ('itemsets', 'rules', 'both'):
        raise ValueError(f"Unknown mode: {mode}")

    miner = create_miner(config, transactions)
    logger.info("Running %r", miner)

    results = {'itemsets': [], 'rules': []}
    stats = {}

    if mode in ['itemsets', 'both']:
        itemsets, itemset_stats = miner.mine_itemsets()
        itemsets = apply_filters(itemsets, config.filters, mode='itemsets')
        results['itemsets'] = itemsets
        stats['itemsets'] = itemset_stats
        stats['itemsets']['count'] = len(itemsets)

    if mode in ['rules', 'both']:
        rules, rule_stats = miner.mine_rules()
        rules = apply_filters(rules, config.filters, mode='rules')
        results['rules'] = rules
        stats['rules'] = rule_stats
        stats['rules']['count'] = len(rules)

    return results, stats
