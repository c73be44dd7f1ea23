"""
Rule Mining Experiment: Ingredient Co-occurrence

Loads the stall's usage history, mines frequent ingredient combinations and
association rules, prints a short report and saves Excel and text results.
"""
import logging
from pathlib import Path
from datetime import datetime

from ingredient_mining.experiments.base import load_data, run_rule_mining
from ingredient_mining.experiments.config import DataConfig, MinerConfig, RuleMiningConfig
from ingredient_mining.postprocessing.insights import summarize_analysis
from ingredient_mining.rule_mining.base import InsufficientDataError
from ingredient_mining.utils.excel_io import save_rule_mining_results, save_rules_text

logger = logging.getLogger(__name__)

# =============================================================================
# CONFIGURATION
# =============================================================================

HISTORY_PATH = "../../data/raw/usage_history.csv"
INGREDIENTS_PATH = "../../data/raw/ingredients.csv"
OUTPUT_DIR = "../../out/ingredient_rules"

MINER_TYPE = 'apriori'  # 'apriori', 'mlxtend'
MIN_SUPPORT = 0.4
MIN_CONFIDENCE = 0.6
MAX_ITEMSET_SIZE = 3


# =============================================================================
# EXPERIMENT
# =============================================================================

def run_experiment(
    data_config: DataConfig = None,
    mining_config: RuleMiningConfig = None,
    output_dir: str = OUTPUT_DIR
):
    """Returns the analysis summary, or None when there is too little history."""
    data_config = data_config or DataConfig(history_path=HISTORY_PATH, ingredients_path=INGREDIENTS_PATH)
    mining_config = mining_config or RuleMiningConfig(
        miner_type=MINER_TYPE,
        miner_config=MinerConfig(
            min_support=MIN_SUPPORT,
            min_confidence=MIN_CONFIDENCE,
            max_itemset_size=MAX_ITEMSET_SIZE
        ),
        mode='both'
    )

    print("=" * 70)
    print("INGREDIENT ASSOCIATION EXPERIMENT")
    print("=" * 70)

    print("\n[1] Loading usage history...")
    transactions = load_data(data_config)
    print(f"  Transactions: {len(transactions)}")

    print("\n[2] Mining itemsets and rules...")
    try:
        results, stats = run_rule_mining(transactions, mining_config)
    except InsufficientDataError as e:
        logger.warning("Skipping analysis: %s", e)
        print(f"  {e}")
        print("  Record more usage to enable association analysis.")
        return None

    itemsets, rules = results['itemsets'], results['rules']
    print(f"  Frequent itemsets: {len(itemsets)}")
    print(f"  Rules: {len(rules)}")

    summary = summarize_analysis(transactions, itemsets, rules)

    print(f"\n{'=' * 70}")
    print("SAVING RESULTS")
    print("=" * 70)

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filename = f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_ingredient_rules"

    parameters = {
        **data_config.to_dict(),
        **mining_config.to_dict(),
        'timestamp': datetime.now().isoformat()
    }
    save_rule_mining_results(
        itemsets, rules, stats,
        output_path=output_path / filename,
        parameters=parameters,
        metadata={'dataset': data_config.name}
    )
    save_rules_text(
        rules,
        output_path=output_path / filename,
        title="INGREDIENT ASSOCIATION RULES",
        itemsets=itemsets,
        metadata={'transactions': len(transactions), **mining_config.miner_config.to_dict()}
    )

    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    for line in summary['insights']:
        print(f"  {line}")
    for rule in summary['top_rules']:
        print(f"    {rule['description']}")
    print("=" * 70)

    return summary


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_experiment()
