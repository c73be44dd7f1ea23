"""
MLxtend-based mining over the same transactions as the Apriori miner.

Runs mlxtend's ``apriori`` and ``association_rules`` and converts the result
frames into ``Itemset`` and ``AssociationRule`` objects, so both backends can
be swapped behind ``create_miner`` and compared against each other.
"""
import logging
from typing import List

import pandas as pd
from mlxtend.frequent_patterns import apriori, association_rules
from mlxtend.preprocessing import TransactionEncoder

from ingredient_mining.rule_mining.base import AssociationMiner, Itemset, AssociationRule

logger = logging.getLogger(__name__)


class MLxtendMiner(AssociationMiner):
    """
    MLxtend Apriori miner.

    mlxtend rejects a non-positive ``min_support``, so the threshold passed
    to it is floored at one transaction (1 / n). Combinations that never
    occur are therefore not reported by this backend.
    """

    algorithm_name = 'MLxtend_apriori'

    def _prepare_data(self) -> pd.DataFrame:
        """One-hot encode transactions into a boolean item matrix."""
        rows = [sorted(transaction.items) for transaction in self.transactions]
        te = TransactionEncoder()
        te_array = te.fit(rows).transform(rows)
        return pd.DataFrame(te_array, columns=te.columns_)

    def _frequent_frame(self) -> pd.DataFrame:
        self._check_transactions()
        df_encoded = self._prepare_data()
        if df_encoded.shape[1] == 0:
            return pd.DataFrame(columns=['support', 'itemsets'])

        total = len(self.transactions)
        return apriori(
            df_encoded,
            min_support=max(self.min_support, 1 / total),
            use_colnames=True,
            max_len=self.max_itemset_size
        )

    def frequent_itemsets(self) -> List[Itemset]:
        frequent_df = self._frequent_frame()
        total = len(self.transactions)

        itemsets = []
        for _, row in frequent_df.iterrows():
            support = float(row['support'])
            # support is count / total here, so the product is an integer up to float error
            itemsets.append(Itemset(
                items=tuple(sorted(row['itemsets'])),
                support=support,
                count=int(round(support * total))
            ))

        logger.debug("mlxtend found %d frequent itemsets", len(itemsets))
        return sorted(itemsets, key=lambda itemset: itemset.support, reverse=True)

    def association_rules(self) -> List[AssociationRule]:
        frequent_df = self._frequent_frame()
        if len(frequent_df) == 0:
            return []

        rules_df = association_rules(
            frequent_df,
            num_itemsets=len(self.transactions),
            metric='confidence',
            min_threshold=self.min_confidence
        )

        rules = []
        for _, row in rules_df.iterrows():
            rules.append(AssociationRule(
                antecedent=tuple(sorted(row['antecedents'])),
                consequent=tuple(sorted(row['consequents'])),
                confidence=float(row['confidence']),
                lift=float(row['lift']),
                support=float(row['support'])
            ))

        return sorted(rules, key=lambda rule: rule.confidence, reverse=True)
