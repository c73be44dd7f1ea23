"""
Level-wise Apriori miner for ingredient co-occurrence.

Candidates of size k are built by joining frequent (k-1)-itemsets that share
their first k-2 items in sorted order. Expansion stops at the first empty
level or at ``max_itemset_size``, whichever comes first. The size bound keeps
the subset enumeration of rule derivation small; it is not needed for
correctness.
"""
import logging
import math
from typing import FrozenSet, Iterable, List, Tuple

from ingredient_mining.rule_mining.base import AssociationMiner, Itemset, AssociationRule

logger = logging.getLogger(__name__)


class AprioriMiner(AssociationMiner):
    """
    Apriori frequent itemset and association rule miner.

    Every support value comes from a full scan of the transactions, so
    antecedent and consequent supports used for rules agree with the
    itemset supports by construction.
    """

    algorithm_name = 'Apriori'

    def frequent_itemsets(self) -> List[Itemset]:
        self._check_transactions()

        items = self._unique_items()
        current = self._frequent_from_candidates([(item,) for item in items])
        frequent = list(current)
        logger.debug("L1: %d of %d items frequent", len(current), len(items))

        k = 2
        while current and k <= self.max_itemset_size:
            candidates = self._generate_candidates(current, k)
            current = self._frequent_from_candidates(candidates)
            logger.debug("L%d: %d of %d candidates frequent", k, len(current), len(candidates))
            frequent.extend(current)
            k += 1

        return sorted(frequent, key=lambda itemset: itemset.support, reverse=True)

    def association_rules(self) -> List[AssociationRule]:
        rules = []

        for itemset in self.frequent_itemsets():
            if len(itemset.items) < 2:
                continue

            for antecedent in self._proper_subsets(itemset.items):
                consequent = tuple(item for item in itemset.items if item not in antecedent)

                antecedent_support = self.support(antecedent)
                consequent_support = self.support(consequent)
                if antecedent_support <= 0 or consequent_support <= 0:
                    logger.debug("Skipping %s -> %s: zero support", antecedent, consequent)
                    continue

                confidence = itemset.support / antecedent_support
                lift = confidence / consequent_support
                if not (math.isfinite(confidence) and math.isfinite(lift)):
                    logger.debug("Skipping %s -> %s: non-finite metrics", antecedent, consequent)
                    continue

                if confidence >= self.min_confidence:
                    rules.append(AssociationRule(
                        antecedent=antecedent,
                        consequent=consequent,
                        confidence=confidence,
                        lift=lift,
                        support=itemset.support
                    ))

        return sorted(rules, key=lambda rule: rule.confidence, reverse=True)

    def support(self, items: Iterable[str]) -> float:
        """Fraction of transactions containing every item in ``items``."""
        self._check_transactions()
        return self._count(frozenset(items)) / len(self.transactions)

    def _count(self, items: FrozenSet[str]) -> int:
        return sum(1 for transaction in self.transactions if items <= transaction.items)

    def _unique_items(self) -> List[str]:
        items = set()
        for transaction in self.transactions:
            items.update(transaction.items)
        return sorted(items)

    def _frequent_from_candidates(self, candidates: List[Tuple[str, ...]]) -> List[Itemset]:
        total = len(self.transactions)
        frequent = []
        for candidate in candidates:
            count = self._count(frozenset(candidate))
            support = count / total
            if support >= self.min_support:
                frequent.append(Itemset(items=candidate, support=support, count=count))
        return frequent

    @staticmethod
    def _generate_candidates(previous: List[Itemset], k: int) -> List[Tuple[str, ...]]:
        """Join (k-1)-itemsets sharing their first k-2 sorted items into k-item candidates."""
        candidates = []
        seen = set()

        for i in range(len(previous)):
            first = previous[i].items
            for j in range(i + 1, len(previous)):
                second = previous[j].items
                if first[:k - 2] != second[:k - 2]:
                    continue

                candidate = tuple(sorted(set(first) | set(second)))
                if len(candidate) == k and candidate not in seen:
                    seen.add(candidate)
                    candidates.append(candidate)

        return candidates

    @staticmethod
    def _proper_subsets(items: Tuple[str, ...]) -> List[Tuple[str, ...]]:
        """All non-empty proper subsets, enumerated by bitmask."""
        n = len(items)
        subsets = []
        for mask in range(1, 2 ** n - 1):
            subsets.append(tuple(items[j] for j in range(n) if mask & (1 << j)))
        return subsets
