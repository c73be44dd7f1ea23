"""
Base interfaces and result types for association mining.
"""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple, Any


class InsufficientDataError(ValueError):
    """Raised when there are too few transactions to compute support."""

    def __init__(self, num_transactions: int, min_transactions: int):
        self.num_transactions = num_transactions
        self.min_transactions = min_transactions
        super().__init__(
            f"Association analysis needs at least {min_transactions} transactions, "
            f"got {num_transactions}"
        )


@dataclass(frozen=True)
class Transaction:
    """One usage record reduced to the distinct item names it involved."""
    id: str
    items: FrozenSet[str]

    def __post_init__(self):
        object.__setattr__(self, 'id', str(self.id))
        object.__setattr__(self, 'items', frozenset(self.items))

    @classmethod
    def from_items(cls, id, items: Iterable[str]) -> 'Transaction':
        return cls(id=id, items=items)


@dataclass(frozen=True)
class Itemset:
    items: Tuple[str, ...]
    support: float
    count: int

    def __len__(self):
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': list(self.items),
            'length': len(self.items),
            'support': self.support,
            'count': self.count
        }


@dataclass(frozen=True)
class AssociationRule:
    antecedent: Tuple[str, ...]
    consequent: Tuple[str, ...]
    confidence: float
    lift: float
    support: float

    @property
    def items(self) -> FrozenSet[str]:
        return frozenset(self.antecedent) | frozenset(self.consequent)

    def describe(self) -> str:
        """Render the rule as an implication sentence."""
        return (f"If {', '.join(self.antecedent)}, then {', '.join(self.consequent)} "
                f"(confidence {self.confidence * 100:.1f}%)")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'antecedent': list(self.antecedent),
            'consequent': list(self.consequent),
            'support': self.support,
            'confidence': self.confidence,
            'lift': self.lift
        }


class AssociationMiner(ABC):
    """
    Base class for miners producing both frequent itemsets and association rules
    over a fixed set of transactions.

    Results are recomputed on every call; nothing is cached between calls.

    Thresholds are not validated. Out-of-range values produce an empty or a
    complete result set rather than an error.
    """

    algorithm_name = 'base'

    def __init__(
        self,
        transactions: Sequence[Transaction],
        min_support: float = 0.4,
        min_confidence: float = 0.6,
        max_itemset_size: int = 3,
        min_transactions: int = 2
    ):
        """
        Args:
            transactions: Transactions to analyse
            min_support: Minimum support for an itemset to be frequent
            min_confidence: Minimum confidence for a rule to be emitted
            max_itemset_size: Largest itemset size explored (performance bound)
            min_transactions: Fewest transactions the analysis accepts
        """
        self.transactions = list(transactions)
        self.min_support = min_support
        self.min_confidence = min_confidence
        self.max_itemset_size = max_itemset_size
        self.min_transactions = min_transactions

    def _check_transactions(self):
        required = max(1, self.min_transactions)
        if len(self.transactions) < required:
            raise InsufficientDataError(len(self.transactions), required)

    @abstractmethod
    def frequent_itemsets(self) -> List[Itemset]:
        """Frequent itemsets sorted by descending support."""
        pass

    @abstractmethod
    def association_rules(self) -> List[AssociationRule]:
        """Association rules sorted by descending confidence."""
        pass

    def mine_itemsets(self) -> Tuple[List[Itemset], Dict[str, Any]]:
        """
        Mine frequent itemsets and collect run statistics.

        Returns:
            Tuple of (itemsets, stats)
        """
        start_time = time.time()
        itemsets = self.frequent_itemsets()

        stats = {
            'num_itemsets': len(itemsets),
            'num_transactions': len(self.transactions),
            'execution_time': time.time() - start_time,
            'average_support': sum(i.support for i in itemsets) / len(itemsets) if itemsets else 0.0,
            'algorithm': self.algorithm_name,
            'mode': 'itemsets'
        }
        return itemsets, stats

    def mine_rules(self) -> Tuple[List[AssociationRule], Dict[str, Any]]:
        """
        Mine association rules and collect run statistics.

        Returns:
            Tuple of (rules, stats)
        """
        start_time = time.time()
        rules = self.association_rules()

        stats = {
            'num_rules': len(rules),
            'num_transactions': len(self.transactions),
            'execution_time': time.time() - start_time,
            'average_support': sum(r.support for r in rules) / len(rules) if rules else 0.0,
            'average_confidence': sum(r.confidence for r in rules) / len(rules) if rules else 0.0,
            'average_lift': sum(r.lift for r in rules) / len(rules) if rules else 0.0,
            'algorithm': self.algorithm_name,
            'mode': 'rules'
        }
        return rules, stats

    def __repr__(self):
        return (f"{self.__class__.__name__}(transactions={len(self.transactions)}, "
                f"min_support={self.min_support}, min_confidence={self.min_confidence}, "
                f"max_itemset_size={self.max_itemset_size})")
