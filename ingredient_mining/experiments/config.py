from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union


@dataclass
class DataConfig:
    history_path: str
    ingredients_path: Optional[str] = None
    record_col: str = "record_id"
    item_col: str = "ingredient_id"
    name: str = "usage_history"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'history_path': self.history_path,
            'ingredients_path': self.ingredients_path,
            'record_col': self.record_col,
            'item_col': self.item_col,
            'name': self.name
        }


@dataclass
class MinerConfig:
    min_support: float = 0.4
    min_confidence: float = 0.6
    # Itemsets above this size are not explored; rule derivation enumerates
    # 2^size - 2 subsets per itemset
    max_itemset_size: int = 3
    min_transactions: int = 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            'min_support': self.min_support,
            'min_confidence': self.min_confidence,
            'max_itemset_size': self.max_itemset_size,
            'min_transactions': self.min_transactions
        }


@dataclass
class FilterConfig:
    metric: str
    threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {'metric': self.metric, 'threshold': self.threshold}


@dataclass
class PatternFilterConfig:
    """Item-name patterns a rule must (or must not) contain; rules only."""
    antecedent_contains: Optional[List[str]] = None
    consequent_contains: Optional[List[str]] = None
    antecedent_excludes: Optional[List[str]] = None
    consequent_excludes: Optional[List[str]] = None
    match_any: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'antecedent_contains': self.antecedent_contains,
            'consequent_contains': self.consequent_contains,
            'antecedent_excludes': self.antecedent_excludes,
            'consequent_excludes': self.consequent_excludes,
            'match_any': self.match_any
        }


@dataclass
class RuleMiningConfig:
    miner_type: str = 'apriori'  # 'apriori', 'mlxtend'
    miner_config: MinerConfig = field(default_factory=MinerConfig)
    mode: str = 'both'  # 'rules', 'itemsets', 'both'
    filters: List[Union[FilterConfig, PatternFilterConfig]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'miner_type': self.miner_type,
            'miner_config': self.miner_config.to_dict(),
            'mode': self.mode,
            'filters': [f.to_dict() for f in self.filters]
        }
