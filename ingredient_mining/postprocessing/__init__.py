from .rule import (
    filter_rules,
    filter_rules_by_pattern,
    filter_itemsets
)
from .insights import summarize_analysis

__all__ = [
    'filter_rules',
    'filter_rules_by_pattern',
    'filter_itemsets',
    'summarize_analysis'
]
