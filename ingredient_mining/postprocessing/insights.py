"""Summary of one analysis run for reporting."""
from typing import Any, Dict, Sequence

from ingredient_mining.rule_mining.base import AssociationRule, Itemset, Transaction


def summarize_analysis(
    transactions: Sequence[Transaction],
    itemsets: Sequence[Itemset],
    rules: Sequence[AssociationRule],
    top_itemsets: int = 8,
    top_rules: int = 6
) -> Dict[str, Any]:
    """
    Collect totals, the top ranked itemsets and rules, and short insight lines.

    ``itemsets`` and ``rules`` are expected in the miners' order (descending
    support and descending confidence), so the first entries are the most
    popular combination and the strongest rule.
    """
    summary = {
        'num_transactions': len(transactions),
        'num_itemsets': len(itemsets),
        'num_rules': len(rules),
        'top_itemsets': [itemset.to_dict() for itemset in itemsets[:top_itemsets]],
        'top_rules': [dict(rule.to_dict(), description=rule.describe()) for rule in rules[:top_rules]],
        'insights': []
    }

    if itemsets:
        popular = itemsets[0]
        summary['insights'].append(
            f"Most popular combination: {' + '.join(popular.items)} "
            f"(in {popular.support * 100:.1f}% of transactions)"
        )
    if rules:
        strongest = rules[0]
        summary['insights'].append(
            f"Strongest rule: {', '.join(strongest.antecedent)} -> {', '.join(strongest.consequent)} "
            f"(confidence {strongest.confidence * 100:.1f}%)"
        )

    return summary
