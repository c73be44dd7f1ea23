from typing import Dict, List, Sequence, Tuple, Any

from ingredient_mining.rule_mining.base import AssociationRule, Itemset


def filter_rules(rules: Sequence[AssociationRule], criterion: str, threshold: float) -> List[AssociationRule]:
    """
    Filters rules based on a criterion >= threshold.

    Args:
        rules: List of association rules
        criterion: The rule metric to filter on ('support', 'confidence', 'lift')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        List of rules meeting the criterion, in their original order
    """
    return [rule for rule in rules if getattr(rule, criterion, float("-inf")) >= threshold]


def filter_rules_by_pattern(
    rules: Sequence[AssociationRule],
    antecedent_contains: list = None,
    consequent_contains: list = None,
    antecedent_excludes: list = None,
    consequent_excludes: list = None,
    match_any: bool = False
) -> List[AssociationRule]:
    """
    Filter rules by antecedent/consequent item patterns.

    Patterns are matched case-insensitively as substrings of item names,
    so 'bakso' matches 'Bakso Sapi'.

    Args:
        rules: List of association rules
        antecedent_contains: Patterns that must appear in the antecedent
        consequent_contains: Patterns that must appear in the consequent
        antecedent_excludes: Patterns that must NOT appear in the antecedent
        consequent_excludes: Patterns that must NOT appear in the consequent
        match_any: If True, match if ANY pattern matches. If False, ALL must match.

    Returns:
        List of filtered rules
    """
    def matches_patterns(items, patterns, match_any_pattern):
        if not patterns:
            return True
        items_lower = [item.lower() for item in items]
        hits = (any(p.lower() in item for item in items_lower) for p in patterns)
        return any(hits) if match_any_pattern else all(hits)

    def excludes_patterns(items, patterns):
        if not patterns:
            return True
        return not matches_patterns(items, patterns, True)

    filtered = []
    for rule in rules:
        if (matches_patterns(rule.antecedent, antecedent_contains, match_any)
                and matches_patterns(rule.consequent, consequent_contains, match_any)
                and excludes_patterns(rule.antecedent, antecedent_excludes)
                and excludes_patterns(rule.consequent, consequent_excludes)):
            filtered.append(rule)

    return filtered


def filter_itemsets(
    itemsets: Sequence[Itemset],
    criterion: str = 'support',
    threshold: float = 0.0
) -> Tuple[List[Itemset], Dict[str, Any]]:
    """
    Filters frequent itemsets based on a criterion >= threshold.
    Returns both filtered itemsets and a stats dictionary.

    Args:
        itemsets: List of itemsets
        criterion: The metric to filter on ('support' or 'count')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        Tuple of (filtered_itemsets, stats)
    """
    filtered_itemset_list = [itemset for itemset in itemsets
                             if getattr(itemset, criterion, float("-inf")) >= threshold]

    count = len(filtered_itemset_list)
    if count == 0:
        stats = {
            "num_itemsets": 0,
            "average_support": 0.0,
        }
        return filtered_itemset_list, stats

    avg_support = sum(itemset.support for itemset in filtered_itemset_list) / count

    stats = {
        "num_itemsets": count,
        "average_support": round(avg_support, 3),
    }

    return filtered_itemset_list, stats
