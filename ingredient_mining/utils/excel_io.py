import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Sequence, Union

from ingredient_mining.rule_mining.base import AssociationRule, Itemset


def _with_suffix(output_path: Union[str, Path], suffix: str) -> Path:
    output_path = Path(output_path)
    if output_path.suffix != suffix:
        output_path = output_path.with_suffix(suffix)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def _flatten_stats(stats: Dict[str, Any], prefix: str = '') -> Dict[str, Any]:
    flat = {}
    for key, value in stats.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten_stats(value, prefix=f"{name}."))
        else:
            flat[name] = value
    return flat


def save_rule_mining_results(
    itemsets: Sequence[Itemset],
    rules: Sequence[AssociationRule],
    stats: Dict[str, Any],
    output_path: Union[str, Path],
    parameters: Dict[str, Any] = None,
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save mining results to Excel with multiple sheets.

    Sheets:
        - Itemsets: Frequent itemsets with support and count
        - Rules: All mined rules with metrics
        - Summary: Aggregate statistics (nested stats flattened to dotted keys)
        - Parameters: Miner parameters used

    Args:
        itemsets: Frequent itemsets
        rules: Association rules
        stats: Statistics dictionary from mining
        output_path: Output file path (will add .xlsx if needed)
        parameters: Miner parameters used
        metadata: Additional metadata (dataset name, timestamp, etc.)
    """
    output_path = _with_suffix(output_path, '.xlsx')

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        if itemsets:
            itemsets_df = pd.DataFrame([format_itemset_for_excel(i) for i in itemsets])
            itemsets_df.to_excel(writer, sheet_name='Itemsets', index=False)

        if rules:
            rules_df = pd.DataFrame([format_rule_for_excel(r) for r in rules])
            rules_df.to_excel(writer, sheet_name='Rules', index=False)

        summary = _flatten_stats(stats)
        if metadata:
            summary.update(metadata)
        summary_df = pd.DataFrame({
            'Metric': list(summary.keys()),
            'Value': [str(v) for v in summary.values()]
        })
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        if parameters:
            params_df = pd.DataFrame({
                'Parameter': list(parameters.keys()),
                'Value': [str(v) for v in parameters.values()]
            })
            params_df.to_excel(writer, sheet_name='Parameters', index=False)

    print(f"Results saved to: {output_path}")
    return output_path


def format_itemset_for_excel(itemset: Itemset) -> Dict[str, Any]:
    row = itemset.to_dict()
    row['items'] = _format_items(itemset.items)
    return row


def format_rule_for_excel(rule: AssociationRule) -> Dict[str, Any]:
    """
    Format a rule for Excel output with human-readable antecedent/consequent.

    Items are joined as "item1 AND item2", parseable by splitting on " AND ".
    """
    row = rule.to_dict()
    row['antecedent'] = _format_items(rule.antecedent)
    row['consequent'] = _format_items(rule.consequent)
    row['description'] = rule.describe()
    return row


def _format_items(items: Sequence[str]) -> str:
    return ' AND '.join(items)


def save_rules_text(
    rules: Sequence[AssociationRule],
    output_path: Union[str, Path],
    title: str = "MINED RULES",
    itemsets: Sequence[Itemset] = None,
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save rules (and optionally itemsets) in human-readable text format.

    Args:
        rules: Association rules
        output_path: Output file path (will add .txt if needed)
        title: Title for the output file header
        itemsets: Optional frequent itemsets listed before the rules
        metadata: Optional metadata to include in header
    """
    output_path = _with_suffix(output_path, '.txt')

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write("=" * 80 + "\n")
        f.write(f"{title}\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if metadata:
            for key, val in metadata.items():
                f.write(f"{key}: {val}\n")
        f.write("=" * 80 + "\n\n")

        if itemsets:
            f.write("FREQUENT ITEMSETS\n")
            f.write("-" * 80 + "\n")
            for itemset in itemsets:
                f.write(f"  {' + '.join(itemset.items):50s} "
                        f"support {itemset.support:.4f}  count {itemset.count}\n")
            f.write("\n")

        if not rules:
            f.write("No rules found.\n")
        else:
            for i, rule in enumerate(rules, 1):
                _write_rule(f, rule, i)

        f.write("=" * 80 + "\n")
        f.write(f"Total rules: {len(rules)}\n")
        f.write("=" * 80 + "\n")

    print(f"Rules saved to: {output_path}")
    return output_path


def _write_rule(f, rule: AssociationRule, rule_num: int):
    f.write(f"Rule #{rule_num}:\n")
    f.write(f"  IF {_format_items(rule.antecedent)}\n")
    f.write(f"  THEN {_format_items(rule.consequent)}\n\n")
    f.write(f"  Metrics:\n")

    for label, value in (('Confidence', rule.confidence), ('Support', rule.support), ('Lift', rule.lift)):
        f.write(f"    {label:18s} {value:.4f}\n")

    f.write("\n")
