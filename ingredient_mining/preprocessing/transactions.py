"""
Conversion of usage history into mining transactions.

A usage record lists the ingredient ids consumed by one production event.
Ids are resolved to display names through the ingredient catalogue; ids
that do not resolve are dropped before the transaction is built.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from ingredient_mining.rule_mining.base import Transaction

logger = logging.getLogger(__name__)

_ID_KEYS = ('ingredientId', 'ingredient_id', 'id')


def load_table(path: Union[str, Path]) -> pd.DataFrame:
    path = Path(path)
    if path.suffix == '.csv':
        return pd.read_csv(path)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path)
    elif path.suffix == '.parquet':
        return pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def ingredient_names(
    ingredients: Union[Mapping[Any, str], Iterable[Mapping[str, Any]], pd.DataFrame],
    id_col: str = 'id',
    name_col: str = 'name'
) -> Dict[str, str]:
    """
    Build an id -> name lookup from an ingredient catalogue.

    Accepts a ready mapping, a list of ``{'id': ..., 'name': ...}`` dicts or
    a DataFrame with ``id_col`` and ``name_col`` columns. Keys are
    normalised to strings.
    """
    if isinstance(ingredients, pd.DataFrame):
        pairs = zip(ingredients[id_col], ingredients[name_col])
    elif isinstance(ingredients, Mapping):
        pairs = ingredients.items()
    else:
        pairs = ((ing[id_col], ing[name_col]) for ing in ingredients)

    names = {}
    for key, name in pairs:
        key = normalise_id(key)
        if key is not None:
            names[key] = str(name)
    return names


def normalise_id(value: Any) -> Optional[str]:
    """
    String form of an ingredient id, or None for a missing one.

    A blank cell upcasts an integer id column to float in pandas, so
    integral floats are written without the trailing '.0'.
    """
    if value is None:
        return None
    if isinstance(value, float):
        if pd.isna(value):
            return None
        if value.is_integer():
            return str(int(value))
    return str(value)


def _usage_id(usage: Any) -> Optional[str]:
    if isinstance(usage, Mapping):
        for key in _ID_KEYS:
            if key in usage:
                return normalise_id(usage[key])
        return None
    return normalise_id(usage)


def build_transactions(
    records: Iterable[Mapping[str, Any]],
    ingredients: Union[Mapping[Any, str], Iterable[Mapping[str, Any]], pd.DataFrame],
    items_key: str = 'ingredients'
) -> List[Transaction]:
    """
    Turn usage records into transactions of ingredient names.

    Args:
        records: Mappings with an ``id`` and a list under ``items_key``.
                 Each entry is either a bare ingredient id or a mapping
                 holding ``ingredientId`` / ``ingredient_id`` / ``id``.
        ingredients: Ingredient catalogue (see ``ingredient_names``)
        items_key: Key of the usage list inside each record

    Returns:
        One transaction per record. A record whose ingredients all fail to
        resolve yields an empty transaction; it still counts towards the
        transaction total.
    """
    names = ingredient_names(ingredients)
    transactions = []
    dropped = 0

    for record in records:
        items = set()
        for usage in record.get(items_key) or []:
            name = names.get(_usage_id(usage))
            if name is None:
                dropped += 1
                continue
            items.add(name)
        transactions.append(Transaction.from_items(record['id'], items))

    if dropped:
        logger.debug("Dropped %d unresolved ingredient references", dropped)
    return transactions


def transactions_from_frame(
    df: pd.DataFrame,
    id_col: str = 'record_id',
    item_col: str = 'ingredient'
) -> List[Transaction]:
    """
    Group a long-format usage table (one row per record and item) into transactions.

    Rows with a missing item are ignored; record order follows first appearance.
    """
    df = df[[id_col, item_col]].dropna(subset=[item_col])
    return [
        Transaction.from_items(record_id, group[item_col].astype(str))
        for record_id, group in df.groupby(id_col, sort=False)
    ]


def resolve_usage_frame(
    usage_df: pd.DataFrame,
    ingredients_df: pd.DataFrame,
    id_col: str = 'record_id',
    ingredient_id_col: str = 'ingredient_id'
) -> List[Transaction]:
    """
    Resolve a long-format usage table of ingredient ids against a catalogue table.

    Records are kept even if none of their ingredients resolve.
    """
    names = ingredient_names(ingredients_df)
    records = []
    for record_id, group in usage_df.groupby(id_col, sort=False):
        records.append({
            'id': record_id,
            'ingredients': list(group[ingredient_id_col].dropna())
        })
    return build_transactions(records, names)
