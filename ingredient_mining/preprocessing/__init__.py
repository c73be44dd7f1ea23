from .transactions import (
    load_table,
    ingredient_names,
    normalise_id,
    build_transactions,
    transactions_from_frame,
    resolve_usage_frame
)

__all__ = [
    'load_table',
    'ingredient_names',
    'normalise_id',
    'build_transactions',
    'transactions_from_frame',
    'resolve_usage_frame'
]
