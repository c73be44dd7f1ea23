"""
Rule Mining Module

Frequent itemset and association rule mining over ingredient transactions:
- Apriori level-wise miner (default)
- MLxtend Apriori backend
"""
from .base import (
    Transaction,
    Itemset,
    AssociationRule,
    InsufficientDataError,
    AssociationMiner
)
from .apriori_miner import AprioriMiner

__all__ = [
    'Transaction',
    'Itemset',
    'AssociationRule',
    'InsufficientDataError',
    'AssociationMiner',
    'AprioriMiner'
]
