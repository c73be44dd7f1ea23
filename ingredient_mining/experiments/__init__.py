from .config import (
    DataConfig,
    MinerConfig,
    RuleMiningConfig,
    FilterConfig,
    PatternFilterConfig
)
from .base import (
    load_data,
    run_rule_mining,
    create_miner,
    apply_filters
)

__all__ = [
    'DataConfig',
    'MinerConfig',
    'RuleMiningConfig',
    'FilterConfig',
    'PatternFilterConfig',
    'load_data',
    'run_rule_mining',
    'create_miner',
    'apply_filters'
]
