"""
Shared utilities: configuration loading, logging setup, timing and
day-count helpers.
"""

from .config import load_config, merge_configs, get_nested_value
from .logging_utils import setup_logging, LoggerMixin
from .math_helpers import yearfrac, discount_factor, zero_rate
from .timers import Timer

__all__ = [
    'load_config',
    'merge_configs',
    'get_nested_value',
    'setup_logging',
    'LoggerMixin',
    'yearfrac',
    'discount_factor',
    'zero_rate',
    'Timer'
]
