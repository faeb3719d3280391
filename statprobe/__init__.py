"""
StatProbe - threshold alerts for a single server stats endpoint
"""

from .config import ProbeConfig, ConfigError
from .errors import (
    ErrorType,
    ProbeError,
    FetchError,
    TransportError,
    HttpStatusError,
    ReadError,
    ParseError,
    FieldCountError,
    InvalidNumberError,
    PayloadEncodingError,
    classify_error,
)
from .fetcher import StatsFetcher
from .parser import parse_stats, FIELD_NAMES
from .monitoring import MetricsSnapshot, Alert, AlertRule, calculate_percentage, evaluate
from .poller import StatsPoller, PollState, CycleResult

__all__ = [
    'ProbeConfig',
    'ConfigError',
    'ErrorType',
    'ProbeError',
    'FetchError',
    'TransportError',
    'HttpStatusError',
    'ReadError',
    'ParseError',
    'FieldCountError',
    'InvalidNumberError',
    'PayloadEncodingError',
    'classify_error',
    'StatsFetcher',
    'parse_stats',
    'FIELD_NAMES',
    'MetricsSnapshot',
    'Alert',
    'AlertRule',
    'calculate_percentage',
    'evaluate',
    'StatsPoller',
    'PollState',
    'CycleResult'
]
