"""
Snapshot evaluation, alert output and run observability
"""

from .snapshot import MetricsSnapshot
from .evaluator import Alert, AlertRule, calculate_percentage, evaluate
from .alert_sink import AlertSink, ConsoleAlertSink, LoggingAlertSink
from .log_manager import LogManager
from .cycle_stats import CycleStats

__all__ = [
    'MetricsSnapshot',
    'Alert',
    'AlertRule',
    'calculate_percentage',
    'evaluate',
    'AlertSink',
    'ConsoleAlertSink',
    'LoggingAlertSink',
    'LogManager',
    'CycleStats'
]
