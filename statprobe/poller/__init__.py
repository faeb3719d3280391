"""
Poll cycle orchestration
"""

from .poller import StatsPoller, UNAVAILABLE_MESSAGE
from .result import CycleResult
from .state import PollState

__all__ = ['StatsPoller', 'UNAVAILABLE_MESSAGE', 'CycleResult', 'PollState']
