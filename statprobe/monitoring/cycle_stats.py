import time
from collections import Counter, deque
from typing import Any, Dict, Iterable, Optional

from ..errors import ErrorType
from .evaluator import Alert


class CycleStats:
    """In-memory counters for a polling run"""

    def __init__(self, window: int = 100):
        self.start_time = time.time()
        self.cycles = 0
        self.successes = 0
        self.failures: Counter = Counter()
        self.alerts: Counter = Counter()

        # Rolling response times of the last `window` cycles
        self.response_times: deque = deque(maxlen=window)

    def record_success(self, response_time: float, alerts: Iterable[Alert]):
        self.cycles += 1
        self.successes += 1
        self.response_times.append(response_time)
        for alert in alerts:
            self.alerts[alert.rule.value] += 1

    def record_failure(self, error_type: ErrorType, response_time: Optional[float] = None):
        self.cycles += 1
        self.failures[error_type.value] += 1
        if response_time is not None:
            self.response_times.append(response_time)

    @property
    def failure_count(self) -> int:
        return sum(self.failures.values())

    @property
    def avg_response_time(self) -> float:
        if not self.response_times:
            return 0.0
        return sum(self.response_times) / len(self.response_times)

    def summary(self) -> Dict[str, Any]:
        """Current counters as a plain dict"""
        success_rate = (self.successes / self.cycles * 100) if self.cycles > 0 else 0.0
        return {
            'uptime_seconds': time.time() - self.start_time,
            'cycles': self.cycles,
            'successes': self.successes,
            'failures': dict(self.failures),
            'alerts': dict(self.alerts),
            'success_rate': success_rate,
            'avg_response_time': self.avg_response_time,
        }

    def format_summary(self) -> str:
        s = self.summary()
        return (
            f"{s['cycles']} cycles, {s['successes']} ok, {self.failure_count} failed "
            f"({s['success_rate']:.1f}% success), {sum(self.alerts.values())} alerts, "
            f"avg response {s['avg_response_time']:.3f}s"
        )
