"""
Cycle Result - outcome of one fetch, parse and evaluate pass
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ErrorType, ProbeError
from ..monitoring.evaluator import Alert
from ..monitoring.snapshot import MetricsSnapshot


@dataclass
class CycleResult:
    """Result of polling the stats endpoint once"""
    snapshot: Optional[MetricsSnapshot] = None
    alerts: List[Alert] = field(default_factory=list)
    error: Optional[ProbeError] = None
    error_type: Optional[ErrorType] = None
    response_time: float = 0.0
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None
