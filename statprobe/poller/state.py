from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PollState:
    """State carried from one poll cycle to the next"""
    consecutive_failures: int = 0

    def after_failure(self) -> "PollState":
        return replace(self, consecutive_failures=self.consecutive_failures + 1)

    def after_success(self) -> "PollState":
        return replace(self, consecutive_failures=0)

    def is_unavailable(self, threshold: int) -> bool:
        """True once consecutive failures reach the threshold; stays true until a success"""
        return self.consecutive_failures >= threshold
