"""
Stats Poller - fixed-interval fetch, parse and evaluate loop
"""

import math
import asyncio
import logging
from typing import Optional, Tuple

import aiohttp

from ..config import ProbeConfig
from ..errors import ProbeError, classify_error
from ..fetcher import StatsFetcher
from ..parser import parse_stats
from ..monitoring import AlertSink, ConsoleAlertSink, CycleStats, evaluate
from .result import CycleResult
from .state import PollState

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Unable to fetch server statistic"


class StatsPoller:
    """
    Polls one stats endpoint on a fixed interval until stopped.

    Between cycles the poller is idle, waiting on whichever comes first: the
    next tick or a stop request. A running cycle is never interrupted; a stop
    requested mid-cycle is honoured once the cycle completes.
    """

    def __init__(self, config: ProbeConfig, sink: Optional[AlertSink] = None):
        self.config = config
        self.sink = sink or ConsoleAlertSink()
        self.stats = CycleStats()
        self.state = PollState()
        self._stop_requested = False
        self._stop_event: Optional[asyncio.Event] = None

    def stop(self):
        """Request shutdown; safe to call from a signal handler"""
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self) -> PollState:
        """Main polling loop, returns the final state once stopped"""
        loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        if self._stop_requested:
            self._stop_event.set()

        logger.info(f"Polling {self.config.url} every {self.config.interval:g}s")

        async with aiohttp.ClientSession() as session:
            fetcher = StatsFetcher(
                session,
                user_agent=self.config.user_agent,
                request_timeout=self.config.request_timeout
            )
            next_tick = loop.time() + self.config.interval
            try:
                while not await self._idle_until(next_tick):
                    self.state, _ = await self.run_cycle(fetcher, self.state)
                    next_tick = self._next_tick(next_tick, loop.time())
            finally:
                logger.info(f"Stats probe stopped: {self.stats.format_summary()}")

        return self.state

    async def _idle_until(self, deadline: float) -> bool:
        """Wait for the tick deadline or a stop request

        Returns:
            bool: True when a stop was requested, False when the tick fired
        """
        if self._stop_event.is_set():
            return True

        timeout = max(0.0, deadline - asyncio.get_running_loop().time())
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    def _next_tick(self, previous: float, now: float) -> float:
        """Next deadline on the fixed cadence, dropping ticks missed by a slow cycle"""
        interval = self.config.interval
        missed = max(0, math.floor((now - previous) / interval))
        if missed:
            logger.debug(f"Cycle overran the interval, skipping {missed} tick(s)")
        return previous + (missed + 1) * interval

    async def run_cycle(self, fetcher: StatsFetcher, state: PollState) -> Tuple[PollState, CycleResult]:
        """Fetch, parse and evaluate once

        Returns:
            (new_state, result): state for the next cycle and this cycle's outcome
        """
        result = CycleResult()
        try:
            raw = await fetcher.fetch(self.config.url)
            result.snapshot = parse_stats(raw)
        except ProbeError as e:
            result.error = e
            result.error_type = classify_error(e)
        finally:
            result.status_code = fetcher.last_status
            result.response_time = fetcher.last_response_time

        if not result.ok:
            return self._handle_failure(state, result), result

        return self._handle_success(state, result), result

    def _handle_failure(self, state: PollState, result: CycleResult) -> PollState:
        new_state = state.after_failure()
        self.stats.record_failure(result.error_type, result.response_time)

        logger.warning(
            f"Cycle failed ({result.error_type.value}, "
            f"{new_state.consecutive_failures} in a row): {result.error}"
        )

        if new_state.is_unavailable(self.config.failure_threshold):
            self.sink.emit(UNAVAILABLE_MESSAGE)

        return new_state

    def _handle_success(self, state: PollState, result: CycleResult) -> PollState:
        if state.consecutive_failures:
            logger.info(f"Stats endpoint recovered after {state.consecutive_failures} failed cycle(s)")

        result.alerts = evaluate(result.snapshot)
        self.stats.record_success(result.response_time, result.alerts)

        for alert in result.alerts:
            self.sink.emit(alert.message)
        logger.debug(f"Cycle ok in {result.response_time:.3f}s, {len(result.alerts)} alert(s)")

        return state.after_success()
