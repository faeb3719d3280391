import asyncio

import pytest
from aiohttp import test_utils, web

from statprobe.config import ProbeConfig
from statprobe.errors import ErrorType, FieldCountError, TransportError
from statprobe.monitoring import AlertRule, AlertSink
from statprobe.poller import UNAVAILABLE_MESSAGE, PollState, StatsPoller

ALERTING_PAYLOAD = b"35,1000,900,1000000,950000,1000000,950000"
HEALTHY_PAYLOAD = b"10,1000,500,1000000,500000,1000000,500000"


class ScriptedFetcher:
    """Replays a fixed list of payloads and exceptions"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.last_status = None
        self.last_response_time = 0.0

    async def fetch(self, url):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        self.last_response_time = 0.01
        if isinstance(outcome, Exception):
            self.last_status = None
            raise outcome
        self.last_status = 200
        return outcome


def transport_failure():
    return TransportError("http://stats.test/_stats", "connection refused")


def run_cycles(poller, fetcher, count):
    """Run count cycles, returning (state, result, lines emitted) per cycle"""
    async def scenario():
        state = PollState()
        history = []
        for _ in range(count):
            before = len(poller.sink.lines)
            state, result = await poller.run_cycle(fetcher, state)
            history.append((state, result, poller.sink.lines[before:]))
        return history

    return asyncio.run(scenario())


def make_poller(sink, **overrides):
    config = ProbeConfig(url="http://stats.test/_stats", **overrides)
    return StatsPoller(config, sink=sink)


def test_poll_state_transitions():
    state = PollState()
    assert state.after_failure().after_failure().consecutive_failures == 2
    assert state.after_failure().after_success() == PollState()
    assert not PollState(2).is_unavailable(3)
    assert PollState(3).is_unavailable(3)
    assert PollState(4).is_unavailable(3)


def test_successful_cycle_emits_alerts_in_order(sink):
    poller = make_poller(sink)
    [(state, result, lines)] = run_cycles(poller, ScriptedFetcher([ALERTING_PAYLOAD]), 1)

    assert result.ok
    assert state.consecutive_failures == 0
    assert [a.rule for a in result.alerts] == [
        AlertRule.LOAD, AlertRule.MEMORY, AlertRule.DISK, AlertRule.NETWORK
    ]
    assert lines == [a.message for a in result.alerts]
    assert result.status_code == 200


def test_healthy_cycle_emits_nothing(sink):
    poller = make_poller(sink)
    [(state, result, lines)] = run_cycles(poller, ScriptedFetcher([HEALTHY_PAYLOAD]), 1)
    assert result.ok
    assert result.alerts == []
    assert lines == []


def test_unavailable_diagnostic_after_three_failures_and_reset_on_success(sink):
    poller = make_poller(sink)
    fetcher = ScriptedFetcher([
        transport_failure(),
        transport_failure(),
        transport_failure(),
        HEALTHY_PAYLOAD,
        transport_failure(),
        transport_failure(),
        transport_failure(),
    ])
    history = run_cycles(poller, fetcher, 7)

    counts = [state.consecutive_failures for state, _, _ in history]
    assert counts == [1, 2, 3, 0, 1, 2, 3]

    emitted = [lines for _, _, lines in history]
    assert emitted == [[], [], [UNAVAILABLE_MESSAGE], [], [], [], [UNAVAILABLE_MESSAGE]]


def test_unavailable_diagnostic_repeats_every_failed_cycle(sink):
    poller = make_poller(sink)
    history = run_cycles(poller, ScriptedFetcher([transport_failure()] * 5), 5)

    assert [lines for _, _, lines in history] == [
        [], [], [UNAVAILABLE_MESSAGE], [UNAVAILABLE_MESSAGE], [UNAVAILABLE_MESSAGE]
    ]
    assert history[-1][0].consecutive_failures == 5


def test_failure_threshold_is_configurable(sink):
    poller = make_poller(sink, failure_threshold=1)
    [(_, _, lines)] = run_cycles(poller, ScriptedFetcher([transport_failure()]), 1)
    assert lines == [UNAVAILABLE_MESSAGE]


def test_parse_failures_count_as_failed_cycles(sink):
    poller = make_poller(sink)
    history = run_cycles(poller, ScriptedFetcher([b"1,2,3", b"1,2,3,4,5,6,x", b"nope"]), 3)

    results = [result for _, result, _ in history]
    assert isinstance(results[0].error, FieldCountError)
    assert [r.error_type for r in results] == [
        ErrorType.FIELD_COUNT_ERROR, ErrorType.INVALID_NUMBER, ErrorType.FIELD_COUNT_ERROR
    ]
    assert all(r.snapshot is None for r in results)
    assert history[-1][2] == [UNAVAILABLE_MESSAGE]
    assert poller.stats.failures == {'field_count_error': 2, 'invalid_number': 1}


def test_failed_cycle_is_logged(sink, caplog):
    poller = make_poller(sink)
    with caplog.at_level("WARNING", logger="statprobe.poller.poller"):
        run_cycles(poller, ScriptedFetcher([transport_failure()]), 1)
    assert "connection_error" in caplog.text
    assert "connection refused" in caplog.text


def test_unexpected_exceptions_propagate(sink):
    poller = make_poller(sink)
    with pytest.raises(RuntimeError):
        run_cycles(poller, ScriptedFetcher([RuntimeError("boom")]), 1)


def test_stats_track_cycles(sink):
    poller = make_poller(sink)
    run_cycles(poller, ScriptedFetcher([ALERTING_PAYLOAD, transport_failure(), HEALTHY_PAYLOAD]), 3)

    summary = poller.stats.summary()
    assert summary['cycles'] == 3
    assert summary['successes'] == 2
    assert summary['failures'] == {'connection_error': 1}
    assert summary['alerts'] == {'load': 1, 'memory': 1, 'disk': 1, 'network': 1}
    assert "3 cycles" in poller.stats.format_summary()


def test_next_tick_keeps_fixed_cadence(sink):
    poller = make_poller(sink, interval=1.0)
    assert poller._next_tick(10.0, 10.3) == pytest.approx(11.0)
    # A cycle that overran two ticks lands on the following one
    assert poller._next_tick(10.0, 12.5) == pytest.approx(13.0)


def test_stop_while_idle_ends_loop_without_another_tick(sink):
    poller = make_poller(sink, interval=3600)

    async def scenario():
        task = asyncio.create_task(poller.run())
        await asyncio.sleep(0.05)
        poller.stop()
        return await asyncio.wait_for(task, timeout=5)

    state = asyncio.run(scenario())
    assert state == PollState()
    assert poller.stats.cycles == 0
    assert sink.lines == []


def test_stop_before_run_returns_immediately(sink):
    poller = make_poller(sink, interval=3600)
    poller.stop()

    async def scenario():
        return await asyncio.wait_for(poller.run(), timeout=5)

    assert asyncio.run(scenario()) == PollState()
    assert poller.stats.cycles == 0


class StopAfterSink(AlertSink):
    """Collects lines and stops the poller once enough have arrived"""

    def __init__(self, limit):
        self.limit = limit
        self.lines = []
        self.poller = None

    def emit(self, line):
        self.lines.append(line)
        if len(self.lines) >= self.limit:
            self.poller.stop()


def run_against(handler, sink, **overrides):
    async def scenario():
        app = web.Application()
        app.router.add_get("/_stats", handler)
        async with test_utils.TestServer(app) as server:
            config = ProbeConfig(url=str(server.make_url("/_stats")), interval=0.05, **overrides)
            poller = StatsPoller(config, sink=sink)
            sink.poller = poller
            state = await asyncio.wait_for(poller.run(), timeout=10)
            return poller, state

    return asyncio.run(scenario())


def test_run_polls_endpoint_and_emits_alerts():
    async def handler(request):
        return web.Response(body=ALERTING_PAYLOAD + b"\n", content_type="text/plain")

    sink = StopAfterSink(limit=4)
    poller, state = run_against(handler, sink)

    assert sink.lines == [
        "Load Average is too high: 35",
        "Memory usage too high: 90%",
        "Free disk space is too low: 0 Mb left",
        "Network bandwidth usage high: 0.38 Mbit/s available",
    ]
    assert state.consecutive_failures == 0
    assert poller.stats.successes == 1


def test_run_reports_unavailable_endpoint():
    async def handler(request):
        return web.Response(status=500, text="down")

    sink = StopAfterSink(limit=1)
    poller, state = run_against(handler, sink)

    assert sink.lines == [UNAVAILABLE_MESSAGE]
    assert state.consecutive_failures == 3
    assert poller.stats.failures == {'http_status_error': 3}
