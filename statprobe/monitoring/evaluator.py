"""
Threshold rules applied to each metrics snapshot
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .snapshot import MetricsSnapshot

LOAD_AVERAGE_LIMIT = 30
MEMORY_PERCENT_LIMIT = 80
DISK_PERCENT_LIMIT = 90
NETWORK_PERCENT_LIMIT = 90

MEGABYTE = 1024 * 1024


class AlertRule(Enum):
    """Threshold rules, in the order their alerts are reported"""
    LOAD = "load"
    MEMORY = "memory"
    DISK = "disk"
    NETWORK = "network"


@dataclass(frozen=True)
class Alert:
    """A single threshold violation"""
    rule: AlertRule
    value: Union[int, float]
    message: str


def calculate_percentage(used: int, total: int) -> int:
    """Floored percentage of used over total, 0 when total is 0"""
    if total == 0:
        return 0
    return int(used * 100 // total)


def evaluate(snapshot: MetricsSnapshot) -> List[Alert]:
    """Apply every threshold rule to a snapshot

    Returns:
        List[Alert]: Alerts in LOAD, MEMORY, DISK, NETWORK order; empty when healthy
    """
    alerts: List[Alert] = []

    if snapshot.load_average > LOAD_AVERAGE_LIMIT:
        alerts.append(Alert(
            rule=AlertRule.LOAD,
            value=snapshot.load_average,
            message=f"Load Average is too high: {snapshot.load_average}"
        ))

    ram_percent = calculate_percentage(snapshot.ram_usage_bytes, snapshot.ram_total_bytes)
    if ram_percent > MEMORY_PERCENT_LIMIT:
        alerts.append(Alert(
            rule=AlertRule.MEMORY,
            value=ram_percent,
            message=f"Memory usage too high: {ram_percent}%"
        ))

    disk_percent = calculate_percentage(snapshot.disk_usage_bytes, snapshot.disk_total_bytes)
    if disk_percent > DISK_PERCENT_LIMIT:
        free_mb = (snapshot.disk_total_bytes - snapshot.disk_usage_bytes) // MEGABYTE
        alerts.append(Alert(
            rule=AlertRule.DISK,
            value=free_mb,
            message=f"Free disk space is too low: {free_mb} Mb left"
        ))

    network_percent = calculate_percentage(
        snapshot.network_load_bytes_per_second,
        snapshot.network_bandwidth_bytes_per_second
    )
    if network_percent > NETWORK_PERCENT_LIMIT:
        free_mbit = (
            snapshot.network_bandwidth_bytes_per_second - snapshot.network_load_bytes_per_second
        ) / MEGABYTE * 8
        alerts.append(Alert(
            rule=AlertRule.NETWORK,
            value=free_mbit,
            message=f"Network bandwidth usage high: {free_mbit:.2f} Mbit/s available"
        ))

    return alerts
