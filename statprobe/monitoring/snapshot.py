from dataclasses import dataclass


@dataclass(frozen=True)
class MetricsSnapshot:
    """Server resource statistics from a single poll"""
    load_average: int
    ram_total_bytes: int
    ram_usage_bytes: int
    disk_total_bytes: int
    disk_usage_bytes: int
    network_bandwidth_bytes_per_second: int
    network_load_bytes_per_second: int
