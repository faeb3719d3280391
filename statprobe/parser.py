"""
Stats payload parser

The endpoint answers with seven comma-separated base-10 integers:

    load_average,ram_total,ram_usage,disk_total,disk_usage,net_bandwidth,net_load

Surrounding whitespace (including a trailing newline) is ignored. Whitespace
is not accepted as a field separator.
"""

import re
import logging
from typing import List

from .errors import FieldCountError, InvalidNumberError, PayloadEncodingError
from .monitoring.snapshot import MetricsSnapshot

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","

# Wire order of the payload, matching MetricsSnapshot's constructor
FIELD_NAMES = (
    "load_average",
    "ram_total_bytes",
    "ram_usage_bytes",
    "disk_total_bytes",
    "disk_usage_bytes",
    "network_bandwidth_bytes_per_second",
    "network_load_bytes_per_second",
)

_UNSIGNED_INTEGER = re.compile(r"[0-9]+")


def split_fields(text: str) -> List[str]:
    """Split a decoded payload into exactly len(FIELD_NAMES) non-empty tokens"""
    text = text.strip()
    if not text:
        raise FieldCountError(expected=len(FIELD_NAMES), actual=0)

    tokens = [token.strip() for token in text.split(FIELD_SEPARATOR)]
    if len(tokens) != len(FIELD_NAMES):
        raise FieldCountError(expected=len(FIELD_NAMES), actual=len(tokens))
    if not all(tokens):
        # e.g. "1,2,,4,5,6,7": seven slots but only six values
        raise FieldCountError(expected=len(FIELD_NAMES), actual=len([t for t in tokens if t]))
    return tokens


def parse_field(field_name: str, token: str) -> int:
    try:
        if not _UNSIGNED_INTEGER.fullmatch(token):
            raise ValueError(f"invalid literal for a base-10 unsigned integer: {token!r}")
        return int(token)
    except ValueError as e:
        raise InvalidNumberError(field_name, token) from e


def parse_stats(raw: bytes) -> MetricsSnapshot:
    """Parse a raw stats payload into a snapshot

    Raises:
        PayloadEncodingError: payload is not UTF-8 text
        FieldCountError: payload does not hold exactly seven values
        InvalidNumberError: a value is not a non-negative integer
    """
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PayloadEncodingError(str(e)) from e

    tokens = split_fields(text)
    values = [parse_field(name, token) for name, token in zip(FIELD_NAMES, tokens)]

    snapshot = MetricsSnapshot(*values)
    logger.debug(f"Parsed snapshot: {snapshot}")
    return snapshot
