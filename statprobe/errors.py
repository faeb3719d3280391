import asyncio
from enum import Enum
from typing import Optional

import aiohttp


class ErrorType(Enum):
    """Classification of probe cycle failures"""
    CONNECTION_ERROR = "connection_error"
    NETWORK_TIMEOUT = "network_timeout"
    HTTP_STATUS_ERROR = "http_status_error"  # non-2xx
    READ_ERROR = "read_error"
    FIELD_COUNT_ERROR = "field_count_error"
    INVALID_NUMBER = "invalid_number"
    ENCODING_ERROR = "encoding_error"
    UNKNOWN_ERROR = "unknown_error"


class ProbeError(Exception):
    """Base class for failures of a single poll cycle"""


class FetchError(ProbeError):
    """The stats payload could not be retrieved"""

    def __init__(self, url: str, message: str):
        super().__init__(f"error fetching metrics from {url}: {message}")
        self.url = url


class TransportError(FetchError):
    """Request could not be sent or no response headers arrived"""


class HttpStatusError(TransportError):
    """Endpoint answered with a non-2xx status"""

    def __init__(self, url: str, status: int, reason: Optional[str] = None):
        super().__init__(url, f"HTTP {status}" + (f" {reason}" if reason else ""))
        self.status = status


class ReadError(FetchError):
    """Response body could not be read completely"""


class ParseError(ProbeError):
    """The payload is not a valid stats record"""


class PayloadEncodingError(ParseError):
    def __init__(self, reason: str):
        super().__init__(f"error parsing metrics: payload is not valid UTF-8 ({reason})")


class FieldCountError(ParseError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"unexpected number of metrics: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidNumberError(ParseError):
    def __init__(self, field_name: str, token: str):
        super().__init__(f"error parsing metrics: {field_name} parsing error: {token!r} is not a non-negative integer")
        self.field_name = field_name
        self.token = token


def classify_error(error: BaseException) -> ErrorType:
    """Classify an exception raised during a cycle into an error type"""
    if isinstance(error, HttpStatusError):
        return ErrorType.HTTP_STATUS_ERROR
    elif isinstance(error, ReadError):
        return ErrorType.READ_ERROR
    elif isinstance(error, TransportError):
        cause = error.__cause__
        if isinstance(cause, (asyncio.TimeoutError, aiohttp.ServerTimeoutError)):
            return ErrorType.NETWORK_TIMEOUT
        return ErrorType.CONNECTION_ERROR
    elif isinstance(error, FieldCountError):
        return ErrorType.FIELD_COUNT_ERROR
    elif isinstance(error, InvalidNumberError):
        return ErrorType.INVALID_NUMBER
    elif isinstance(error, PayloadEncodingError):
        return ErrorType.ENCODING_ERROR
    elif isinstance(error, asyncio.TimeoutError):
        return ErrorType.NETWORK_TIMEOUT
    elif isinstance(error, aiohttp.ClientConnectorError):
        return ErrorType.CONNECTION_ERROR

    return ErrorType.UNKNOWN_ERROR
