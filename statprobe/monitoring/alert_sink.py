import sys
import logging
from abc import ABC, abstractmethod
from typing import Optional, TextIO


class AlertSink(ABC):
    """Destination for alert and diagnostic lines"""

    @abstractmethod
    def emit(self, line: str) -> None:
        """Deliver one human-readable line"""
        pass


class ConsoleAlertSink(AlertSink):
    """Writes each line to a text stream, stdout by default"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def emit(self, line: str):
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()


class LoggingAlertSink(AlertSink):
    """Routes each line through a named logger"""

    def __init__(self, logger_name: str = "statprobe.alerts", level: int = logging.WARNING):
        self.logger = logging.getLogger(logger_name)
        self.level = level

    def emit(self, line: str):
        self.logger.log(self.level, line)
