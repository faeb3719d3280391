from typing import List

import pytest

from statprobe.monitoring import AlertSink


class CollectingSink(AlertSink):
    """Keeps emitted lines in memory"""

    def __init__(self):
        self.lines: List[str] = []

    def emit(self, line: str):
        self.lines.append(line)


@pytest.fixture
def sink():
    return CollectingSink()
