import pytest

from nomiscript.natives import Host


class FakeHost:
    """Scripted input lines, captured output and a fixed clock."""

    def __init__(self, lines=None, now=1700000000000.0):
        self.lines = list(lines or [])
        self.output = []
        self.now = now

    def read_line(self):
        if not self.lines:
            return None
        return self.lines.pop(0)

    def write_output(self, text):
        self.output.append(text)

    def current_timestamp(self):
        return self.now

    def as_host(self):
        return Host(
            read_line=self.read_line,
            write_output=self.write_output,
            current_timestamp=self.current_timestamp,
        )


@pytest.fixture
def fake():
    return FakeHost()
