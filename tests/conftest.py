import pytest
from click.testing import CliRunner

from markline.renderers import Renderer


class RecordingRenderer(Renderer):
    """Renderer recording block callbacks and emitting nothing."""

    def __init__(self):
        self.calls = []

    def _record(self, *call):
        self.calls.append(call)
        return ""

    def on_title(self, marker, text):
        return self._record("title", marker, text)

    def on_paragraph(self, command, lines):
        return self._record("paragraph", command, list(lines))

    def on_list(self, items):
        return self._record("list", list(items))

    def on_key_value(self, entries):
        return self._record("key_value", list(entries))

    def on_embedded(self, command, lines):
        return self._record("embedded", command, list(lines))

    def on_break(self, kind):
        return self._record("break", kind)

    def on_line(self, line):
        return self._record("line", line)


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def recorder() -> RecordingRenderer:
    """Provides a renderer that records the constructs it receives."""
    return RecordingRenderer()
