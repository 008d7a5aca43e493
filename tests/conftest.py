"""Shared fixtures: an in-memory stand-in for libtidy and a libtidy gate."""

from __future__ import annotations

import pytest

from tidier.engine import engine_available

requires_tidy = pytest.mark.skipif(not engine_available(), reason="libtidy not installed")


class FakeHandle:
    """Records every primitive call and replays scripted results."""

    def __init__(self, engine: FakeEngine) -> None:
        self.engine = engine
        self.calls: list[tuple] = []
        self.release_count = 0
        self._pending = ""

    # configuration
    def reset_options(self) -> bool:
        self.calls.append(("reset",))
        return True

    def set_int(self, name: str, value: int) -> bool:
        self.calls.append(("int", name, value))
        return name not in self.engine.rejected

    def set_bool(self, name: str, value: bool) -> bool:
        self.calls.append(("bool", name, value))
        return name not in self.engine.rejected

    def set_encoding(self, name: str) -> bool:
        self.calls.append(("encoding", name))
        return True

    # document
    def parse(self, text: str) -> int:
        self.calls.append(("parse", text))
        self._pending += self.engine.parse_diagnostics
        return self.engine.parse_status

    def clean_and_repair(self) -> int:
        self.calls.append(("clean",))
        return 0

    def save(self) -> tuple[int, bytes]:
        self.calls.append(("save",))
        self.engine.renders += 1
        self._pending += self.engine.render_diagnostics
        return self.engine.render_status, self.engine.output

    def drain_diagnostics(self) -> str:
        text, self._pending = self._pending, ""
        return text

    @property
    def released(self) -> bool:
        return self.release_count > 0

    def release(self) -> None:
        self.release_count += 1


class FakeEngine:
    """Creates :class:`FakeHandle` objects; attributes script their behaviour."""

    def __init__(
        self,
        *,
        output: bytes = b"<p>\n    caf\xc3\xa9\n</p>\n",
        parse_status: int = 0,
        render_status: int = 0,
        parse_diagnostics: str = "",
        render_diagnostics: str = "",
    ) -> None:
        self.output = output
        self.parse_status = parse_status
        self.render_status = render_status
        self.parse_diagnostics = parse_diagnostics
        self.render_diagnostics = render_diagnostics
        self.rejected: set[str] = set()
        self.handles: list[FakeHandle] = []
        self.renders = 0

    def create(self) -> FakeHandle:
        handle = FakeHandle(self)
        self.handles.append(handle)
        return handle


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()
