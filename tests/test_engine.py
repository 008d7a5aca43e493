"""Tests for the libtidy binding."""

from __future__ import annotations

import pytest
from conftest import requires_tidy

from tidier.engine import STATUS_ERRORS, LibTidy, default_engine
from tidier.errors import EngineContractError, EngineLoadError


def test_missing_library(tmp_path):
    with pytest.raises(EngineLoadError, match="libtidy not found"):
        LibTidy(str(tmp_path / "libtidy-missing.so"))


@requires_tidy
class TestTidyHandle:

    def test_version(self):
        assert default_engine().version()

    def test_default_engine_is_cached(self):
        assert default_engine() is default_engine()

    def test_primitives(self):
        with default_engine().create() as handle:
            assert handle.reset_options()
            assert handle.set_bool("quiet", True)
            assert handle.set_int("wrap", 0)
            assert handle.set_encoding("utf8")
            status = handle.parse("<p>x</p>")
            assert 0 <= status < STATUS_ERRORS
            assert handle.clean_and_repair() >= 0
            status, output = handle.save()
            assert status >= 0
            assert b"x" in output

    def test_drain_clears_buffer(self):
        with default_engine().create() as handle:
            handle.set_bool("show-info", False)
            handle.parse("<p><ul><li>1</li></p></ul>")
            first = handle.drain_diagnostics()
            assert first
            assert handle.drain_diagnostics() == ""

    def test_release_once(self):
        handle = default_engine().create()
        handle.release()
        handle.release()
        assert handle.released
        with pytest.raises(EngineContractError, match="after release"):
            handle.parse("<p>x</p>")
