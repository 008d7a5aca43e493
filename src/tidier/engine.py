"""ctypes binding to libtidy (tidy-html5).

Only the handful of primitives tidier needs are bound. Options are looked
up by their documented names ("indent-spaces", "wrap", ...) and resolved to
the numeric ids of the loaded build, so the binding does not depend on the
``TidyOptionId`` numbering of a particular libtidy release.

The library is located through ``TIDIER_LIBRARY`` if set, then
:func:`ctypes.util.find_library`, then a list of common sonames.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import os
from functools import lru_cache
from typing import Optional

from tidier.errors import EngineContractError, EngineLoadError

logger = logging.getLogger(__name__)

ENV_LIBRARY = "TIDIER_LIBRARY"

_CANDIDATE_NAMES = (
    "libtidy.so",
    "libtidy.so.5",
    "libtidy.so.58",
    "libtidy.so.5deb1",
    "libtidy.dylib",
    "libtidy.5.dylib",
    "tidy.dll",
    "libtidy.dll",
)

# Status codes returned by parse / clean / save
STATUS_OK = 0
STATUS_WARNINGS = 1
STATUS_ERRORS = 2


class TidyBuffer(ctypes.Structure):
    """Mirror of libtidy's ``TidyBuffer``."""

    _fields_ = [
        ("allocator", ctypes.c_void_p),
        ("bp", ctypes.POINTER(ctypes.c_ubyte)),
        ("size", ctypes.c_uint),
        ("allocated", ctypes.c_uint),
        ("next", ctypes.c_uint),
    ]

    def to_bytes(self) -> bytes:
        if not self.size:
            return b""
        return ctypes.string_at(self.bp, self.size)


_PBUF = ctypes.POINTER(TidyBuffer)

# name -> (restype, argtypes)
_SIGNATURES = {
    "tidyCreate": (ctypes.c_void_p, []),
    "tidyRelease": (None, [ctypes.c_void_p]),
    "tidyReleaseDate": (ctypes.c_char_p, []),
    "tidyOptResetAllToDefault": (ctypes.c_int, [ctypes.c_void_p]),
    "tidyGetOptionByName": (ctypes.c_void_p, [ctypes.c_void_p, ctypes.c_char_p]),
    "tidyOptGetId": (ctypes.c_int, [ctypes.c_void_p]),
    "tidyOptSetInt": (ctypes.c_int, [ctypes.c_void_p, ctypes.c_int, ctypes.c_ulong]),
    "tidyOptSetBool": (ctypes.c_int, [ctypes.c_void_p, ctypes.c_int, ctypes.c_int]),
    "tidySetCharEncoding": (ctypes.c_int, [ctypes.c_void_p, ctypes.c_char_p]),
    "tidySetErrorBuffer": (ctypes.c_int, [ctypes.c_void_p, _PBUF]),
    "tidyParseString": (ctypes.c_int, [ctypes.c_void_p, ctypes.c_char_p]),
    "tidyCleanAndRepair": (ctypes.c_int, [ctypes.c_void_p]),
    "tidySaveBuffer": (ctypes.c_int, [ctypes.c_void_p, _PBUF]),
    "tidyBufInit": (None, [_PBUF]),
    "tidyBufClear": (None, [_PBUF]),
    "tidyBufFree": (None, [_PBUF]),
}


def _candidate_paths() -> list[str]:
    paths: list[str] = []
    override = os.environ.get(ENV_LIBRARY)
    if override:
        paths.append(override)
    found = ctypes.util.find_library("tidy")
    if found:
        paths.append(found)
    paths.extend(_CANDIDATE_NAMES)
    return paths


class LibTidy:
    """A loaded libtidy shared library."""

    def __init__(self, path: Optional[str] = None) -> None:
        paths = [path] if path else _candidate_paths()
        lib = None
        for candidate in paths:
            try:
                lib = ctypes.CDLL(candidate)
            except OSError:
                continue
            self.path = candidate
            break
        if lib is None:
            raise EngineLoadError(
                f"libtidy not found (tried: {', '.join(paths)}); "
                f"install tidy-html5 or set {ENV_LIBRARY}"
            )
        for name, (restype, argtypes) in _SIGNATURES.items():
            try:
                func = getattr(lib, name)
            except AttributeError as exc:
                raise EngineLoadError(f"{self.path} does not export {name}") from exc
            func.restype = restype
            func.argtypes = argtypes
        self._lib = lib
        logger.debug("Loaded libtidy %s from %s", self.version(), self.path)

    def version(self) -> str:
        """Release date string reported by libtidy."""
        return self._lib.tidyReleaseDate().decode("ascii", "replace")

    def create(self) -> TidyHandle:
        """Allocate a new document handle."""
        return TidyHandle(self._lib)


class TidyHandle:
    """Exclusive owner of one ``TidyDoc`` and its diagnostics buffer.

    :meth:`release` frees the native resources exactly once; every other
    method raises :class:`EngineContractError` after that.
    """

    def __init__(self, lib: ctypes.CDLL) -> None:
        self._lib = lib
        doc = lib.tidyCreate()
        if not doc:
            raise EngineContractError("tidyCreate returned NULL")
        self._doc: Optional[int] = doc
        self._errbuf = TidyBuffer()
        lib.tidyBufInit(ctypes.byref(self._errbuf))
        res = lib.tidySetErrorBuffer(doc, ctypes.byref(self._errbuf))
        if res != 0:
            self.release()
            raise EngineContractError(f"tidySetErrorBuffer returned {res}")
        self._option_ids: dict[str, int] = {}

    # -- lifecycle ----------------------------------------------------------

    @property
    def released(self) -> bool:
        return self._doc is None

    def release(self) -> None:
        """Free the document and its buffers. Further calls do nothing."""
        doc, self._doc = self._doc, None
        if doc is None:
            return
        self._lib.tidyRelease(doc)
        self._lib.tidyBufFree(ctypes.byref(self._errbuf))
        logger.debug("Released tidy document %#x", doc)

    def __enter__(self) -> TidyHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def _live(self) -> int:
        if self._doc is None:
            raise EngineContractError("tidy document used after release")
        return self._doc

    # -- configuration primitives -------------------------------------------

    def option_id(self, name: str) -> int:
        """Resolve an option name to this build's ``TidyOptionId``."""
        if name not in self._option_ids:
            opt = self._lib.tidyGetOptionByName(self._live(), name.encode("ascii"))
            if not opt:
                raise EngineContractError(f"libtidy has no option named {name!r}")
            self._option_ids[name] = self._lib.tidyOptGetId(opt)
        return self._option_ids[name]

    def reset_options(self) -> bool:
        return self._lib.tidyOptResetAllToDefault(self._live()) == 1

    def set_int(self, name: str, value: int) -> bool:
        return self._lib.tidyOptSetInt(self._live(), self.option_id(name), value) == 1

    def set_bool(self, name: str, value: bool) -> bool:
        return self._lib.tidyOptSetBool(self._live(), self.option_id(name), int(value)) == 1

    def set_encoding(self, name: str) -> bool:
        return self._lib.tidySetCharEncoding(self._live(), name.encode("ascii")) == 0

    # -- document primitives ------------------------------------------------

    def parse(self, text: str) -> int:
        """Parse *text* (sent as UTF-8); returns libtidy's status."""
        return self._lib.tidyParseString(self._live(), text.encode("utf-8"))

    def clean_and_repair(self) -> int:
        return self._lib.tidyCleanAndRepair(self._live())

    def save(self) -> tuple[int, bytes]:
        """Render the document into a fresh buffer; returns (status, output)."""
        doc = self._live()
        out = TidyBuffer()
        self._lib.tidyBufInit(ctypes.byref(out))
        try:
            status = self._lib.tidySaveBuffer(doc, ctypes.byref(out))
            return status, out.to_bytes()
        finally:
            self._lib.tidyBufFree(ctypes.byref(out))

    def drain_diagnostics(self) -> str:
        """Return and clear whatever libtidy wrote to the diagnostics buffer."""
        self._live()
        text = self._errbuf.to_bytes().decode("utf-8", "replace")
        self._lib.tidyBufClear(ctypes.byref(self._errbuf))
        return text


@lru_cache(maxsize=None)
def default_engine() -> LibTidy:
    """Process-wide libtidy instance, loaded on first use."""
    return LibTidy()


def engine_available() -> bool:
    """True if libtidy can be loaded."""
    try:
        default_engine()
    except EngineLoadError:
        return False
    return True
