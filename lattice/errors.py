"""Fatal error categories raised while loading or ordering a lattice.

Each error carries an ``ErrorKind`` tag. Its integer value is the exit status a
command-line host is expected to use; the library itself never exits.
"""
from __future__ import annotations

from enum import IntEnum


class ErrorKind(IntEnum):
    OPEN_FAILURE = 1
    PARSE_FAILURE = 2
    CYCLE_DETECTED = 3


class LatticeError(RuntimeError):
    kind: ErrorKind

    @property
    def status(self) -> int:
        return int(self.kind)


class LatticeOpenError(LatticeError):
    kind = ErrorKind.OPEN_FAILURE


class LatticeParseError(LatticeError):
    kind = ErrorKind.PARSE_FAILURE


class LatticeCycleError(LatticeError):
    kind = ErrorKind.CYCLE_DETECTED
