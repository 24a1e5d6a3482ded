"""Base exceptions for the fretmap engine.

Malformed input (unparseable note names, negative counts, unknown chord or
scale symbols) is reported through these exceptions. Infeasible but
well-formed requests never raise; the search functions return empty results
for those instead.
"""

from __future__ import annotations

from typing import Any


class FretmapException(Exception):
    """Root of all exceptions raised by fretmap."""


class NoteNameException(FretmapException, ValueError):
    """Raised when a note name cannot be resolved to a pitch class."""

    def __init__(self, name: Any) -> None:
        """Initialize with the offending note name.

        Args:
            name: The value that failed to parse as a note name.
        """
        super().__init__(f"Invalid note name: {name!r}")
        self.name = name


class ToneSetException(FretmapException, KeyError):
    """Raised when a chord or scale symbol is not known to the resolver."""

    def __init__(self, kind: str, symbol: str) -> None:
        super().__init__(f"Unknown {kind}: {symbol!r}")
        self.kind = kind
        self.symbol = symbol

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class GeometryException(FretmapException, ValueError):
    """Raised for malformed instrument geometry such as negative counts."""


class PlaybackException(FretmapException, ValueError):
    """Raised for out-of-range MIDI playback settings."""


class MatchException(FretmapException):
    """Exception raised when pattern matching fails."""

    def __init__(self, value: Any) -> None:
        """Initialize a MatchException with the unmatched value.

        Args:
            value: The value that failed to match any pattern.
        """
        super().__init__(f"Failed to match value: {value}")
