"""Exception types raised by complyscan."""

from __future__ import annotations

from typing import Mapping


class ComplyscanError(RuntimeError):
    """Base class for errors surfaced to report callers."""


class CatalogUnavailableError(ComplyscanError):
    """The standards catalog could not be retrieved.

    There is no local fallback: a report cannot be assembled without the
    canonical catalog, so this always propagates to the caller.
    """

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class AnnotationSyntaxError(ComplyscanError, ValueError):
    """Raised by strict annotation parsing when a required field is absent."""

    def __init__(self, message: str, *, text: str) -> None:
        super().__init__(f"{message}: {text!r}")
        self.text = text


class NeverThrown(RuntimeError):
    """Sentinel for code paths that must be unreachable.

    Raising this exception signals a broken internal invariant rather than
    bad user input.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})
