"""Invariant markers for complyscan."""

from __future__ import annotations

from typing import NoReturn

from complyscan.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The optional env payload is diagnostic metadata attached to the raised
    exception; it is not evaluated.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)
