"""Public runtime orchestration entry points.

This package groups the session bootstrap (`run_session`) and the
lower-level event loop contracts used by tests and composition code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .loop import LoopOutcome, LoopSettings


def run_session(*args, **kwargs):
    """Lazily import session entrypoint so config parsing stays import-light."""
    from .session import run_session as _run_session

    return _run_session(*args, **kwargs)


def run_input_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_input_loop as _run_input_loop

    return _run_input_loop(*args, **kwargs)


def __getattr__(name: str):
    if name in {"LoopOutcome", "LoopSettings"}:
        from . import loop as _loop

        return getattr(_loop, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "run_session",
    "run_input_loop",
    "LoopOutcome",
    "LoopSettings",
]
