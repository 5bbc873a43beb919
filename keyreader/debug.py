"""Diagnostic logging setup driven by the ``-d``/``-D`` flags.

Log records go to stderr so they never interleave with the byte report on
stdout. Records at ERROR and above carry the innermost stack frames.
"""

from __future__ import annotations

import logging
import traceback

DEFAULT_DEBUG_LEVEL = 1
DEFAULT_STACK_FRAMES = 1
LOG_FORMAT = "%(name)s: %(levelname)s: %(message)s"


def logging_level_for(debug_level: int) -> int:
    """Map a 0..10 debug level onto a ``logging`` level."""
    if debug_level <= 0:
        return logging.ERROR
    if debug_level == 1:
        return logging.WARNING
    if debug_level == 2:
        return logging.INFO
    return logging.DEBUG


class StackFramesFormatter(logging.Formatter):
    """Append up to ``stack_frames`` caller frames to error records."""

    def __init__(self, fmt: str = LOG_FORMAT, stack_frames: int = DEFAULT_STACK_FRAMES) -> None:
        super().__init__(fmt)
        self.stack_frames = stack_frames

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if record.levelno < logging.ERROR or record.stack_info:
            return text
        # Skip the logging machinery itself: keep the frames up to the caller.
        frames = traceback.extract_stack()
        caller = [
            frame
            for frame in frames
            if frame.filename == record.pathname and frame.lineno == record.lineno
        ]
        if caller:
            frames = frames[: frames.index(caller[-1]) + 1]
        frames = frames[-self.stack_frames :]
        return text + "\n" + "".join(traceback.format_list(frames)).rstrip("\n")


def configure_logging(
    debug_level: int = DEFAULT_DEBUG_LEVEL,
    stack_frames: int = DEFAULT_STACK_FRAMES,
) -> logging.Handler:
    """Install a stderr handler on the root logger and return it."""
    handler = logging.StreamHandler()
    handler.setFormatter(StackFramesFormatter(stack_frames=stack_frames))
    logging.basicConfig(handlers=[handler], force=True)
    logging.getLogger().setLevel(logging_level_for(debug_level))
    return handler
