"""Input-layer public API: byte source, classification, matching, and timing."""

from .classify import ByteDescription, describe_byte
from .key_names import NamedSequenceTable, parse_key_sequence
from .matchers import ExitPhraseMatcher, NamedSequenceMatcher
from .reader import DEFAULT_SEQUENCE_TIMEOUT_MS, INTERRUPTED, FdInputSource
from .timing import TimingSample, TimingTracker, format_delay

__all__ = [
    "ByteDescription",
    "describe_byte",
    "NamedSequenceTable",
    "parse_key_sequence",
    "ExitPhraseMatcher",
    "NamedSequenceMatcher",
    "DEFAULT_SEQUENCE_TIMEOUT_MS",
    "INTERRUPTED",
    "FdInputSource",
    "TimingSample",
    "TimingTracker",
    "format_delay",
]
