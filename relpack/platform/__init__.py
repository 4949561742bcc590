"""Platform abstraction layer."""

from .process import (
    OutputSource,
    ProcessError,
    RunningProcess,
    Sink,
    run_streaming,
    start,
)

__all__ = [
    "OutputSource",
    "ProcessError",
    "RunningProcess",
    "Sink",
    "run_streaming",
    "start",
]
