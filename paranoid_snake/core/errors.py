# =============================================================================
# Paranoid Snake - Errors
# =============================================================================
"""
Exception hierarchy for the engine.

InvalidSnapshot is surfaced to callers, InvariantViolation signals a bug in
the caller, DeadlineExceededBeforeAnyDepth never leaves decide().
"""


class EngineError(Exception):
    """Base class for every error raised by the engine"""


class InvalidSnapshot(EngineError, ValueError):
    """The input cannot form a valid BoardState"""


class InvariantViolation(EngineError, RuntimeError):
    """A caller broke an engine precondition, e.g. moved an eliminated agent"""


class DeadlineExceededBeforeAnyDepth(EngineError):
    """Not even a depth-1 search finished before the deadline"""
