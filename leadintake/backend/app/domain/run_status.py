# app/domain/run_status.py
from __future__ import annotations

import enum


class RunStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    error = "error"


class IllegalRunTransition(ValueError):
    def __init__(self, current: RunStatus, target: RunStatus) -> None:
        super().__init__(f"illegal run transition {current.value} -> {target.value}")
        self.current = current
        self.target = target


# One-way: nothing goes back to pending, terminal states stay terminal.
ALLOWED_TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.pending: frozenset({RunStatus.completed, RunStatus.failed, RunStatus.error}),
    RunStatus.completed: frozenset(),
    RunStatus.failed: frozenset(),
    RunStatus.error: frozenset(),
}


def is_terminal(status: RunStatus) -> bool:
    return not ALLOWED_TRANSITIONS[RunStatus(status)]


def transition(current: RunStatus, target: RunStatus) -> RunStatus:
    """
    The only way a run status changes.
    Returns the new status or raises IllegalRunTransition.
    """
    current = RunStatus(current)
    target = RunStatus(target)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise IllegalRunTransition(current, target)
    return target
