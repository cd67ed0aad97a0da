"""Canonical state transition helpers for projects and bids."""

from __future__ import annotations

from bidmarket.core.enums import BidStatus, ProjectStatus
from bidmarket.core.exceptions import InvalidTransitionError

BID_TRANSITIONS: dict[str, set[str]] = {
    BidStatus.DRAFT.value: {BidStatus.PENDING.value, BidStatus.WITHDRAWN.value},
    BidStatus.PENDING.value: {
        BidStatus.IN_REVIEW.value,
        BidStatus.WITHDRAWN.value,
        BidStatus.REJECTED.value,
    },
    BidStatus.IN_REVIEW.value: {
        BidStatus.ACCEPTED.value,
        BidStatus.REJECTED.value,
        BidStatus.PENDING.value,
    },
    # Revert path.
    BidStatus.ACCEPTED.value: {BidStatus.IN_REVIEW.value},
    # Reconsideration path.
    BidStatus.REJECTED.value: {BidStatus.IN_REVIEW.value},
    # Resubmission path.
    BidStatus.WITHDRAWN.value: {BidStatus.PENDING.value},
}

# Only enforced when STRICT_PROJECT_TRANSITIONS is on.
PROJECT_TRANSITIONS: dict[str, set[str]] = {
    ProjectStatus.DRAFT.value: {ProjectStatus.OPEN.value, ProjectStatus.CANCELLED.value},
    ProjectStatus.OPEN.value: {
        ProjectStatus.IN_REVIEW.value,
        ProjectStatus.IN_PROGRESS.value,
        ProjectStatus.ON_HOLD.value,
        ProjectStatus.CANCELLED.value,
    },
    ProjectStatus.IN_REVIEW.value: {
        ProjectStatus.OPEN.value,
        ProjectStatus.IN_PROGRESS.value,
        ProjectStatus.ON_HOLD.value,
        ProjectStatus.CANCELLED.value,
    },
    ProjectStatus.IN_PROGRESS.value: {
        ProjectStatus.IN_REVIEW.value,
        ProjectStatus.ON_HOLD.value,
        ProjectStatus.COMPLETED.value,
        ProjectStatus.CANCELLED.value,
    },
    ProjectStatus.ON_HOLD.value: {
        ProjectStatus.OPEN.value,
        ProjectStatus.IN_PROGRESS.value,
        ProjectStatus.CANCELLED.value,
    },
    ProjectStatus.COMPLETED.value: set(),
    ProjectStatus.CANCELLED.value: set(),
}


class StateMachine:
    """Transition table lookup; a ``None`` table allows any known state."""

    def __init__(self, transitions: dict[str, set[str]] | None, states: set[str] | None = None) -> None:
        self._transitions = transitions
        self._states = states if states is not None else set(transitions or {})

    def can_transition(self, current: str, target: str) -> bool:
        if target not in self._states:
            return False
        if self._transitions is None:
            return True
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(current=current, target=target)


bid_state_machine = StateMachine(BID_TRANSITIONS)


def project_state_machine(strict: bool) -> StateMachine:
    """Return the project machine; permissive unless ``strict`` is set."""
    states = {status.value for status in ProjectStatus}
    return StateMachine(PROJECT_TRANSITIONS if strict else None, states=states)
