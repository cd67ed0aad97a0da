"""Status changes that always travel with a history entry."""

from __future__ import annotations

from datetime import datetime

from bidmarket.core.enums import BidStatus
from bidmarket.database.models import Bid, BidStatusHistory, Project, ProjectStatusHistory, utcnow
from bidmarket.orchestration.state_machine import bid_state_machine, project_state_machine


def apply_bid_status(bid: Bid, target: str, reason: str | None = None, at: datetime | None = None) -> None:
    """Move ``bid`` to ``target`` or raise ``InvalidTransitionError``."""
    target = BidStatus(target).value
    bid_state_machine.assert_transition(current=bid.status, target=target)
    now = at or utcnow()
    bid.status = target
    bid.status_history.append(BidStatusHistory(status=target, reason=reason, timestamp=now))
    bid.last_updated = now
    if target == BidStatus.PENDING.value and bid.submitted_at is None:
        bid.submitted_at = now


def apply_project_status(
    project: Project,
    target: str,
    reason: str | None = None,
    strict: bool = False,
    at: datetime | None = None,
) -> bool:
    """Move ``project`` to ``target``; returns False when it is already there."""
    if project.status == target:
        return False
    project_state_machine(strict).assert_transition(current=project.status, target=target)
    now = at or utcnow()
    project.status = target
    project.status_history.append(ProjectStatusHistory(status=target, reason=reason, timestamp=now))
    project.last_activity_at = now
    return True
