# erp/services/approval_workflow.py
"""
Document approval state machine.

    DRAFT -> APPROVED_LEVEL_1 -> APPROVED_LEVEL_2 -> COMPLETED
      \\___________\\___________________\\______ SUSPENDED (and back)

Pure functions only: the caller hands in anything with the approval
attributes (an ORM row or a SimpleNamespace in tests) and applies the
returned field changes itself.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from erp.core.errors import BadRequest
from erp.models.approval import ApprovalStatus


class ApprovalAction(str, enum.Enum):
    APPROVE1 = "approve1"
    APPROVE2 = "approve2"
    COMPLETE = "complete"
    SUSPEND = "suspend"
    UNSUSPEND = "unsuspend"


# forward steps: action -> (required current status, target status, flag, stamp prefix)
_FORWARD = {
    ApprovalAction.APPROVE1: (ApprovalStatus.DRAFT, ApprovalStatus.APPROVED_LEVEL_1, "is_approved1", "approved1"),
    ApprovalAction.APPROVE2: (ApprovalStatus.APPROVED_LEVEL_1, ApprovalStatus.APPROVED_LEVEL_2, "is_approved2",
                              "approved2"),
    ApprovalAction.COMPLETE: (ApprovalStatus.APPROVED_LEVEL_2, ApprovalStatus.COMPLETED, "is_complete", "completed"),
}

_FORWARD_ERRORS = {
    ApprovalAction.APPROVE1: "Only DRAFT can be approved (level 1)",
    ApprovalAction.APPROVE2: "Only level 1 approved can be approved (level 2)",
    ApprovalAction.COMPLETE: "Only level 2 approved can be completed",
}


@dataclass
class TransitionResult:
    previous_status: ApprovalStatus
    new_status: ApprovalStatus
    changes: Dict[str, Any] = field(default_factory=dict)


def _status(value: Any) -> ApprovalStatus:
    if isinstance(value, ApprovalStatus):
        return value
    return ApprovalStatus(str(value or ApprovalStatus.DRAFT.value))


def restored_status(doc: Any) -> ApprovalStatus:
    """Status a suspended document returns to on unsuspend."""
    before = getattr(doc, "status_before_suspend", None)
    if before is not None and _status(before) != ApprovalStatus.SUSPENDED:
        return _status(before)
    # rows suspended before status_before_suspend was recorded
    if getattr(doc, "is_complete", False):
        return ApprovalStatus.COMPLETED
    if getattr(doc, "is_approved2", False):
        return ApprovalStatus.APPROVED_LEVEL_2
    if getattr(doc, "is_approved1", False):
        return ApprovalStatus.APPROVED_LEVEL_1
    return ApprovalStatus.DRAFT


def transition(
    doc: Any,
    action: ApprovalAction | str,
    *,
    actor_id: Optional[int],
    now: datetime,
    label: str = "document",
) -> TransitionResult:
    """
    Validate `action` against the current state of `doc` and return the
    field changes it implies. Raises BadRequest when the action is illegal.
    """
    try:
        action = ApprovalAction(action)
    except ValueError:
        raise BadRequest(f"Unknown status action '{action}'")

    current = _status(getattr(doc, "approval_status", None))

    if action in _FORWARD:
        required, target, flag, stamp = _FORWARD[action]
        if current != required:
            raise BadRequest(_FORWARD_ERRORS[action])
        return TransitionResult(current, target, {
            "approval_status": target,
            flag: True,
            f"{stamp}_by_id": actor_id,
            f"{stamp}_at": now,
        })

    if action == ApprovalAction.SUSPEND:
        if current == ApprovalStatus.COMPLETED:
            raise BadRequest(f"Completed {label} cannot be suspended")
        changes: Dict[str, Any] = {
            "approval_status": ApprovalStatus.SUSPENDED,
            "is_suspended": True,
            "suspended_by_id": actor_id,
            "suspended_at": now,
        }
        # re-suspending keeps the originally recorded status
        if current != ApprovalStatus.SUSPENDED:
            changes["status_before_suspend"] = current
        return TransitionResult(current, ApprovalStatus.SUSPENDED, changes)

    # unsuspend
    if current != ApprovalStatus.SUSPENDED:
        raise BadRequest(f"Only suspended {label} can be unsuspended")
    target = restored_status(doc)
    return TransitionResult(current, target, {
        "approval_status": target,
        "is_suspended": False,
        "status_before_suspend": None,
    })


def apply_changes(doc: Any, result: TransitionResult) -> None:
    for attr, value in result.changes.items():
        setattr(doc, attr, value)


def legal_actions(status: Any) -> List[ApprovalAction]:
    current = _status(status)
    out = [a for a, (required, *_rest) in _FORWARD.items() if required == current]
    if current == ApprovalStatus.SUSPENDED:
        out.append(ApprovalAction.UNSUSPEND)
    elif current != ApprovalStatus.COMPLETED:
        out.append(ApprovalAction.SUSPEND)
    return out


def available_actions(status: Any, action_perms: Dict[ApprovalAction, str], granted: Iterable[str],
                      *, is_admin: bool = False) -> List[str]:
    """
    Actions the caller could apply right now: legal from `status` and backed by
    the permission mapped in `action_perms`.
    """
    granted_set = set(granted)
    out: List[str] = []
    for action in legal_actions(status):
        perm = action_perms.get(action)
        if is_admin or (perm and perm in granted_set):
            out.append(action.value)
    return out
