from datetime import datetime
from types import SimpleNamespace

import pytest

from erp.core.errors import BadRequest
from erp.models.approval import ApprovalStatus
from erp.services.approval_workflow import (
    ApprovalAction,
    apply_changes,
    available_actions,
    legal_actions,
    restored_status,
    transition,
)

NOW = datetime(2025, 6, 1, 10, 30)


def _doc(status=ApprovalStatus.DRAFT, **kw):
    base = dict(
        approval_status=status,
        status_before_suspend=None,
        is_approved1=False,
        is_approved2=False,
        is_complete=False,
        is_suspended=False,
    )
    base.update(kw)
    return SimpleNamespace(**base)


def _run(doc, action, actor_id=7):
    result = transition(doc, action, actor_id=actor_id, now=NOW, label="work order")
    apply_changes(doc, result)
    return result


def test_forward_path_sets_flags_and_stamps():
    doc = _doc()
    _run(doc, ApprovalAction.APPROVE1, actor_id=1)
    assert doc.approval_status == ApprovalStatus.APPROVED_LEVEL_1
    assert doc.is_approved1 is True
    assert doc.approved1_by_id == 1
    assert doc.approved1_at == NOW

    _run(doc, "approve2", actor_id=2)
    assert doc.approval_status == ApprovalStatus.APPROVED_LEVEL_2
    assert doc.is_approved2 is True
    assert doc.approved2_by_id == 2

    result = _run(doc, ApprovalAction.COMPLETE, actor_id=3)
    assert result.previous_status == ApprovalStatus.APPROVED_LEVEL_2
    assert doc.approval_status == ApprovalStatus.COMPLETED
    assert doc.is_complete is True
    assert doc.completed_by_id == 3


@pytest.mark.parametrize(
    "status, action, message",
    [
        (ApprovalStatus.APPROVED_LEVEL_1, ApprovalAction.APPROVE1, "Only DRAFT can be approved (level 1)"),
        (ApprovalStatus.DRAFT, ApprovalAction.APPROVE2, "Only level 1 approved can be approved (level 2)"),
        (ApprovalStatus.APPROVED_LEVEL_1, ApprovalAction.COMPLETE, "Only level 2 approved can be completed"),
        (ApprovalStatus.SUSPENDED, ApprovalAction.APPROVE2, "Only level 1 approved can be approved (level 2)"),
    ],
)
def test_out_of_order_actions_are_rejected(status, action, message):
    doc = _doc(status)
    with pytest.raises(BadRequest) as exc:
        transition(doc, action, actor_id=1, now=NOW)
    assert exc.value.message == message
    assert doc.approval_status == status


def test_unknown_action_is_rejected():
    with pytest.raises(BadRequest):
        transition(_doc(), "archive", actor_id=1, now=NOW)


def test_completed_document_cannot_be_suspended():
    doc = _doc(ApprovalStatus.COMPLETED, is_approved1=True, is_approved2=True, is_complete=True)
    with pytest.raises(BadRequest) as exc:
        transition(doc, ApprovalAction.SUSPEND, actor_id=1, now=NOW, label="work order")
    assert exc.value.message == "Completed work order cannot be suspended"


def test_suspend_then_unsuspend_restores_previous_status():
    doc = _doc(ApprovalStatus.APPROVED_LEVEL_1, is_approved1=True)
    _run(doc, ApprovalAction.SUSPEND, actor_id=5)
    assert doc.approval_status == ApprovalStatus.SUSPENDED
    assert doc.is_suspended is True
    assert doc.status_before_suspend == ApprovalStatus.APPROVED_LEVEL_1
    assert doc.suspended_by_id == 5

    _run(doc, ApprovalAction.UNSUSPEND)
    assert doc.approval_status == ApprovalStatus.APPROVED_LEVEL_1
    assert doc.is_suspended is False
    assert doc.status_before_suspend is None
    # approval flags survive the round trip
    assert doc.is_approved1 is True


def test_suspending_twice_keeps_original_status():
    doc = _doc(ApprovalStatus.APPROVED_LEVEL_2, is_approved1=True, is_approved2=True)
    _run(doc, ApprovalAction.SUSPEND)
    _run(doc, ApprovalAction.SUSPEND)
    assert doc.status_before_suspend == ApprovalStatus.APPROVED_LEVEL_2
    _run(doc, ApprovalAction.UNSUSPEND)
    assert doc.approval_status == ApprovalStatus.APPROVED_LEVEL_2


def test_unsuspend_requires_suspended_document():
    with pytest.raises(BadRequest) as exc:
        transition(_doc(), ApprovalAction.UNSUSPEND, actor_id=1, now=NOW, label="indent")
    assert exc.value.message == "Only suspended indent can be unsuspended"


def test_restored_status_falls_back_to_flags():
    assert restored_status(_doc(ApprovalStatus.SUSPENDED)) == ApprovalStatus.DRAFT
    assert restored_status(_doc(ApprovalStatus.SUSPENDED, is_approved1=True)) == ApprovalStatus.APPROVED_LEVEL_1
    assert restored_status(
        _doc(ApprovalStatus.SUSPENDED, is_approved1=True, is_approved2=True)
    ) == ApprovalStatus.APPROVED_LEVEL_2


def test_legal_actions_per_status():
    assert legal_actions(ApprovalStatus.DRAFT) == [ApprovalAction.APPROVE1, ApprovalAction.SUSPEND]
    assert legal_actions(ApprovalStatus.APPROVED_LEVEL_2) == [ApprovalAction.COMPLETE, ApprovalAction.SUSPEND]
    assert legal_actions(ApprovalStatus.COMPLETED) == []
    assert legal_actions(ApprovalStatus.SUSPENDED) == [ApprovalAction.UNSUSPEND]


def test_available_actions_filters_by_permission():
    perms = {ApprovalAction.APPROVE1: "A1", ApprovalAction.SUSPEND: "S"}
    assert available_actions(ApprovalStatus.DRAFT, perms, ["A1"]) == ["approve1"]
    assert available_actions(ApprovalStatus.DRAFT, perms, []) == []
    assert available_actions(ApprovalStatus.DRAFT, perms, [], is_admin=True) == ["approve1", "suspend"]
