# erp/services/line_items.py
"""
Full-replace reconciliation of a document's line items.

The submitted list is the new truth: rows whose id is submitted are updated
in place, rows without a known id are inserted, rows not submitted are
deleted. Serial numbers follow list position (1-based).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, MutableSequence, Optional, Tuple

from erp.core.errors import ValidationFailed

logger = logging.getLogger(__name__)


@dataclass
class ReconcilePlan:
    # (existing id, serial_no, fields)
    updates: List[Tuple[int, int, Dict[str, Any]]] = field(default_factory=list)
    # (serial_no, fields)
    inserts: List[Tuple[int, Dict[str, Any]]] = field(default_factory=list)
    deletes: List[int] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not (self.updates or self.inserts or self.deletes)


def plan_line_items(existing_ids: Iterable[int], incoming: Iterable[Mapping[str, Any]]) -> ReconcilePlan:
    """
    Three-way diff between stored row ids and the submitted list.

    An id that is not one of `existing_ids` is treated as a new row (its id is
    dropped). Submitting the same id twice is a client error.
    """
    existing = set(existing_ids)
    plan = ReconcilePlan()
    seen: set = set()

    for position, raw in enumerate(incoming, start=1):
        data = dict(raw)
        item_id: Optional[int] = data.pop("id", None)

        if item_id is not None and item_id in existing:
            if item_id in seen:
                raise ValidationFailed(f"Line item {item_id} submitted more than once",
                                       details=[{"field": f"items.{position - 1}.id", "message": "Duplicate item id"}])
            seen.add(item_id)
            plan.updates.append((item_id, position, data))
        else:
            plan.inserts.append((position, data))

    plan.deletes = sorted(existing - seen)
    return plan


def apply_line_item_plan(
    rows: MutableSequence[Any],
    plan: ReconcilePlan,
    factory: Callable[..., Any],
) -> None:
    """
    Apply `plan` to an ORM collection (document.items). Removed rows are
    deleted by the relationship's delete-orphan cascade at flush time.
    """
    by_id = {r.id: r for r in rows}

    for row_id in plan.deletes:
        rows.remove(by_id[row_id])

    for row_id, serial_no, data in plan.updates:
        row = by_id[row_id]
        for attr, value in data.items():
            setattr(row, attr, value)
        row.serial_no = serial_no

    for serial_no, data in plan.inserts:
        rows.append(factory(serial_no=serial_no, **data))

    logger.debug("line items reconciled: %d updated, %d inserted, %d deleted",
                 len(plan.updates), len(plan.inserts), len(plan.deletes))
