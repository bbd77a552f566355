# complaint_rows.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence

NO_FEEDBACK = "No feedback yet"


def format_timestamp(millis: int) -> str:
    """Epoch milliseconds -> '05 Mar 2025, 14:07' in local time."""
    try:
        return datetime.fromtimestamp(millis / 1000).strftime("%d %b %Y, %H:%M")
    except (OverflowError, OSError, ValueError):
        return ""


def feedback_label(complaint) -> str:
    return complaint.feedback if complaint.feedback is not None else NO_FEEDBACK


@dataclass
class RowDiff:
    removed: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)
    order: List[str] = field(default_factory=list)
    reordered: bool = False

    @property
    def empty(self) -> bool:
        return not (self.removed or self.added or self.changed or self.reordered)


def diff_by_id(old: Sequence, new: Sequence) -> RowDiff:
    """
    Compare two rendered lists by complaint id rather than position.
    `changed` lists ids present in both whose content differs.
    """
    old_by_id = {c.id: c for c in old}
    new_ids = [c.id for c in new]
    new_set = set(new_ids)

    diff = RowDiff(order=new_ids)
    diff.removed = [c.id for c in old if c.id not in new_set]
    for c in new:
        prev = old_by_id.get(c.id)
        if prev is None:
            diff.added.append(c.id)
        elif prev != c:
            diff.changed.append(c.id)
    kept_old = [c.id for c in old if c.id in new_set]
    diff.reordered = bool(diff.added) or kept_old != [i for i in new_ids if i in old_by_id]
    return diff
