# models.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping, Optional

from errors import MalformedRecord, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "STAFF"
GLOBAL_ADMIN_ROLE = "ADMIN"


class Department(str, Enum):
    TICKETING = "TICKETING"
    CATERING = "CATERING"
    CLEANLINESS = "CLEANLINESS"
    TRAIN_DELAY = "TRAIN_DELAY"
    LOST_AND_FOUND = "LOST_AND_FOUND"
    MAINTENANCE = "MAINTENANCE"
    SECURITY = "SECURITY"
    OTHER = "OTHER"


def normalize_department(value) -> Department:
    """
    Map a stored department value onto the closed Department set.
    Missing, blank, non-string and unknown values all become OTHER.
    """
    if not isinstance(value, str):
        return Department.OTHER
    try:
        return Department(value.strip().upper())
    except ValueError:
        return Department.OTHER


def normalize_role(value) -> str:
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_ROLE
    return value.strip().upper()


@dataclass(frozen=True)
class AdminProfile:
    role: str = DEFAULT_ROLE
    department: Department = Department.OTHER

    @property
    def is_global_admin(self) -> bool:
        return self.role == GLOBAL_ADMIN_ROLE

    @classmethod
    def from_doc(cls, doc: Optional[Mapping]) -> "AdminProfile":
        doc = doc or {}
        return cls(
            role=normalize_role(doc.get("role")),
            department=normalize_department(doc.get("department")),
        )


# older mobile clients wrote userId / complaintText
_AUTHOR_FIELDS = ("authorId", "userId")
_TEXT_FIELDS = ("text", "complaintText")


def _first(fields: Mapping, names):
    for name in names:
        if fields.get(name) is not None:
            return fields[name]
    return None


def _as_millis(key, value) -> int:
    if isinstance(value, bool):
        raise MalformedRecord(key, "timestamp is not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise MalformedRecord(key, f"bad timestamp {value!r}") from None
    raise MalformedRecord(key, f"bad timestamp {value!r}")


@dataclass(frozen=True)
class Complaint:
    id: str
    author_id: str
    text: str
    timestamp: int
    department: Department = Department.OTHER
    feedback: Optional[str] = None

    @classmethod
    def from_record(cls, key, fields) -> "Complaint":
        """
        Build a Complaint from one store record.
        `key` is the store-assigned id; the complaintId field is only a fallback.
        Raises MalformedRecord when required fields are missing or mistyped.
        """
        if not isinstance(fields, Mapping):
            raise MalformedRecord(key, f"expected a mapping, got {type(fields).__name__}")

        cid = key or fields.get("complaintId")
        if not isinstance(cid, str) or not cid:
            raise MalformedRecord(key, "no complaint id")

        text = _first(fields, _TEXT_FIELDS)
        if not isinstance(text, str):
            raise MalformedRecord(key, "missing complaint text")

        if fields.get("timestamp") is None:
            raise MalformedRecord(key, "missing timestamp")
        ts = _as_millis(key, fields["timestamp"])

        feedback = fields.get("feedback")
        if feedback is not None and not isinstance(feedback, str):
            raise MalformedRecord(key, "feedback is not text")

        author = _first(fields, _AUTHOR_FIELDS)
        return cls(
            id=cid,
            author_id=author if isinstance(author, str) else "",
            text=text,
            timestamp=ts,
            department=normalize_department(fields.get("department")),
            feedback=feedback,
        )


def parse_complaints(records: Optional[Mapping]) -> List[Complaint]:
    """Parse a full snapshot, keeping snapshot order and skipping bad records."""
    out = []
    for key, fields in (records or {}).items():
        try:
            out.append(Complaint.from_record(key, fields))
        except MalformedRecord as e:
            logger.warning("Skipping malformed record: %s", e)
    return out


def visible_complaints(complaints: Iterable[Complaint], profile: AdminProfile) -> List[Complaint]:
    """
    If role == 'ADMIN' => every complaint.
    else only complaints of the profile's own department.
    Newest first; equal timestamps keep their snapshot order.
    """
    if profile.is_global_admin:
        visible = list(complaints)
    else:
        visible = [c for c in complaints if c.department == profile.department]
    return sorted(visible, key=lambda c: c.timestamp, reverse=True)


def validate_feedback(text) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Please enter feedback")
    return cleaned
