"""
Case-insensitive substring search over list views.

A field is a callable that pulls one display string out of a record, so the
same filter works for pydantic leave records and for the loosely-typed admin
records (plain dicts).
"""
from datetime import date, datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

FieldGetter = Callable[[Any], Optional[str]]

DISPLAY_DATE_FORMAT = "%b %d, %Y"  # Jan 10, 2024


def format_display_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return None
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DISPLAY_DATE_FORMAT)


def attr(name: str) -> FieldGetter:
    """Reads an attribute, or a key when the record is a dict."""
    def _get(record: Any) -> Optional[str]:
        value = record.get(name) if isinstance(record, dict) else getattr(record, name, None)
        if value is None:
            return None
        # str-enums render as their value
        return value.value if hasattr(value, "value") else str(value)
    return _get


def display_date(name: str) -> FieldGetter:
    def _get(record: Any) -> Optional[str]:
        value = record.get(name) if isinstance(record, dict) else getattr(record, name, None)
        return format_display_date(value)
    return _get


def search_filter(items: Iterable[T], query: Optional[str], fields: Sequence[FieldGetter]) -> List[T]:
    """
    Returns the records where the lower-cased query is a substring of at
    least one field's lower-cased value. A blank query returns every record.
    Input order is preserved.
    """
    items = list(items)
    if not query or not query.strip():
        return items
    needle = query.lower()

    def matches(record: T) -> bool:
        for field in fields:
            value = field(record)
            if value is not None and needle in value.lower():
                return True
        return False

    return [record for record in items if matches(record)]


# Field sets per list view
MY_LEAVE_FIELDS = (
    attr("subject"),
    attr("reason"),
    attr("status"),
    attr("reported_to_name"),
    display_date("from_date"),
    display_date("to_date"),
)

APPROVAL_FIELDS = (
    attr("applicant_name"),
    attr("class_name"),
    attr("subject"),
    attr("reason"),
    display_date("from_date"),
    display_date("to_date"),
)

HISTORY_FIELDS = APPROVAL_FIELDS + (attr("rejection_reason"),)

DEPARTMENT_FIELDS = (attr("departmentName"),)
CLASS_FIELDS = (attr("className"), attr("departmentName"))
PERSON_FIELDS = (attr("name"), attr("email"))
CLASS_TEACHER_FIELDS = (attr("teacherName"), attr("className"))
