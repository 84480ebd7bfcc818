"""Activity log domain service."""

from datetime import date
from typing import Any, Optional, Sequence

from ledgerview.domain.entities import ActivityAction, ActivityLogView, Record
from ledgerview.domain.predicates import (
    any_contains,
    build_filter,
    contains,
    date_range,
    equals,
    where,
)
from ledgerview.domain.view_engine import DerivedViewEngine

DEFAULT_PAGE_SIZE = 15
SYSTEM_ADMINISTRATOR = "System Administrator"
NO_SUBJECT = "—"

# (substring of the model name, exact snake_case value, label)
SUBJECT_TYPE_LABELS = (
    ("JournalEntry", "journal_entry", "Journal Entry"),
    ("Client", "client", "Client"),
    ("Invoice", "invoice", "Invoice"),
    ("Supplier", "supplier", "Supplier"),
    ("Bill", "bill", "Bill"),
    ("Payment", "payment", "Payment"),
    ("AuthorizationCode", None, "Authorization Code"),
)

ACTION_PHRASES = {
    ActivityAction.CREATED.value: "record created",
    ActivityAction.UPDATED.value: "record updated",
    ActivityAction.DELETED.value: "record deleted",
    ActivityAction.DEACTIVATED.value: "record deactivated",
}


def subject_type_label(subject_type: Any) -> str:
    """Human-readable subject type, e.g. ``App\\Models\\JournalEntry`` -> "Journal Entry"."""
    if not subject_type:
        return NO_SUBJECT
    raw = str(subject_type)
    for fragment, exact, label in SUBJECT_TYPE_LABELS:
        if fragment in raw or (exact is not None and raw == exact):
            return label
    return raw


def subject_type_description(subject_type: Any, action: Any) -> str:
    """Phrase describing what happened, e.g. "Invoice record deleted"."""
    act = str(action or "").lower()
    if act == ActivityAction.LOGIN.value:
        return "User login"
    if act == ActivityAction.LOGOUT.value:
        return "User logout"

    subject = subject_type_label(subject_type)
    if subject == NO_SUBJECT:
        return str(action) if action else NO_SUBJECT

    if act in ACTION_PHRASES:
        phrase = ACTION_PHRASES[act]
    elif action:
        phrase = act
    else:
        phrase = "record modified"
    return f"{subject} {phrase}"


def is_personnel_entry(entry: Record) -> bool:
    """Entries by administrators are excluded from the personnel log."""
    if entry.get("user_type") == "admin":
        return False
    return str(entry.get("user_name") or "").strip() != SYSTEM_ADMINISTRATOR


class ActivityLogService:
    """Builds the filtered and paginated personnel activity log."""

    def __init__(self, engine: Optional[DerivedViewEngine] = None):
        self.engine = engine or DerivedViewEngine()

    def build_view(
        self,
        entries: Sequence[Record],
        user_id: Any = None,
        action: Optional[str] = None,
        subject_type: Optional[str] = None,
        date_from: Optional[date | str] = None,
        date_to: Optional[date | str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ActivityLogView:
        """Build one page of the activity log.

        Args:
            entries: Activity log records, newest first as fetched
            user_id: Actor id; compared by string form
            action: Substring of the action
            subject_type: Substring of the raw subject type, its label or
                the description phrase
            date_from: First calendar day included
            date_to: Last calendar day included
            page: Requested page, clamped to the valid range
            page_size: Rows per page

        Returns:
            ActivityLogView with the page and counters

        Raises:
            InvalidArgumentError: If page_size is not positive
        """
        user_predicate = None
        if user_id is not None and user_id != "":
            user_predicate = equals("user_id", user_id, as_string=True)

        action_predicate = contains("action", action) if action else None

        subject_predicate = None
        if subject_type:
            subject_predicate = any_contains(
                (
                    "subject_type",
                    lambda entry: subject_type_label(entry.get("subject_type")),
                    lambda entry: subject_type_description(
                        entry.get("subject_type"), entry.get("action")
                    ),
                ),
                subject_type,
            )

        range_predicate = None
        if date_from or date_to:
            range_predicate = date_range("created_at", date_from, date_to)

        user_filters = build_filter(
            user_predicate, action_predicate, subject_predicate, range_predicate
        )
        filter_spec = build_filter(where(is_personnel_entry, description="personnel only")).and_(
            *user_filters.predicates
        )

        view = self.engine.build_view(
            entries,
            filter_spec=filter_spec,
            page=page,
            page_size=page_size,
        )
        return ActivityLogView(
            page=view.page,
            filtered_count=view.filtered_count,
            has_active_filters=bool(user_filters),
        )
