"""
Validation package.

Used by the ledger before every mutation. A presentation layer catching
InvalidInputError can show ``get_user_friendly_summary(error)`` next to the
form instead of the raw issue list.
"""

from expense_ledger.validation.validator import (
    EDITABLE_FIELDS,
    get_user_friendly_summary,
    issues_from_error,
    merge_patch,
    validate_budget,
    validate_expense,
)

__all__ = [
    "EDITABLE_FIELDS",
    "get_user_friendly_summary",
    "issues_from_error",
    "merge_patch",
    "validate_budget",
    "validate_expense",
]
