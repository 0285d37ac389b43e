"""
Expense Validation

DESIGN DECISION: Validation is a pure function in front of every ledger
mutation. It never touches storage and never changes ledger state; it
either returns a normalized ExpenseDraft or raises InvalidInputError
listing every problem found.

Rules:
- description must be non-empty after trimming (the trimmed text is kept)
- amount must parse to a finite number greater than zero; numeric
  strings such as "12.50" are accepted; a fractional amount must reload
  unchanged from its stored JSON float (up to 15 significant digits always do)
- category defaults to Other when absent or None; a present but
  unrecognized name is rejected (matching ignores case and surrounding
  whitespace)
- any other keys, such as id or date, are ignored

IMPORTANT: Validation NEVER silently fixes a bad value.
Trimming whitespace is the only normalization applied.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Union

from pydantic import ValidationError

from expense_ledger.errors import InvalidInputError
from expense_ledger.models.expense import Expense, ExpenseDraft, ValidationIssue


# Fields a caller may replace through an update
EDITABLE_FIELDS = ("description", "amount", "category")


def validate_expense(data: Union[Mapping[str, Any], ExpenseDraft]) -> ExpenseDraft:
    """
    Check and normalize a proposed expense.

    Args:
        data: Mapping with description, amount and (optionally) category

    Returns:
        The normalized draft

    Raises:
        InvalidInputError: If any field is missing or invalid
    """
    if isinstance(data, ExpenseDraft):
        return data
    if not isinstance(data, Mapping):
        raise InvalidInputError([ValidationIssue(
            field="input",
            issue_type="invalid_type",
            message=f"Expected a mapping of expense fields, got {type(data).__name__}",
        )])

    try:
        return ExpenseDraft.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidInputError(issues_from_error(e)) from e


def merge_patch(current: Expense, patch: Mapping[str, Any]) -> dict[str, Any]:
    """
    Overlay an update patch on an existing expense.

    Only the editable fields are taken from ``patch``; a key present
    with value None keeps the current value. The result still has to go
    through ``validate_expense``.
    """
    if not isinstance(patch, Mapping):
        raise InvalidInputError([ValidationIssue(
            field="patch",
            issue_type="invalid_type",
            message=f"Expected a mapping of expense fields, got {type(patch).__name__}",
        )])

    merged: dict[str, Any] = {
        "description": current.description,
        "amount": current.amount,
        "category": current.category,
    }
    for name in EDITABLE_FIELDS:
        if patch.get(name) is not None:
            merged[name] = patch[name]
    return merged


def validate_budget(value: Any) -> Decimal:
    """
    Parse a budget value.

    Any finite number is accepted as-is, including zero and negatives;
    budget_status decides how to report those.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError([ValidationIssue(
            field="budget",
            issue_type="invalid_type",
            message="Budget must be a number",
        )])

    try:
        budget = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidInputError([ValidationIssue(
            field="budget",
            issue_type="invalid_number",
            message=f"Budget '{value}' is not a number",
        )]) from None

    if not budget.is_finite():
        raise InvalidInputError([ValidationIssue(
            field="budget",
            issue_type="not_finite",
            message="Budget must be a finite number",
        )])
    return budget


def issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    """Translate pydantic errors into ValidationIssue objects."""
    issues = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ()))
        issues.append(ValidationIssue(
            field=location or "input",
            issue_type=detail.get("type", "invalid"),
            message=detail.get("msg", "Invalid value"),
        ))
    return issues


def get_user_friendly_summary(error: InvalidInputError) -> str:
    """
    Generate a short, readable summary of why an expense was rejected.

    This is what a form shows next to the Save button.
    """
    lines = ["The expense could not be saved:"]
    for issue in error.issues:
        lines.append(f"   • {issue.field}: {issue.message}")
    return "\n".join(lines)
