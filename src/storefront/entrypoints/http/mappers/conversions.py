from __future__ import annotations

from decimal import Decimal, InvalidOperation


def parse_decimal(raw: str, field: str, errors: list[dict[str, str]]) -> Decimal:
    """
    Convert a boundary string to Decimal, collecting a field error on failure.

    Returns a zero placeholder on failure so the caller can keep validating
    the remaining fields before raising.
    """
    try:
        return Decimal(raw.strip())
    except (InvalidOperation, ValueError, AttributeError):
        errors.append(
            {
                "field": field,
                "message": f"Must be a valid decimal: {raw}",
                "code": "INVALID_DECIMAL",
            }
        )
        return Decimal("0")


def parse_optional_decimal(
    raw: str | None, field: str, errors: list[dict[str, str]]
) -> Decimal | None:
    if raw is None or raw == "":
        return None
    return parse_decimal(raw, field, errors)


def split_categories(raw: list[str] | str) -> tuple[str, ...]:
    """Accept a list or a pipe-separated string ("celulares|tablets")."""
    values = raw.split("|") if isinstance(raw, str) else raw
    return tuple(value.strip() for value in values if value and value.strip())
