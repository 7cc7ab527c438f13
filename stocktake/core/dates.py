from datetime import date, datetime


def normalize_date(value):
    """Reduce a date, datetime or ISO string to its calendar day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            return date.fromisoformat(value_text[:10])
        except ValueError:
            return None
    return None


def same_day(left, right) -> bool:
    return normalize_date(left) == normalize_date(right)
