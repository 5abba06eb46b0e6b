# core/utils.py

from datetime import datetime, timezone


def sanitize(data: dict) -> dict:
    """
    Sanitize dictionary data before it is written to Supabase:
    - Empty strings → None
    - Strip string whitespace
    - Everything else kept as-is

    Numeric-looking strings stay strings (phone numbers, PAN, IFSC).
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped if stripped != "" else None
            continue

        clean[k] = v

    return clean


def drop_none(data: dict) -> dict:
    """Remove None values so optional columns fall back to DB defaults."""
    return {k: v for k, v in data.items() if v is not None}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# -----------------------------------------------------
# Comma-separated text ⇄ list fields
# -----------------------------------------------------
# Profile screens edit list columns (assigned_areas, service_types, …) as
# one comma-separated text box. Entries are trimmed only: duplicates and
# empty entries are kept as typed.

def split_list_field(text):
    """'a, b ,c' → ['a', 'b', 'c']; empty text → None; lists pass through."""
    if text is None:
        return None
    if isinstance(text, (list, tuple)):
        return [str(item).strip() for item in text]
    if text == "":
        return None
    return [part.strip() for part in str(text).split(",")]


def join_list_field(values) -> str:
    """['a', 'b'] → 'a, b'; None → ''."""
    if not values:
        return ""
    return ", ".join(values)
