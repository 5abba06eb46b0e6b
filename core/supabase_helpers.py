# core/supabase_helpers.py

from typing import Optional

from core.utils import sanitize
from core.errors import handle_supabase_error
from core.supabase_client import get_supabase_client


# =================================================================
#  SAFE SELECT / INSERT / UPDATE / UPSERT / DELETE
# =================================================================
# Thin wrappers over the PostgREST query builder for the public
# marketplace tables. Failures are converted to HTTPException via
# handle_supabase_error, so routers can let them propagate.
# =================================================================

def _client():
    client = get_supabase_client()
    if client is None:
        raise RuntimeError("Supabase client not configured")
    return client


def safe_select(
    table: str,
    filters: dict = None,
    *,
    single: bool = False,
    columns: str = "*",
    order_by: Optional[str] = None,
    desc: bool = True,
    limit: Optional[int] = None,
):
    """
    SELECT with equality filters.
    single=True returns one row dict (or None); otherwise a list.
    """
    client = _client()

    try:
        query = client.table(table).select(columns)
        if filters:
            for key, val in filters.items():
                query = query.eq(key, val)

        if single:
            result = query.maybe_single().execute()
            # postgrest returns None (not an empty response) when no row matches
            return result.data if result else None

        if order_by:
            query = query.order(order_by, desc=desc)
        if limit:
            query = query.limit(limit)

        result = query.execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to fetch from {table}")


def safe_count(table: str, filters: dict = None) -> int:
    """Exact row count using a head-only request."""
    client = _client()

    try:
        query = client.table(table).select("id", count="exact")
        if filters:
            for key, val in filters.items():
                query = query.eq(key, val)
        result = query.limit(1).execute()
        return result.count or 0

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to count {table}")


def safe_insert(table: str, data: dict):
    """INSERT one row, returning the stored representation."""
    client = _client()
    cleaned = sanitize(data)

    try:
        result = (
            client.table(table)
            .insert(cleaned, returning="representation")
            .execute()
        )
        return result.data[0] if result.data else None

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to insert into {table}")


def safe_update(table: str, filters: dict, data: dict, *, many: bool = False):
    """UPDATE rows matching filters; returns the first updated row (all rows with many=True)."""
    client = _client()
    cleaned = sanitize(data)

    try:
        query = client.table(table).update(
            cleaned, returning="representation"
        )
        for key, val in filters.items():
            query = query.eq(key, val)

        result = query.execute()
        if many:
            return result.data or []
        return result.data[0] if result.data else None

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to update {table}")


def safe_upsert(table: str, data: dict, on_conflict: str):
    """INSERT … ON CONFLICT (on_conflict) DO UPDATE."""
    client = _client()
    cleaned = sanitize(data)

    try:
        result = (
            client.table(table)
            .upsert(cleaned, on_conflict=on_conflict, returning="representation")
            .execute()
        )
        return result.data[0] if result.data else None

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to upsert into {table}")


def safe_delete(table: str, filters: dict) -> list:
    """DELETE rows matching filters; returns the deleted rows."""
    if not filters:
        raise ValueError(f"Refusing to delete from {table} without filters")

    client = _client()

    try:
        query = client.table(table).delete(returning="representation")
        for key, val in filters.items():
            query = query.eq(key, val)

        result = query.execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to delete from {table}")
