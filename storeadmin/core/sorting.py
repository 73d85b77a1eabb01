"""Shared sorting utilities for repository queries."""

from __future__ import annotations

from pydantic.alias_generators import to_snake
from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from storeadmin.core.database import Base


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    sort_by: str | None,
    sort_order: str | None = None,
    allowed_fields: tuple[str, ...] | None = None,
    default_field: str = "created_at",
    default_direction: str = "desc",
) -> Query:  # type: ignore[type-arg]
    """Apply ordering to a SQLAlchemy query.

    Args:
        query: The SQLAlchemy query to sort.
        model: The SQLAlchemy model class.
        sort_by: Wire field name to sort by, camelCase or snake_case
            (e.g. "createdAt"). Unknown or disallowed fields fall back to
            default_field.
        sort_order: "asc" or "desc". Anything else uses default_direction.
        allowed_fields: Optional whitelist of snake_case column names.
        default_field: Default column to sort by.
        default_direction: Default sort direction ("asc" or "desc").

    Returns:
        The query with ordering applied.
    """
    field = default_field
    direction = default_direction

    if sort_by:
        candidate = to_snake(sort_by)
        allowed = allowed_fields is None or candidate in allowed_fields
        # Validate column exists on model
        if allowed and hasattr(model, candidate):
            field = candidate

    if sort_order in ("asc", "desc"):
        direction = sort_order

    column = getattr(model, field)
    order_func = asc if direction == "asc" else desc
    return query.order_by(order_func(column))
