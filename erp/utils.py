"""
Utility functions shared across the blueprints. This includes:
- parse_iso_date: YYYY-MM-DD or a full ISO timestamp -> date.
- parse_query_date: Parse an optional ISO date from the query string.
- date_window: The ?startDate / ?endDate pair used by budget reads.
- as_json_list: Serialize a list of models.
- IdConverter: the <id:...> URL converter for primary keys.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from flask import request
from werkzeug.routing import IntegerConverter

from .errors import ValidationFailure
from .models import SQL_INT_MAX


class IdConverter(IntegerConverter):
    """Like <id:...> but ids above SQL_INT_MAX don't match (404)."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("max", SQL_INT_MAX)
        super().__init__(map, *args, **kwargs)


def parse_iso_date(raw: str) -> date:
    """
    Parse a calendar date or an ISO datetime (the date part is kept).

    Raises ValueError for anything else, trailing text included.
    """
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return datetime.fromisoformat(raw).date()


def parse_query_date(name: str) -> Optional[date]:
    """Return request.args[name] as a date, None if absent/empty."""
    raw = (request.args.get(name) or "").strip()
    if raw == "":
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationFailure(errors={name: ["Not a valid date value."]})


def date_window() -> Tuple[Optional[date], Optional[date]]:
    return parse_query_date("startDate"), parse_query_date("endDate")


def as_json_list(instances: Iterable) -> list:
    return [instance.to_dict() for instance in instances]
