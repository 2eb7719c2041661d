from datetime import datetime
from typing import Any, Dict, Iterable

from facilitator_analytics.utils import to_utc

SQL_DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'


def format_date_for_sql(dt: datetime) -> str:
    return to_utc(dt).strftime(SQL_DATETIME_FORMAT)


def in_placeholders(prefix: str, values: Iterable[Any], parameters: Dict[str, Any]) -> str:
    """
    Bind each value as its own parameter and return the placeholder list
    for an IN (...) clause. The bindings are added to `parameters`.
    """
    placeholders = []
    for i, value in enumerate(values):
        key = f'{prefix}_{i}'
        parameters[key] = value
        placeholders.append(f'%({key})s')

    if not placeholders:
        raise ValueError(f"IN clause for {prefix} requires at least one value")

    return ', '.join(placeholders)
