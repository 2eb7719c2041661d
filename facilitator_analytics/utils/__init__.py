import re
from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_evm_address(value) -> bool:
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def normalize_address(value: str) -> str:
    if not is_evm_address(value):
        raise ValueError(f"Invalid Ethereum address: {value!r}")
    return value.lower()


def to_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def months_ago(months: int, now: datetime = None) -> datetime:
    return (now or utc_now()) - relativedelta(months=months)
