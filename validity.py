import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from solders.pubkey import Pubkey

from name_record import NameRecordHeader


@dataclass(frozen=True)
class Validity:
    effective_owner: Optional[Pubkey]
    is_expired: bool


def to_timestamp(now: Union[int, float, datetime, None]) -> Union[int, float]:
    if now is None:
        return time.time()
    if isinstance(now, datetime):
        # naive datetimes are taken as local time, same as datetime.fromtimestamp
        return now.timestamp()
    # ints stay exact: expires_at is a u64
    if isinstance(now, int):
        return now
    return float(now)


def evaluate(record: NameRecordHeader, now=None) -> Validity:
    """Expiry state and effective owner of `record` at `now` (unix seconds or datetime).

    An expired record has no effective owner, whatever its owner field says.
    """
    if record.expires_at is None:
        return Validity(effective_owner=record.owner, is_expired=False)
    if to_timestamp(now) >= record.expires_at:
        return Validity(effective_owner=None, is_expired=True)
    return Validity(effective_owner=record.owner, is_expired=False)
