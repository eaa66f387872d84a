from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from solders.pubkey import Pubkey

from name_record import NameRecordHeader


class RoleKind(Enum):
    TLD_ROOT = "tld_root"
    MAIN_DOMAIN = "main_domain"
    TYPED_SUB_RECORD = "typed_sub_record"
    UNKNOWN_SUB_RECORD = "unknown_sub_record"


@dataclass(frozen=True)
class RecordRole:
    kind: RoleKind
    label: Optional[str] = None

    def __str__(self):
        if self.label:
            return f"{self.kind.value}({self.label})"
        return self.kind.value


TLD_ROOT = RecordRole(RoleKind.TLD_ROOT)
MAIN_DOMAIN = RecordRole(RoleKind.MAIN_DOMAIN)
UNKNOWN_SUB_RECORD = RecordRole(RoleKind.UNKNOWN_SUB_RECORD)


def typed_sub_record(label: str) -> RecordRole:
    return RecordRole(RoleKind.TYPED_SUB_RECORD, label)


def classify(record: NameRecordHeader, known_classes: Mapping[Pubkey, str]) -> RecordRole:
    """Role of a decoded record.

    Never raises: a class missing from `known_classes` is reported as
    UNKNOWN_SUB_RECORD and the caller decides what to do with it.
    """
    if record.parent_name is None:
        return TLD_ROOT
    if record.name_class is None:
        return MAIN_DOMAIN
    label = (known_classes or {}).get(record.name_class)
    if label is None:
        return UNKNOWN_SUB_RECORD
    return typed_sub_record(label)
