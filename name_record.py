"""Binary layouts of the ANS accounts.

Every ANS account starts with an 8 byte discriminator, followed by the
fields below (little endian):

    NameRecordHeader: parent(32), owner(32), class(32), expires_at(u64)

The header is padded on chain; the record payload of a name account starts
at DATA_OFFSET as a u32 length prefixed string.
"""
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from construct import (
    Bytes,
    ConstructError,
    Int8ul,
    Int32ul,
    Int64ul,
    PascalString,
    Padding,
    Struct,
)
from solders.pubkey import Pubkey

from errors import DecodeError

DISCRIMINATOR_LEN = 8
HASH_PREFIX = "ALT Name Service"

NAME_RECORD_HEADER = Struct(
    Padding(DISCRIMINATOR_LEN),
    "parent_name" / Bytes(32),
    "owner" / Bytes(32),
    "name_class" / Bytes(32),
    "expires_at" / Int64ul,
)
HEADER_LEN = NAME_RECORD_HEADER.sizeof()  # 112

# discriminator + padded header (parent, owner, class, expiry, is_valid) + reserved
DATA_OFFSET = 8 + 112 + 88
REVERSE_LOOKUP_OFFSET = 200

MAIN_DOMAIN = Struct(
    Padding(DISCRIMINATOR_LEN),
    "name_account" / Bytes(32),
    "tld" / PascalString(Int32ul, "utf8"),
    "domain" / PascalString(Int32ul, "utf8"),
)

NFT_RECORD = Struct(
    Padding(DISCRIMINATOR_LEN),
    "tag" / Int8ul,
    "bump" / Int8ul,
    "name_account" / Bytes(32),
    "owner" / Bytes(32),
    "nft_mint_account" / Bytes(32),
    "tld_house" / Bytes(32),
)

TLD_HOUSE_TLD = Struct(
    Padding(DISCRIMINATOR_LEN + 32 + 32 + 32),
    "tld" / PascalString(Int32ul, "utf8"),
)

_ZERO_KEY = bytes(32)


def _key_or_none(raw: bytes) -> Optional[Pubkey]:
    # all-zero pubkey is the on-chain "unset" value
    if raw == _ZERO_KEY:
        return None
    return Pubkey.from_bytes(raw)


def _key_bytes(key: Optional[Pubkey]) -> bytes:
    return bytes(key) if key is not None else _ZERO_KEY


@dataclass(frozen=True)
class NameRecordHeader:
    """Header of a name account, with sentinels already mapped to None."""

    parent_name: Optional[Pubkey]
    owner: Optional[Pubkey]
    name_class: Optional[Pubkey]
    expires_at: Optional[int]

    @property
    def is_tld(self) -> bool:
        return self.parent_name is None

    @property
    def is_expirable(self) -> bool:
        return self.expires_at is not None

    @property
    def is_valid(self) -> bool:
        if self.expires_at is None:
            return False
        return time.time() < self.expires_at


def decode(data: bytes) -> NameRecordHeader:
    if data is None or len(data) < HEADER_LEN:
        got = 0 if data is None else len(data)
        raise DecodeError(f"name record needs {HEADER_LEN} bytes, got {got}")
    parsed = NAME_RECORD_HEADER.parse(bytes(data[:HEADER_LEN]))
    return NameRecordHeader(
        parent_name=_key_or_none(parsed.parent_name),
        owner=_key_or_none(parsed.owner),
        name_class=_key_or_none(parsed.name_class),
        expires_at=parsed.expires_at or None,
    )


def encode(header: NameRecordHeader) -> bytes:
    return NAME_RECORD_HEADER.build(
        dict(
            parent_name=_key_bytes(header.parent_name),
            owner=_key_bytes(header.owner),
            name_class=_key_bytes(header.name_class),
            expires_at=header.expires_at or 0,
        )
    )


def decode_data_string(data: bytes) -> str:
    """Returns the payload string stored after the header of a record account."""
    if len(data) < DATA_OFFSET + 4:
        raise DecodeError(f"record account has no payload ({len(data)} bytes)")
    try:
        return PascalString(Int32ul, "utf8").parse(bytes(data[DATA_OFFSET:]))
    except (ConstructError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid record payload: {e}") from e


def decode_reverse_lookup_name(data: bytes) -> str:
    if len(data) <= REVERSE_LOOKUP_OFFSET:
        raise DecodeError(f"reverse lookup account too short ({len(data)} bytes)")
    try:
        return bytes(data[REVERSE_LOOKUP_OFFSET:]).decode("utf-8").strip("\x00")
    except UnicodeDecodeError as e:
        raise DecodeError(f"invalid reverse lookup name: {e}") from e


def decode_tld_house_tld(data: bytes) -> str:
    try:
        return TLD_HOUSE_TLD.parse(bytes(data)).tld.strip("\x00")
    except (ConstructError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid tld house account: {e}") from e


@dataclass(frozen=True)
class MainDomain:
    name_account: Pubkey
    tld: str
    domain: str


def decode_main_domain(data: bytes) -> MainDomain:
    try:
        parsed = MAIN_DOMAIN.parse(bytes(data))
    except (ConstructError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid main domain account: {e}") from e
    return MainDomain(
        name_account=Pubkey.from_bytes(parsed.name_account),
        tld=parsed.tld,
        domain=parsed.domain,
    )


class NftRecordTag(IntEnum):
    UNINITIALIZED = 0
    ACTIVE_RECORD = 1
    INACTIVE_RECORD = 2


@dataclass(frozen=True)
class NftRecord:
    tag: int
    bump: int
    name_account: Pubkey
    owner: Pubkey
    nft_mint_account: Pubkey
    tld_house: Pubkey

    @property
    def is_active(self) -> bool:
        return self.tag == NftRecordTag.ACTIVE_RECORD


def decode_nft_record(data: bytes) -> NftRecord:
    try:
        parsed = NFT_RECORD.parse(bytes(data))
    except ConstructError as e:
        raise DecodeError(f"invalid nft record account: {e}") from e
    return NftRecord(
        tag=parsed.tag,
        bump=parsed.bump,
        name_account=Pubkey.from_bytes(parsed.name_account),
        owner=Pubkey.from_bytes(parsed.owner),
        nft_mint_account=Pubkey.from_bytes(parsed.nft_mint_account),
        tld_house=Pubkey.from_bytes(parsed.tld_house),
    )
