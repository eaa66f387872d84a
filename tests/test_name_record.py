import struct

import pytest
from solders.pubkey import Pubkey

from conftest import DNS_CLASS, OWNER, key
from errors import DecodeError
from name_record import (
    DATA_OFFSET,
    HEADER_LEN,
    REVERSE_LOOKUP_OFFSET,
    NameRecordHeader,
    decode,
    decode_data_string,
    decode_main_domain,
    decode_nft_record,
    decode_reverse_lookup_name,
    decode_tld_house_tld,
    encode,
)

PARENT = key("parent")


def raw_header(parent=PARENT, owner=OWNER, name_class=None, expires_at=0):
    return (
        b"\x07" * 8
        + bytes(parent)
        + bytes(owner)
        + (bytes(name_class) if name_class else bytes(32))
        + struct.pack("<Q", expires_at)
    )


def test_header_len():
    assert HEADER_LEN == 112


def test_decode_fields():
    record = decode(raw_header(name_class=DNS_CLASS, expires_at=1_700_000_000))
    assert record.parent_name == PARENT
    assert record.owner == OWNER
    assert record.name_class == DNS_CLASS
    assert record.expires_at == 1_700_000_000


def test_decode_maps_sentinels_to_none():
    record = decode(b"\x00" * HEADER_LEN)
    assert record == NameRecordHeader(None, None, None, None)
    assert record.is_tld
    assert not record.is_expirable
    assert not record.is_valid


def test_decode_is_deterministic():
    data = raw_header(expires_at=42)
    assert decode(data) == decode(data)
    assert decode(bytearray(data)) == decode(data)


@pytest.mark.parametrize("trailing", [b"\x01", b"\xff" * 96, bytes(300)])
def test_trailing_bytes_are_ignored(trailing):
    data = raw_header(expires_at=7)
    assert decode(data + trailing) == decode(data)


@pytest.mark.parametrize("length", range(HEADER_LEN))
def test_short_input_fails(length):
    with pytest.raises(DecodeError):
        decode(raw_header()[:length])


def test_round_trip():
    header = NameRecordHeader(PARENT, OWNER, DNS_CLASS, 1_800_000_000)
    data = encode(header)
    assert len(data) == HEADER_LEN
    assert decode(data) == header
    assert decode(encode(NameRecordHeader(None, None, None, None))) == NameRecordHeader(None, None, None, None)


def test_is_valid_uses_current_time():
    assert NameRecordHeader(PARENT, OWNER, None, 2**62).is_valid
    assert not NameRecordHeader(PARENT, OWNER, None, 1).is_valid


def test_decode_data_string():
    payload = "https://example.com".encode("utf-8")
    data = raw_header() + bytes(DATA_OFFSET - HEADER_LEN) + struct.pack("<I", len(payload)) + payload
    assert decode_data_string(data) == "https://example.com"


def test_decode_data_string_without_payload():
    with pytest.raises(DecodeError):
        decode_data_string(raw_header())
    # length prefix larger than the account
    data = raw_header() + bytes(DATA_OFFSET - HEADER_LEN) + struct.pack("<I", 50) + b"abc"
    with pytest.raises(DecodeError):
        decode_data_string(data)


def test_decode_reverse_lookup_name():
    data = bytes(REVERSE_LOOKUP_OFFSET) + b"miester\x00\x00"
    assert decode_reverse_lookup_name(data) == "miester"
    with pytest.raises(DecodeError):
        decode_reverse_lookup_name(bytes(REVERSE_LOOKUP_OFFSET))


def test_decode_tld_house_tld():
    data = bytes(8 + 96) + struct.pack("<I", 6) + b".abc\x00\x00" + b"rest"
    assert decode_tld_house_tld(data) == ".abc"
    with pytest.raises(DecodeError):
        decode_tld_house_tld(bytes(50))


def test_decode_main_domain():
    name_account = key("miester.abc")
    data = bytes(8) + bytes(name_account) + struct.pack("<I", 4) + b".abc" + struct.pack("<I", 7) + b"miester"
    main = decode_main_domain(data + bytes(40))
    assert main.name_account == name_account
    assert main.tld == ".abc"
    assert main.domain == "miester"
    with pytest.raises(DecodeError):
        decode_main_domain(data[:45])


def test_decode_nft_record():
    keys = [key(f"k{i}") for i in range(4)]
    data = bytes(8) + bytes([1, 254]) + b"".join(bytes(k) for k in keys)
    nft = decode_nft_record(data + bytes(64))
    assert nft.is_active
    assert nft.bump == 254
    assert nft.name_account == keys[0]
    assert nft.owner == keys[1]
    assert nft.nft_mint_account == keys[2]
    assert nft.tld_house == keys[3]

    inactive = decode_nft_record(bytes(8) + bytes([2, 0]) + bytes(128))
    assert not inactive.is_active
    assert inactive.owner == Pubkey.default()

    with pytest.raises(DecodeError):
        decode_nft_record(bytes(20))
