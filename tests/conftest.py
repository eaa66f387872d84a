import hashlib
import os
import sys

import pytest
from solders.pubkey import Pubkey

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from name_record import NameRecordHeader, encode  # noqa: E402


def key(name):
    return Pubkey(hashlib.sha256(name.encode("utf-8")).digest())


def stub_derive(seed, parent):
    return Pubkey(hashlib.sha256(seed.encode("utf-8") + bytes(parent)).digest())


ROOT = key("root authority")
OWNER = key("owner")
DNS_CLASS = key("dns class")


class FakeLedger:
    """Accounts keyed by address; counts every fetch."""

    def __init__(self):
        self.accounts = {}
        self.calls = []

    def add(self, address, parent=None, owner=OWNER, name_class=None, expires_at=None, trailing=b""):
        header = NameRecordHeader(parent, owner, name_class, expires_at)
        self.accounts[address] = encode(header) + trailing
        return address

    def add_chain(self, seeds, root=ROOT, **leaf):
        """Registers every level of `seeds` (TLD first); keyword args apply to the leaf."""
        parent, keys = None, []
        for i, seed in enumerate(seeds):
            address = stub_derive(seed, parent or root)
            if i == len(seeds) - 1:
                self.add(address, parent=parent, **leaf)
            else:
                self.add(address, parent=parent)
            keys.append(address)
            parent = address
        return keys

    def __call__(self, address):
        self.calls.append(address)
        return self.accounts.get(address)


@pytest.fixture
def ledger():
    return FakeLedger()
