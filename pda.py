import hashlib
import logging
from typing import Optional

from solders.pubkey import Pubkey

from name_record import HASH_PREFIX

logger = logging.getLogger(__name__)

# AllDomains ANS program addresses
ANS_PROGRAM_ID = Pubkey.from_string("ALTNSZ46uaAUU7XUV6awvdorLGqAsPwa9shm7h4uP2FK")
TLD_HOUSE_PROGRAM_ID = Pubkey.from_string("TLDHkysf5pCnKsVA4gXpNvmy7psXLPEu4LAdDJthT9S")
NAME_HOUSE_PROGRAM_ID = Pubkey.from_string("NH3uX6FtVE2fNREAioP7hm5RaozotZxeL6khU1EHx51")
# Parent of every TLD name account
ORIGIN_TLD_KEY = Pubkey.from_string("3mX9b4AZaQehNoQGfckVcmgmA6bkBoFcbLj9RMmMyNcU")

TLD_HOUSE_PREFIX = b"tld_house"
MAIN_DOMAIN_PREFIX = b"main_domain"
NAME_HOUSE_PREFIX = b"name_house"
NFT_RECORD_PREFIX = b"nft_record"


def get_hashed_name(name: str) -> bytes:
    return hashlib.sha256((HASH_PREFIX + name).encode("utf-8")).digest()


def get_name_account_key(
    name_hash: bytes,
    name_class: Optional[Pubkey] = None,
    parent_name: Optional[Pubkey] = None,
    program_id: Pubkey = ANS_PROGRAM_ID,
) -> Pubkey:
    seeds = [
        name_hash,
        bytes(name_class) if name_class else bytes(32),
        bytes(parent_name) if parent_name else bytes(32),
    ]
    key, _ = Pubkey.find_program_address(seeds, program_id)
    return key


def derive_name_account(seed: str, parent: Optional[Pubkey], program_id: Pubkey = ANS_PROGRAM_ID) -> Pubkey:
    """Address of the name account for `seed` under `parent` (class left unset)."""
    key = get_name_account_key(get_hashed_name(seed), None, parent, program_id)
    logger.debug(f"derived {seed!r} under {parent}: {key}")
    return key


def get_tld_key(tld: str, origin: Pubkey = ORIGIN_TLD_KEY, program_id: Pubkey = ANS_PROGRAM_ID) -> Pubkey:
    """Name account of a TLD; accepts "abc" or ".abc"."""
    return derive_name_account(_dotted(tld), origin, program_id)


def find_tld_house(tld: str, program_id: Pubkey = TLD_HOUSE_PROGRAM_ID) -> Pubkey:
    key, _ = Pubkey.find_program_address([TLD_HOUSE_PREFIX, _dotted(tld).encode("utf-8")], program_id)
    return key


def find_name_house(tld_house: Pubkey, program_id: Pubkey = NAME_HOUSE_PROGRAM_ID) -> Pubkey:
    key, _ = Pubkey.find_program_address([NAME_HOUSE_PREFIX, bytes(tld_house)], program_id)
    return key


def find_nft_record(name_account: Pubkey, name_house: Pubkey, program_id: Pubkey = NAME_HOUSE_PROGRAM_ID) -> Pubkey:
    key, _ = Pubkey.find_program_address(
        [NFT_RECORD_PREFIX, bytes(name_house), bytes(name_account)], program_id
    )
    return key


def find_main_domain(user: Pubkey, program_id: Pubkey = TLD_HOUSE_PROGRAM_ID) -> Pubkey:
    key, _ = Pubkey.find_program_address([MAIN_DOMAIN_PREFIX, bytes(user)], program_id)
    return key


def find_reverse_lookup_key(name_account: Pubkey, tld_house: Pubkey, program_id: Pubkey = ANS_PROGRAM_ID) -> Pubkey:
    # reverse lookup accounts use the tld house as class and have no parent
    return get_name_account_key(get_hashed_name(str(name_account)), tld_house, None, program_id)


def _dotted(tld: str) -> str:
    return tld if tld.startswith(".") else "." + tld
