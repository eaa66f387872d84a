"""TldParser: ANS lookups against a Solana RPC node.

Domain resolution goes through resolver_logic; the remaining lookups
(main domain, reverse lookup, user domains) read single accounts or use
getProgramAccounts filters on the name record header.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.core import RPCException
from solana.rpc.types import MemcmpOpts
from solders.pubkey import Pubkey

from classifier import RecordRole
from config import AnsConfig
from errors import DecodeError, NotFoundError, TransportError
from fetchers import RpcAccountFetcher
from name_record import (
    MainDomain,
    NameRecordHeader,
    decode,
    decode_data_string,
    decode_main_domain,
    decode_nft_record,
    decode_reverse_lookup_name,
    decode_tld_house_tld,
)
from pda import (
    find_main_domain,
    find_name_house,
    find_nft_record,
    find_reverse_lookup_key,
    find_tld_house,
    get_tld_key,
)
from resolver_logic import HierarchyResolver, ResolvedDomain, resolve
from validity import Validity, evaluate

logger = logging.getLogger(__name__)

# offsets of parent_name and owner inside a name account
PARENT_OFFSET = 8
OWNER_OFFSET = 40


class Record(Enum):
    IPFS = "IPFS"
    ARWV = "ARWV"
    SOL = "SOL"
    ETH = "ETH"
    BTC = "BTC"
    LATTICA = "Lattica"
    LTC = "LTC"
    DOGE = "DOGE"
    EMAIL = "email"
    URL = "url"
    DISCORD = "discord"
    GITHUB = "github"
    REDDIT = "reddit"
    TWITTER = "twitter"
    TELEGRAM = "telegram"
    PIC = "pic"
    SHDW = "SHDW"
    POINT = "POINT"


@dataclass(frozen=True)
class DomainLookup:
    resolved: ResolvedDomain
    role: RecordRole
    validity: Validity

    @property
    def record(self) -> NameRecordHeader:
        return self.resolved.record

    @property
    def owner(self) -> Optional[Pubkey]:
        return self.validity.effective_owner


class TldParser:
    def __init__(self, client: Optional[Client] = None, config: Optional[AnsConfig] = None):
        self.config = config or AnsConfig()
        self.client = client or Client(self.config.rpc_url)
        self.fetch = RpcAccountFetcher(self.client)
        self.resolver = HierarchyResolver.from_config(self.fetch, self.config)

    def _account_data(self, key: Pubkey) -> bytes:
        data = self.fetch(key)
        if data is None:
            raise NotFoundError(str(key), address=key)
        return data

    # ---------------- forward lookups ----------------
    def get_name_record(self, domain: str, now=None) -> DomainLookup:
        """Resolves `domain` ("miester.abc") and evaluates it at `now`."""
        resolved = self.resolver.resolve(domain)
        return DomainLookup(
            resolved=resolved,
            role=self.resolver.classify(resolved.record),
            validity=evaluate(resolved.record, now),
        )

    def get_name_record_from_name_account(self, name_account: Pubkey) -> NameRecordHeader:
        return decode(self._account_data(name_account))

    def get_owner(self, domain: str, now=None) -> Optional[Pubkey]:
        """Effective owner of `domain`, following NFT-wrapped domains to the token holder."""
        lookup = self.get_name_record(domain, now)
        owner = lookup.owner
        if owner is None:
            return None

        tld_house = find_tld_house(lookup.resolved.labels[-1], self.config.tld_house_program_id)
        name_house = find_name_house(tld_house, self.config.name_house_program_id)
        nft_record_key = find_nft_record(
            lookup.resolved.name_account, name_house, self.config.name_house_program_id
        )
        if owner != nft_record_key:
            return owner

        logger.debug(f"{domain} is wrapped, nft record {nft_record_key}")
        nft_record = decode_nft_record(self._account_data(nft_record_key))
        return self._token_holder(nft_record.nft_mint_account)

    def _token_holder(self, mint: Pubkey) -> Pubkey:
        try:
            res = self.client.get_token_largest_accounts(mint)
        except (SolanaRpcException, RPCException) as e:
            raise TransportError(f"getTokenLargestAccounts {mint} failed: {e}") from e
        if not res.value:
            raise NotFoundError(str(mint), address=mint)
        token_account = res.value[0].address
        data = self._account_data(token_account)
        # SPL token account: mint(32), owner(32), ...
        if len(data) < 64:
            raise DecodeError(f"token account {token_account} too short ({len(data)} bytes)")
        return Pubkey.from_bytes(data[32:64])

    def get_record(self, domain: str, record: Record) -> str:
        """Payload of a record sub-account, e.g. get_record("miester.abc", Record.URL)."""
        raw = {}

        def fetch(key):
            data = self.fetch(key)
            raw[key] = data
            return data

        resolved = resolve(
            f"{record.value}.{domain}",
            fetch,
            self.resolver.derive,
            self.resolver.root_authority,
            record=True,
        )
        return decode_data_string(raw[resolved.name_account])

    # ---------------- user lookups ----------------
    def get_main_domain(self, user: Pubkey) -> MainDomain:
        key = find_main_domain(user, self.config.tld_house_program_id)
        return decode_main_domain(self._account_data(key))

    def get_all_user_domains(self, user: Pubkey) -> List[Pubkey]:
        filters = [MemcmpOpts(offset=OWNER_OFFSET, bytes=str(user))]
        return self._program_accounts(filters)

    def get_all_user_domains_from_tld(self, user: Pubkey, tld: str) -> List[Pubkey]:
        parent = get_tld_key(tld, self.config.origin_tld_key, self.config.ans_program_id)
        filters = [
            MemcmpOpts(offset=PARENT_OFFSET, bytes=str(parent)),
            MemcmpOpts(offset=OWNER_OFFSET, bytes=str(user)),
        ]
        return self._program_accounts(filters)

    def _program_accounts(self, filters) -> List[Pubkey]:
        try:
            res = self.client.get_program_accounts(
                self.config.ans_program_id, encoding="base64", filters=filters
            )
        except (SolanaRpcException, RPCException) as e:
            raise TransportError(f"getProgramAccounts failed: {e}") from e
        return [account.pubkey for account in res.value]

    # ---------------- reverse lookups ----------------
    def get_tld_from_parent_account(self, parent_account: Pubkey) -> str:
        """TLD (".abc") of a TLD name account, read from the TLD house that owns it."""
        parent = decode(self._account_data(parent_account))
        if parent.owner is None:
            raise NotFoundError(str(parent_account), address=parent_account)
        return decode_tld_house_tld(self._account_data(parent.owner))

    def reverse_lookup_name_account(self, name_account: Pubkey, tld_house: Optional[Pubkey] = None) -> str:
        """Domain name (without TLD) of `name_account`.

        Without `tld_house` this costs two extra account reads to find the TLD.
        """
        if tld_house is None:
            header = self.get_name_record_from_name_account(name_account)
            if header.parent_name is None:
                raise NotFoundError(str(name_account), address=name_account)
            tld = self.get_tld_from_parent_account(header.parent_name)
            tld_house = find_tld_house(tld, self.config.tld_house_program_id)
        key = find_reverse_lookup_key(name_account, tld_house, self.config.ans_program_id)
        return decode_reverse_lookup_name(self._account_data(key))
