import logging
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple

from solders.pubkey import Pubkey

from classifier import RecordRole, classify
from errors import InvalidDomainError, NotFoundError
from name_record import NameRecordHeader, decode
from pda import ANS_PROGRAM_ID, ORIGIN_TLD_KEY, derive_name_account

logger = logging.getLogger(__name__)

# tld, domain, subdomain, record
MAX_LABELS = 4

SUBDOMAIN_PREFIX = "\x00"
LEAF_SUBDOMAIN_PREFIX = "0"
RECORD_PREFIX = "1"

Fetch = Callable[[Pubkey], Optional[bytes]]
Derive = Callable[[str, Pubkey], Pubkey]


@dataclass(frozen=True)
class ResolvedDomain:
    domain: str
    labels: Tuple[str, ...]
    name_account: Pubkey
    record: NameRecordHeader
    tld_account: Pubkey
    parent_account: Optional[Pubkey] = None
    parent_record: Optional[NameRecordHeader] = None


def normalize_domain(domain: str, record: bool = False) -> List[str]:
    """Splits "sub.name.tld" into lowercase labels, leaf first.

    Record names ("IPFS", "SOL", ...) are case sensitive, so with `record`
    the leaf label is kept as given.
    """
    if not isinstance(domain, str):
        raise InvalidDomainError(f"domain must be a string, got {type(domain).__name__}")
    labels = domain.strip().rstrip(".").split(".")
    labels = [label if record and i == 0 else label.lower() for i, label in enumerate(labels)]
    if any(not label for label in labels):
        raise InvalidDomainError(f"empty label in {domain!r}")
    if len(labels) < 2:
        raise InvalidDomainError(f"{domain!r} has no TLD")
    if len(labels) > MAX_LABELS:
        raise InvalidDomainError(f"{domain!r} is nested deeper than {MAX_LABELS} labels")
    return labels


def label_seeds(labels: List[str], record: bool = False) -> List[str]:
    """Hashed name of each level, ordered TLD first.

    The TLD is hashed with a leading dot, the main domain as is. Deeper
    levels carry a prefix: NUL for an intermediate subdomain, "0" for a leaf
    subdomain and "1" for a leaf record.
    """
    if record and len(labels) < 3:
        raise InvalidDomainError(f"record lookup needs record.domain.tld, got {'.'.join(labels)!r}")
    ordered = list(reversed(labels))
    seeds = ["." + ordered[0]]
    for depth, label in enumerate(ordered[1:], start=1):
        if depth == 1:
            seeds.append(label)
        elif depth < len(ordered) - 1:
            seeds.append(SUBDOMAIN_PREFIX + label)
        else:
            seeds.append((RECORD_PREFIX if record else LEAF_SUBDOMAIN_PREFIX) + label)
    return seeds


def resolve(
    domain: str,
    fetch: Fetch,
    derive: Optional[Derive] = None,
    root_authority: Pubkey = ORIGIN_TLD_KEY,
    record: bool = False,
) -> ResolvedDomain:
    """Walks the name accounts of `domain` from its TLD down to the leaf.

    `fetch` returns the raw account data or None when the account doesn't
    exist; anything it raises propagates unchanged. Every derived address
    depends on the previous one, so levels are fetched one at a time.
    """
    labels = normalize_domain(domain, record)
    seeds = label_seeds(labels, record)
    if derive is None:
        derive = derive_name_account
    ordered = list(reversed(labels))

    parent_key, parent_record = root_authority, None
    key, header = None, None
    tld_key = None
    for depth, (label, seed) in enumerate(zip(ordered, seeds)):
        if header is not None:
            parent_key, parent_record = key, header
        key = derive(seed, parent_key)
        logger.debug(f"looking up {label!r} (depth {depth}) at {key}")
        data = fetch(key)
        if data is None:
            raise NotFoundError(label, depth, key)
        header = decode(data)
        if depth == 0:
            tld_key = key

    return ResolvedDomain(
        domain=".".join(labels),
        labels=tuple(labels),
        name_account=key,
        record=header,
        tld_account=tld_key,
        parent_account=parent_key,
        parent_record=parent_record,
    )


class HierarchyResolver:
    """Resolver bound to one fetch collaborator and one set of ANS addresses."""

    def __init__(
        self,
        fetch: Fetch,
        known_classes: Optional[Mapping[Pubkey, str]] = None,
        root_authority: Pubkey = ORIGIN_TLD_KEY,
        program_id: Pubkey = ANS_PROGRAM_ID,
        derive: Optional[Derive] = None,
    ):
        self.fetch = fetch
        self.known_classes = dict(known_classes or {})
        self.root_authority = root_authority
        if derive is None:
            derive = lambda seed, parent: derive_name_account(seed, parent, program_id)  # noqa: E731
        self.derive = derive

    @classmethod
    def from_config(cls, fetch: Fetch, config) -> "HierarchyResolver":
        return cls(
            fetch,
            known_classes=config.known_classes,
            root_authority=config.origin_tld_key,
            program_id=config.ans_program_id,
        )

    def resolve(self, domain: str, record: bool = False) -> ResolvedDomain:
        return resolve(domain, self.fetch, self.derive, self.root_authority, record)

    def classify(self, record: NameRecordHeader) -> RecordRole:
        return classify(record, self.known_classes)
