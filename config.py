import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv
from solders.pubkey import Pubkey

from errors import ConfigError
from known_classes import DNS_RECORD, KNOWN_TLDS, build_known_classes
from pda import ANS_PROGRAM_ID, NAME_HOUSE_PROGRAM_ID, ORIGIN_TLD_KEY, TLD_HOUSE_PROGRAM_ID

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class AnsConfig:
    rpc_url: str = DEFAULT_RPC_URL
    ans_program_id: Pubkey = ANS_PROGRAM_ID
    tld_house_program_id: Pubkey = TLD_HOUSE_PROGRAM_ID
    name_house_program_id: Pubkey = NAME_HOUSE_PROGRAM_ID
    origin_tld_key: Pubkey = ORIGIN_TLD_KEY
    tlds: List[str] = field(default_factory=lambda: list(KNOWN_TLDS))
    known_classes: Dict[Pubkey, str] = field(default_factory=dict)
    log_level: str = "info"


def parse_pubkey(value: str, name: str) -> Pubkey:
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as e:
        raise ConfigError(f"{name}: invalid pubkey {value!r}") from e


def parse_known_classes(value: Optional[str]) -> Dict[Pubkey, str]:
    """Parses "pubkey=label,pubkey=label"; a bare pubkey is labelled as a DNS record class."""
    table = {}
    if not value:
        return table
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, _, label = entry.partition("=")
        table[parse_pubkey(key, "ANS_KNOWN_CLASSES")] = label.strip() or DNS_RECORD
    return table


def load_config(dotenv_path=None) -> AnsConfig:
    """Builds the config from the environment (and a .env file, if present)."""
    load_dotenv(dotenv_path)

    def key(env, default):
        value = os.getenv(env)
        return parse_pubkey(value, env) if value else default

    tlds_env = os.getenv("ANS_TLDS")
    tlds = [t.strip() for t in tlds_env.split(",") if t.strip()] if tlds_env else list(KNOWN_TLDS)
    tld_house_program_id = key("ANS_TLD_HOUSE_PROGRAM_ID", TLD_HOUSE_PROGRAM_ID)

    extra = parse_known_classes(os.getenv("ANS_KNOWN_CLASSES"))
    dns_class = os.getenv("ANS_DNS_CLASS")
    if dns_class:
        extra[parse_pubkey(dns_class, "ANS_DNS_CLASS")] = DNS_RECORD

    return AnsConfig(
        rpc_url=os.getenv("ANS_RPC_URL", DEFAULT_RPC_URL),
        ans_program_id=key("ANS_PROGRAM_ID", ANS_PROGRAM_ID),
        tld_house_program_id=tld_house_program_id,
        name_house_program_id=key("ANS_NAME_HOUSE_PROGRAM_ID", NAME_HOUSE_PROGRAM_ID),
        origin_tld_key=key("ANS_ORIGIN_TLD_KEY", ORIGIN_TLD_KEY),
        tlds=tlds,
        known_classes=build_known_classes(tlds, extra, tld_house_program_id),
        log_level=os.getenv("ANS_LOG_LEVEL", "info").lower(),
    )


def init_logging(level="info"):
    logging.basicConfig(
        level=_LEVELS.get(str(level).lower(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
