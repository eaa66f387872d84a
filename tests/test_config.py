import logging
import os
from unittest.mock import patch

import pytest

from config import DEFAULT_RPC_URL, init_logging, load_config, parse_known_classes
from conftest import DNS_CLASS, key
from errors import ConfigError
from known_classes import DNS_RECORD, KNOWN_TLDS, REVERSE_LOOKUP
from pda import ANS_PROGRAM_ID, ORIGIN_TLD_KEY, find_tld_house

CLEAN_ENV = {
    "ANS_RPC_URL": "",
    "ANS_PROGRAM_ID": "",
    "ANS_TLD_HOUSE_PROGRAM_ID": "",
    "ANS_NAME_HOUSE_PROGRAM_ID": "",
    "ANS_ORIGIN_TLD_KEY": "",
    "ANS_TLDS": "",
    "ANS_KNOWN_CLASSES": "",
    "ANS_DNS_CLASS": "",
    "ANS_LOG_LEVEL": "",
}


@pytest.fixture
def env(tmp_path):
    """Empty .env in a temp dir so the developer's own .env never leaks in."""
    dotenv = tmp_path / ".env"
    dotenv.write_text("")
    with patch.dict(os.environ, CLEAN_ENV):
        for name in CLEAN_ENV:
            del os.environ[name]
        yield str(dotenv)


def test_defaults(env):
    config = load_config(env)
    assert config.rpc_url == DEFAULT_RPC_URL
    assert config.ans_program_id == ANS_PROGRAM_ID
    assert config.origin_tld_key == ORIGIN_TLD_KEY
    assert config.tlds == KNOWN_TLDS
    assert config.known_classes[find_tld_house(".abc")] == REVERSE_LOOKUP
    assert config.log_level == "info"


def test_environment_overrides(env):
    overrides = {
        "ANS_RPC_URL": "http://localhost:8899",
        "ANS_TLDS": ".abc, .bonk",
        "ANS_DNS_CLASS": str(DNS_CLASS),
        "ANS_ORIGIN_TLD_KEY": str(key("origin")),
        "ANS_LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, overrides):
        config = load_config(env)
    assert config.rpc_url == "http://localhost:8899"
    assert config.tlds == [".abc", ".bonk"]
    assert config.origin_tld_key == key("origin")
    assert config.known_classes[DNS_CLASS] == DNS_RECORD
    assert len(config.known_classes) == 3
    assert config.log_level == "debug"


def test_dotenv_file_is_read(env):
    with open(env, "w") as f:
        f.write(f"ANS_KNOWN_CLASSES={DNS_CLASS}=dns,{key('pic')}=picture\n")
    config = load_config(env)
    assert config.known_classes[DNS_CLASS] == "dns"
    assert config.known_classes[key("pic")] == "picture"


def test_parse_known_classes():
    assert parse_known_classes(None) == {}
    assert parse_known_classes(f" {DNS_CLASS} ,") == {DNS_CLASS: DNS_RECORD}


def test_invalid_pubkey(env):
    with pytest.raises(ConfigError):
        parse_known_classes("not-a-key=dns")
    with patch.dict(os.environ, {"ANS_PROGRAM_ID": "xyz"}):
        with pytest.raises(ConfigError):
            load_config(env)


def test_init_logging():
    with patch("config.logging.basicConfig") as basic:
        init_logging("debug")
        assert basic.call_args.kwargs["level"] == logging.DEBUG
        init_logging("nonsense")
        assert basic.call_args.kwargs["level"] == logging.INFO
