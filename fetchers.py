"""Account fetchers handed to the resolver.

A fetcher is any callable `fetch(pubkey) -> bytes | None`: None means the
account doesn't exist, a failed request raises TransportError. None of
them cache or retry.
"""
import base64
import logging

import requests
from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.core import RPCException

from errors import TransportError

logger = logging.getLogger(__name__)


class RpcAccountFetcher:
    def __init__(self, client=None, rpc_url=None):
        if client is None:
            client = Client(rpc_url) if rpc_url else Client()
        self.client = client

    def __call__(self, key):
        try:
            res = self.client.get_account_info(key)
        except (SolanaRpcException, RPCException) as e:
            raise TransportError(f"getAccountInfo {key} failed: {e}") from e
        if res.value is None:
            logger.debug(f"no account at {key}")
            return None
        return bytes(res.value.data)


class JsonRpcAccountFetcher:
    """Plain JSON-RPC getAccountInfo over requests, for hosts without solana-py's client."""

    def __init__(self, rpc_url, timeout=10, session=None):
        self.rpc_url = rpc_url
        self.timeout = timeout
        # optional caller-owned requests.Session; plain requests.post otherwise
        self.session = session

    def __call__(self, key):
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getAccountInfo",
            "params": [str(key), {"encoding": "base64"}],
        }
        try:
            post = self.session.post if self.session is not None else requests.post
            res = post(self.rpc_url, json=payload, timeout=self.timeout)
            res.raise_for_status()
            data = res.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(f"getAccountInfo {key} failed: {e}") from e

        if "error" in data:
            raise TransportError(f"getAccountInfo {key} failed: {data['error']}")
        value = (data.get("result") or {}).get("value")
        if value is None:
            logger.debug(f"no account at {key}")
            return None
        encoded, _encoding = value["data"]
        return base64.b64decode(encoded)
