import os

import pytest
from eth_account import Account
from web3 import Web3

# anvil's first default account, only ever funded on a local fork
ANVIL_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


@pytest.fixture(scope="session")
def rpc_url():
    return os.getenv("FORK_RPC_URL")


@pytest.fixture(scope="session")
def w3(rpc_url):
    if not rpc_url:
        pytest.skip("FORK_RPC_URL not set")
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    assert w3.is_connected(), "RPC connection failed"
    return w3


@pytest.fixture(scope="session")
def vault_address():
    addr = os.getenv("MANAGED_VAULT_VAULT")
    if not addr:
        pytest.skip("MANAGED_VAULT_VAULT not set")
    return Web3.to_checksum_address(addr)


@pytest.fixture(scope="session")
def operator():
    return Account.from_key(os.getenv("FORK_PRIVATE_KEY") or ANVIL_KEY)
