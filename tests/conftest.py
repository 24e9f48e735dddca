import pytest
from fastapi.testclient import TestClient

from tos_relay.core.blockchain import get_contract_opener
from tos_relay.core.config import Settings, get_settings
from tos_relay.main import app

# Hardhat's first development account
SERVICE_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
SERVICE_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class FakeContract:
    """Stands in for a ContractHandle, recording every call it receives."""

    def __init__(self, tx_hash="H1", receipts=None, records=None):
        self.tx_hash = tx_hash
        self.receipts = receipts if receipts is not None else {}
        self.records = records if records is not None else {}
        self.calls = []

    async def function_call(self, method, *args, gas=None):
        self.calls.append(("function_call", method, args))
        return self.tx_hash

    async def tx_status(self, tx_hash):
        self.calls.append(("tx_status", tx_hash))
        if tx_hash not in self.receipts:
            raise TimeoutError(f"Transaction {tx_hash} is not in the chain")
        return self.receipts[tx_hash]

    async def call_view(self, method, *args):
        self.calls.append(("call_view", method, args))
        return self.records.get(args, ["0", "0", "0", 0])


class FakeOpener:
    """Replacement for open_contract that hands out a FakeContract."""

    def __init__(self, contract=None, error=None):
        self.contract = contract or FakeContract()
        self.error = error
        self.secret_keys = []

    async def __call__(self, settings, secret_key=None):
        self.secret_keys.append(secret_key)
        if self.error is not None:
            raise self.error
        return self.contract


@pytest.fixture
def settings():
    return Settings(
        GATEWAY_URL="http://localhost:8545",
        NETWORK_ID=31337,
        ACCOUNT_ID=SERVICE_ACCOUNT,
        PRIVATE_KEY=SERVICE_PRIVATE_KEY,
        CONTRACT_ADDRESS=CONTRACT_ADDRESS,
    )


@pytest.fixture
def opener():
    return FakeOpener(FakeContract(receipts={"H1": {"status": "ok"}}))


@pytest.fixture
def client(settings, opener):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_contract_opener] = lambda: opener
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
