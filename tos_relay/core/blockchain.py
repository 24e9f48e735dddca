"""
Blockchain interaction utilities: credentials and contract handles.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract

from .config import Settings
from .errors import MalformedKeyError, MethodNotAllowedError, TransactionLookupError

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()

DEFAULT_ABI_PATH = Path(__file__).parent.parent / "abi" / "TermsOfService.json"


@dataclass(frozen=True)
class Credential:
    """A key pair bound to one account on one network, held in memory only."""

    account_id: str
    network_id: int
    key: LocalAccount


def generate_secret_key() -> str:
    """Derive a secret key from a freshly generated mnemonic."""
    account, _mnemonic = Account.create_with_mnemonic()
    return Web3.to_hex(account.key)


def provision_credential(settings: Settings, secret_key: Optional[str] = None) -> Credential:
    """
    Wrap ``secret_key`` (or a newly generated one) into a request-scoped credential.

    The credential is bound to the configured account and network. No network
    calls are made here.
    """
    if not secret_key:
        secret_key = generate_secret_key()

    try:
        key = Account.from_key(secret_key)
    except (ValueError, TypeError) as e:
        raise MalformedKeyError(f"Secret key is not a valid private key: {e}") from e

    return Credential(
        account_id=settings.ACCOUNT_ID or key.address,
        network_id=settings.NETWORK_ID,
        key=key,
    )


def load_contract_abi(abi_path: Optional[str] = None) -> list:
    """Load the contract ABI from a Hardhat artifact or a bare ABI list."""
    path = Path(abi_path) if abi_path else DEFAULT_ABI_PATH
    if not path.exists():
        raise FileNotFoundError(f"ABI not found at {path}")

    with open(path) as f:
        artifact = json.load(f)
    if isinstance(artifact, dict):
        return artifact.get("abi", [])
    return artifact


def restrict_abi(abi: list, method_names: list[str]) -> list:
    """Keep only the functions named in ``method_names`` (events and the rest pass through)."""
    allowed = set(method_names)
    return [
        entry
        for entry in abi
        if entry.get("type") != "function" or entry.get("name") in allowed
    ]


class ContractHandle:
    """A live connection bound to one contract and its callable methods."""

    def __init__(
        self,
        w3: AsyncWeb3,
        account: str,
        credential: Credential,
        contract: AsyncContract,
        view_methods: list[str],
        change_methods: list[str],
    ):
        self.w3 = w3
        self.account = account
        self.credential = credential
        self.contract = contract
        self.view_methods = list(view_methods)
        self.change_methods = list(change_methods)

    def _function(self, method: str, allowed: list[str], *args: Any):
        if method not in allowed:
            raise MethodNotAllowedError(f"Contract method {method!r} is not allowed")
        return getattr(self.contract.functions, method)(*args)

    async def call_view(self, method: str, *args: Any) -> Any:
        """Run a read-only contract method."""
        fn = self._function(method, self.view_methods, *args)
        return await fn.call({"from": self.account})

    async def function_call(self, method: str, *args: Any, gas: Optional[int] = None) -> str:
        """
        Sign and submit a state-changing contract call.

        Gas is estimated by the node unless ``gas`` is given. Returns the
        transaction hash as a 0x-prefixed hex string.
        """
        fn = self._function(method, self.change_methods, *args)

        tx_params = {
            "from": self.account,
            "nonce": await self.w3.eth.get_transaction_count(self.account),
            "chainId": self.credential.network_id,
        }
        if gas is not None:
            tx_params["gas"] = gas

        tx = await fn.build_transaction(tx_params)
        signed_txn = self.credential.key.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed_txn.raw_transaction)
        return Web3.to_hex(tx_hash)

    async def tx_status(self, tx_hash: str) -> dict:
        """Wait for the receipt of ``tx_hash`` sent from this handle's account."""
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)

        sender = receipt.get("from")
        if sender and Web3.to_checksum_address(sender) != self.account:
            raise TransactionLookupError(
                f"Transaction {tx_hash} was sent by {sender}, not {self.account}"
            )
        return json.loads(Web3.to_json(receipt))


async def build_contract_handle(settings: Settings, credential: Credential) -> ContractHandle:
    """
    Connect to the gateway with ``credential`` and bind the terms contract.

    Raises ConnectionError when the gateway is unreachable or the account
    cannot be resolved on it.
    """
    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.GATEWAY_URL))

    if not await w3.is_connected():
        raise ConnectionError(f"Could not connect to {settings.GATEWAY_URL}")

    try:
        account = AsyncWeb3.to_checksum_address(credential.account_id)
    except (ValueError, TypeError) as e:
        raise ConnectionError(f"Could not resolve account {credential.account_id}: {e}") from e

    chain_id = await w3.eth.chain_id
    if chain_id != credential.network_id:
        raise ConnectionError(
            f"Gateway {settings.GATEWAY_URL} serves network {chain_id}, "
            f"expected {credential.network_id}"
        )

    abi = restrict_abi(load_contract_abi(settings.CONTRACT_ABI_PATH), settings.contract_methods)
    contract = w3.eth.contract(
        address=AsyncWeb3.to_checksum_address(settings.CONTRACT_ADDRESS),
        abi=abi,
    )
    logger.debug(f"Bound contract {settings.CONTRACT_ADDRESS} for account {account}")

    return ContractHandle(
        w3=w3,
        account=account,
        credential=credential,
        contract=contract,
        view_methods=settings.CONTRACT_VIEW_METHODS,
        change_methods=settings.CONTRACT_CHANGE_METHODS,
    )


async def open_contract(settings: Settings, secret_key: Optional[str] = None) -> ContractHandle:
    """Provision a credential and build a contract handle from it."""
    credential = provision_credential(settings, secret_key)
    return await build_contract_handle(settings, credential)


def get_contract_opener():
    """FastAPI dependency returning the coroutine used to reach the contract."""
    return open_contract
