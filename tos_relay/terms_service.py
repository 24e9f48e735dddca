"""
Terms service - signs terms acceptances and verifies recorded signatures.
"""
import logging
from typing import Any, Awaitable, Callable, Optional

from .core.blockchain import ContractHandle
from .core.config import Settings
from .core.errors import describe_error
from .core.results import Err, capture
from .schemas.envelope import Envelope
from .schemas.terms import SignatureRecord, SignTermsParams, SignTermsRequest

logger = logging.getLogger(__name__)

SIGN_TERMS_ACTION = "signTerms"
VERIFY_SIGNATURE_ACTION = "verifySignature"
VALIDATE_SIGNATURE_METHOD = "validateSignature"

# Sentinel signee returned by the contract when no signature is on record
NO_SIGNEE = "0"
NANOS_PER_MILLI = 1_000_000

INVALID_ACTION = "Invalid action!"
MISSING_PARAMS = "Missing params!"

ContractOpener = Callable[[Settings, Optional[str]], Awaitable[ContractHandle]]


def nanos_to_millis(timestamp_nanos: int) -> int | float:
    """Convert a contract timestamp in nanoseconds to milliseconds."""
    if isinstance(timestamp_nanos, int) and timestamp_nanos % NANOS_PER_MILLI == 0:
        return timestamp_nanos // NANOS_PER_MILLI
    return timestamp_nanos / NANOS_PER_MILLI


def unpack_signature(record: Any) -> SignatureRecord:
    """Turn the ``[signee, signature, trailHash, timestampNanos]`` tuple into a record."""
    signee, signee_signature, trail_hash, timestamp_nanos = record
    return SignatureRecord(
        signee=signee,
        signeeSignature=signee_signature,
        trailHash=trail_hash,
        timestamp=nanos_to_millis(timestamp_nanos),
        isValid=signee != NO_SIGNEE,
    )


async def _submit_terms(
    settings: Settings, open_contract: ContractOpener, params: SignTermsParams
) -> dict:
    contract = await open_contract(settings, settings.PRIVATE_KEY)

    tx_hash = await contract.function_call(
        SIGN_TERMS_ACTION,
        params.pubKey,  # signer_string
        params.signature,  # signer_signature_string
        params.tosHash,  # terms_hash_string
    )
    logger.info(f"Submitted {SIGN_TERMS_ACTION} transaction {tx_hash} for {params.pubKey}")

    # A transaction that lands but whose receipt lookup fails is reported as an error as-is
    return await contract.tx_status(tx_hash)


async def sign_terms(
    settings: Settings, open_contract: ContractOpener, request: Optional[SignTermsRequest]
) -> Envelope:
    """
    Record a terms-of-service acceptance on chain using the service's own key.
    """
    action = request.action if request else None
    if action != SIGN_TERMS_ACTION:
        logger.info(f"Rejected signTerms request with action {action!r}")
        return Envelope.failure(INVALID_ACTION)

    if not isinstance(request.params, dict):
        logger.info("Rejected signTerms request without params")
        return Envelope.failure(MISSING_PARAMS)

    params = SignTermsParams.model_validate(request.params)
    if not params.tosHash or not params.pubKey or not params.signature:
        logger.info("Rejected signTerms request with incomplete params")
        return Envelope.failure(MISSING_PARAMS)

    echoed = params.model_dump()
    outcome = await capture(_submit_terms(settings, open_contract, params))
    if isinstance(outcome, Err):
        return Envelope.failure(describe_error(outcome.error), action=action, params=echoed)

    return Envelope.success(action, echoed, {"txReceipt": outcome.value})


async def _query_signature(
    settings: Settings, open_contract: ContractOpener, pub_key: str, tos_hash: str
) -> SignatureRecord:
    # Read-only, so any freshly generated key will do
    contract = await open_contract(settings, None)

    record = await contract.call_view(
        VALIDATE_SIGNATURE_METHOD,
        pub_key,  # signer_string
        tos_hash,  # terms_hash_string
    )
    return unpack_signature(record)


async def verify_signature(
    settings: Settings,
    open_contract: ContractOpener,
    pub_key: Optional[str],
    tos_hash: Optional[str],
) -> Envelope:
    """
    Look up the signature recorded for ``pub_key`` on the terms ``tos_hash``.
    """
    if not pub_key or not tos_hash:
        logger.info("Rejected verifySignature request with missing params")
        return Envelope.failure(MISSING_PARAMS)

    echoed = {"pubKey": pub_key, "tosHash": tos_hash}
    outcome = await capture(_query_signature(settings, open_contract, pub_key, tos_hash))
    if isinstance(outcome, Err):
        return Envelope.failure(
            describe_error(outcome.error), action=VERIFY_SIGNATURE_ACTION, params=echoed
        )

    record = outcome.value
    logger.info(f"Signature lookup for {pub_key}: isValid={record.isValid}")
    return Envelope.success(VERIFY_SIGNATURE_ACTION, echoed, record.model_dump())
