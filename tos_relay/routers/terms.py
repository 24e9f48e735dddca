"""
Terms endpoints: sign a terms acceptance and verify a recorded signature.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from ..core.blockchain import get_contract_opener
from ..core.config import Settings, get_settings
from ..schemas.terms import SignTermsRequest
from ..terms_service import ContractOpener, sign_terms, verify_signature

router = APIRouter()


@router.post("/signTerms")
async def sign_terms_endpoint(
    payload: Optional[SignTermsRequest] = Body(None),
    settings: Settings = Depends(get_settings),
    open_contract: ContractOpener = Depends(get_contract_opener),
):
    """
    Submit a signed terms-of-service acceptance to the contract.
    Always answers HTTP 200; failures are reported in the envelope's code.
    """
    envelope = await sign_terms(settings, open_contract, payload)
    return envelope.to_body()


@router.get("/verifySignature")
async def verify_signature_endpoint(
    pubKey: Optional[str] = Query(None, description="Signer public key"),
    tosHash: Optional[str] = Query(None, description="Hash of the signed terms"),
    settings: Settings = Depends(get_settings),
    open_contract: ContractOpener = Depends(get_contract_opener),
):
    """
    Check whether ``pubKey`` has a signature on record for ``tosHash``.
    """
    envelope = await verify_signature(settings, open_contract, pubKey, tosHash)
    return envelope.to_body()
