"""
Terms-related Pydantic schemas.
"""
from typing import Any, Optional, Union

from pydantic import BaseModel


class SignTermsParams(BaseModel):
    tosHash: Optional[Any] = None
    pubKey: Optional[Any] = None
    signature: Optional[Any] = None


class SignTermsRequest(BaseModel):
    action: Optional[Any] = None
    # Checked by the handler so that a malformed value still yields an envelope
    params: Optional[Any] = None


class SignatureRecord(BaseModel):
    signee: str
    signeeSignature: str
    trailHash: str
    timestamp: Union[int, float]
    isValid: bool
