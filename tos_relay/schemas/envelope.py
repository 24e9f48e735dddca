"""
Uniform response envelope shared by the terms endpoints.
"""
from typing import Any, Optional

from pydantic import BaseModel

SUCCESS_CODE = 200
ERROR_CODE = 500


class Envelope(BaseModel):
    code: int
    message: str
    action: Optional[str] = None
    params: Optional[dict[str, Any]] = None
    result: Any = None

    @classmethod
    def success(cls, action: str, params: dict[str, Any], result: Any) -> "Envelope":
        return cls(code=SUCCESS_CODE, message="success", action=action, params=params, result=result)

    @classmethod
    def failure(
        cls,
        result: str,
        action: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> "Envelope":
        return cls(code=ERROR_CODE, message="ERROR", action=action, params=params, result=result)

    def to_body(self) -> dict[str, Any]:
        """Dump for the wire, leaving out ``action``/``params`` when unset."""
        omitted = {name for name in ("action", "params") if getattr(self, name) is None}
        return self.model_dump(exclude=omitted)
