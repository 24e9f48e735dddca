"""
Explicit success/failure values returned across the contract boundary.
"""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: Exception


Result = Union[Ok[Any], Err]


async def capture(awaitable: Awaitable[T]) -> Result:
    """Await a contract-layer coroutine and fold any failure into an Err."""
    try:
        return Ok(await awaitable)
    except Exception as e:
        logger.error(f"Contract call failed: {e}", exc_info=True)
        return Err(e)
