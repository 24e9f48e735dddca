"""
Errors raised by the credential and contract layer.
"""
import json


class RelayError(Exception):
    """Base class for failures raised by the relay itself."""


class MalformedKeyError(RelayError):
    """The secret key is not a valid private key encoding."""


class MethodNotAllowedError(RelayError):
    """A contract method outside the configured allow-list was requested."""


class TransactionLookupError(RelayError):
    """A transaction receipt does not belong to the querying account."""


def describe_error(error: BaseException) -> str:
    """Pretty-print an exception as a JSON object for the response envelope."""
    return json.dumps(
        {
            "name": type(error).__name__,
            "message": str(error),
            "args": list(error.args),
        },
        indent=4,
        default=str,
    )
