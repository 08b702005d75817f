"""
Relay Errors

Error codes are centralized as constants (they are part of the public response
contract) and every failure the relay can raise is a RelayError subclass that
carries its code and HTTP status.
"""

# Request errors
ERROR_MISSING_FIELDS = "missing_fields"
ERROR_MISSING_SIGNATURE = "missing_signature"
ERROR_INVALID_SIGNATURE = "invalid_signature"
ERROR_INVALID_AMOUNT = "invalid_amount"

# Order errors
ERROR_ORDER_NOT_FOUND = "order_not_found"
ERROR_DUPLICATE_ORDER = "duplicate_order"
ERROR_LEDGER_INTEGRITY = "ledger_integrity"

# Webhook errors
ERROR_MALFORMED_PAYLOAD = "malformed_payload"

# Server / gateway errors
ERROR_SERVER_MISCONFIGURATION = "server_misconfiguration"
ERROR_GATEWAY = "gateway_error"


class RelayError(Exception):
    """Base class for every error raised by the relay."""

    code: str = "relay_error"
    status_code: int = 500

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.code}


class MissingFields(RelayError):
    code = ERROR_MISSING_FIELDS
    status_code = 400


class MissingSignature(RelayError):
    code = ERROR_MISSING_SIGNATURE
    status_code = 400


class SignatureInvalid(RelayError):
    code = ERROR_INVALID_SIGNATURE
    status_code = 400


class InvalidAmount(RelayError):
    code = ERROR_INVALID_AMOUNT
    status_code = 400


class OrderNotFound(RelayError):
    code = ERROR_ORDER_NOT_FOUND
    status_code = 404


class DuplicateKey(RelayError):
    """A local or gateway order id is already registered in the ledger."""

    code = ERROR_DUPLICATE_ORDER
    status_code = 409


class LedgerIntegrityError(RelayError):
    """The gateway-id index and the primary map disagree."""

    code = ERROR_LEDGER_INTEGRITY
    status_code = 500


class MalformedPayload(RelayError):
    code = ERROR_MALFORMED_PAYLOAD
    status_code = 400


class ServerMisconfigured(RelayError):
    code = ERROR_SERVER_MISCONFIGURATION
    status_code = 500


class GatewayError(RelayError):
    code = ERROR_GATEWAY
    status_code = 502


__all__ = [
    "ERROR_MISSING_FIELDS",
    "ERROR_MISSING_SIGNATURE",
    "ERROR_INVALID_SIGNATURE",
    "ERROR_INVALID_AMOUNT",
    "ERROR_ORDER_NOT_FOUND",
    "ERROR_DUPLICATE_ORDER",
    "ERROR_LEDGER_INTEGRITY",
    "ERROR_MALFORMED_PAYLOAD",
    "ERROR_SERVER_MISCONFIGURATION",
    "ERROR_GATEWAY",
    "RelayError",
    "MissingFields",
    "MissingSignature",
    "SignatureInvalid",
    "InvalidAmount",
    "OrderNotFound",
    "DuplicateKey",
    "LedgerIntegrityError",
    "MalformedPayload",
    "ServerMisconfigured",
    "GatewayError",
]
