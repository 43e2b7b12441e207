from typing import Optional
from .enums import ErrorCode


class BulkSignatureError(Exception):
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code or ErrorCode.INTERNAL_ERROR


class MalformedProofError(BulkSignatureError):
    """Raised when a packed signature cannot be split into signature, index and proof."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MALFORMED_PROOF)


class InvalidTreeHeightError(BulkSignatureError):
    """Raised when a tree height falls outside [1, 24]."""

    def __init__(self, height: object):
        self.height = height
        super().__init__(
            f"Invalid bulk order tree height: {height!r} (expected 1..24)",
            ErrorCode.INVALID_TREE_HEIGHT,
        )


class OrderHashMismatchError(BulkSignatureError):
    """Raised when the digest rebuilt from order parameters differs from the message."""

    def __init__(self, expected: bytes, actual: bytes):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Order digest mismatch: message 0x{expected.hex()}, derived 0x{actual.hex()}",
            ErrorCode.ORDER_HASH_MISMATCH,
        )


class RecoveryFailureError(BulkSignatureError):
    """Raised when no signer can be recovered from a signature."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.RECOVERY_FAILURE)


class MalformedEnvelopeError(BulkSignatureError):
    """Raised when a bulk signature envelope is not valid ABI."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MALFORMED_ENVELOPE)


class InvalidOrderParametersError(BulkSignatureError):
    """Raised when order parameters cannot be turned into order components."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_ORDER_PARAMETERS)
