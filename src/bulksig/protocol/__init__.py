from .enums import ErrorCode, ItemType, OrderType, SignatureKind
from .errors import (
    BulkSignatureError,
    MalformedProofError,
    InvalidTreeHeightError,
    OrderHashMismatchError,
    RecoveryFailureError,
    MalformedEnvelopeError,
    InvalidOrderParametersError,
)
from .models import (
    ZERO_ADDRESS,
    ZERO_BYTES32,
    OfferItem,
    ConsiderationItem,
    OrderComponents,
    OrderParameters,
    ChainContext,
)

__all__ = [
    "ErrorCode",
    "ItemType",
    "OrderType",
    "SignatureKind",
    "BulkSignatureError",
    "MalformedProofError",
    "InvalidTreeHeightError",
    "OrderHashMismatchError",
    "RecoveryFailureError",
    "MalformedEnvelopeError",
    "InvalidOrderParametersError",
    "ZERO_ADDRESS",
    "ZERO_BYTES32",
    "OfferItem",
    "ConsiderationItem",
    "OrderComponents",
    "OrderParameters",
    "ChainContext",
]
