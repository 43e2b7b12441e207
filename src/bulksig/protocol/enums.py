from enum import Enum, IntEnum


class ErrorCode(str, Enum):
    MALFORMED_PROOF = "malformed_proof"
    INVALID_TREE_HEIGHT = "invalid_tree_height"
    ORDER_HASH_MISMATCH = "order_hash_mismatch"
    RECOVERY_FAILURE = "recovery_failure"
    MALFORMED_ENVELOPE = "malformed_envelope"
    INVALID_ORDER_PARAMETERS = "invalid_order_parameters"
    UNAUTHORIZED_SIGNER = "unauthorized_signer"
    INTERNAL_ERROR = "internal_error"


class ItemType(IntEnum):
    NATIVE = 0
    ERC20 = 1
    ERC721 = 2
    ERC1155 = 3
    ERC721_WITH_CRITERIA = 4
    ERC1155_WITH_CRITERIA = 5


class OrderType(IntEnum):
    FULL_OPEN = 0
    PARTIAL_OPEN = 1
    FULL_RESTRICTED = 2
    PARTIAL_RESTRICTED = 3
    CONTRACT = 4


class SignatureKind(str, Enum):
    """Which branch of the verifier a signature blob was dispatched to."""
    PLAIN = "plain"
    BULK = "bulk"
