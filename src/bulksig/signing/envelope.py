"""
Bulk signature envelope.

The signature passed to ``isValidSignature`` on the bulk path is

    abi.encode(bytes packedBulkSignature, OrderParameters parameters, uint256 counter)

so the verifier can rebuild the order hash itself instead of trusting the leaf.
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError

from bulksig.protocol.errors import MalformedEnvelopeError
from bulksig.protocol.models import OrderParameters, normalize_uint


OFFER_ITEM_ABI = "(uint8,address,uint256,uint256,uint256)"
CONSIDERATION_ITEM_ABI = "(uint8,address,uint256,uint256,uint256,address)"
ORDER_PARAMETERS_ABI = (
    "(address,address,"
    + OFFER_ITEM_ABI + "[],"
    + CONSIDERATION_ITEM_ABI + "[],"
    + "uint8,uint256,uint256,bytes32,uint256,bytes32,uint256)"
)
ENVELOPE_ABI = ["bytes", ORDER_PARAMETERS_ABI, "uint256"]


@dataclass(frozen=True)
class BulkSignatureEnvelope:
    """
    Packed bulk signature plus the order data needed to rebuild its leaf.

    Attributes:
        packed_signature: ``signature ‖ index ‖ proof`` bytes
        parameters: Order parameters of the order being validated
        counter: Offerer's counter the order was signed with
    """
    packed_signature: bytes
    parameters: OrderParameters
    counter: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "packed_signature", bytes(self.packed_signature))
        object.__setattr__(self, "counter", normalize_uint(self.counter, name="counter"))

    def encode(self) -> bytes:
        return encode(
            ENVELOPE_ABI,
            [self.packed_signature, self.parameters.to_abi(), self.counter],
        )

    @classmethod
    def decode(cls, data: bytes) -> "BulkSignatureEnvelope":
        """
        Decode an ABI-encoded envelope.

        Raises:
            MalformedEnvelopeError: If the bytes are not a valid envelope
        """
        try:
            packed_signature, parameters, counter = decode(ENVELOPE_ABI, bytes(data))
        except (DecodingError, OverflowError) as e:
            raise MalformedEnvelopeError(f"Invalid bulk signature envelope: {e}") from e

        try:
            order_parameters = OrderParameters.from_abi(parameters)
        except ValueError as e:
            raise MalformedEnvelopeError(f"Invalid order parameters in envelope: {e}") from e

        return cls(packed_signature=packed_signature, parameters=order_parameters, counter=counter)
