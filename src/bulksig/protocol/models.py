"""
Order data models.

These mirror the structured-data records that make up a bulk order leaf:

- OfferItem / ConsiderationItem (line items)
- OrderComponents (the signed record, carries the offerer's counter)
- OrderParameters (the fulfilment record, carries the original consideration count)

All models are immutable value types. Field values are normalized on construction:
addresses become checksummed hex strings, bytes32 fields become 32-byte ``bytes``,
and integers are range-checked against their ABI width.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Sequence, Tuple, Union

from eth_utils import is_address, to_checksum_address

from .enums import ItemType, OrderType
from .errors import InvalidOrderParametersError


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_BYTES32 = b"\x00" * 32

UINT8_MAX = 2**8 - 1
UINT256_MAX = 2**256 - 1

BytesLike = Union[bytes, bytearray, str]


# ===========================================================================
# Field normalization
# ===========================================================================


def normalize_address(value: Any) -> str:
    """Return the checksummed form of an address, raising ValueError if invalid."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(value)}")
        value = "0x" + bytes(value).hex()
    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    return to_checksum_address(value)


def normalize_bytes32(value: BytesLike) -> bytes:
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            value = bytes.fromhex(text)
        except ValueError as e:
            raise ValueError(f"Invalid bytes32 hex: {value!r}") from e
    if not isinstance(value, (bytes, bytearray)) or len(value) != 32:
        raise ValueError(f"bytes32 value must be 32 bytes: {value!r}")
    return bytes(value)


def normalize_uint(value: Any, maximum: int = UINT256_MAX, name: str = "value") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > maximum:
        raise ValueError(f"{name} out of range: {value}")
    return int(value)


# ===========================================================================
# Line items
# ===========================================================================


@dataclass(frozen=True)
class OfferItem:
    """
    An item the offerer gives up.

    Attributes:
        item_type: Kind of asset (native, ERC20, ERC721, ERC1155, or criteria-based)
        token: Token contract address (zero address for native)
        identifier_or_criteria: Token id, or a criteria root for criteria-based items
        start_amount: Amount at the order start time
        end_amount: Amount at the order end time
    """
    item_type: ItemType
    token: str
    identifier_or_criteria: int
    start_amount: int
    end_amount: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_type", ItemType(normalize_uint(int(self.item_type), UINT8_MAX, "item_type")))
        object.__setattr__(self, "token", normalize_address(self.token))
        object.__setattr__(
            self,
            "identifier_or_criteria",
            normalize_uint(self.identifier_or_criteria, name="identifier_or_criteria"),
        )
        object.__setattr__(self, "start_amount", normalize_uint(self.start_amount, name="start_amount"))
        object.__setattr__(self, "end_amount", normalize_uint(self.end_amount, name="end_amount"))

    def to_abi(self) -> Tuple[int, str, int, int, int]:
        return (
            int(self.item_type),
            self.token,
            self.identifier_or_criteria,
            self.start_amount,
            self.end_amount,
        )

    @classmethod
    def from_abi(cls, values: Sequence[Any]) -> "OfferItem":
        item_type, token, identifier, start_amount, end_amount = values
        return cls(ItemType(item_type), token, identifier, start_amount, end_amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemType": int(self.item_type),
            "token": self.token,
            "identifierOrCriteria": str(self.identifier_or_criteria),
            "startAmount": str(self.start_amount),
            "endAmount": str(self.end_amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OfferItem":
        return cls(
            item_type=ItemType(int(data["itemType"])),
            token=data["token"],
            identifier_or_criteria=int(data["identifierOrCriteria"]),
            start_amount=int(data["startAmount"]),
            end_amount=int(data["endAmount"]),
        )


@dataclass(frozen=True)
class ConsiderationItem:
    """
    An item the offerer expects to receive, paid to ``recipient``.
    """
    item_type: ItemType
    token: str
    identifier_or_criteria: int
    start_amount: int
    end_amount: int
    recipient: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_type", ItemType(normalize_uint(int(self.item_type), UINT8_MAX, "item_type")))
        object.__setattr__(self, "token", normalize_address(self.token))
        object.__setattr__(
            self,
            "identifier_or_criteria",
            normalize_uint(self.identifier_or_criteria, name="identifier_or_criteria"),
        )
        object.__setattr__(self, "start_amount", normalize_uint(self.start_amount, name="start_amount"))
        object.__setattr__(self, "end_amount", normalize_uint(self.end_amount, name="end_amount"))
        object.__setattr__(self, "recipient", normalize_address(self.recipient))

    def to_abi(self) -> Tuple[int, str, int, int, int, str]:
        return (
            int(self.item_type),
            self.token,
            self.identifier_or_criteria,
            self.start_amount,
            self.end_amount,
            self.recipient,
        )

    @classmethod
    def from_abi(cls, values: Sequence[Any]) -> "ConsiderationItem":
        item_type, token, identifier, start_amount, end_amount, recipient = values
        return cls(ItemType(item_type), token, identifier, start_amount, end_amount, recipient)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemType": int(self.item_type),
            "token": self.token,
            "identifierOrCriteria": str(self.identifier_or_criteria),
            "startAmount": str(self.start_amount),
            "endAmount": str(self.end_amount),
            "recipient": self.recipient,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsiderationItem":
        return cls(
            item_type=ItemType(int(data["itemType"])),
            token=data["token"],
            identifier_or_criteria=int(data["identifierOrCriteria"]),
            start_amount=int(data["startAmount"]),
            end_amount=int(data["endAmount"]),
            recipient=data["recipient"],
        )


# ===========================================================================
# Orders
# ===========================================================================


def _normalize_order_fields(obj: Any) -> None:
    object.__setattr__(obj, "offerer", normalize_address(obj.offerer))
    object.__setattr__(obj, "zone", normalize_address(obj.zone))
    object.__setattr__(obj, "offer", tuple(obj.offer))
    object.__setattr__(obj, "consideration", tuple(obj.consideration))
    for item in obj.offer:
        if not isinstance(item, OfferItem):
            raise TypeError(f"offer entries must be OfferItem, got {type(item).__name__}")
    for item in obj.consideration:
        if not isinstance(item, ConsiderationItem):
            raise TypeError(
                f"consideration entries must be ConsiderationItem, got {type(item).__name__}"
            )
    object.__setattr__(
        obj, "order_type", OrderType(normalize_uint(int(obj.order_type), UINT8_MAX, "order_type"))
    )
    object.__setattr__(obj, "start_time", normalize_uint(obj.start_time, name="start_time"))
    object.__setattr__(obj, "end_time", normalize_uint(obj.end_time, name="end_time"))
    object.__setattr__(obj, "zone_hash", normalize_bytes32(obj.zone_hash))
    object.__setattr__(obj, "salt", normalize_uint(obj.salt, name="salt"))
    object.__setattr__(obj, "conduit_key", normalize_bytes32(obj.conduit_key))


@dataclass(frozen=True)
class OrderComponents:
    """
    The record an offerer signs. Its struct hash is one leaf of a bulk order tree.

    Attributes:
        offerer: Account offering the items
        zone: Zone contract (restricted orders) or zero address
        offer: Ordered offer items
        consideration: Ordered consideration items
        order_type: Fill/restriction mode
        start_time: Order start timestamp
        end_time: Order end timestamp
        zone_hash: Opaque value passed to the zone
        salt: Entropy to make otherwise-identical orders distinct
        conduit_key: Conduit used for transfers
        counter: Offerer's counter at signing time
    """
    offerer: str
    zone: str = ZERO_ADDRESS
    offer: Tuple[OfferItem, ...] = field(default_factory=tuple)
    consideration: Tuple[ConsiderationItem, ...] = field(default_factory=tuple)
    order_type: OrderType = OrderType.FULL_OPEN
    start_time: int = 0
    end_time: int = 0
    zone_hash: bytes = ZERO_BYTES32
    salt: int = 0
    conduit_key: bytes = ZERO_BYTES32
    counter: int = 0

    def __post_init__(self) -> None:
        _normalize_order_fields(self)
        object.__setattr__(self, "counter", normalize_uint(self.counter, name="counter"))

    @classmethod
    def empty(cls) -> "OrderComponents":
        """The all-zero order used to pad bulk order trees."""
        return cls(offerer=ZERO_ADDRESS)

    def to_parameters(self) -> "OrderParameters":
        return OrderParameters(
            offerer=self.offerer,
            zone=self.zone,
            offer=self.offer,
            consideration=self.consideration,
            order_type=self.order_type,
            start_time=self.start_time,
            end_time=self.end_time,
            zone_hash=self.zone_hash,
            salt=self.salt,
            conduit_key=self.conduit_key,
            total_original_consideration_items=len(self.consideration),
        )

    def with_counter(self, counter: int) -> "OrderComponents":
        return replace(self, counter=counter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offerer": self.offerer,
            "zone": self.zone,
            "offer": [item.to_dict() for item in self.offer],
            "consideration": [item.to_dict() for item in self.consideration],
            "orderType": int(self.order_type),
            "startTime": str(self.start_time),
            "endTime": str(self.end_time),
            "zoneHash": "0x" + self.zone_hash.hex(),
            "salt": str(self.salt),
            "conduitKey": "0x" + self.conduit_key.hex(),
            "counter": str(self.counter),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderComponents":
        return cls(
            offerer=data["offerer"],
            zone=data.get("zone", ZERO_ADDRESS),
            offer=tuple(OfferItem.from_dict(i) for i in data.get("offer", [])),
            consideration=tuple(
                ConsiderationItem.from_dict(i) for i in data.get("consideration", [])
            ),
            order_type=OrderType(int(data.get("orderType", 0))),
            start_time=int(data.get("startTime", 0)),
            end_time=int(data.get("endTime", 0)),
            zone_hash=data.get("zoneHash", ZERO_BYTES32),
            salt=int(data.get("salt", 0)),
            conduit_key=data.get("conduitKey", ZERO_BYTES32),
            counter=int(data.get("counter", 0)),
        )


@dataclass(frozen=True)
class OrderParameters:
    """
    The record a fulfiller submits. Same fields as OrderComponents except that
    ``counter`` is replaced by ``total_original_consideration_items``: only that
    many leading consideration items were signed, any extra items are tips.
    """
    offerer: str
    zone: str = ZERO_ADDRESS
    offer: Tuple[OfferItem, ...] = field(default_factory=tuple)
    consideration: Tuple[ConsiderationItem, ...] = field(default_factory=tuple)
    order_type: OrderType = OrderType.FULL_OPEN
    start_time: int = 0
    end_time: int = 0
    zone_hash: bytes = ZERO_BYTES32
    salt: int = 0
    conduit_key: bytes = ZERO_BYTES32
    total_original_consideration_items: int = 0

    def __post_init__(self) -> None:
        _normalize_order_fields(self)
        object.__setattr__(
            self,
            "total_original_consideration_items",
            normalize_uint(
                self.total_original_consideration_items,
                name="total_original_consideration_items",
            ),
        )

    def to_components(self, counter: int) -> OrderComponents:
        """
        Build the signed OrderComponents for this order at ``counter``.

        Raises:
            InvalidOrderParametersError: If more original consideration items are
                declared than are present
        """
        total = self.total_original_consideration_items
        if total > len(self.consideration):
            raise InvalidOrderParametersError(
                f"total_original_consideration_items ({total}) exceeds "
                f"consideration length ({len(self.consideration)})"
            )
        return OrderComponents(
            offerer=self.offerer,
            zone=self.zone,
            offer=self.offer,
            consideration=self.consideration[:total],
            order_type=self.order_type,
            start_time=self.start_time,
            end_time=self.end_time,
            zone_hash=self.zone_hash,
            salt=self.salt,
            conduit_key=self.conduit_key,
            counter=counter,
        )

    def to_abi(self) -> Tuple[Any, ...]:
        return (
            self.offerer,
            self.zone,
            [item.to_abi() for item in self.offer],
            [item.to_abi() for item in self.consideration],
            int(self.order_type),
            self.start_time,
            self.end_time,
            self.zone_hash,
            self.salt,
            self.conduit_key,
            self.total_original_consideration_items,
        )

    @classmethod
    def from_abi(cls, values: Sequence[Any]) -> "OrderParameters":
        (
            offerer,
            zone,
            offer,
            consideration,
            order_type,
            start_time,
            end_time,
            zone_hash,
            salt,
            conduit_key,
            total_original,
        ) = values
        return cls(
            offerer=offerer,
            zone=zone,
            offer=tuple(OfferItem.from_abi(i) for i in offer),
            consideration=tuple(ConsiderationItem.from_abi(i) for i in consideration),
            order_type=OrderType(order_type),
            start_time=start_time,
            end_time=end_time,
            zone_hash=zone_hash,
            salt=salt,
            conduit_key=conduit_key,
            total_original_consideration_items=total_original,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offerer": self.offerer,
            "zone": self.zone,
            "offer": [item.to_dict() for item in self.offer],
            "consideration": [item.to_dict() for item in self.consideration],
            "orderType": int(self.order_type),
            "startTime": str(self.start_time),
            "endTime": str(self.end_time),
            "zoneHash": "0x" + self.zone_hash.hex(),
            "salt": str(self.salt),
            "conduitKey": "0x" + self.conduit_key.hex(),
            "totalOriginalConsiderationItems": self.total_original_consideration_items,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderParameters":
        return cls(
            offerer=data["offerer"],
            zone=data.get("zone", ZERO_ADDRESS),
            offer=tuple(OfferItem.from_dict(i) for i in data.get("offer", [])),
            consideration=tuple(
                ConsiderationItem.from_dict(i) for i in data.get("consideration", [])
            ),
            order_type=OrderType(int(data.get("orderType", 0))),
            start_time=int(data.get("startTime", 0)),
            end_time=int(data.get("endTime", 0)),
            zone_hash=data.get("zoneHash", ZERO_BYTES32),
            salt=int(data.get("salt", 0)),
            conduit_key=data.get("conduitKey", ZERO_BYTES32),
            total_original_consideration_items=int(
                data.get("totalOriginalConsiderationItems", 0)
            ),
        )


# ===========================================================================
# Chain context
# ===========================================================================


@dataclass(frozen=True)
class ChainContext:
    """
    Environment values the verifier reads but never owns.

    Attributes:
        chain_id: Chain the signature is bound to
        verifying_contract: Address of the verifying contract
    """
    chain_id: int
    verifying_contract: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "chain_id", normalize_uint(self.chain_id, name="chain_id"))
        if self.chain_id == 0:
            raise ValueError("chain_id must be positive")
        object.__setattr__(self, "verifying_contract", normalize_address(self.verifying_contract))

    @classmethod
    def from_settings(cls) -> "ChainContext":
        from bulksig.core.settings import get_settings

        settings = get_settings()
        return cls(chain_id=settings.chain_id, verifying_contract=settings.verifying_contract)
