"""
Shared fixtures for bulksig tests.
"""

import pytest

from bulksig.protocol.enums import ItemType, OrderType
from bulksig.protocol.models import (
    ChainContext,
    ConsiderationItem,
    OfferItem,
    OrderComponents,
)
from bulksig.signing.ecdsa import EcdsaSigner


OFFERER_KEY = (1).to_bytes(32, "big")
OTHER_KEY = (2).to_bytes(32, "big")

NFT_TOKEN = "0x00000000000000000000000000000000000000aa"
PAYMENT_TOKEN = "0x00000000000000000000000000000000000000bb"
FEE_RECIPIENT = "0x00000000000000000000000000000000000000cc"
VERIFYING_CONTRACT = "0x00000000000000adc04c56bf30ac9d3c0aaf14dc"


def build_order(offerer: str, salt: int = 1, counter: int = 0) -> OrderComponents:
    """A listing of one NFT for an ERC20 payment plus a fee."""
    return OrderComponents(
        offerer=offerer,
        offer=(
            OfferItem(
                item_type=ItemType.ERC721,
                token=NFT_TOKEN,
                identifier_or_criteria=salt,
                start_amount=1,
                end_amount=1,
            ),
        ),
        consideration=(
            ConsiderationItem(
                item_type=ItemType.ERC20,
                token=PAYMENT_TOKEN,
                identifier_or_criteria=0,
                start_amount=975,
                end_amount=975,
                recipient=offerer,
            ),
            ConsiderationItem(
                item_type=ItemType.ERC20,
                token=PAYMENT_TOKEN,
                identifier_or_criteria=0,
                start_amount=25,
                end_amount=25,
                recipient=FEE_RECIPIENT,
            ),
        ),
        order_type=OrderType.FULL_OPEN,
        start_time=1_700_000_000,
        end_time=1_800_000_000,
        salt=salt,
        counter=counter,
    )


@pytest.fixture
def signer():
    """Signer with private key 1."""
    return EcdsaSigner.from_private_bytes(OFFERER_KEY)


@pytest.fixture
def other_signer():
    """Signer with private key 2."""
    return EcdsaSigner.from_private_bytes(OTHER_KEY)


@pytest.fixture
def context():
    return ChainContext(chain_id=1, verifying_contract=VERIFYING_CONTRACT)


@pytest.fixture
def order(signer):
    return build_order(signer.address, salt=1)


@pytest.fixture
def orders(signer):
    return [build_order(signer.address, salt=i) for i in range(1, 6)]
