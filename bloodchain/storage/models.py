"""
Record types held by the BloodChain repository.

These are the persisted shapes; request validation lives in the API schemas
and is maintained separately from these definitions.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


DEFAULT_MINIMUM_THRESHOLD = 10


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Donor:
    """
    Registered donor, identified by wallet address.

    Only reward_points and total_donations change after creation.
    """
    wallet_address: str
    name: str
    blood_type: str
    location: str
    id: str = field(default_factory=new_id)
    reward_points: int = 0
    total_donations: int = 0
    is_verified: bool = False
    registered_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class Donation:
    blood_type: str
    quantity: int
    hospital: str
    location: str
    donor_id: str | None = None
    transaction_hash: str | None = None
    block_number: int | None = None
    nft_token_id: str | None = None
    reward_tokens: str | None = None  # Decimal string
    id: str = field(default_factory=new_id)
    donated_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class NFTCertificate:
    token_id: str
    donor_address: str
    donation_id: str | None = None
    metadata_uri: str | None = None
    image_uri: str | None = None
    transaction_hash: str | None = None
    id: str = field(default_factory=new_id)
    minted_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class BloodSupply:
    """Inventory for one blood type at one location"""
    location: str
    blood_type: str
    current_stock: int = 0
    minimum_threshold: int = DEFAULT_MINIMUM_THRESHOLD
    shortage_risk: str = "0.0000"  # Decimal string, four places
    id: str = field(default_factory=new_id)
    last_updated: datetime = field(default_factory=utc_now)

    @property
    def key(self) -> tuple[str, str]:
        return self.location, self.blood_type


@dataclass(frozen=True)
class SmartContractEvent:
    event_type: str
    contract_address: str
    transaction_hash: str
    block_number: int
    event_data: str | None = None  # JSON payload
    id: str = field(default_factory=new_id)
    processed_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class TokenTransaction:
    to_address: str
    amount: str  # Decimal string
    transaction_type: str  # mint, transfer, burn
    transaction_hash: str
    block_number: int
    from_address: str | None = None
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utc_now)

    def involves(self, address: str) -> bool:
        """Case-insensitive match against the sender or the recipient"""
        address = address.lower()
        return (
            (self.from_address is not None and self.from_address.lower() == address)
            or self.to_address.lower() == address
        )
