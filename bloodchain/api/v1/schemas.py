"""
Pydantic schemas for API v1 requests and responses

Request schemas enumerate every accepted field and reject unknown ones; they
are maintained independently of the storage records. Fields travel as
camelCase on the wire (``walletAddress``, ``bloodType``) and are exposed as
snake_case attributes in Python.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from bloodchain.core.blood import BloodType


def _check_decimal_string(value: str) -> str:
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"'{value}' is not a decimal number")
    if not parsed.is_finite() or parsed < 0:
        raise ValueError("must be a finite, non-negative decimal number")
    return value


DecimalString = Annotated[str, AfterValidator(_check_decimal_string)]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """
    Base model for request bodies.

    Only the camelCase spelling of a field is accepted, unknown fields are
    rejected and numbers are never coerced from strings or booleans.
    """
    model_config = ConfigDict(extra="forbid", use_enum_values=True, populate_by_name=False)


# Requests

class DonorCreateRequest(RequestModel):
    """Request schema for registering a donor"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "walletAddress": "0x71C7656EC7ab88b098defB751B7401B5f6d8976F",
                "name": "Alice",
                "bloodType": "O-",
                "location": "NYC"
            }
        }
    )

    wallet_address: NonEmptyStr = Field(..., description="Donor wallet address, unique regardless of letter case")
    name: NonEmptyStr = Field(..., description="Donor display name")
    blood_type: BloodType = Field(..., description="Donor blood type")
    location: NonEmptyStr = Field(..., description="Registered location of the donor")


class DonationCreateRequest(RequestModel):
    """Request schema for logging a donation"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "donorId": "5b0f7c9e-3f5a-4c55-9b43-5b1b8b1f6a10",
                "bloodType": "O-",
                "quantity": 2,
                "hospital": "General Hospital",
                "location": "NYC",
                "transactionHash": "0xabc123",
                "blockNumber": 1024,
                "rewardTokens": "20.0"
            }
        }
    )

    donor_id: str | None = Field(None, description="Identifier of the registered donor, if any")
    blood_type: BloodType = Field(..., description="Blood type of the donated units")
    quantity: StrictInt = Field(..., gt=0, description="Number of units donated")
    hospital: NonEmptyStr = Field(..., description="Receiving hospital")
    location: NonEmptyStr = Field(..., description="Where the donation took place")
    transaction_hash: str | None = Field(None, description="On-chain transaction hash")
    block_number: StrictInt | None = Field(None, ge=0, description="Block containing the transaction")
    nft_token_id: str | None = Field(None, description="Token id of the certificate minted for this donation")
    reward_tokens: DecimalString | None = Field(None, description="Reward tokens paid out, as a decimal string")


class NFTCertificateCreateRequest(RequestModel):
    """Request schema for recording a minted NFT certificate"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tokenId": "42",
                "donationId": "0d6c2b9e-7f51-4a53-8f3c-3fb5f41d1a55",
                "donorAddress": "0x71C7656EC7ab88b098defB751B7401B5f6d8976F",
                "metadataUri": "ipfs://bafy.../42.json",
                "transactionHash": "0xdef456"
            }
        }
    )

    token_id: NonEmptyStr = Field(..., description="Unique token id")
    donor_address: NonEmptyStr = Field(..., description="Wallet address of the certificate holder")
    donation_id: str | None = Field(None, description="Donation the certificate commemorates")
    metadata_uri: str | None = Field(None, description="Token metadata URI")
    image_uri: str | None = Field(None, description="Certificate image URI")
    transaction_hash: str | None = Field(None, description="Mint transaction hash")


class BloodSupplyUpdateRequest(RequestModel):
    """Request schema for upserting the supply of one blood type at one location"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "location": "NYC",
                "bloodType": "O-",
                "currentStock": 12,
                "minimumThreshold": 10
            }
        }
    )

    location: NonEmptyStr = Field(..., description="Location holding the stock")
    blood_type: BloodType = Field(..., description="Blood type of the stock")
    current_stock: StrictInt | None = Field(None, ge=0, description="Units in stock")
    minimum_threshold: StrictInt | None = Field(None, ge=0, description="Minimum units the location should hold")
    shortage_risk: StrictFloat | None = Field(None, ge=0, le=1, description="Explicit risk score; derived when omitted")


class ContractEventRequest(RequestModel):
    """Request schema for ingesting a smart-contract event"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "eventType": "DonationRecorded",
                "contractAddress": "0x5FbDB2315678afecb367f032d93F642f64180aa3",
                "transactionHash": "0xabc123",
                "blockNumber": 1024,
                "eventData": "{\"donor\": \"0x71C7...\", \"quantity\": 2}"
            }
        }
    )

    event_type: NonEmptyStr
    contract_address: NonEmptyStr
    transaction_hash: NonEmptyStr
    block_number: StrictInt = Field(..., ge=0)
    event_data: str | None = Field(None, description="JSON payload of the event")


class TokenTransactionRequest(RequestModel):
    """Request schema for ingesting a reward-token transaction"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fromAddress": None,
                "toAddress": "0x71C7656EC7ab88b098defB751B7401B5f6d8976F",
                "amount": "20.0",
                "transactionType": "mint",
                "transactionHash": "0xabc123",
                "blockNumber": 1024
            }
        }
    )

    from_address: str | None = None
    to_address: NonEmptyStr
    amount: DecimalString
    transaction_type: NonEmptyStr = Field(..., description="mint, transfer or burn")
    transaction_hash: NonEmptyStr
    block_number: StrictInt = Field(..., ge=0)


# Responses

class DonorResponse(CamelModel):
    id: str
    wallet_address: str
    name: str
    blood_type: str
    location: str
    reward_points: int
    total_donations: int
    is_verified: bool
    registered_at: datetime


class DonationResponse(CamelModel):
    id: str
    donor_id: str | None
    blood_type: str
    quantity: int
    hospital: str
    location: str
    transaction_hash: str | None
    block_number: int | None
    nft_token_id: str | None
    reward_tokens: str | None
    donated_at: datetime


class NFTCertificateResponse(CamelModel):
    id: str
    token_id: str
    donation_id: str | None
    donor_address: str
    metadata_uri: str | None
    image_uri: str | None
    transaction_hash: str | None
    minted_at: datetime


class BloodSupplyResponse(CamelModel):
    id: str
    location: str
    blood_type: str
    current_stock: int
    minimum_threshold: int
    shortage_risk: str
    last_updated: datetime


class ContractEventResponse(CamelModel):
    id: str
    event_type: str
    contract_address: str
    transaction_hash: str
    block_number: int
    event_data: str | None
    processed_at: datetime


class TokenTransactionResponse(CamelModel):
    id: str
    from_address: str | None
    to_address: str
    amount: str
    transaction_type: str
    transaction_hash: str
    block_number: int
    timestamp: datetime


class DonationMetricsResponse(CamelModel):
    total_donations: int
    total_donors: int
    total_units: int
    total_tokens_distributed: float
    total_nfts_minted: int = Field(..., alias="totalNFTsMinted")


class BloodTypeStatResponse(CamelModel):
    blood_type: str
    count: int
    percentage: float


class LocationStatResponse(CamelModel):
    location: str
    donations: int
    donors: int


class ShortagePredictionResponse(CamelModel):
    blood_type: str
    current_stock: int
    minimum_threshold: int
    shortage_risk: float
    recommended_stock: int


class ShortageForecastResponse(CamelModel):
    location: str
    predictions: list[ShortagePredictionResponse]
    last_updated: datetime


class AcknowledgementResponse(CamelModel):
    success: bool = True
