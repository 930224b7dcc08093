"""
API v1 endpoints for BloodChain

This module provides the RESTful endpoints for donors, donations, NFT
certificates, blood supply, analytics and blockchain telemetry. Request bodies
are validated by the schemas before any repository call; domain errors raised
here or by the repository are turned into JSON error responses by the
handlers installed in the app factory.
"""

import time
import dataclasses
import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Query

from bloodchain.api.dependencies import RepositoryDep, SettingsDep
from bloodchain.api.v1.schemas import (
    DonorCreateRequest, DonorResponse,
    DonationCreateRequest, DonationResponse,
    NFTCertificateCreateRequest, NFTCertificateResponse,
    BloodSupplyUpdateRequest, BloodSupplyResponse,
    ContractEventRequest, ContractEventResponse,
    TokenTransactionRequest, TokenTransactionResponse,
    DonationMetricsResponse, BloodTypeStatResponse, LocationStatResponse,
    ShortageForecastResponse, AcknowledgementResponse,
)
from bloodchain.core.blood import is_valid_blood_type, reward_points_for
from bloodchain.core.errors import NotFoundError, ValidationError
from bloodchain.security.secure_logging import sanitize_for_log
from bloodchain.storage.bounded_log import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["BloodChain"])

LimitQuery = Annotated[int | None, Query(ge=1, le=DEFAULT_CAPACITY, description="Maximum number of entries")]


@router.get("/health")
async def health_check(settings: SettingsDep):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "api_version": settings.API_VERSION,
        "timestamp": time.time(),
    }


# Donors

@router.post("/donors", response_model=DonorResponse)
async def create_donor(donor_request: DonorCreateRequest, repository: RepositoryDep):
    """Register a donor; a wallet address can only be registered once"""
    return repository.create_donor(donor_request.model_dump())


@router.get("/donors", response_model=list[DonorResponse])
async def list_donors(repository: RepositoryDep):
    return repository.get_all_donors()


@router.get("/donors/wallet/{address}", response_model=DonorResponse)
async def get_donor_by_wallet(address: str, repository: RepositoryDep):
    """Look up a donor by wallet address (case-insensitive)"""
    donor = repository.get_donor_by_wallet(address)
    if donor is None:
        raise NotFoundError("Donor not found")
    return donor


@router.get("/donors/{donor_id}", response_model=DonorResponse)
async def get_donor(donor_id: str, repository: RepositoryDep):
    donor = repository.get_donor(donor_id)
    if donor is None:
        raise NotFoundError("Donor not found")
    return donor


# Donations

@router.post("/donations", response_model=DonationResponse)
async def create_donation(donation_request: DonationCreateRequest, repository: RepositoryDep):
    """
    Log a donation.

    If the donation references a registered donor, the donor is awarded
    10 reward points per unit and their donation counter goes up by one.
    """
    if not is_valid_blood_type(donation_request.blood_type):
        raise ValidationError("Invalid blood type")

    donation = repository.create_donation(donation_request.model_dump())

    if donation.donor_id:
        donor = repository.get_donor(donation.donor_id)
        if donor is not None:
            repository.update_donor_points(donor.wallet_address, reward_points_for(donation.quantity))
        else:
            logger.info(f"Donation {donation.id} references unknown donor {sanitize_for_log(donation.donor_id)}")

    return donation


@router.get("/donations", response_model=list[DonationResponse])
async def list_donations(repository: RepositoryDep):
    """All donations, newest first"""
    return repository.get_all_donations()


@router.get("/donations/donor/{donor_id}", response_model=list[DonationResponse])
async def list_donor_donations(donor_id: str, repository: RepositoryDep):
    return repository.get_donations_by_donor(donor_id)


@router.get("/donations/{donation_id}", response_model=DonationResponse)
async def get_donation(donation_id: str, repository: RepositoryDep):
    donation = repository.get_donation(donation_id)
    if donation is None:
        raise NotFoundError("Donation not found")
    return donation


# NFT certificates

@router.post("/nft-certificates", response_model=NFTCertificateResponse)
async def create_nft_certificate(certificate_request: NFTCertificateCreateRequest, repository: RepositoryDep):
    """Record a minted certificate; token ids are unique"""
    return repository.create_nft_certificate(certificate_request.model_dump())


@router.get("/nft-certificates", response_model=list[NFTCertificateResponse])
async def list_nft_certificates(repository: RepositoryDep):
    """All certificates, newest first"""
    return repository.get_all_nft_certificates()


@router.get("/nft-certificates/donor/{address}", response_model=list[NFTCertificateResponse])
async def list_donor_nft_certificates(address: str, repository: RepositoryDep):
    return repository.get_nfts_by_donor(address)


@router.get("/nft-certificates/{token_id}", response_model=NFTCertificateResponse)
async def get_nft_certificate(token_id: str, repository: RepositoryDep):
    certificate = repository.get_nft_certificate(token_id)
    if certificate is None:
        raise NotFoundError("NFT certificate not found")
    return certificate


# Blood supply

@router.get("/blood-supply", response_model=list[BloodSupplyResponse])
async def list_blood_supply(repository: RepositoryDep):
    return repository.get_all_blood_supply()


@router.put("/blood-supply", response_model=BloodSupplyResponse)
async def update_blood_supply(supply_request: BloodSupplyUpdateRequest, repository: RepositoryDep):
    """Insert or replace the stock record for one location and blood type"""
    return repository.update_blood_supply(supply_request.model_dump())


@router.get("/blood-supply/{location}/{blood_type}", response_model=BloodSupplyResponse)
async def get_blood_supply(location: str, blood_type: str, repository: RepositoryDep):
    supply = repository.get_blood_supply(location, blood_type)
    if supply is None:
        raise NotFoundError("Blood supply data not found")
    return supply


# Analytics

@router.get("/analytics/metrics", response_model=DonationMetricsResponse)
async def get_donation_metrics(repository: RepositoryDep):
    return repository.get_donation_metrics()


@router.get("/analytics/blood-types", response_model=list[BloodTypeStatResponse])
async def get_blood_type_distribution(repository: RepositoryDep):
    return repository.get_blood_type_distribution()


@router.get("/analytics/locations", response_model=list[LocationStatResponse])
async def get_location_stats(repository: RepositoryDep):
    return repository.get_location_stats()


@router.get("/predictions/shortage/{location}", response_model=ShortageForecastResponse)
async def get_shortage_predictions(location: str, repository: RepositoryDep):
    """Shortage risk and recommended stock per blood type at a location"""
    return ShortageForecastResponse(
        location=location,
        predictions=[
            dataclasses.asdict(prediction) for prediction in repository.get_shortage_predictions(location)
        ],
        last_updated=datetime.now(timezone.utc),
    )


# Blockchain telemetry

@router.post("/blockchain/events", response_model=AcknowledgementResponse)
async def log_contract_event(event_request: ContractEventRequest, repository: RepositoryDep):
    repository.log_contract_event(event_request.model_dump())
    return AcknowledgementResponse(success=True)


@router.get("/blockchain/events", response_model=list[ContractEventResponse])
async def list_contract_events(repository: RepositoryDep, limit: LimitQuery = None):
    """Most recent contract events, newest first"""
    return repository.get_contract_events(limit)


@router.post("/tokens/transactions", response_model=AcknowledgementResponse)
async def log_token_transaction(transaction_request: TokenTransactionRequest, repository: RepositoryDep):
    repository.log_token_transaction(transaction_request.model_dump())
    return AcknowledgementResponse(success=True)


@router.get("/tokens/transactions", response_model=list[TokenTransactionResponse])
async def list_token_transactions(repository: RepositoryDep, address: str | None = None,
                                  limit: LimitQuery = None):
    """Most recent token transactions, optionally sent from or to address"""
    return repository.get_token_transactions(address, limit)
