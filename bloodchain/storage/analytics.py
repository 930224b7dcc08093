"""
Donation analytics

Pure aggregation functions over snapshots of the repository collections.
Nothing here is cached; every call recomputes from the records it is given.
"""

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable

from bloodchain.core.blood import BLOOD_TYPES
from bloodchain.core.shortage import calculate_shortage_risk, recommended_stock
from bloodchain.storage.models import (
    DEFAULT_MINIMUM_THRESHOLD, Donor, Donation, NFTCertificate, BloodSupply
)


@dataclass(frozen=True)
class DonationMetrics:
    total_donations: int
    total_donors: int
    total_units: int
    total_tokens_distributed: Decimal
    total_nfts_minted: int


@dataclass(frozen=True)
class BloodTypeStat:
    blood_type: str
    count: int
    percentage: float


@dataclass(frozen=True)
class LocationStat:
    location: str
    donations: int
    donors: int


@dataclass(frozen=True)
class ShortagePrediction:
    blood_type: str
    current_stock: int
    minimum_threshold: int
    shortage_risk: float
    recommended_stock: int


def parse_decimal(value: str | None) -> Decimal:
    """Parse a decimal string, treating None and empty strings as zero"""
    if not value:
        return Decimal(0)
    try:
        return Decimal(value)
    except InvalidOperation:
        return Decimal(0)


def donation_metrics(donations: list[Donation], donors: list[Donor],
                     certificates: list[NFTCertificate]) -> DonationMetrics:
    return DonationMetrics(
        total_donations=len(donations),
        total_donors=len(donors),
        total_units=sum(donation.quantity for donation in donations),
        total_tokens_distributed=sum(
            (parse_decimal(donation.reward_tokens) for donation in donations), Decimal(0)
        ),
        total_nfts_minted=len(certificates),
    )


def blood_type_distribution(donations: list[Donation]) -> list[BloodTypeStat]:
    """
    Count donations per blood type.

    Every enumerated blood type is reported, in enumeration order, so an empty
    repository yields eight zero entries rather than an empty list.
    """
    counts = Counter(donation.blood_type for donation in donations)
    total = len(donations)

    blood_types = list(BLOOD_TYPES) + sorted(set(counts) - set(BLOOD_TYPES))
    return [
        BloodTypeStat(
            blood_type=blood_type,
            count=counts.get(blood_type, 0),
            percentage=(counts.get(blood_type, 0) / total) * 100 if total > 0 else 0.0,
        )
        for blood_type in blood_types
    ]


def location_stats(donations: list[Donation], donors: list[Donor]) -> list[LocationStat]:
    """
    Donation counts per donation location.

    The donor count for a location is the number of distinct donors whose
    registered location matches, regardless of where they donated.
    """
    donation_counts: dict[str, int] = {}
    for donation in donations:
        donation_counts[donation.location] = donation_counts.get(donation.location, 0) + 1

    donors_by_location: dict[str, set[str]] = {}
    for donor in donors:
        donors_by_location.setdefault(donor.location, set()).add(donor.id)

    return [
        LocationStat(
            location=location,
            donations=count,
            donors=len(donors_by_location.get(location, ())),
        )
        for location, count in donation_counts.items()
    ]


def shortage_predictions(supplies: Iterable[BloodSupply],
                         average_consumption: float) -> list[ShortagePrediction]:
    """Predict shortage risk for every blood type from the supply records of one location"""
    by_type = {supply.blood_type: supply for supply in supplies}
    predictions = []
    for blood_type in BLOOD_TYPES:
        supply = by_type.get(blood_type)
        current = supply.current_stock if supply else 0
        threshold = supply.minimum_threshold if supply else DEFAULT_MINIMUM_THRESHOLD
        predictions.append(ShortagePrediction(
            blood_type=blood_type,
            current_stock=current,
            minimum_threshold=threshold,
            shortage_risk=calculate_shortage_risk(current, average_consumption, threshold),
            recommended_stock=recommended_stock(current, threshold),
        ))
    return predictions
