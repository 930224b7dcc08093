"""
BloodChain Repository

Single source of truth for donors, donations, NFT certificates, blood supply,
contract events and token transactions. All state is held in memory and lives
for the lifetime of the repository object; one instance is created at process
start and handed to the request handlers.

Each collection is guarded by its own lock, so uniqueness checks and the
insert that follows them are atomic even when handlers run on worker threads.
"""

import logging
from typing import Any

from bloodchain.core.errors import ConflictError
from bloodchain.core.shortage import calculate_shortage_risk, format_risk
from bloodchain.security.secure_logging import SecureLogger, sanitize_for_log
from bloodchain.storage import analytics
from bloodchain.storage.bounded_log import BoundedLog, DEFAULT_CAPACITY
from bloodchain.storage.memory_storage import MemoryStorage
from bloodchain.storage.models import (
    DEFAULT_MINIMUM_THRESHOLD, Donor, Donation, NFTCertificate, BloodSupply,
    SmartContractEvent, TokenTransaction,
)

logger = logging.getLogger(__name__)
audit_logger = SecureLogger(f"{__name__}.audit")

DEFAULT_LIMIT = 50


def _newest_first(records: list[Any], attribute: str) -> list[Any]:
    """Sort by timestamp descending; ties keep the most recently inserted record first"""
    return sorted(reversed(records), key=lambda record: getattr(record, attribute), reverse=True)


class BloodChainRepository:
    """In-memory repository with derived analytics queries"""

    def __init__(self, log_capacity: int = DEFAULT_CAPACITY, average_daily_consumption: float = 1.0,
                 default_limit: int = DEFAULT_LIMIT):
        self.donors = MemoryStorage("donors")
        self.donors.create_index("wallet", lambda donor: donor.wallet_address.lower())

        self.donations = MemoryStorage("donations")
        self.donations.create_index("donor_id", lambda donation: donation.donor_id)

        # Keyed by token id
        self.nft_certificates = MemoryStorage("nft_certificates")
        self.nft_certificates.create_index("donor_address", lambda cert: cert.donor_address.lower())

        # Keyed by (location, blood_type)
        self.blood_supply = MemoryStorage("blood_supply")
        self.blood_supply.create_index("location", lambda supply: supply.location)

        self.contract_events = BoundedLog(log_capacity)
        self.token_transactions = BoundedLog(log_capacity)

        self.average_daily_consumption = average_daily_consumption
        self.default_limit = default_limit

    # Donor operations

    def get_donor(self, donor_id: str) -> Donor | None:
        return self.donors.get(donor_id)

    def get_donor_by_wallet(self, wallet_address: str) -> Donor | None:
        matches = self.donors.query_by_index("wallet", wallet_address.lower())
        return matches[0] if matches else None

    def create_donor(self, donor: dict[str, Any]) -> Donor:
        """
        Register a donor.

        Counters start at zero and the donor is unverified, whatever the input holds.

        Raises:
            ConflictError: If the wallet address is already registered (any letter case)
        """
        with self.donors.lock:
            if self.get_donor_by_wallet(donor["wallet_address"]) is not None:
                audit_logger.audit("create", "donor", success=False,
                                   wallet_address=donor["wallet_address"], reason="duplicate_wallet")
                raise ConflictError("Donor already registered with this wallet address")

            record = Donor(
                wallet_address=donor["wallet_address"],
                name=donor["name"],
                blood_type=donor["blood_type"],
                location=donor["location"],
            )
            self.donors.set(record.id, record)

        audit_logger.audit("create", "donor", donor_id=record.id, wallet_address=record.wallet_address)
        return record

    def update_donor_points(self, wallet_address: str, points: int):
        """
        Add reward points to a donor and count one more donation.

        The donation counter goes up by exactly one per call, independent of the
        number of units donated. Unknown wallets are ignored.
        """
        with self.donors.lock:
            donor = self.get_donor_by_wallet(wallet_address)
            if donor is None:
                logger.debug(f"Points update skipped, no donor for wallet {sanitize_for_log(wallet_address)}")
                return
            donor.reward_points += points
            donor.total_donations += 1

        logger.info(f"Donor {donor.id} awarded {points} points (total {donor.reward_points})")

    def get_all_donors(self) -> list[Donor]:
        return self.donors.get_all_values()

    # Donation operations

    def get_donation(self, donation_id: str) -> Donation | None:
        return self.donations.get(donation_id)

    def create_donation(self, donation: dict[str, Any]) -> Donation:
        """Record a donation. Reward points are awarded by the caller."""
        record = Donation(
            blood_type=donation["blood_type"],
            quantity=donation["quantity"],
            hospital=donation["hospital"],
            location=donation["location"],
            donor_id=donation.get("donor_id") or None,
            transaction_hash=donation.get("transaction_hash") or None,
            block_number=donation.get("block_number"),
            nft_token_id=donation.get("nft_token_id") or None,
            reward_tokens=donation.get("reward_tokens") or None,
        )
        self.donations.set(record.id, record)

        audit_logger.audit("create", "donation", donation_id=record.id,
                           donor_id=record.donor_id, quantity=record.quantity)
        return record

    def get_donations_by_donor(self, donor_id: str) -> list[Donation]:
        return self.donations.query_by_index("donor_id", donor_id)

    def get_all_donations(self) -> list[Donation]:
        """All donations, newest first"""
        return _newest_first(self.donations.get_all_values(), "donated_at")

    # NFT certificate operations

    def get_nft_certificate(self, token_id: str) -> NFTCertificate | None:
        return self.nft_certificates.get(token_id)

    def create_nft_certificate(self, certificate: dict[str, Any]) -> NFTCertificate:
        """
        Record a minted certificate.

        Raises:
            ConflictError: If a certificate with the same token id exists
        """
        with self.nft_certificates.lock:
            if self.nft_certificates.contains(certificate["token_id"]):
                audit_logger.audit("create", "nft_certificate", success=False,
                                   token_id=certificate["token_id"], reason="duplicate_token")
                raise ConflictError(f"NFT certificate with token id '{certificate['token_id']}' already exists")

            record = NFTCertificate(
                token_id=certificate["token_id"],
                donor_address=certificate["donor_address"],
                donation_id=certificate.get("donation_id") or None,
                metadata_uri=certificate.get("metadata_uri") or None,
                image_uri=certificate.get("image_uri") or None,
                transaction_hash=certificate.get("transaction_hash") or None,
            )
            self.nft_certificates.set(record.token_id, record)

        audit_logger.audit("create", "nft_certificate", token_id=record.token_id,
                           donor_address=record.donor_address)
        return record

    def get_nfts_by_donor(self, donor_address: str) -> list[NFTCertificate]:
        return self.nft_certificates.query_by_index("donor_address", donor_address.lower())

    def get_all_nft_certificates(self) -> list[NFTCertificate]:
        """All certificates, newest first"""
        return _newest_first(self.nft_certificates.get_all_values(), "minted_at")

    # Blood supply operations

    def get_blood_supply(self, location: str, blood_type: str) -> BloodSupply | None:
        return self.blood_supply.get((location, blood_type))

    def update_blood_supply(self, supply: dict[str, Any]) -> BloodSupply:
        """
        Insert or replace the supply record for (location, blood_type).

        When no shortage risk is given it is derived from the stock, the
        minimum threshold and the configured average daily consumption.
        """
        current_stock = supply.get("current_stock")
        if current_stock is None:
            current_stock = 0
        minimum_threshold = supply.get("minimum_threshold")
        if minimum_threshold is None:
            minimum_threshold = DEFAULT_MINIMUM_THRESHOLD

        shortage_risk = supply.get("shortage_risk")
        if shortage_risk is None:
            shortage_risk = calculate_shortage_risk(
                current_stock, self.average_daily_consumption, minimum_threshold
            )

        record = BloodSupply(
            location=supply["location"],
            blood_type=supply["blood_type"],
            current_stock=current_stock,
            minimum_threshold=minimum_threshold,
            shortage_risk=format_risk(shortage_risk),
        )
        self.blood_supply.set(record.key, record)

        logger.info(
            f"Blood supply updated: {sanitize_for_log(record.location)}/{record.blood_type} "
            f"stock={record.current_stock} risk={record.shortage_risk}"
        )
        return record

    def get_all_blood_supply(self) -> list[BloodSupply]:
        return self.blood_supply.get_all_values()

    def get_blood_supply_by_location(self, location: str) -> list[BloodSupply]:
        return self.blood_supply.query_by_index("location", location)

    # Analytics operations

    def get_donation_metrics(self) -> analytics.DonationMetrics:
        return analytics.donation_metrics(
            self.get_all_donations(), self.get_all_donors(), self.get_all_nft_certificates()
        )

    def get_blood_type_distribution(self) -> list[analytics.BloodTypeStat]:
        return analytics.blood_type_distribution(self.get_all_donations())

    def get_location_stats(self) -> list[analytics.LocationStat]:
        return analytics.location_stats(self.get_all_donations(), self.get_all_donors())

    def get_shortage_predictions(self, location: str) -> list[analytics.ShortagePrediction]:
        return analytics.shortage_predictions(
            self.get_blood_supply_by_location(location), self.average_daily_consumption
        )

    # Blockchain event operations

    def log_contract_event(self, event: dict[str, Any]) -> SmartContractEvent:
        record = SmartContractEvent(
            event_type=event["event_type"],
            contract_address=event["contract_address"],
            transaction_hash=event["transaction_hash"],
            block_number=event["block_number"],
            event_data=event.get("event_data") or None,
        )
        self.contract_events.push(record)
        logger.debug(f"Contract event logged: {sanitize_for_log(record.event_type)} block={record.block_number}")
        return record

    def get_contract_events(self, limit: int | None = None) -> list[SmartContractEvent]:
        return self.contract_events.latest(limit or self.default_limit)

    # Token transaction operations

    def log_token_transaction(self, transaction: dict[str, Any]) -> TokenTransaction:
        record = TokenTransaction(
            from_address=transaction.get("from_address") or None,
            to_address=transaction["to_address"],
            amount=transaction["amount"],
            transaction_type=transaction["transaction_type"],
            transaction_hash=transaction["transaction_hash"],
            block_number=transaction["block_number"],
        )
        self.token_transactions.push(record)
        logger.debug(
            f"Token transaction logged: {sanitize_for_log(record.transaction_type)} "
            f"amount={sanitize_for_log(record.amount)}"
        )
        return record

    def get_token_transactions(self, address: str | None = None,
                               limit: int | None = None) -> list[TokenTransaction]:
        """Newest-first transactions, optionally only those sent from or to address"""
        predicate = (lambda tx: tx.involves(address)) if address else None
        return self.token_transactions.latest(limit or self.default_limit, predicate)

    def clear(self):
        """Drop all state"""
        for store in (self.donors, self.donations, self.nft_certificates, self.blood_supply):
            store.clear()
        self.contract_events.clear()
        self.token_transactions.clear()
        logger.info("Repository cleared")
