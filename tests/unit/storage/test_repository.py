"""
Unit tests for BloodChainRepository

Covers donors, donations, NFT certificates, blood supply and the bounded
contract-event and token-transaction logs.
"""

import threading
from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from bloodchain.core.errors import ConflictError
from bloodchain.storage.repository import BloodChainRepository


def _event(n):
    return {
        "event_type": "DonationRecorded",
        "contract_address": "0xC0",
        "transaction_hash": f"0x{n:04x}",
        "block_number": n,
    }


def _transaction(n, from_address=None, to_address="0xBB"):
    return {
        "from_address": from_address,
        "to_address": to_address,
        "amount": "10.5",
        "transaction_type": "mint",
        "transaction_hash": f"0x{n:04x}",
        "block_number": n,
    }


# Donors

def test_create_donor_assigns_defaults(repository, donor_data):
    donor = repository.create_donor(donor_data)

    assert donor.id
    assert donor.wallet_address == "0xAA"
    assert donor.reward_points == 0
    assert donor.total_donations == 0
    assert donor.is_verified is False
    assert donor.registered_at is not None
    assert repository.get_donor(donor.id) is donor


def test_create_donor_ignores_counter_fields(repository, donor_data):
    donor = repository.create_donor({**donor_data, "reward_points": 500, "is_verified": True})

    assert donor.reward_points == 0
    assert donor.is_verified is False


def test_duplicate_wallet_conflicts_in_any_case(repository, donor_data):
    repository.create_donor(donor_data)

    with pytest.raises(ConflictError):
        repository.create_donor({**donor_data, "wallet_address": "0xaa", "name": "Mallory"})

    assert len(repository.get_all_donors()) == 1


def test_distinct_wallets_never_collide(repository, donor_data):
    for n in range(20):
        repository.create_donor({**donor_data, "wallet_address": f"0x{n:02x}"})

    assert len(repository.get_all_donors()) == 20
    assert len({donor.id for donor in repository.get_all_donors()}) == 20


def test_get_donor_by_wallet_is_case_insensitive(repository, donor_data):
    donor = repository.create_donor({**donor_data, "wallet_address": "0xAbCdEf"})

    assert repository.get_donor_by_wallet("0xabcdef") is donor
    assert repository.get_donor_by_wallet("0XABCDEF") is donor
    assert repository.get_donor_by_wallet("0x123") is None


def test_update_donor_points_increments_donations_by_one(repository, donor_data):
    repository.create_donor(donor_data)

    repository.update_donor_points("0xaa", 20)
    repository.update_donor_points("0xAA", 50)

    donor = repository.get_donor_by_wallet("0xAA")
    assert donor.reward_points == 70
    assert donor.total_donations == 2


def test_update_donor_points_unknown_wallet_is_noop(repository):
    repository.update_donor_points("0xNOBODY", 10)
    assert repository.get_all_donors() == []


def test_concurrent_registration_of_same_wallet(repository, donor_data):
    results = []

    def register():
        try:
            repository.create_donor(donor_data)
            results.append("created")
        except ConflictError:
            results.append("conflict")

    threads = [threading.Thread(target=register) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count("created") == 1
    assert results.count("conflict") == 7


# Donations

def test_create_donation_does_not_award_points(repository, donor_data, donation_data):
    donor = repository.create_donor(donor_data)
    donation = repository.create_donation({**donation_data, "donor_id": donor.id})

    assert donation.id
    assert donation.donor_id == donor.id
    assert donation.donated_at is not None
    assert donor.reward_points == 0
    assert repository.get_donation(donation.id) is donation


def test_create_donation_normalizes_optional_fields(repository, donation_data):
    donation = repository.create_donation({**donation_data, "donor_id": "", "reward_tokens": ""})

    assert donation.donor_id is None
    assert donation.reward_tokens is None
    assert donation.transaction_hash is None
    assert donation.block_number is None


def test_all_donations_newest_first(repository, donation_data):
    created = [repository.create_donation({**donation_data, "hospital": f"H{n}"}) for n in range(5)]

    assert [d.id for d in repository.get_all_donations()] == [d.id for d in reversed(created)]


def test_donations_by_donor(repository, donor_data, donation_data):
    donor = repository.create_donor(donor_data)
    mine = repository.create_donation({**donation_data, "donor_id": donor.id})
    repository.create_donation({**donation_data, "donor_id": "someone-else"})
    repository.create_donation(donation_data)

    assert repository.get_donations_by_donor(donor.id) == [mine]
    assert repository.get_donations_by_donor("unknown") == []


# NFT certificates

def test_create_nft_certificate(repository):
    cert = repository.create_nft_certificate({"token_id": "T1", "donor_address": "0xAA"})

    assert cert.id
    assert cert.minted_at is not None
    assert cert.metadata_uri is None
    assert repository.get_nft_certificate("T1") is cert


def test_duplicate_token_id_conflicts(repository):
    first = repository.create_nft_certificate({"token_id": "T1", "donor_address": "0xAA"})

    with pytest.raises(ConflictError):
        repository.create_nft_certificate({"token_id": "T1", "donor_address": "0xBB"})

    assert repository.get_nft_certificate("T1") is first
    assert len(repository.get_all_nft_certificates()) == 1


def test_nfts_by_donor_case_insensitive(repository):
    repository.create_nft_certificate({"token_id": "T1", "donor_address": "0xAbC"})
    repository.create_nft_certificate({"token_id": "T2", "donor_address": "0xabc"})
    repository.create_nft_certificate({"token_id": "T3", "donor_address": "0xDEF"})

    assert {cert.token_id for cert in repository.get_nfts_by_donor("0xABC")} == {"T1", "T2"}


def test_all_nft_certificates_newest_first(repository):
    for n in range(4):
        repository.create_nft_certificate({"token_id": f"T{n}", "donor_address": "0xAA"})

    assert [cert.token_id for cert in repository.get_all_nft_certificates()] == ["T3", "T2", "T1", "T0"]


# Blood supply

def test_update_blood_supply_upserts_per_key(repository):
    repository.update_blood_supply({"location": "NYC", "blood_type": "O-", "current_stock": 5})
    updated = repository.update_blood_supply({"location": "NYC", "blood_type": "O-", "current_stock": 40})
    repository.update_blood_supply({"location": "NYC", "blood_type": "A+", "current_stock": 40})

    assert repository.get_blood_supply("NYC", "O-") is updated
    assert updated.current_stock == 40
    assert len(repository.get_all_blood_supply()) == 2


def test_blood_supply_defaults_and_derived_risk(repository):
    supply = repository.update_blood_supply({"location": "NYC", "blood_type": "O-"})

    assert supply.current_stock == 0
    assert supply.minimum_threshold == 10
    # No stock at all is a high shortage risk
    assert supply.shortage_risk == "0.8000"


def test_blood_supply_explicit_risk(repository):
    supply = repository.update_blood_supply(
        {"location": "NYC", "blood_type": "O-", "current_stock": 50, "shortage_risk": 0.35}
    )
    assert supply.shortage_risk == "0.3500"


def test_blood_supply_unknown_key(repository):
    assert repository.get_blood_supply("Nowhere", "AB-") is None


# Contract events

def test_contract_events_newest_first_with_default_limit(repository):
    for n in range(60):
        repository.log_contract_event(_event(n))

    events = repository.get_contract_events()
    assert len(events) == 50
    assert events[0].block_number == 59
    assert events[0].event_data is None
    assert repository.get_contract_events(5)[-1].block_number == 55


def test_contract_events_capped_at_1000(repository):
    for n in range(1010):
        repository.log_contract_event(_event(n))

    events = repository.get_contract_events(2000)
    assert len(events) == 1000
    assert events[0].block_number == 1009
    assert events[-1].block_number == 10


# Token transactions

def test_token_transactions_filtered_by_address(repository):
    repository.log_token_transaction(_transaction(1, to_address="0xAA"))
    repository.log_token_transaction(_transaction(2, from_address="0xaa", to_address="0xBB"))
    repository.log_token_transaction(_transaction(3, to_address="0xCC"))

    matched = repository.get_token_transactions("0xAA")
    assert [tx.block_number for tx in matched] == [2, 1]
    assert len(repository.get_token_transactions()) == 3
    assert repository.get_token_transactions("0xAA", limit=1)[0].block_number == 2


def test_token_transactions_capped_at_1000(repository):
    for n in range(1001):
        repository.log_token_transaction(_transaction(n))

    assert len(repository.get_token_transactions(limit=5000)) == 1000
    assert repository.get_token_transactions(limit=1)[0].block_number == 1000


@given(count=st.integers(min_value=0, max_value=1100))
@settings(max_examples=15, deadline=None)
def test_event_log_never_exceeds_capacity(count):
    repository = BloodChainRepository()
    for n in range(count):
        repository.log_contract_event(_event(n))

    events = repository.get_contract_events(1000)
    assert len(events) == min(count, 1000)
    assert [event.block_number for event in events] == list(range(count - 1, max(count - 1000, 0) - 1, -1))


def test_small_log_capacity():
    repository = BloodChainRepository(log_capacity=3)
    for n in range(5):
        repository.log_token_transaction(_transaction(n))

    assert [tx.block_number for tx in repository.get_token_transactions(limit=10)] == [4, 3, 2]


# Metrics

def test_metrics_recomputed_each_call(repository, donor_data, donation_data):
    empty = repository.get_donation_metrics()
    assert empty.total_donations == 0
    assert empty.total_tokens_distributed == Decimal(0)

    repository.create_donor(donor_data)
    repository.create_donation({**donation_data, "reward_tokens": "20.5"})
    repository.create_donation({**donation_data, "quantity": 3, "reward_tokens": "0.25"})
    repository.create_nft_certificate({"token_id": "T1", "donor_address": "0xAA"})

    metrics = repository.get_donation_metrics()
    assert metrics.total_donations == 2
    assert metrics.total_donors == 1
    assert metrics.total_units == 5
    assert metrics.total_tokens_distributed == Decimal("20.75")
    assert metrics.total_nfts_minted == 1


def test_clear(repository, donor_data, donation_data):
    repository.create_donor(donor_data)
    repository.create_donation(donation_data)
    repository.log_contract_event(_event(1))
    repository.clear()

    assert repository.get_all_donors() == []
    assert repository.get_all_donations() == []
    assert repository.get_contract_events() == []
    # Indexes still work after clearing
    repository.create_donor(donor_data)
    assert repository.get_donor_by_wallet("0xaa") is not None


def test_configured_default_limit():
    repository = BloodChainRepository(default_limit=3)
    for n in range(10):
        repository.log_contract_event(_event(n))

    assert [event.block_number for event in repository.get_contract_events()] == [9, 8, 7]
    assert len(repository.get_contract_events(10)) == 10
