"""
Pytest configuration for BloodChain.

Ensures the project root is on sys.path so `import bloodchain` resolves without
an installed package, and provides repository and HTTP client fixtures.
"""

import os
import sys
import pytest

# Compute project root (parent of this tests directory)
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from fastapi.testclient import TestClient

from bloodchain.api.server import create_app
from bloodchain.storage.repository import BloodChainRepository


@pytest.fixture
def repository():
    """Fresh, empty repository"""
    return BloodChainRepository()


@pytest.fixture
def app(repository):
    return create_app(repository=repository)


@pytest.fixture
def client(app):
    """HTTP client bound to an app backed by the `repository` fixture"""
    return TestClient(app)


@pytest.fixture
def donor_data():
    return {
        "wallet_address": "0xAA",
        "name": "Alice",
        "blood_type": "O-",
        "location": "NYC",
    }


@pytest.fixture
def donation_data():
    return {
        "blood_type": "O-",
        "quantity": 2,
        "hospital": "Gen",
        "location": "NYC",
    }
