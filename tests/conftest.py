"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import logging
from datetime import datetime, timezone

import pytest

from fingrab.core import config as config_module
from fingrab.core.http import RetryPolicy
from tests.fixtures.fake_api import FakeBankAPI

# Start of the export range used throughout the provider tests.
START = datetime(2025, 1, 1, tzinfo=timezone.utc)
END = datetime(2025, 1, 31, tzinfo=timezone.utc)


@pytest.fixture
def fake_api() -> FakeBankAPI:
    """In-memory bank API served through httpx.MockTransport."""
    return FakeBankAPI()


@pytest.fixture
def no_wait_retry() -> RetryPolicy:
    """Default retry policy whose back-off never actually sleeps."""
    waits: list[float] = []
    policy = RetryPolicy(sleep=waits.append)
    policy.waits = waits  # type: ignore[attr-defined]
    return policy


@pytest.fixture
def sample_monzo_transaction() -> dict:
    """Monzo card payment as returned by GET /transactions."""
    return {
        "id": "tx_0001",
        "description": "TFL TRAVEL CH",
        "created": "2025-01-25T10:00:00.000Z",
        "amount": -280,
        "currency": "GBP",
        "local_amount": -280,
        "local_currency": "GBP",
        "category": "transport",
        "notes": "Travel",
        "settled": "2025-01-26T02:00:00.000Z",
        "account_id": "acc_0001",
        "merchant": {"id": "merch_tfl", "name": "TfL", "category": "transport"},
        "counterparty": {},
        "decline_reason": "",
        "metadata": {},
    }


@pytest.fixture
def sample_feed_item() -> dict:
    """Starling interest payment as returned by transactions-between."""
    return {
        "feedItemUid": "11111111-1111-1111-1111-111111111111",
        "categoryUid": "22222222-2222-2222-2222-222222222222",
        "amount": {"currency": "GBP", "minorUnits": 123},
        "direction": "IN",
        "transactionTime": "2025-02-19T16:37:59.000Z",
        "source": "INTEREST_PAYMENT",
        "sourceSubType": "DEPOSIT",
        "status": "SETTLED",
        "counterPartyType": "STARLING",
        "counterPartyUid": "33333333-3333-3333-3333-333333333333",
        "counterPartyName": "Starling Bank",
        "reference": "Interest",
        "spendingCategory": "INCOME",
        "userNote": "",
    }


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Set up test environment variables."""
    # Ensure tests never pick up real credentials
    monkeypatch.setenv("FINGRAB_ENV", "test")
    monkeypatch.setenv("FINGRAB_TIMEZONE", "UTC")
    monkeypatch.setenv("FINGRAB_LOG_LEVEL", "INFO")
    for name in (
        "FINGRAB_TIMEOUT",
        "FINGRAB_FORMAT",
        "FINGRAB_MONZO_BASE_URL",
        "FINGRAB_STARLING_BASE_URL",
        "MONZO_TOKEN",
        "MONZO_CLIENT_ID",
        "MONZO_CLIENT_SECRET",
        "STARLING_TOKEN",
        "STARLING_CLIENT_ID",
        "STARLING_CLIENT_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)

    # Every test starts from a fresh configuration
    monkeypatch.setattr(config_module, "_config", None)

    yield

    # The CLI installs its own handler; hand logging back to pytest
    logger = logging.getLogger(config_module.LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "http: Tests for the REST client substrate")
    config.addinivalue_line("markers", "monzo: Tests for the Monzo client and exporter")
    config.addinivalue_line("markers", "starling: Tests for the Starling client and exporter")
