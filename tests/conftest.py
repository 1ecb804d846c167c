"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from buyer_leads.store import BuyerStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def valid_form() -> dict:
    """A complete, valid buyer in form vocabulary."""
    return {
        "fullName": "Rohan Mehta",
        "email": "rohan.mehta@gmail.com",
        "phone": "9876543210",
        "city": "Chandigarh",
        "propertyType": "Apartment",
        "bhk": "2",
        "purpose": "Buy",
        "budgetMin": "5000000",
        "budgetMax": "7500000",
        "timeline": "0-3m",
        "source": "Walk-in",
        "notes": "Prefers a corner unit",
        "tags": '["hot", "investor"]',
        "status": "New",
    }


@pytest.fixture
def csv_header() -> str:
    """The full import header line."""
    return (
        "fullName,email,phone,city,propertyType,bhk,purpose,budgetMin,budgetMax,"
        "timeline,source,notes,tags,status"
    )


@pytest.fixture
def owner_id() -> str:
    """Sample owner ID."""
    return "user-test-001"


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at 2024-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> BuyerStore:
    """Empty store with deterministic timestamps and IDs."""
    counter = iter(range(1, 10_000))
    return BuyerStore(clock=clock, id_factory=lambda: f"buyer-{next(counter):03d}")
