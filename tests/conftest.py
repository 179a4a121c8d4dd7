"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import os
import sys
import pytest
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ["APP_ENV"] = "test"
os.environ["RESPONDER_BACKEND"] = "none"
os.environ["OPENAI_API_KEY"] = ""
os.environ["KNOWLEDGE_DATA_DIR"] = str(project_root / "data")


RETURNS_TEXT = """RETURNS AND REFUNDS POLICY

=== RETURN POLICY ===
Items can be returned within 30 days of purchase in their original condition.
A proof of purchase is required for every return.

REFUND PROCESS:
Refunds are issued to the original payment method within 5-10 business days.

Q: How do I return an item?
A: Log into your account and click Return Item.
Print the prepaid label and drop the parcel at any courier location.

Q: How long do refunds take?
A: Refunds take 5-10 business days after we receive your return.
"""

ORDERS_TEXT = """ORDER MANAGEMENT

ORDER HISTORY:
Log into your account to see your order history.
Every past order is listed with its order number.
Your most recent orders are shown at the top.
Orders older than two years are archived.

Q: How do I track my order?
A: Open your order history and click Track Order next to the purchase.

Q: How do I cancel my order?
A: You can cancel your order within 1 hour of placing it from your order history page.
"""

WARRANTY_TEXT = """SAMSUNG WARRANTY INFORMATION

=== MOBILE DEVICES WARRANTY ===

SMARTPHONE (including Certified Re-Newed model):
- Warranty period: 24 Months
- Warranty service offered: Our Samsung Authorised Service Partners offer both In and Out of warranty repairs.
- Repair services available: In-store repair, Pick up repair, Doorstep repair

TABLET:
- Warranty period: 24 Months
- Warranty service offered: Our Samsung Authorised Service Partners offer both In and Out of warranty repairs.
- Repair services available: In-store repair, Pick up repair, Doorstep repair

GALAXY BUDS AND WIRELESS HEADPHONES:
- Warranty period: 12 Months
- Warranty service offered: Our Samsung Authorised Service Partners offer both In and Out of warranty repairs.
- Repair services available: In-store repair, Pick up repair

=== WARRANTY FAQs ===

Q: What does the warranty cover?
A: The warranty covers defects in materials and workmanship under normal use.
"""


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def returns_text():
    return RETURNS_TEXT


@pytest.fixture
def orders_text():
    return ORDERS_TEXT


@pytest.fixture
def warranty_text():
    return WARRANTY_TEXT


@pytest.fixture
def clock():
    """Fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path):
    """Temporary corpus directory with returns, orders and warranty files."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "returns.txt").write_text(RETURNS_TEXT, encoding="utf-8")
    (directory / "orders.txt").write_text(ORDERS_TEXT, encoding="utf-8")
    (directory / "warranty.txt").write_text(WARRANTY_TEXT, encoding="utf-8")
    return directory


@pytest.fixture
def mock_fetcher():
    """Live fetcher whose fetches succeed with fixed text."""
    fetcher = MagicMock()
    fetcher.fetch_warranty.return_value = "LIVE WARRANTY:\n- Warranty period: 24 Months\n"
    fetcher.fetch_products.return_value = "SAMSUNG PRODUCTS INFORMATION\n"
    return fetcher


@pytest.fixture
def failing_fetcher():
    """Live fetcher whose fetches always fail."""
    fetcher = MagicMock()
    fetcher.fetch_warranty.side_effect = ConnectionError("network down")
    fetcher.fetch_products.side_effect = ConnectionError("network down")
    return fetcher


@pytest.fixture
def knowledge_service(data_dir, mock_fetcher, clock):
    """Knowledge service over the temporary corpus and a succeeding fetcher."""
    from supportdesk.knowledge.service import KnowledgeService
    from supportdesk.knowledge.store import CorpusStore

    return KnowledgeService(
        store=CorpusStore(data_dir),
        fetcher=mock_fetcher,
        ttl_seconds=3600,
        clock=clock,
    )


@pytest.fixture
def mock_responder():
    """Generative responder returning a fixed reply."""
    responder = MagicMock()
    responder.name = "mock"
    responder.generate.return_value = "This is a generated reply."
    return responder
