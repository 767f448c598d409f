"""Shared fixtures for the Violet chat relay test suite.

Backends are stubs and the catalog is an in-memory fake, so nothing here
touches the network.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from models.catalog_records import (  # noqa: E402
    CategoryRecord,
    FlashSaleRecord,
    PartnerRecord,
    ProductRecord,
    WebsiteStats,
)
from models.session_models import ChatMessage  # noqa: E402
from services.violet.backend import BackendError  # noqa: E402


# =============================================================================
# BACKEND STUBS
# =============================================================================

class RecordingBackend:
    """Configured backend that records every call and returns canned output."""

    available = True

    def __init__(self, reply: str = "Happy to help!", structured: Optional[Dict[str, Any]] = None):
        self.reply = reply
        self.structured = structured if structured is not None else {
            "intent": "product_search",
            "entities": ["lipstick"],
            "confidence": 0.9,
        }
        self.calls: List[Dict[str, Any]] = []
        self.structured_calls: List[Dict[str, Any]] = []

    async def generate(self, system_prompt, history):
        self.calls.append({"system_prompt": system_prompt, "history": history})
        return self.reply

    async def generate_structured(self, system_prompt, text, function):
        self.structured_calls.append({"system_prompt": system_prompt, "text": text, "function": function})
        return self.structured


class FailingBackend:
    """Configured backend whose every call fails."""

    available = True

    def __init__(self):
        self.calls = 0

    async def generate(self, system_prompt, history):
        self.calls += 1
        raise BackendError("connection reset")

    async def generate_structured(self, system_prompt, text, function):
        self.calls += 1
        raise BackendError("connection reset")


class NeverCalledBackend:
    """Unavailable backend that fails the test if anything calls it."""

    available = False

    async def generate(self, system_prompt, history):
        raise AssertionError("backend must not be called when unavailable")

    async def generate_structured(self, system_prompt, text, function):
        raise AssertionError("backend must not be called when unavailable")


# =============================================================================
# CATALOG FAKE
# =============================================================================

class FakeCatalog:
    """In-memory stand-in for CatalogDAL."""

    def __init__(self, products=None, categories=None, partners=None, flash_sale=None, stats=None):
        self.products = products or []
        self.categories = categories or []
        self.partners = partners or []
        self.flash_sale = flash_sale
        self.stats = stats or WebsiteStats(total_products=0, total_partners=0, active_flash_sales=0)
        self.reads: List[str] = []

    async def list_products(self, limit=50):
        self.reads.append("products")
        return self.products[:limit]

    async def list_categories(self):
        self.reads.append("categories")
        return self.categories

    async def list_partners(self):
        self.reads.append("partners")
        return self.partners

    async def get_active_flash_sale(self, now=None):
        self.reads.append("flash_sale")
        return self.flash_sale

    async def get_stats(self, now=None):
        self.reads.append("stats")
        return self.stats


@pytest.fixture
def recording_backend():
    return RecordingBackend()


@pytest.fixture
def failing_backend():
    return FailingBackend()


@pytest.fixture
def never_called_backend():
    return NeverCalledBackend()


@pytest.fixture
def full_catalog():
    """Catalog with two products, categories, a partner and a running flash sale."""
    return FakeCatalog(
        products=[
            ProductRecord(id=1, name="Velvet Matte Lipstick", price=24.0,
                          description="Long-lasting matte finish in twelve rich shades for every skin tone."),
            ProductRecord(id=2, name="Gentle Puppy Shampoo", price=15.5, description="Tear-free formula."),
        ],
        categories=[
            CategoryRecord(id=1, name="Makeup", slug="makeup"),
            CategoryRecord(id=2, name="Pet Care", slug="pet-care"),
        ],
        partners=[PartnerRecord(id=1, name="GlowLab", category_id=1, commission_rate=0.12)],
        flash_sale=FlashSaleRecord(id=1, name="Autumn Glow", discount_percentage=20, starts_at=0, ends_at=2**31),
        stats=WebsiteStats(total_products=42, total_partners=7, active_flash_sales=1),
    )


@pytest.fixture
def empty_catalog():
    return FakeCatalog()


def make_transcript(session_id: str, count: int) -> List[ChatMessage]:
    """Alternate user/violet messages numbered from 0."""
    return [
        ChatMessage(session_id=session_id, sender="user" if i % 2 == 0 else "violet", content=f"message {i}")
        for i in range(count)
    ]
