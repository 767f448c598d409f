from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ProductRecord:
    """In-memory representation of a row in the products table.

    Attributes:
        id: Primary key.
        name: Display name shown to shoppers.
        price: Unit price in dollars.
        description: Marketing description (may be long; prompts truncate it).
        category_id: Optional owning category.
        partner_id: Optional supplying partner.
    """

    id: int
    name: str
    price: float
    description: str = ""
    category_id: Optional[int] = None
    partner_id: Optional[int] = None


@dataclass
class CategoryRecord:
    id: int
    name: str
    slug: str


@dataclass
class PartnerRecord:
    id: int
    name: str
    category_id: Optional[int] = None
    commission_rate: Optional[float] = None
    status: str = "approved"


@dataclass
class FlashSaleRecord:
    """A time-boxed promotion; `starts_at`/`ends_at` are unix timestamps (seconds)."""

    id: int
    name: str
    discount_percentage: int
    starts_at: int
    ends_at: int


@dataclass
class WebsiteStats:
    """Aggregate counts surfaced to admin-mode conversations."""

    total_products: int
    total_partners: int
    active_flash_sales: int
