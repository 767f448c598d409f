"""Assemble a best-effort snapshot of catalog data for a chat turn."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, TypeVar

from models.catalog_records import (
    CategoryRecord,
    FlashSaleRecord,
    PartnerRecord,
    ProductRecord,
    WebsiteStats,
)
from models.session_models import ADMIN_MODE

T = TypeVar("T")


class CatalogReader(Protocol):
    """Read queries the assembler needs; `dal.catalog_dal.CatalogDAL` satisfies it."""

    async def list_products(self, limit: int = 50) -> List[ProductRecord]: ...

    async def list_categories(self) -> List[CategoryRecord]: ...

    async def list_partners(self) -> List[PartnerRecord]: ...

    async def get_active_flash_sale(self, now: Optional[int] = None) -> Optional[FlashSaleRecord]: ...

    async def get_stats(self, now: Optional[int] = None) -> WebsiteStats: ...


@dataclass
class BusinessContext:
    """Catalog snapshot used to condition one response. Empty fields are omitted."""

    products: List[ProductRecord] = field(default_factory=list)
    categories: List[CategoryRecord] = field(default_factory=list)
    partners: List[PartnerRecord] = field(default_factory=list)
    flash_sale: Optional[FlashSaleRecord] = None
    stats: Optional[WebsiteStats] = None


class ContextAssembler:
    """Read the catalog collaborators for the fields a given mode needs.

    Customer turns get products, categories, partners and the running flash
    sale; admin turns get aggregate stats. A failing read is logged and left
    out of the snapshot.
    """

    def __init__(self, catalog: Optional[CatalogReader], product_limit: int = 50) -> None:
        self.catalog = catalog
        self.product_limit = product_limit

    async def assemble(self, mode: str) -> BusinessContext:
        context = BusinessContext()
        if self.catalog is None:
            return context

        if mode == ADMIN_MODE:
            context.stats = await self._read("stats", self.catalog.get_stats)
            return context

        context.products = await self._read("products", lambda: self.catalog.list_products(self.product_limit)) or []
        context.categories = await self._read("categories", self.catalog.list_categories) or []
        context.partners = await self._read("partners", self.catalog.list_partners) or []
        context.flash_sale = await self._read("flash sale", self.catalog.get_active_flash_sale)
        return context

    @staticmethod
    async def _read(name: str, query: Callable[[], Awaitable[T]]) -> Optional[T]:
        try:
            return await query()
        except Exception as exc:
            logging.warning("Catalog read for %s failed, omitting it from context: %s", name, exc)
            return None


def describe_context(context: BusinessContext) -> Dict[str, Any]:
    """Return a compact summary of which fields were assembled, for logging."""
    return {
        "products": len(context.products),
        "categories": len(context.categories),
        "partners": len(context.partners),
        "flash_sale": context.flash_sale is not None,
        "stats": context.stats is not None,
    }
