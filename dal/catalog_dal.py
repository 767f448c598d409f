"""Async read-only Data Access Layer for the Shop&Glow catalog.

Provides CatalogDAL with the queries Violet needs to ground its answers:
products, categories, partners, the active flash sale and aggregate
counts. Every query may legitimately return nothing.
"""

from __future__ import annotations

import time
from typing import List, Optional, Sequence

from models.catalog_records import (
    CategoryRecord,
    FlashSaleRecord,
    PartnerRecord,
    ProductRecord,
    WebsiteStats,
)
from utils.database_init import AsyncDatabaseInitializer


class CatalogDAL:
    """Data access layer for catalog reads.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    _PRODUCT_COLUMNS = "id, name, price, description, category_id, partner_id"
    _FLASH_SALE_COLUMNS = "id, name, discount_percentage, starts_at, ends_at"

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def list_products(self, limit: int = 50) -> List[ProductRecord]:
        """Return active products, newest first.

        Args:
            limit: Maximum number of rows to return.
        """
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._PRODUCT_COLUMNS} FROM products WHERE is_active = 1 ORDER BY id DESC LIMIT ?",
                (limit,),
            )
            rows = await cur.fetchall()
            return [self._row_to_product(r) for r in rows]

    async def list_categories(self) -> List[CategoryRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute("SELECT id, name, slug FROM categories ORDER BY id")
            rows = await cur.fetchall()
            return [CategoryRecord(id=r[0], name=r[1], slug=r[2]) for r in rows]

    async def list_partners(self) -> List[PartnerRecord]:
        """Return approved partners only."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                "SELECT id, name, category_id, commission_rate, status FROM partners "
                "WHERE status = 'approved' ORDER BY id"
            )
            rows = await cur.fetchall()
            return [
                PartnerRecord(id=r[0], name=r[1], category_id=r[2], commission_rate=r[3], status=r[4])
                for r in rows
            ]

    async def get_active_flash_sale(self, now: Optional[int] = None) -> Optional[FlashSaleRecord]:
        """Return the flash sale running at `now` (unix seconds), or None.

        When several overlap, the one ending soonest wins.
        """
        now = int(time.time()) if now is None else now
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._FLASH_SALE_COLUMNS} FROM flash_sales "
                "WHERE is_active = 1 AND starts_at <= ? AND ends_at > ? "
                "ORDER BY ends_at ASC LIMIT 1",
                (now, now),
            )
            row = await cur.fetchone()
            return self._row_to_flash_sale(row) if row else None

    async def get_stats(self, now: Optional[int] = None) -> WebsiteStats:
        """Return aggregate counts of active products, approved partners and running flash sales."""
        now = int(time.time()) if now is None else now
        async with self._db.connection() as conn:
            cur = await conn.execute(
                "SELECT "
                "(SELECT COUNT(*) FROM products WHERE is_active = 1), "
                "(SELECT COUNT(*) FROM partners WHERE status = 'approved'), "
                "(SELECT COUNT(*) FROM flash_sales WHERE is_active = 1 AND starts_at <= ? AND ends_at > ?)",
                (now, now),
            )
            row = await cur.fetchone()
            return WebsiteStats(
                total_products=int(row[0] or 0),
                total_partners=int(row[1] or 0),
                active_flash_sales=int(row[2] or 0),
            )

    @staticmethod
    def _row_to_product(row: Sequence[object]) -> ProductRecord:
        return ProductRecord(
            id=row[0],
            name=row[1],
            price=float(row[2]),
            description=row[3] or "",
            category_id=row[4],
            partner_id=row[5],
        )

    @staticmethod
    def _row_to_flash_sale(row: Sequence[object]) -> FlashSaleRecord:
        return FlashSaleRecord(
            id=row[0],
            name=row[1],
            discount_percentage=int(row[2]),
            starts_at=int(row[3]),
            ends_at=int(row[4]),
        )
