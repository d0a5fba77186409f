"""SQLite implementation of the equipment and materials catalog."""

import uuid
from collections.abc import Iterable

import aiosqlite

from src.config import get_logger
from src.core.entities.equipment import BillingMode, Equipment, InkRates
from src.core.entities.material import Material
from src.core.exceptions import MaterialNotFoundError
from src.core.interfaces.catalog_store import ICatalogStore
from src.infrastructure.storage.sqlite.columns import (
    dump_json,
    load_json,
    now_iso,
    parse_timestamp,
)
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _placeholders(count: int) -> str:
    return ",".join("?" for _ in range(count))


class SQLiteCatalogStore(ICatalogStore):
    """Tenant-scoped equipment and materials reference data."""

    # Equipment

    async def create_equipment(self, equipment: Equipment) -> Equipment:
        equipment_id = equipment.id or str(uuid.uuid4())
        now = now_iso()
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO equipment (
                    id, tenant_id, name, type, mode, hourly_rate, flat_fee,
                    ink_rates, use_soft_white, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    equipment_id,
                    equipment.tenant_id,
                    equipment.name,
                    equipment.type,
                    equipment.mode.value,
                    equipment.hourly_rate,
                    equipment.flat_fee,
                    dump_json(equipment.ink_rates.model_dump()),
                    int(equipment.use_soft_white),
                    now,
                    now,
                ),
            )
        logger.info(
            "equipment_created",
            tenant_id=equipment.tenant_id,
            equipment_id=equipment_id,
            type=equipment.type,
        )
        return await self.get_equipment(equipment.tenant_id, equipment_id)

    async def get_equipment(self, tenant_id: str, equipment_id: str) -> Equipment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM equipment WHERE tenant_id = ? AND id = ?",
                (tenant_id, equipment_id),
            )
            row = await cursor.fetchone()
            return self._row_to_equipment(row) if row else None

    async def list_equipment(
        self, tenant_id: str, limit: int = 100, offset: int = 0
    ) -> list[Equipment]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM equipment WHERE tenant_id = ? ORDER BY name LIMIT ? OFFSET ?",
                (tenant_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_equipment(r) for r in rows]

    async def get_equipment_by_ids(
        self, tenant_id: str, equipment_ids: Iterable[str]
    ) -> dict[str, Equipment]:
        ids = sorted({i for i in equipment_ids if i})
        if not ids:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM equipment WHERE tenant_id = ? AND id IN ({_placeholders(len(ids))})",
                (tenant_id, *ids),
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_equipment(row) for row in rows}

    async def update_equipment(self, equipment: Equipment) -> Equipment:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE equipment SET
                    name = ?, type = ?, mode = ?, hourly_rate = ?, flat_fee = ?,
                    ink_rates = ?, use_soft_white = ?, updated_at = ?
                WHERE tenant_id = ? AND id = ?
                """,
                (
                    equipment.name,
                    equipment.type,
                    equipment.mode.value,
                    equipment.hourly_rate,
                    equipment.flat_fee,
                    dump_json(equipment.ink_rates.model_dump()),
                    int(equipment.use_soft_white),
                    now_iso(),
                    equipment.tenant_id,
                    equipment.id,
                ),
            )
        return await self.get_equipment(equipment.tenant_id, equipment.id)

    async def delete_equipment(self, tenant_id: str, equipment_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM equipment WHERE tenant_id = ? AND id = ?",
                (tenant_id, equipment_id),
            )
            return cursor.rowcount > 0

    # Materials

    async def create_material(self, material: Material) -> Material:
        material_id = material.id or str(uuid.uuid4())
        now = now_iso()
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO materials (
                    id, tenant_id, name, unit, purchase_price, selling_price,
                    on_hand, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    material_id,
                    material.tenant_id,
                    material.name,
                    material.unit,
                    material.purchase_price,
                    material.selling_price,
                    material.on_hand,
                    now,
                    now,
                ),
            )
        logger.info(
            "material_created",
            tenant_id=material.tenant_id,
            material_id=material_id,
        )
        return await self.get_material(material.tenant_id, material_id)

    async def get_material(self, tenant_id: str, material_id: str) -> Material | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE tenant_id = ? AND id = ?",
                (tenant_id, material_id),
            )
            row = await cursor.fetchone()
            return self._row_to_material(row) if row else None

    async def list_materials(
        self, tenant_id: str, limit: int = 100, offset: int = 0
    ) -> list[Material]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE tenant_id = ? ORDER BY name LIMIT ? OFFSET ?",
                (tenant_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_material(r) for r in rows]

    async def get_materials_by_ids(
        self, tenant_id: str, material_ids: Iterable[str]
    ) -> dict[str, Material]:
        ids = sorted({i for i in material_ids if i})
        if not ids:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM materials WHERE tenant_id = ? AND id IN ({_placeholders(len(ids))})",
                (tenant_id, *ids),
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_material(row) for row in rows}

    async def update_material(self, material: Material) -> Material:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE materials SET
                    name = ?, unit = ?, purchase_price = ?, selling_price = ?,
                    on_hand = ?, updated_at = ?
                WHERE tenant_id = ? AND id = ?
                """,
                (
                    material.name,
                    material.unit,
                    material.purchase_price,
                    material.selling_price,
                    material.on_hand,
                    now_iso(),
                    material.tenant_id,
                    material.id,
                ),
            )
        return await self.get_material(material.tenant_id, material.id)

    async def delete_material(self, tenant_id: str, material_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM materials WHERE tenant_id = ? AND id = ?",
                (tenant_id, material_id),
            )
            return cursor.rowcount > 0

    async def adjust_stock(self, tenant_id: str, material_id: str, delta: float) -> Material:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE materials SET on_hand = on_hand + ?, updated_at = ?
                WHERE tenant_id = ? AND id = ?
                """,
                (delta, now_iso(), tenant_id, material_id),
            )
            if cursor.rowcount == 0:
                raise MaterialNotFoundError(material_id)

        logger.info(
            "material_stock_adjusted",
            tenant_id=tenant_id,
            material_id=material_id,
            delta=delta,
        )
        return await self.get_material(tenant_id, material_id)

    # Row conversion

    def _row_to_equipment(self, row: aiosqlite.Row) -> Equipment:
        return Equipment(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            type=row["type"] or "",
            mode=BillingMode.coerce(row["mode"]),
            hourly_rate=row["hourly_rate"],
            flat_fee=row["flat_fee"],
            ink_rates=InkRates.model_validate(load_json(row["ink_rates"])),
            use_soft_white=bool(row["use_soft_white"]),
            created_at=parse_timestamp(row["created_at"]) or now_iso(),
            updated_at=parse_timestamp(row["updated_at"]) or now_iso(),
        )

    def _row_to_material(self, row: aiosqlite.Row) -> Material:
        return Material(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            unit=row["unit"],
            purchase_price=row["purchase_price"],
            selling_price=row["selling_price"],
            on_hand=row["on_hand"],
            created_at=parse_timestamp(row["created_at"]) or now_iso(),
            updated_at=parse_timestamp(row["updated_at"]) or now_iso(),
        )
