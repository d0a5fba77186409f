"""Equipment and materials catalog endpoints."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from src.api.dependencies import get_catalog, get_tenant_id
from src.application.dto.mappers import equipment_to_response, material_to_response
from src.application.dto.requests import (
    EquipmentRequest,
    MaterialRequest,
    StockAdjustmentRequest,
)
from src.application.dto.responses import (
    EquipmentListResponse,
    EquipmentResponse,
    ErrorResponse,
    MaterialListResponse,
    MaterialResponse,
)
from src.config import get_logger, get_settings
from src.core.entities.equipment import Equipment
from src.core.entities.material import Material
from src.core.exceptions import EquipmentNotFoundError, MaterialNotFoundError
from src.core.interfaces import ICatalogStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def _ink_categories() -> frozenset[str]:
    return frozenset(get_settings().pricing.ink_categories)


# --- Equipment ---


@router.post(
    "/equipment",
    response_model=EquipmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_equipment(
    request: EquipmentRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> EquipmentResponse:
    """Add equipment to the tenant's catalog."""
    equipment = await store.create_equipment(
        Equipment(tenant_id=tenant_id, **request.model_dump())
    )
    return equipment_to_response(equipment, _ink_categories())


@router.get("/equipment", response_model=EquipmentListResponse)
async def list_equipment(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> EquipmentListResponse:
    """List equipment ordered by name."""
    rows = await store.list_equipment(tenant_id, limit=limit, offset=offset)
    categories = _ink_categories()
    return EquipmentListResponse(
        items=[equipment_to_response(e, categories) for e in rows],
        total=len(rows),
    )


@router.get(
    "/equipment/{equipment_id}",
    response_model=EquipmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_equipment(
    equipment_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> EquipmentResponse:
    equipment = await store.get_equipment(tenant_id, equipment_id)
    if equipment is None:
        raise EquipmentNotFoundError(equipment_id)
    return equipment_to_response(equipment, _ink_categories())


@router.put(
    "/equipment/{equipment_id}",
    response_model=EquipmentResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_equipment(
    equipment_id: str,
    request: EquipmentRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> EquipmentResponse:
    """Replace an equipment row. Open quotes pick up the new rates on their next save."""
    existing = await store.get_equipment(tenant_id, equipment_id)
    if existing is None:
        raise EquipmentNotFoundError(equipment_id)
    equipment = await store.update_equipment(
        Equipment.model_validate({**existing.model_dump(), **request.model_dump()})
    )
    logger.info("equipment_updated", tenant_id=tenant_id, equipment_id=equipment_id)
    return equipment_to_response(equipment, _ink_categories())


@router.delete(
    "/equipment/{equipment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_equipment(
    equipment_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> Response:
    if not await store.delete_equipment(tenant_id, equipment_id):
        raise EquipmentNotFoundError(equipment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Materials ---


@router.post(
    "/materials",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_material(
    request: MaterialRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> MaterialResponse:
    """Add a material to the tenant's catalog."""
    material = await store.create_material(
        Material(tenant_id=tenant_id, **request.model_dump())
    )
    return material_to_response(material)


@router.get("/materials", response_model=MaterialListResponse)
async def list_materials(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> MaterialListResponse:
    rows = await store.list_materials(tenant_id, limit=limit, offset=offset)
    return MaterialListResponse(
        items=[material_to_response(m) for m in rows],
        total=len(rows),
    )


@router.get(
    "/materials/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> MaterialResponse:
    material = await store.get_material(tenant_id, material_id)
    if material is None:
        raise MaterialNotFoundError(material_id)
    return material_to_response(material)


@router.put(
    "/materials/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_material(
    material_id: str,
    request: MaterialRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> MaterialResponse:
    """Replace a material row. Issued invoices keep their frozen prices."""
    existing = await store.get_material(tenant_id, material_id)
    if existing is None:
        raise MaterialNotFoundError(material_id)
    material = await store.update_material(
        Material.model_validate({**existing.model_dump(), **request.model_dump()})
    )
    logger.info("material_updated", tenant_id=tenant_id, material_id=material_id)
    return material_to_response(material)


@router.delete(
    "/materials/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_material(
    material_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> Response:
    if not await store.delete_material(tenant_id, material_id):
        raise MaterialNotFoundError(material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/materials/{material_id}/stock",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def adjust_material_stock(
    material_id: str,
    request: StockAdjustmentRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ICatalogStore = Depends(get_catalog),
) -> MaterialResponse:
    """Add to or take from on-hand stock outside of job completion."""
    material = await store.adjust_stock(tenant_id, material_id, request.delta)
    logger.info(
        "material_stock_corrected",
        tenant_id=tenant_id,
        material_id=material_id,
        delta=request.delta,
        reason=request.reason,
    )
    return material_to_response(material)
