"""Tenant settings endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_tenant_id, get_tenants
from src.application.dto.mappers import settings_to_response
from src.application.dto.requests import TenantSettingsRequest
from src.application.dto.responses import ErrorResponse, TenantSettingsResponse
from src.config import get_settings
from src.core.entities.tenant import TenantSettings
from src.core.interfaces import ITenantSettingsStore

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=TenantSettingsResponse)
async def get_tenant_settings(
    tenant_id: str = Depends(get_tenant_id),
    store: ITenantSettingsStore = Depends(get_tenants),
) -> TenantSettingsResponse:
    """Tax rate, currency, default margin and numbering for the tenant."""
    settings = await store.get_settings(tenant_id)
    return settings_to_response(settings, get_settings().pricing.code_width)


@router.api_route(
    "",
    methods=["PUT", "PATCH"],
    response_model=TenantSettingsResponse,
    responses={400: {"model": ErrorResponse}},
)
async def update_tenant_settings(
    request: TenantSettingsRequest,
    tenant_id: str = Depends(get_tenant_id),
    store: ITenantSettingsStore = Depends(get_tenants),
) -> TenantSettingsResponse:
    """
    Update tenant settings.

    Only provided fields change. Counters are never set directly; a new
    tax rate applies to invoices generated afterwards.
    """
    current = await store.get_settings(tenant_id)
    changes = request.model_dump(exclude_none=True)
    if changes:
        current = await store.update_settings(
            TenantSettings.model_validate({**current.model_dump(), **changes})
        )
    return settings_to_response(current, get_settings().pricing.code_width)
