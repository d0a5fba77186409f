"""
Domain exceptions for the ShopFloor application.

Provides specific exception types for different error scenarios. The
pricing engines never raise; these cover storage, workflow and request
problems around them.
"""

from typing import Any


class ShopFloorError(Exception):
    """Base exception for all ShopFloor errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(ShopFloorError):
    """Base exception for storage operations."""

    pass


class NotFoundError(StorageError):
    """A tenant-scoped record does not exist."""

    pass


class EquipmentNotFoundError(NotFoundError):
    """Equipment not found for tenant."""

    def __init__(self, equipment_id: str):
        super().__init__(
            f"Equipment not found: {equipment_id}",
            code="EQUIPMENT_NOT_FOUND",
            details={"equipment_id": equipment_id},
        )


class MaterialNotFoundError(NotFoundError):
    """Material not found for tenant."""

    def __init__(self, material_id: str):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class SalesDocumentNotFoundError(NotFoundError):
    """Quote or job not found for tenant."""

    def __init__(self, kind: str, document_id: int):
        super().__init__(
            f"{kind.capitalize()} not found: {document_id}",
            code=f"{kind.upper()}_NOT_FOUND",
            details={"kind": kind, "document_id": document_id},
        )


class InvoiceNotFoundError(NotFoundError):
    """Invoice not found for tenant."""

    def __init__(self, invoice_id: int):
        super().__init__(
            f"Invoice not found: {invoice_id}",
            code="INVOICE_NOT_FOUND",
            details={"invoice_id": invoice_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Workflow Exceptions
class WorkflowError(ShopFloorError):
    """Base exception for document lifecycle violations."""

    pass


class InvalidStatusTransitionError(WorkflowError):
    """Requested lifecycle transition is not allowed from the current status."""

    def __init__(self, entity: str, entity_id: int, current: str, target: str):
        super().__init__(
            f"Cannot move {entity} {entity_id} from '{current}' to '{target}'",
            code="INVALID_STATUS_TRANSITION",
            details={
                "entity": entity,
                "entity_id": entity_id,
                "current": current,
                "target": target,
            },
        )


class DocumentLockedError(WorkflowError):
    """Converted quotes and completed jobs are read-only."""

    def __init__(self, kind: str, document_id: int, status: str):
        super().__init__(
            f"{kind.capitalize()} {document_id} is {status} and can no longer be edited",
            code="DOCUMENT_LOCKED",
            details={"kind": kind, "document_id": document_id, "status": status},
        )


class InvoiceLockedError(WorkflowError):
    """Paid invoices cannot be edited."""

    def __init__(self, invoice_id: int):
        super().__init__(
            f"Invoice {invoice_id} is paid and can no longer be edited",
            code="INVOICE_LOCKED",
            details={"invoice_id": invoice_id},
        )


# Validation Exceptions
class ValidationError(ShopFloorError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class MissingTenantError(ValidationError):
    """Request did not identify a tenant."""

    def __init__(self, header: str):
        super().__init__(
            field=header,
            message="Tenant header is required",
        )
        self.code = "TENANT_REQUIRED"


class ConfigurationError(ShopFloorError):
    """Configuration error."""

    pass
