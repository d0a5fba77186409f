"""Complete Job Use Case: finish a job and consume its materials from stock."""

from collections import defaultdict
from dataclasses import dataclass, field

from src.application.dto.mappers import document_to_response
from src.application.dto.responses import CompleteJobResponse, StockMovementResponse
from src.application.services import DocumentPricer, get_document_pricer
from src.config import get_logger
from src.core.entities.sales_document import DocumentKind, DocumentStatus, SalesDocument
from src.core.exceptions import InvalidStatusTransitionError, SalesDocumentNotFoundError
from src.core.interfaces import ICatalogStore, ISalesDocumentStore

logger = get_logger(__name__)


@dataclass
class StockMovement:
    """Quantity consumed from one material."""

    material_id: str
    quantity: float
    on_hand: float | None = None


@dataclass
class CompleteJobResult:
    job: SalesDocument
    movements: list[StockMovement] = field(default_factory=list)
    missing_materials: list[str] = field(default_factory=list)


class CompleteJobUseCase:
    """
    Move an active job to completed.

    The job is re-priced one last time so its totals reflect the prices in
    force at completion; those totals are what invoices snapshot. Material
    line quantities are deducted from on-hand stock in the same transaction
    that completes the job, so a failure leaves both untouched. Materials no
    longer in the catalog are skipped and reported.
    """

    def __init__(
        self,
        document_store: ISalesDocumentStore | None = None,
        catalog_store: ICatalogStore | None = None,
        pricer: DocumentPricer | None = None,
    ):
        self._document_store = document_store
        self._catalog_store = catalog_store
        self._pricer = pricer

    async def _get_document_store(self) -> ISalesDocumentStore:
        if self._document_store is None:
            from src.infrastructure.storage.sqlite import get_sales_document_store

            self._document_store = await get_sales_document_store()
        return self._document_store

    def _get_pricer(self) -> DocumentPricer:
        if self._pricer is None:
            self._pricer = get_document_pricer(self._catalog_store)
        return self._pricer

    async def execute(self, tenant_id: str, job_id: int) -> CompleteJobResult:
        logger.info("complete_job_started", tenant_id=tenant_id, job_id=job_id)

        store = await self._get_document_store()

        job = await store.get_document(tenant_id, DocumentKind.JOB, job_id)
        if job is None:
            raise SalesDocumentNotFoundError(DocumentKind.JOB.value, job_id)
        if job.status != DocumentStatus.ACTIVE:
            raise InvalidStatusTransitionError(
                "job", job_id, job.status.value, DocumentStatus.COMPLETED.value
            )

        pricing = await self._get_pricer().price(tenant_id, job.items, job.margin_pct)

        missing = set(pricing.missing_materials)
        consumed: dict[str, float] = defaultdict(float)
        for line in job.items.materials:
            if line.material_id and line.qty and line.material_id not in missing:
                consumed[line.material_id] += line.qty

        job, on_hand = await store.complete_job(tenant_id, job_id, pricing.totals, dict(consumed))

        # Deleted after pricing: nothing was deducted
        missing.update(consumed.keys() - on_hand.keys())
        movements = [
            StockMovement(material_id=material_id, quantity=quantity, on_hand=on_hand[material_id])
            for material_id, quantity in consumed.items()
            if material_id in on_hand
        ]

        logger.info(
            "complete_job_complete",
            tenant_id=tenant_id,
            job_id=job_id,
            materials_consumed=len(movements),
            missing_materials=len(missing),
            total=job.totals.total_charge_pre_tax,
        )
        return CompleteJobResult(
            job=job,
            movements=movements,
            missing_materials=sorted(missing),
        )

    def to_response(self, result: CompleteJobResult) -> CompleteJobResponse:
        return CompleteJobResponse(
            job=document_to_response(result.job),
            stock_movements=[
                StockMovementResponse(
                    material_id=m.material_id,
                    quantity=m.quantity,
                    on_hand=m.on_hand,
                )
                for m in result.movements
            ],
            missing_materials=result.missing_materials,
        )
