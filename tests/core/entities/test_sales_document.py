"""Tests for quote/job entities."""

from src.core.entities import (
    DocumentKind,
    DocumentStatus,
    EquipmentLine,
    LineItems,
    SalesDocument,
)


class TestSalesDocument:
    def test_quote_starts_open(self):
        quote = SalesDocument(kind=DocumentKind.QUOTE, title="Signage")

        assert quote.status == DocumentStatus.OPEN
        assert quote.items == LineItems()

    def test_job_starts_active(self):
        job = SalesDocument(kind="job", title="Signage")

        assert job.status == DocumentStatus.ACTIVE

    def test_explicit_status_kept(self):
        job = SalesDocument(kind=DocumentKind.JOB, title="x", status=DocumentStatus.COMPLETED)

        assert job.status == DocumentStatus.COMPLETED

    def test_bad_margin_is_zero(self):
        quote = SalesDocument(kind=DocumentKind.QUOTE, title="x", margin_pct="n/a")

        assert quote.margin_pct == 0.0


class TestLineItems:
    def test_reference_ids(self):
        items = LineItems.model_validate(
            {
                "equipment": [
                    {"equipment_id": "a"},
                    {"equipment_id": "a"},
                    {"equipment_id": None},
                ],
                "materials": [{"material_id": "m1", "qty": 2}, {"qty": 1}],
            }
        )

        assert items.equipment_ids() == {"a"}
        assert items.material_ids() == {"m1"}

    def test_unknown_keys_ignored(self):
        items = LineItems.model_validate(
            {"materials": [{"material_id": "m1", "qty": 1, "color": "red"}], "extra": 1}
        )

        assert items.materials[0].material_id == "m1"

    def test_equipment_mode_normalised(self):
        line = EquipmentLine.model_validate({"equipment_id": "a", "mode": " Hourly "})

        assert line.mode == "hourly"

    def test_rate_left_unset_stays_none(self):
        line = EquipmentLine.model_validate({"equipment_id": "a", "rate": ""})

        assert line.rate is None
        assert line.flat_fee is None
        assert line.use_soft_white is None

    def test_round_trip_through_dump(self, sample_items):
        dumped = sample_items.model_dump()

        assert LineItems.model_validate(dumped) == sample_items
