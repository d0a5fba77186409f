"""
Invoice PDF renderer using fpdf2.

Renders a customer-facing invoice from the frozen job snapshot: a
charge breakdown per category, labour and add-on detail lines, and the
payable summary (discount, tax, deposit, amount due) with a
page-numbered footer.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from src.config.settings import PdfSettings, get_settings
from src.core.entities.invoice import Invoice
from src.core.entities.totals import DiscountType


def _safe_text(text: str | None) -> str:
    """Core PDF fonts are latin-1 only; replace anything else with '?'."""
    return (text or "").encode("latin-1", "replace").decode("latin-1")


class IInvoicePdfRenderer(ABC):
    """Interface for invoice PDF rendering implementations."""

    @abstractmethod
    def render(self, invoice: Invoice, currency: str = "USD") -> bytes:
        """Render an invoice into PDF bytes."""
        ...


class _InvoicePdf(FPDF):
    """FPDF subclass that renders a footer on every page."""

    def __init__(self, pdf_settings: PdfSettings) -> None:
        super().__init__()
        self._pdf_settings = pdf_settings
        self._generation_date = datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.cell(0, 5, _safe_text(self._pdf_settings.footer_text), align="L")
        self.set_x(-60)
        self.cell(
            0,
            5,
            f"Page {self.page_no()} of {{nb}} | {self._generation_date}",
            align="R",
        )


class Fpdf2InvoiceRenderer(IInvoicePdfRenderer):
    """Renders invoice PDFs using fpdf2."""

    def __init__(self, pdf_settings: PdfSettings | None = None) -> None:
        if pdf_settings is None:
            pdf_settings = get_settings().pdf
        self._settings = pdf_settings

    def render(self, invoice: Invoice, currency: str = "USD") -> bytes:
        pdf = _InvoicePdf(self._settings)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        self._render_header(pdf, invoice)
        self._render_separator(pdf)
        self._render_charges(pdf, invoice, currency)
        self._render_detail_lines(pdf, invoice)
        self._render_summary(pdf, invoice, currency)

        return bytes(pdf.output())

    # Sections

    def _render_header(self, pdf: FPDF, invoice: Invoice) -> None:
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(
            0, 6, _safe_text(self._settings.company_name),
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_font("Helvetica", "", 8)
        if self._settings.company_address:
            pdf.cell(
                0, 4, _safe_text(self._settings.company_address),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        if self._settings.company_phone:
            pdf.cell(
                0, 4, f"Tel: {_safe_text(self._settings.company_phone)}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        if self._settings.company_email:
            pdf.cell(
                0, 4, f"Email: {_safe_text(self._settings.company_email)}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )

        pdf.ln(4)
        pdf.set_font("Helvetica", "B", 18)
        pdf.cell(0, 12, "INVOICE", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(3)

        pdf.set_font("Helvetica", "", 10)
        pdf.cell(
            0, 6, f"Invoice No: {_safe_text(invoice.code or str(invoice.id or ''))}",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.cell(
            0, 6, f"Date: {invoice.created_at:%Y-%m-%d}",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        if invoice.title:
            pdf.cell(
                0, 6, f"Job: {_safe_text(invoice.title)}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        if invoice.customer_name:
            pdf.cell(
                0, 6, f"Customer: {_safe_text(invoice.customer_name)}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.cell(
            0, 6, f"Status: {invoice.status.value.upper()}",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(3)

    @staticmethod
    def _render_separator(pdf: FPDF) -> None:
        y = pdf.get_y()
        pdf.set_draw_color(100, 100, 100)
        pdf.line(10, y, 200, y)
        pdf.set_draw_color(0, 0, 0)
        pdf.ln(4)

    @staticmethod
    def _render_charges(pdf: FPDF, invoice: Invoice, currency: str) -> None:
        """Category breakdown of the snapshot, with alternating row shading."""
        snapshot = invoice.snapshot
        rows = [
            ("Ink", snapshot.ink_charge),
            ("Materials", snapshot.mat_charge),
            ("Equipment", snapshot.eq_charge),
            ("Labor", snapshot.labor_charge),
            ("Add-ons", snapshot.addon_charge),
        ]

        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 8, "Charges", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        col_widths = [130, 50]
        pdf.set_font("Helvetica", "B", 9)
        pdf.set_fill_color(70, 70, 70)
        pdf.set_text_color(255, 255, 255)
        pdf.cell(col_widths[0], 7, "Category", border=1, fill=True, align="C")
        pdf.cell(col_widths[1], 7, f"Amount ({currency})", border=1, fill=True, align="C")
        pdf.ln()
        pdf.set_text_color(0, 0, 0)

        pdf.set_font("Helvetica", "", 9)
        for idx, (label, amount) in enumerate(rows, 1):
            fill = idx % 2 == 0
            if fill:
                pdf.set_fill_color(240, 240, 240)
            pdf.cell(col_widths[0], 6, label, border=1, fill=fill)
            pdf.cell(col_widths[1], 6, f"{amount:,.2f}", border=1, align="R", fill=fill)
            pdf.ln()
        pdf.ln(3)

    @staticmethod
    def _render_detail_lines(pdf: FPDF, invoice: Invoice) -> None:
        """Labour and add-on lines, which carry their own prices."""
        labor = invoice.items.labor
        addons = invoice.items.addons
        if not labor and not addons:
            return

        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(0, 7, "Details", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 8)
        for line in labor:
            amount = line.hours * line.rate
            pdf.cell(130, 5, _safe_text(f"Labor: {line.description} ({line.hours:g} h x {line.rate:,.2f})"))
            pdf.cell(50, 5, f"{amount:,.2f}", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        for line in addons:
            amount = line.qty * line.price
            pdf.cell(130, 5, _safe_text(f"Add-on: {line.name} ({line.qty:g} x {line.price:,.2f})"))
            pdf.cell(50, 5, f"{amount:,.2f}", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(3)

    @staticmethod
    def _render_summary(pdf: FPDF, invoice: Invoice, currency: str) -> None:
        totals = invoice.totals
        adj = invoice.adjustments

        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(0, 7, "Summary", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 10)

        def line(label: str, value: float) -> None:
            pdf.cell(130, 6, label, align="R")
            pdf.cell(0, 6, f"{value:,.2f}", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        line("Subtotal:", totals.pre_tax)
        if totals.discount:
            label = (
                f"Discount ({adj.discount_value:g}%):"
                if adj.discount_type == DiscountType.PERCENT
                else "Discount:"
            )
            line(label, -totals.discount)
        line(f"Tax ({adj.tax_rate_pct:g}%):", totals.tax)

        pdf.set_font("Helvetica", "B", 10)
        line("Total:", totals.total)
        pdf.set_font("Helvetica", "", 10)
        if adj.deposit:
            line("Deposit:", -adj.deposit)

        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(130, 8, f"Amount Due ({currency}):", align="R")
        pdf.cell(0, 8, f"{totals.total_due:,.2f}", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        if invoice.memo:
            pdf.ln(4)
            pdf.set_font("Helvetica", "I", 9)
            pdf.multi_cell(0, 5, _safe_text(invoice.memo))
