"""Human-readable document codes (Q-00001, J-00001, INV-00001)."""

from enum import Enum


class CodeKind(str, Enum):
    """Document families with their own counter."""

    QUOTE = "quote"
    JOB = "job"
    INVOICE = "invoice"


DEFAULT_PREFIXES: dict[CodeKind, str] = {
    CodeKind.QUOTE: "Q-",
    CodeKind.JOB: "J-",
    CodeKind.INVOICE: "INV-",
}


def default_prefix(kind: CodeKind | str) -> str:
    return DEFAULT_PREFIXES[CodeKind(kind)]


def format_code(prefix: str | None, counter: int, width: int = 5) -> str:
    """Zero-pad ``counter`` to ``width`` digits behind ``prefix``."""
    return f"{prefix or ''}{max(int(counter), 0):0{width}d}"
