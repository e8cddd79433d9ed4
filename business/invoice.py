import re
from dataclasses import dataclass
from typing import Iterable, Optional

from schemas.invoice import InvoiceItemCreate

INVOICE_NUMBER_PATTERN = re.compile(r"INV-(\d+)")


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    tax_rate: float
    tax_amount: float
    total: float


def compute_totals(items: Iterable[InvoiceItemCreate], tax_rate: Optional[float]) -> InvoiceTotals:
    """subtotal = sum of line amounts; tax is a percentage of the subtotal."""
    rate = tax_rate or 0.0
    subtotal = round(sum(item.amount for item in items), 2)
    tax_amount = round(subtotal * (rate / 100), 2)
    return InvoiceTotals(
        subtotal=subtotal,
        tax_rate=rate,
        tax_amount=tax_amount,
        total=round(subtotal + tax_amount, 2),
    )


def next_invoice_number(latest: Optional[str]) -> str:
    """INV-001 for the first invoice, otherwise one past the latest INV-<n>."""
    next_number = 1
    if latest:
        match = INVOICE_NUMBER_PATTERN.search(latest)
        if match:
            next_number = int(match.group(1)) + 1
    return f"INV-{next_number:03d}"
