"""
Document total computation.

Pure functions over items and discounts: no side effects, no validation.
They compute over whatever is present, so a half-built document still has
a subtotal.

The aggregation order is:
1. Subtotal          = sum(item.price * item.quantity)
2. Tax base per type = sum(item.amount - item.discount) over the items
                       carrying a tax of that type
3. Taxes amount      = sum(round(base * rate / 100)) once per type
4. Discounts amount  = sum of document discounts, or of item discounts when
                       the document has none
5. Total             = subtotal - discounts amount + taxes amount

Design Decisions:
- Bases accumulate unrounded; each tax type is rounded exactly once, so
  items sharing a type do not drift by a cent per line
- Item discounts are netted into the tax base
- The first tax seen for a type supplies its name, rate and fixed amount;
  later items of the same type only add base
- Document discounts and item discounts are mutually exclusive
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from .money import DEFAULT_DECIMAL_PLACES, ZERO
from .models import Discount, Item, Tax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxSummary:
    """One tax type aggregated over all items of a document."""
    type: str | None
    name: str | None
    rate: Decimal | None
    base_amount: Decimal
    amount: Decimal
    rate_type: str | None = None
    fixed_amount: Decimal | None = None
    decimal_places: int = DEFAULT_DECIMAL_PLACES

    def to_tax(self) -> Tax:
        """Materialize the summary as a Tax entity carrying the accumulated base."""
        parameters = {
            "type": self.type,
            "name": self.name,
            "rate": self.rate,
            "rate_type": self.rate_type,
            "fixed_amount": self.fixed_amount,
            "base_amount": self.base_amount,
        }
        return Tax(
            {key: value for key, value in parameters.items() if value is not None},
            decimal_places=self.decimal_places,
        )


@dataclass(frozen=True)
class DocumentTotals:
    """Snapshot of every derived amount of a document."""
    subtotal: Decimal
    discounts_amount: Decimal
    taxes_amount: Decimal
    total: Decimal
    taxes: tuple[TaxSummary, ...] = field(default_factory=tuple)

    def as_strings(self) -> dict[str, str]:
        """Amounts as plain decimal strings, for JSON payloads."""
        return {
            "subtotal": f"{self.subtotal:f}",
            "discounts_amount": f"{self.discounts_amount:f}",
            "taxes_amount": f"{self.taxes_amount:f}",
            "total": f"{self.total:f}",
        }


def _items_only(items: Iterable[object]) -> list[Item]:
    return [item for item in items if isinstance(item, Item)]


def compute_subtotal(items: Iterable[Item]) -> Decimal:
    """Sum of price * quantity over all items."""
    return sum((item.amount for item in _items_only(items)), ZERO)


def aggregate_taxes(
    items: Iterable[Item],
    decimal_places: int = DEFAULT_DECIMAL_PLACES,
) -> list[TaxSummary]:
    """
    Merge item taxes into one summary per tax type.

    Args:
        items: Document items; their ``taxes`` bags are read, not modified
        decimal_places: Precision for each per-type amount

    Returns:
        Summaries in the order each type first appears
    """
    first_seen: dict[str | None, Tax] = {}
    bases: dict[str | None, Decimal] = {}

    for item in _items_only(items):
        for tax in item.taxes:
            if not isinstance(tax, Tax):
                logger.debug(f"Skipping non-tax entry on item '{item.name}': {tax!r}")
                continue
            first_seen.setdefault(tax.type, tax)
            bases[tax.type] = bases.get(tax.type, ZERO) + item.base_amount_for_tax

    summaries = []
    for tax_type, tax in first_seen.items():
        base = bases[tax_type]
        summaries.append(
            TaxSummary(
                type=tax_type,
                name=tax.name,
                rate=tax.rate,
                base_amount=base,
                amount=tax.amount_for(base, decimal_places),
                rate_type=tax.rate_type,
                fixed_amount=tax.fixed_amount,
                decimal_places=decimal_places,
            )
        )

    logger.debug(f"Aggregated {len(summaries)} tax type(s) over items")
    return summaries


def compute_taxes_amount(summaries: Iterable[TaxSummary]) -> Decimal:
    return sum((summary.amount for summary in summaries), ZERO)


def compute_discounts_amount(discounts: Iterable[Discount], items: Iterable[Item]) -> Decimal:
    """
    Document discounts when there are any, otherwise item discounts.
    """
    document_discounts = [discount for discount in discounts if isinstance(discount, Discount)]
    if document_discounts:
        return sum((discount.amount or ZERO for discount in document_discounts), ZERO)
    return sum((item.discount for item in _items_only(items)), ZERO)


def compute_totals(
    items: Iterable[Item],
    discounts: Iterable[Discount] = (),
    decimal_places: int = DEFAULT_DECIMAL_PLACES,
) -> DocumentTotals:
    """Run the full aggregation and return an immutable snapshot."""
    items = list(items)
    subtotal = compute_subtotal(items)
    summaries = aggregate_taxes(items, decimal_places)
    taxes_amount = compute_taxes_amount(summaries)
    discounts_amount = compute_discounts_amount(discounts, items)

    return DocumentTotals(
        subtotal=subtotal,
        discounts_amount=discounts_amount,
        taxes_amount=taxes_amount,
        total=subtotal - discounts_amount + taxes_amount,
        taxes=tuple(summaries),
    )
