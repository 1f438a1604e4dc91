"""
Domain package - document model and totals, with no external dependencies
beyond email validation.

This package contains the parametrized entities (parties, addresses, items,
taxes, discounts, relations), the document types built from them, and the
arithmetic that derives subtotals, taxes and totals.
"""

from .bag import Bag
from .documents import AbstractDocument, CreditNote, Invoice, Ticket
from .models import Address, Discount, Item, Person, Relation, Tax
from .money import Currency, round_money, to_decimal
from .parameters import ParameterContainer
from .totals import DocumentTotals, TaxSummary

__all__ = [
    "AbstractDocument",
    "Address",
    "Bag",
    "CreditNote",
    "Currency",
    "Discount",
    "DocumentTotals",
    "Invoice",
    "Item",
    "ParameterContainer",
    "Person",
    "Relation",
    "Tax",
    "TaxSummary",
    "Ticket",
    "round_money",
    "to_decimal",
]
