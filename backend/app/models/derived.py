"""Derived money fields owned by the total calculator.

Line amounts and document totals are stored, not computed on read. The columns
live behind underscore attributes and are exposed as read-only properties; the
only way to write them is ``apply_amount`` / ``apply_totals``, which accept
nothing but the calculator's result types.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import Column, Numeric

from backend.app.core.time import utc_now

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class LineAmount:
    value: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    tax_rate: Decimal


class DerivedAmountMixin:
    _amount = Column("amount", Numeric(10, 2), nullable=False, default=ZERO)

    @property
    def amount(self) -> Decimal:
        return self._amount if self._amount is not None else ZERO

    def apply_amount(self, amount: LineAmount) -> None:
        if not isinstance(amount, LineAmount):
            raise TypeError("amount can only be set from a computed LineAmount")
        self._amount = amount.value


class DerivedTotalsMixin:
    _subtotal = Column("subtotal", Numeric(10, 2), nullable=False, default=ZERO)
    _tax = Column("tax", Numeric(10, 2), nullable=False, default=ZERO)
    _total = Column("total", Numeric(10, 2), nullable=False, default=ZERO)
    _tax_rate = Column("tax_rate", Numeric(5, 2), nullable=True)

    @property
    def subtotal(self) -> Decimal:
        return self._subtotal if self._subtotal is not None else ZERO

    @property
    def tax(self) -> Decimal:
        return self._tax if self._tax is not None else ZERO

    @property
    def total(self) -> Decimal:
        return self._total if self._total is not None else ZERO

    @property
    def tax_rate(self) -> Decimal | None:
        return self._tax_rate

    def apply_totals(self, totals: DocumentTotals) -> None:
        if not isinstance(totals, DocumentTotals):
            raise TypeError("totals can only be set from computed DocumentTotals")
        self._subtotal = totals.subtotal
        self._tax = totals.tax
        self._total = totals.total
        self._tax_rate = totals.tax_rate
        self.updated_at = utc_now()
