"""Adjustment of shared numeric counters (customer balance, product stock).

Two implementations share one interface. ``AtomicCounterAdjuster`` uses the
store's single-statement increments. ``ReadModifyWriteAdjuster`` reads the
current value, adds the delta and writes it back; concurrent writers can
lose updates in between, so every use is logged and raised as a
``DegradedConsistencyWarning``.
"""

import logging
import warnings
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from shopledger.database.base import AtomicIncrementError, Database
from shopledger.domain.errors import (
    DegradedConsistencyWarning,
    NotFoundError,
    customer_not_found,
    product_not_found,
)

logger = logging.getLogger(__name__)


class CounterAdjuster(ABC):
    """Applies signed deltas to customer balances and product stock levels."""

    atomic: bool = False

    def __init__(self, db: Database):
        self.db = db

    @abstractmethod
    def adjust_customer_balance(self, customer_id: int, delta: Decimal) -> Decimal:
        """Add ``delta`` to a customer's balance. Returns the new balance."""

    @abstractmethod
    def adjust_product_stock(self, product_id: int, delta: int) -> int:
        """Add ``delta`` to a product's stock level. Returns the new level."""


def _warn_degraded(field: str, entity: str, entity_id: int, delta) -> None:
    message = (
        f"Non-atomic update of {entity} {entity_id} {field} by {delta}; "
        "concurrent writers may lose updates"
    )
    logger.warning(message)
    warnings.warn(message, DegradedConsistencyWarning, stacklevel=3)


class ReadModifyWriteAdjuster(CounterAdjuster):
    """Fallback adjuster: read, add, write back."""

    atomic = False

    def adjust_customer_balance(self, customer_id: int, delta: Decimal) -> Decimal:
        customer = self.db.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(customer_not_found(customer_id))

        _warn_degraded("balance", "customer", customer_id, delta)
        new_balance = customer.balance + delta
        self.db.set_customer_balance(customer_id, new_balance)
        return new_balance

    def adjust_product_stock(self, product_id: int, delta: int) -> int:
        product = self.db.get_product(product_id)
        if product is None:
            raise NotFoundError(product_not_found(product_id))

        _warn_degraded("stock_level", "product", product_id, delta)
        new_level = product.stock_level + delta
        self.db.set_product_stock(product_id, new_level)
        return new_level


class AtomicCounterAdjuster(CounterAdjuster):
    """Adjuster backed by the store's atomic increment statements.

    If an increment statement fails at runtime, that single adjustment is
    retried through the read-modify-write fallback.
    """

    atomic = True

    def __init__(self, db: Database, fallback: Optional[CounterAdjuster] = None):
        super().__init__(db)
        self.fallback = fallback or ReadModifyWriteAdjuster(db)

    def adjust_customer_balance(self, customer_id: int, delta: Decimal) -> Decimal:
        try:
            return self.db.increment_customer_balance(customer_id, delta)
        except AtomicIncrementError as exc:
            logger.warning(
                "Atomic balance increment failed for customer %s (%s); falling back",
                customer_id,
                exc,
            )
            return self.fallback.adjust_customer_balance(customer_id, delta)

    def adjust_product_stock(self, product_id: int, delta: int) -> int:
        try:
            return self.db.increment_product_stock(product_id, delta)
        except AtomicIncrementError as exc:
            logger.warning(
                "Atomic stock increment failed for product %s (%s); falling back",
                product_id,
                exc,
            )
            return self.fallback.adjust_product_stock(product_id, delta)


def select_counter_adjuster(db: Database) -> CounterAdjuster:
    """Pick the counter adjuster the store is capable of supporting."""
    if db.supports_atomic_increment():
        return AtomicCounterAdjuster(db)

    logger.warning(
        "Ledger store has no atomic increment support; "
        "balance and stock updates will use read-modify-write"
    )
    return ReadModifyWriteAdjuster(db)
