"""Purchase domain service."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from shopledger.database.base import Database
from shopledger.domain import validation
from shopledger.domain.counters import CounterAdjuster, select_counter_adjuster
from shopledger.domain.entities import (
    PaymentStatus,
    Purchase as PurchaseEntity,
    PurchaseDraft,
    PurchaseStatus,
)
from shopledger.domain.errors import (
    NotFoundError,
    ValidationError,
    product_not_found,
    purchase_not_found,
)
from shopledger.domain.journal import WorkflowJournal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PurchaseService:
    """Service for recording stock purchases from suppliers.

    Recording a purchase adds stock and sets each product's cost to the
    latest purchase price. Editing, cancelling or deleting a purchase does
    not touch stock; the operator adjusts it by hand.
    """

    def __init__(self, db: Database, counters: Optional[CounterAdjuster] = None):
        """Initialize purchase service.

        Args:
            db: Database instance
            counters: Counter adjuster; picked by capability detection if omitted
        """
        self.db = db
        self.counters = counters or select_counter_adjuster(db)

    def record_purchase(self, draft: PurchaseDraft) -> PurchaseEntity:
        """Record a received, paid purchase and restock its products.

        Each line adds its quantity to the product's stock level and
        overwrites the product's unit price with the line's unit cost. Lines
        are applied in order, so with two lines for one product the later
        cost wins and both quantities are added.

        Args:
            draft: Purchase input

        Returns:
            The persisted purchase

        Raises:
            ValidationError: If supplier or lines are missing or out of range
            NotFoundError: If a product doesn't exist
            PartialWriteError: If a step after the header insert failed
        """
        supplier_name = validation.required_text(draft.supplier_name, "Supplier name")
        payment_mode = validation.payment_mode(draft.payment_mode)
        lines = list(draft.lines)
        if not lines:
            raise ValidationError("A purchase needs at least one line item")

        for index, line in enumerate(lines, start=1):
            if line.product_id is None:
                raise ValidationError(f"Line {index}: product is required")
            validation.positive_quantity(line.quantity, f"Line {index} quantity")
            validation.non_negative_money(line.unit_cost, f"Line {index} unit cost")

        for product_id in {line.product_id for line in lines}:
            if self.db.get_product(product_id) is None:
                raise NotFoundError(product_not_found(product_id))

        total = sum((line.quantity * line.unit_cost for line in lines), ZERO)

        journal = WorkflowJournal.begin(
            self.db,
            "record_purchase",
            {
                "supplier_name": supplier_name,
                "total": total,
                "lines": [
                    {
                        "product_id": line.product_id,
                        "quantity": line.quantity,
                        "unit_cost": line.unit_cost,
                    }
                    for line in lines
                ],
            },
        )

        with journal.step("insert_purchase") as step:
            purchase_id = self.db.create_purchase(
                supplier_name=supplier_name,
                company_name=draft.company_name,
                total=total,
                status=PurchaseStatus.RECEIVED.value,
                payment_status=PaymentStatus.PAID.value,
                payment_mode=payment_mode,
                created_at=draft.purchase_date,
            )
            step.entity_id = purchase_id

        with journal.step("insert_lines"):
            self.db.add_purchase_lines(purchase_id, lines)

        for index, line in enumerate(lines, start=1):
            with journal.step(f"add_stock:{index}"):
                self.counters.adjust_product_stock(line.product_id, line.quantity)
            with journal.step(f"set_unit_price:{index}"):
                self.db.update_product(line.product_id, unit_price=line.unit_cost)

        journal.complete()
        logger.info(
            "Recorded purchase %s from %s (%d lines, total %s)",
            purchase_id,
            supplier_name,
            len(lines),
            total,
        )
        return self.require_purchase(purchase_id)

    def get_purchase(self, purchase_id: int) -> Optional[PurchaseEntity]:
        """Get purchase by ID, lines included."""
        return self.db.get_purchase(purchase_id)

    def require_purchase(self, purchase_id: int) -> PurchaseEntity:
        """Get purchase by ID or raise NotFoundError."""
        purchase = self.db.get_purchase(purchase_id)
        if purchase is None:
            raise NotFoundError(purchase_not_found(purchase_id))
        return purchase

    def list_purchases(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[PurchaseEntity]:
        """List purchases, newest first."""
        return self.db.list_purchases(start_date=start_date, end_date=end_date)

    def update_purchase(
        self,
        purchase_id: int,
        supplier_name: Optional[str] = None,
        company_name: Optional[str] = None,
        total: Optional[Decimal] = None,
        payment_mode: Optional[str] = None,
        purchase_date: Optional[datetime] = None,
    ) -> None:
        """Edit purchase header fields. Stock levels are left as they are.

        Raises:
            NotFoundError: If purchase doesn't exist
            ValidationError: If a value is out of range
        """
        self.require_purchase(purchase_id)

        if supplier_name is not None:
            supplier_name = validation.required_text(supplier_name, "Supplier name")
        if total is not None:
            total = validation.non_negative_money(total, "Total")
        payment_mode = validation.payment_mode(payment_mode)

        self.db.update_purchase(
            purchase_id,
            supplier_name=supplier_name,
            company_name=company_name,
            total=total,
            payment_mode=payment_mode,
            created_at=purchase_date,
        )

    def set_status(self, purchase_id: int, status: str) -> None:
        """Move a purchase to a new status.

        Cancelled is final. Stock is not changed by any transition.

        Raises:
            NotFoundError: If purchase doesn't exist
            ValidationError: If the status is unknown or the purchase is cancelled
        """
        status = validation.purchase_status(status)
        purchase = self.require_purchase(purchase_id)

        if purchase.status == status:
            return
        if purchase.status == PurchaseStatus.CANCELLED.value:
            raise ValidationError(f"Purchase {purchase_id} is cancelled")

        self.db.update_purchase(purchase_id, status=status)
        if status == PurchaseStatus.CANCELLED.value:
            logger.warning(
                "Purchase %s cancelled; stock added when it was recorded was not reversed",
                purchase_id,
            )

    def mark_received(self, purchase_id: int) -> None:
        """Mark a purchase as received."""
        self.set_status(purchase_id, PurchaseStatus.RECEIVED.value)

    def cancel_purchase(self, purchase_id: int) -> None:
        """Cancel a purchase without reversing stock."""
        self.set_status(purchase_id, PurchaseStatus.CANCELLED.value)

    def delete_purchase(self, purchase_id: int) -> None:
        """Delete a purchase. Stock is not reversed.

        Raises:
            NotFoundError: If purchase doesn't exist
        """
        purchase = self.require_purchase(purchase_id)
        self.db.delete_purchase(purchase_id)
        logger.warning(
            "Deleted purchase %s; stock for its %d lines must be adjusted manually",
            purchase_id,
            len(purchase.lines),
        )
