"""Expense domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from shopledger.database.base import Database
from shopledger.domain import validation
from shopledger.domain.entities import Expense as ExpenseEntity
from shopledger.domain.errors import NotFoundError, expense_not_found


class ExpenseService:
    """Service for the expense log.

    Expenses are not linked to customers or products.
    """

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_expense(
        self,
        date: date,
        description: str,
        amount: Decimal,
        category: Optional[str] = None,
        payment_mode: Optional[str] = None,
    ) -> int:
        """Record an expense.

        Returns:
            Expense ID

        Raises:
            ValidationError: If description is empty, amount is not positive
                or payment mode is unknown
        """
        description = validation.required_text(description, "Description")
        amount = validation.positive_money(amount, "Amount")
        payment_mode = validation.payment_mode(payment_mode)

        return self.db.create_expense(
            date=date,
            description=description,
            amount=amount,
            category=category,
            payment_mode=payment_mode,
        )

    def get_expense(self, expense_id: int) -> Optional[ExpenseEntity]:
        """Get expense by ID."""
        return self.db.get_expense(expense_id)

    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ExpenseEntity]:
        """List expenses, newest first."""
        return self.db.list_expenses(start_date=start_date, end_date=end_date)

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense.

        Raises:
            NotFoundError: If expense doesn't exist
        """
        if self.db.get_expense(expense_id) is None:
            raise NotFoundError(expense_not_found(expense_id))
        self.db.delete_expense(expense_id)
