"""Customer domain service."""

from decimal import Decimal
from typing import Optional

from shopledger.database.base import Database
from shopledger.domain import validation
from shopledger.domain.entities import Customer as CustomerEntity
from shopledger.domain.errors import (
    DependencyError,
    NotFoundError,
    customer_delete_blocked,
    customer_not_found,
)


class CustomerService:
    """Service for managing customers.

    The balance is only set here once, as the opening balance. After that
    it moves exclusively through the order and payment workflows.
    """

    def __init__(self, db: Database):
        """Initialize customer service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_customer(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        status: str = "Active",
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new customer.

        Args:
            name: Display name
            email: Optional email
            phone: Optional phone number
            address: Optional address
            status: Customer status label
            opening_balance: Signed starting balance (negative means the
                customer already owes money)

        Returns:
            Customer ID

        Raises:
            ValidationError: If name is empty or balance is not a number
        """
        name = validation.required_text(name, "Customer name")
        balance = validation.to_money(opening_balance, "Opening balance")

        return self.db.create_customer(
            name=name,
            email=email,
            phone=phone,
            address=address,
            status=status,
            balance=balance,
        )

    def get_customer(self, customer_id: int) -> Optional[CustomerEntity]:
        """Get customer by ID.

        Returns:
            Customer entity or None if not found
        """
        return self.db.get_customer(customer_id)

    def require_customer(self, customer_id: int) -> CustomerEntity:
        """Get customer by ID or raise NotFoundError."""
        customer = self.db.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(customer_not_found(customer_id))
        return customer

    def list_customers(self, search: Optional[str] = None) -> list[CustomerEntity]:
        """List customers, newest first.

        Args:
            search: Optional case-insensitive name fragment
        """
        return self.db.list_customers(search=search)

    def update_customer(
        self,
        customer_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """Update customer contact fields.

        Raises:
            NotFoundError: If customer doesn't exist
            ValidationError: If name is given but blank
        """
        self.require_customer(customer_id)
        if name is not None:
            name = validation.required_text(name, "Customer name")

        self.db.update_customer(
            customer_id,
            name=name,
            email=email,
            phone=phone,
            address=address,
            status=status,
        )

    def delete_customer(self, customer_id: int) -> None:
        """Delete a customer that has no orders.

        Raises:
            NotFoundError: If customer doesn't exist
            DependencyError: If orders still reference the customer
        """
        self.require_customer(customer_id)

        order_count = self.db.get_customer_order_count(customer_id)
        if order_count > 0:
            raise DependencyError(customer_delete_blocked(customer_id, order_count))

        self.db.delete_customer(customer_id)
