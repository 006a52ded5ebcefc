"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from shopledger.domain.entities import (
    Customer,
    Product,
    Order,
    OrderLineDraft,
    Purchase,
    PurchaseLineDraft,
    Expense,
    WorkflowEntry,
    WorkflowStatus,
)


class AtomicIncrementError(RuntimeError):
    """The store could not run an atomic increment statement."""


class Database(ABC):
    """Abstract ledger store for shopledger.

    Every write method commits on its own. Multi-step workflows are
    sequences of these writes and are not atomic as a whole.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def supports_atomic_increment(self) -> bool:
        """Whether the increment_* methods are single atomic statements."""
        pass

    # Customer operations
    @abstractmethod
    def create_customer(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        status: str = "Active",
        balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a customer. Returns customer ID."""
        pass

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def list_customers(self, search: Optional[str] = None) -> list[Customer]:
        """List customers, newest first, optionally filtered by name."""
        pass

    @abstractmethod
    def update_customer(
        self,
        customer_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """Update customer contact fields. ``None`` leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_customer(self, customer_id: int) -> None:
        """Delete a customer."""
        pass

    @abstractmethod
    def get_customer_order_count(self, customer_id: int) -> int:
        """Get count of orders referencing a customer."""
        pass

    @abstractmethod
    def increment_customer_balance(self, customer_id: int, delta: Decimal) -> Decimal:
        """Atomically add ``delta`` to a customer's balance. Returns the new balance."""
        pass

    @abstractmethod
    def set_customer_balance(self, customer_id: int, balance: Decimal) -> None:
        """Overwrite a customer's balance (non-atomic fallback path)."""
        pass

    # Product operations
    @abstractmethod
    def create_product(
        self,
        sku: str,
        name: str,
        description: Optional[str] = None,
        unit_price: Decimal = Decimal("0"),
        price: Decimal = Decimal("0"),
        stock_level: int = 0,
        reorder_level: int = 10,
    ) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        pass

    @abstractmethod
    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        """Get product by SKU."""
        pass

    @abstractmethod
    def list_products(self) -> list[Product]:
        """List all products ordered by name."""
        pass

    @abstractmethod
    def update_product(
        self,
        product_id: int,
        sku: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        unit_price: Optional[Decimal] = None,
        price: Optional[Decimal] = None,
        reorder_level: Optional[int] = None,
    ) -> None:
        """Update product fields. ``None`` leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_product(self, product_id: int) -> None:
        """Delete a product."""
        pass

    @abstractmethod
    def get_product_line_count(self, product_id: int) -> int:
        """Get count of order and purchase lines referencing a product."""
        pass

    @abstractmethod
    def increment_product_stock(self, product_id: int, delta: int) -> int:
        """Atomically add ``delta`` to a product's stock level. Returns the new level."""
        pass

    @abstractmethod
    def set_product_stock(self, product_id: int, stock_level: int) -> None:
        """Overwrite a product's stock level (non-atomic fallback path)."""
        pass

    # Order operations
    @abstractmethod
    def create_order(
        self,
        customer_id: int,
        customer_name: str,
        total: Decimal,
        amount_paid: Decimal,
        payment_status: str,
        status: str,
        customer_address: Optional[str] = None,
        salesman_id: Optional[str] = None,
        discount: Decimal = Decimal("0"),
        payment_mode: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Insert an order header. Returns order ID."""
        pass

    @abstractmethod
    def add_order_lines(self, order_id: int, lines: Sequence[OrderLineDraft]) -> None:
        """Insert the lines of an order."""
        pass

    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Order]:
        """Get order by ID, lines included."""
        pass

    @abstractmethod
    def list_orders(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        customer_id: Optional[int] = None,
    ) -> list[Order]:
        """List orders, newest first, with optional filters."""
        pass

    @abstractmethod
    def list_outstanding_orders(self, customer_id: int) -> list[Order]:
        """List a customer's orders that are not Paid, oldest first."""
        pass

    @abstractmethod
    def update_order(
        self,
        order_id: int,
        total: Optional[Decimal] = None,
        status: Optional[str] = None,
        amount_paid: Optional[Decimal] = None,
        payment_status: Optional[str] = None,
        payment_mode: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_address: Optional[str] = None,
    ) -> None:
        """Update order header fields. ``None`` leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_order(self, order_id: int) -> None:
        """Delete an order and its lines."""
        pass

    # Purchase operations
    @abstractmethod
    def create_purchase(
        self,
        supplier_name: str,
        total: Decimal,
        status: str,
        payment_status: str,
        company_name: Optional[str] = None,
        payment_mode: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Insert a purchase header. Returns purchase ID."""
        pass

    @abstractmethod
    def add_purchase_lines(self, purchase_id: int, lines: Sequence[PurchaseLineDraft]) -> None:
        """Insert the lines of a purchase."""
        pass

    @abstractmethod
    def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        """Get purchase by ID, lines included."""
        pass

    @abstractmethod
    def list_purchases(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Purchase]:
        """List purchases, newest first."""
        pass

    @abstractmethod
    def update_purchase(
        self,
        purchase_id: int,
        supplier_name: Optional[str] = None,
        company_name: Optional[str] = None,
        total: Optional[Decimal] = None,
        status: Optional[str] = None,
        payment_mode: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        """Update purchase header fields. ``None`` leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_purchase(self, purchase_id: int) -> None:
        """Delete a purchase and its lines."""
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        date: date,
        description: str,
        amount: Decimal,
        category: Optional[str] = None,
        payment_mode: Optional[str] = None,
    ) -> int:
        """Create an expense entry. Returns expense ID."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Expense]:
        """List expenses, newest first."""
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense entry."""
        pass

    # Workflow journal operations
    @abstractmethod
    def create_journal_entry(self, operation: str, payload: dict[str, Any]) -> int:
        """Record the intent to run a workflow. Returns journal ID."""
        pass

    @abstractmethod
    def record_journal_step(
        self, journal_id: int, step: str, entity_id: Optional[int] = None
    ) -> None:
        """Append a completed step, optionally recording the entity it created."""
        pass

    @abstractmethod
    def finish_journal_entry(
        self, journal_id: int, status: WorkflowStatus, error: Optional[str] = None
    ) -> None:
        """Mark a journal entry completed or failed."""
        pass

    @abstractmethod
    def get_journal_entry(self, journal_id: int) -> Optional[WorkflowEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self, statuses: Optional[Sequence[WorkflowStatus]] = None
    ) -> list[WorkflowEntry]:
        """List journal entries, newest first, optionally filtered by status."""
        pass
