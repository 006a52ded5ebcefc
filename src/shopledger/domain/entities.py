"""Domain model entities for shopledger.

These are pure data classes representing business concepts, independent of
database schema. Rows read from the ledger store are decoded into these
types in exactly one place (``shopledger.database.mappers``), so every
workflow sees the same defaults for missing fields.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence


class PaymentStatus(str, Enum):
    """How much of an order's total has been paid."""

    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"


class OrderStatus(str, Enum):
    """Fulfillment state of an order."""

    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PurchaseStatus(str, Enum):
    """Receiving state of a purchase."""

    PENDING = "Pending"
    RECEIVED = "Received"
    CANCELLED = "Cancelled"


class PaymentMode(str, Enum):
    """Accepted payment modes."""

    CASH = "Cash"
    UPI = "UPI"
    CARD = "Card"
    NET_BANKING = "Net Banking"


class StockStatus(str, Enum):
    """Stock badge derived from stock level and reorder level."""

    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


class WorkflowStatus(str, Enum):
    """State of a workflow journal entry."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Customer:
    """Customer domain entity.

    ``balance`` is signed: workflows add what the customer pays and subtract
    what they are billed, so a negative balance is money owed to the
    business and a positive balance is credit.
    """

    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    status: str
    balance: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Product:
    """Inventory item domain entity."""

    id: int
    sku: str
    name: str
    description: Optional[str]
    unit_price: Decimal
    price: Decimal
    stock_level: int
    reorder_level: int
    created_at: datetime

    @property
    def stock_status(self) -> StockStatus:
        if self.stock_level <= 0:
            return StockStatus.OUT_OF_STOCK
        if self.stock_level <= self.reorder_level:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK


@dataclass(frozen=True)
class OrderLine:
    """Order line domain entity."""

    id: int
    order_id: int
    product_id: int
    quantity: int
    free_quantity: int
    unit_price: Decimal
    selling_price: Decimal
    description: Optional[str]

    @property
    def stock_quantity(self) -> int:
        """Units leaving stock for this line, free units included."""
        return self.quantity + self.free_quantity


@dataclass(frozen=True)
class Order:
    """Sales order domain entity."""

    id: int
    customer_id: int
    customer_name: str
    customer_address: Optional[str]
    salesman_id: Optional[str]
    discount: Decimal
    total: Decimal
    amount_paid: Decimal
    payment_status: PaymentStatus
    payment_mode: Optional[str]
    status: str
    created_at: datetime
    lines: tuple[OrderLine, ...] = ()

    @property
    def amount_owed(self) -> Decimal:
        return self.total - self.amount_paid


@dataclass(frozen=True)
class PurchaseLine:
    """Purchase line domain entity."""

    id: int
    purchase_id: int
    product_id: int
    quantity: int
    unit_cost: Decimal
    description: Optional[str]


@dataclass(frozen=True)
class Purchase:
    """Purchase domain entity."""

    id: int
    supplier_name: str
    company_name: Optional[str]
    total: Decimal
    status: str
    payment_status: PaymentStatus
    payment_mode: Optional[str]
    created_at: datetime
    lines: tuple[PurchaseLine, ...] = ()


@dataclass(frozen=True)
class Expense:
    """Expense log entry, independent of customers and products."""

    id: int
    date: date
    description: str
    amount: Decimal
    category: Optional[str]
    payment_mode: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class WorkflowEntry:
    """Journal entry tracking the steps of one multi-step workflow."""

    id: int
    operation: str
    status: WorkflowStatus
    payload: dict[str, Any]
    completed_steps: tuple[str, ...]
    entity_id: Optional[int]
    error: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class OrderLineDraft:
    """Line item as entered, before it is persisted."""

    product_id: int
    quantity: int
    unit_price: Decimal
    selling_price: Optional[Decimal] = None
    free_quantity: int = 0
    description: Optional[str] = None

    @property
    def effective_selling_price(self) -> Decimal:
        """Selling price, falling back to the unit price (MRP)."""
        if self.selling_price is None:
            return self.unit_price
        return self.selling_price


@dataclass(frozen=True)
class OrderDraft:
    """Input to the create-order workflow."""

    customer_id: Optional[int]
    lines: Sequence[OrderLineDraft]
    amount_paid: Decimal = Decimal("0")
    payment_mode: Optional[str] = None
    discount: Decimal = Decimal("0")
    salesman_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class OrderUpdate:
    """Sparse set of order fields to change. ``None`` means unchanged."""

    total: Optional[Decimal] = None
    status: Optional[str] = None
    amount_paid: Optional[Decimal] = None
    payment_status: Optional[PaymentStatus] = None
    payment_mode: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


@dataclass(frozen=True)
class PurchaseLineDraft:
    """Purchase line as entered."""

    product_id: int
    quantity: int
    unit_cost: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class PurchaseDraft:
    """Input to the record-purchase workflow."""

    supplier_name: str
    lines: Sequence[PurchaseLineDraft]
    company_name: Optional[str] = None
    payment_mode: Optional[str] = None
    purchase_date: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentApplication:
    """Slice of a lump payment applied to one order."""

    order_id: int
    applied: Decimal
    new_amount_paid: Decimal
    payment_status: PaymentStatus


@dataclass(frozen=True)
class PaymentAllocation:
    """Outcome of settling a lump payment against a customer's orders."""

    customer_id: int
    amount: Decimal
    applications: tuple[PaymentApplication, ...] = field(default_factory=tuple)
    credited: Decimal = Decimal("0")

    @property
    def total_applied(self) -> Decimal:
        return sum((app.applied for app in self.applications), Decimal("0"))
