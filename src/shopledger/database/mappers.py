"""Mapper functions to convert SQLAlchemy models into domain entities.

This is the only place where rows are decoded. Every workflow reads
entities through these functions, so the defaults applied to missing
columns (zero amounts, zero free quantity, Unpaid status) are defined once.
"""

from decimal import Decimal
from typing import Any, Optional

from shopledger.domain import entities as domain
from shopledger.database.models import (
    Customer as ORMCustomer,
    Product as ORMProduct,
    Order as ORMOrder,
    OrderLine as ORMOrderLine,
    Purchase as ORMPurchase,
    PurchaseLine as ORMPurchaseLine,
    ExpenseTransaction as ORMExpense,
    WorkflowJournal as ORMWorkflowJournal,
)


def _money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _units(value: Optional[int]) -> int:
    return int(value) if value is not None else 0


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    """Convert SQLAlchemy Customer model to domain Customer entity."""
    return domain.Customer(
        id=orm_customer.id,
        name=orm_customer.name,
        email=orm_customer.email,
        phone=orm_customer.phone,
        address=orm_customer.address,
        status=orm_customer.status or "Active",
        balance=_money(orm_customer.balance),
        created_at=orm_customer.created_at,
    )


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    return domain.Product(
        id=orm_product.id,
        sku=orm_product.sku,
        name=orm_product.name,
        description=orm_product.description,
        unit_price=_money(orm_product.unit_price),
        price=_money(orm_product.price),
        stock_level=_units(orm_product.stock_level),
        reorder_level=_units(orm_product.reorder_level),
        created_at=orm_product.created_at,
    )


def order_line_to_domain(orm_line: ORMOrderLine) -> domain.OrderLine:
    """Convert SQLAlchemy OrderLine model to domain OrderLine entity."""
    return domain.OrderLine(
        id=orm_line.id,
        order_id=orm_line.order_id,
        product_id=orm_line.product_id,
        quantity=_units(orm_line.quantity),
        free_quantity=_units(orm_line.free_qty),
        unit_price=_money(orm_line.unit_price),
        selling_price=_money(
            orm_line.selling_price
            if orm_line.selling_price is not None
            else orm_line.unit_price
        ),
        description=orm_line.description,
    )


def order_to_domain(orm_order: ORMOrder, include_lines: bool = True) -> domain.Order:
    """Convert SQLAlchemy Order model to domain Order entity."""
    lines: tuple[domain.OrderLine, ...] = ()
    if include_lines:
        lines = tuple(order_line_to_domain(line) for line in orm_order.lines)

    return domain.Order(
        id=orm_order.id,
        customer_id=orm_order.customer_id,
        customer_name=orm_order.customer_name or "Unknown",
        customer_address=orm_order.customer_address,
        salesman_id=orm_order.salesman_id,
        discount=_money(orm_order.discount),
        total=_money(orm_order.total_amount),
        amount_paid=_money(orm_order.amount_paid),
        payment_status=domain.PaymentStatus(
            orm_order.payment_status or domain.PaymentStatus.UNPAID.value
        ),
        payment_mode=orm_order.payment_mode,
        status=orm_order.status or domain.OrderStatus.PENDING.value,
        created_at=orm_order.created_at,
        lines=lines,
    )


def purchase_line_to_domain(orm_line: ORMPurchaseLine) -> domain.PurchaseLine:
    """Convert SQLAlchemy PurchaseLine model to domain PurchaseLine entity."""
    return domain.PurchaseLine(
        id=orm_line.id,
        purchase_id=orm_line.purchase_id,
        product_id=orm_line.product_id,
        quantity=_units(orm_line.quantity),
        unit_cost=_money(orm_line.unit_price),
        description=orm_line.description,
    )


def purchase_to_domain(orm_purchase: ORMPurchase) -> domain.Purchase:
    """Convert SQLAlchemy Purchase model to domain Purchase entity."""
    return domain.Purchase(
        id=orm_purchase.id,
        supplier_name=orm_purchase.supplier_name,
        company_name=orm_purchase.company_name,
        total=_money(orm_purchase.total_amount),
        status=orm_purchase.status or domain.PurchaseStatus.RECEIVED.value,
        payment_status=domain.PaymentStatus(
            orm_purchase.payment_status or domain.PaymentStatus.PAID.value
        ),
        payment_mode=orm_purchase.payment_mode,
        created_at=orm_purchase.created_at,
        lines=tuple(purchase_line_to_domain(line) for line in orm_purchase.lines),
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy ExpenseTransaction model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        date=orm_expense.date,
        description=orm_expense.description,
        amount=_money(orm_expense.amount),
        category=orm_expense.category,
        payment_mode=orm_expense.payment_mode,
        created_at=orm_expense.created_at,
    )


def workflow_entry_to_domain(orm_entry: ORMWorkflowJournal) -> domain.WorkflowEntry:
    """Convert SQLAlchemy WorkflowJournal model to domain WorkflowEntry entity."""
    return domain.WorkflowEntry(
        id=orm_entry.id,
        operation=orm_entry.operation,
        status=domain.WorkflowStatus(orm_entry.status),
        payload=dict(orm_entry.payload or {}),
        completed_steps=tuple(orm_entry.completed_steps or ()),
        entity_id=orm_entry.entity_id,
        error=orm_entry.error,
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
    )
