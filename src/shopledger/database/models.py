"""SQLAlchemy models for the shopledger database."""

from datetime import datetime, UTC
from typing import Optional
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Customer(Base):
    """Customer model."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    status = Column(String, default="Active", nullable=False)
    balance = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="customer")


class Product(Base):
    """Product (inventory item) model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    sku = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    unit_price = Column(Numeric(12, 2), default=0, nullable=False)
    price = Column(Numeric(12, 2), default=0, nullable=False)
    stock_level = Column(Integer, default=0, nullable=False)
    reorder_level = Column(Integer, default=10, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Order(Base):
    """Sales order header model."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    customer_name = Column(String, nullable=False)
    customer_address = Column(String, nullable=True)
    salesman_id = Column(String, nullable=True)
    discount = Column(Numeric(12, 2), default=0, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    amount_paid = Column(Numeric(12, 2), default=0, nullable=False)
    payment_status = Column(String, default="Unpaid", nullable=False)
    payment_mode = Column(String, nullable=True)
    status = Column(String, default="Pending", nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.id",
    )


class OrderLine(Base):
    """Order line model."""

    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    free_qty = Column(Integer, default=0, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    selling_price = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=True)

    # Relationships
    order = relationship("Order", back_populates="lines")


class Purchase(Base):
    """Purchase header model."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True)
    supplier_name = Column(String, nullable=False)
    company_name = Column(String, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, default="Received", nullable=False)
    payment_status = Column(String, default="Paid", nullable=False)
    payment_mode = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    lines = relationship(
        "PurchaseLine",
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseLine.id",
    )


class PurchaseLine(Base):
    """Purchase line model."""

    __tablename__ = "purchase_lines"

    id = Column(Integer, primary_key=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=True)

    # Relationships
    purchase = relationship("Purchase", back_populates="lines")


class ExpenseTransaction(Base):
    """Expense log model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String, nullable=True)
    payment_mode = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class WorkflowJournal(Base):
    """Intent record for one multi-step workflow."""

    __tablename__ = "workflow_journal"

    id = Column(Integer, primary_key=True)
    operation = Column(String, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    status = Column(String, default="pending", nullable=False)
    completed_steps = Column(JSON, nullable=False, default=list)
    entity_id = Column(Integer, nullable=True)
    error = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


def create_session_factory(
    database_url: str, timeout: Optional[float] = None
) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Args:
        database_url: SQLAlchemy database URL
        timeout: Seconds a SQLite connection waits on a locked database
    """
    connect_args = {}
    if timeout is not None and database_url.startswith("sqlite"):
        connect_args["timeout"] = timeout
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
