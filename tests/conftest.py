"""Shared pytest fixtures for shopledger tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from shopledger.database.factories import create_sqlite_database
from shopledger.domain.customer import CustomerService
from shopledger.domain.expense import ExpenseService
from shopledger.domain.journal import JournalService
from shopledger.domain.order import OrderService
from shopledger.domain.product import ProductService
from shopledger.domain.purchase import PurchaseService


def _make_db(atomic_increments: bool):
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(
        database_path=db_path, atomic_increments=atomic_increments
    )
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()
    return db


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    db = _make_db(atomic_increments=True)

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db.database_path):
        os.unlink(db.database_path)


@pytest.fixture
def rmw_db():
    """Create a temporary database that reports no atomic increment support."""
    db = _make_db(atomic_increments=False)

    yield db

    db.disconnect()
    if os.path.exists(db.database_path):
        os.unlink(db.database_path)


@pytest.fixture
def customer_service(temp_db):
    """Create a CustomerService with a temporary database."""
    return CustomerService(temp_db)


@pytest.fixture
def product_service(temp_db):
    """Create a ProductService with a temporary database."""
    return ProductService(temp_db)


@pytest.fixture
def order_service(temp_db):
    """Create an OrderService with a temporary database."""
    return OrderService(temp_db)


@pytest.fixture
def purchase_service(temp_db):
    """Create a PurchaseService with a temporary database."""
    return PurchaseService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def sample_customer(customer_service):
    """Create a sample customer with a zero balance."""
    customer_id = customer_service.create_customer(
        name="Asha Traders", phone="9800000000", address="12 Market Road"
    )
    return customer_service.get_customer(customer_id)


@pytest.fixture
def sample_products(product_service):
    """Create two products and return them keyed by SKU."""
    rice_id = product_service.create_product(
        sku="RICE-5",
        name="Basmati Rice 5kg",
        unit_price=Decimal("380.00"),
        price=Decimal("450.00"),
        stock_level=20,
        reorder_level=5,
    )
    oil_id = product_service.create_product(
        sku="OIL-1",
        name="Sunflower Oil 1L",
        unit_price=Decimal("110.00"),
        price=Decimal("140.00"),
        stock_level=50,
        reorder_level=10,
    )
    return {
        "RICE-5": product_service.get_product(rice_id),
        "OIL-1": product_service.get_product(oil_id),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
