"""Tests for the Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from shopledger.database.factories import create_database, create_sqlite_database
from shopledger.domain import entities
from shopledger.domain.errors import NotFoundError


class TestDatabaseInterface:
    """Tests to verify the ledger store returns domain models."""

    def test_get_customer_returns_domain_model(self, temp_db):
        """Test that get_customer returns a domain Customer entity."""
        customer_id = temp_db.create_customer(name="Asha Traders", balance=Decimal("10"))

        customer = temp_db.get_customer(customer_id)

        assert isinstance(customer, entities.Customer)
        assert customer.balance == Decimal("10")
        assert isinstance(customer.created_at, datetime)

    def test_get_missing_returns_none(self, temp_db):
        """Test lookups of missing rows return None."""
        assert temp_db.get_customer(1) is None
        assert temp_db.get_product(1) is None
        assert temp_db.get_order(1) is None
        assert temp_db.get_purchase(1) is None
        assert temp_db.get_journal_entry(1) is None

    def test_order_round_trip(self, temp_db):
        """Test an order header and its lines are read back as entities."""
        customer_id = temp_db.create_customer(name="Asha Traders")
        product_id = temp_db.create_product(sku="RICE-5", name="Rice", price=Decimal("450"))
        order_id = temp_db.create_order(
            customer_id=customer_id,
            customer_name="Asha Traders",
            total=Decimal("900"),
            amount_paid=Decimal("0"),
            payment_status="Unpaid",
            status="Pending",
        )
        temp_db.add_order_lines(
            order_id,
            [
                entities.OrderLineDraft(
                    product_id=product_id, quantity=2, unit_price=Decimal("450"), free_quantity=1
                )
            ],
        )

        order = temp_db.get_order(order_id)

        assert isinstance(order, entities.Order)
        assert order.lines[0].free_quantity == 1
        assert order.lines[0].selling_price == Decimal("450")
        assert temp_db.get_product_line_count(product_id) == 1
        assert temp_db.get_customer_order_count(customer_id) == 1

    def test_delete_order_removes_lines(self, temp_db):
        """Test deleting an order deletes its lines."""
        customer_id = temp_db.create_customer(name="Asha Traders")
        product_id = temp_db.create_product(sku="RICE-5", name="Rice")
        order_id = temp_db.create_order(
            customer_id=customer_id,
            customer_name="Asha Traders",
            total=Decimal("1"),
            amount_paid=Decimal("0"),
            payment_status="Unpaid",
            status="Pending",
        )
        temp_db.add_order_lines(
            order_id, [entities.OrderLineDraft(product_id=product_id, quantity=1, unit_price=Decimal("1"))]
        )

        temp_db.delete_order(order_id)

        assert temp_db.get_order(order_id) is None
        assert temp_db.get_product_line_count(product_id) == 0

    def test_increment_returns_new_values(self, temp_db):
        """Test atomic increments return the value after the change."""
        customer_id = temp_db.create_customer(name="Asha Traders")
        product_id = temp_db.create_product(sku="RICE-5", name="Rice", stock_level=4)

        assert temp_db.increment_customer_balance(customer_id, Decimal("-12.25")) == Decimal("-12.25")
        assert temp_db.increment_product_stock(product_id, -6) == -2
        assert temp_db.get_product(product_id).stock_level == -2

    def test_increment_missing_row(self, temp_db):
        """Test incrementing a missing row raises NotFoundError."""
        with pytest.raises(NotFoundError):
            temp_db.increment_product_stock(999, 1)

    def test_journal_steps_append(self, temp_db):
        """Test journal steps accumulate in order."""
        journal_id = temp_db.create_journal_entry("create_order", {"total": "1"})
        temp_db.record_journal_step(journal_id, "insert_order", entity_id=7)
        temp_db.record_journal_step(journal_id, "insert_lines")
        temp_db.finish_journal_entry(journal_id, entities.WorkflowStatus.COMPLETED)

        entry = temp_db.get_journal_entry(journal_id)
        assert entry.completed_steps == ("insert_order", "insert_lines")
        assert entry.entity_id == 7
        assert entry.status == entities.WorkflowStatus.COMPLETED


class TestFactories:
    """Tests for database factory configuration."""

    def test_sqlite_path_from_environment(self, tmp_path, monkeypatch):
        """Test SHOPLEDGER_DB_PATH selects the database file."""
        db_path = tmp_path / "env.db"
        monkeypatch.setenv("SHOPLEDGER_DB_PATH", str(db_path))

        db = create_sqlite_database()
        try:
            db.create_customer(name="Asha Traders")
        finally:
            db.disconnect()

        assert db.database_url == f"sqlite:///{db_path}"
        assert db_path.exists()

    def test_atomic_increments_from_environment(self, tmp_path, monkeypatch):
        """Test SHOPLEDGER_ATOMIC_INCREMENTS can switch atomic increments off."""
        monkeypatch.setenv("SHOPLEDGER_ATOMIC_INCREMENTS", "false")

        db = create_database(f"sqlite:///{tmp_path / 'flag.db'}")
        try:
            assert db.atomic_increments is False
            assert not db.supports_atomic_increment()
        finally:
            db.disconnect()

    def test_explicit_argument_beats_environment(self, tmp_path, monkeypatch):
        """Test an explicit atomic_increments argument wins over the environment."""
        monkeypatch.setenv("SHOPLEDGER_ATOMIC_INCREMENTS", "0")

        db = create_database(f"sqlite:///{tmp_path / 'flag.db'}", atomic_increments=True)
        try:
            assert db.atomic_increments is True
        finally:
            db.disconnect()
