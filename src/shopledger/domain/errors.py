"""Shared domain error messages and error types."""

from typing import Optional, Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input, rejected before anything was written."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class PartialWriteError(DomainError):
    """A multi-step workflow failed after some of its writes were committed.

    The ledger is left in a partial state that needs manual reconciliation.
    The journal entry identified by ``journal_id`` records which steps
    completed.
    """

    def __init__(
        self,
        operation: str,
        journal_id: Optional[int],
        completed_steps: Sequence[str],
        failed_step: str,
        entity_id: Optional[int] = None,
    ):
        self.operation = operation
        self.journal_id = journal_id
        self.completed_steps = tuple(completed_steps)
        self.failed_step = failed_step
        self.entity_id = entity_id
        super().__init__(
            partial_write(operation, journal_id, self.completed_steps, failed_step)
        )


class DegradedConsistencyWarning(UserWarning):
    """A counter was adjusted with a non-atomic read-modify-write.

    Concurrent writers touching the same row during that window can lose
    updates.
    """


def customer_not_found(customer_id: int) -> str:
    """Return message for missing customer."""
    return f"Customer {customer_id} not found"


def product_not_found(product_id: int) -> str:
    """Return message for missing product."""
    return f"Product {product_id} not found"


def order_not_found(order_id: int) -> str:
    """Return message for missing order."""
    return f"Order {order_id} not found"


def purchase_not_found(purchase_id: int) -> str:
    """Return message for missing purchase."""
    return f"Purchase {purchase_id} not found"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def journal_entry_not_found(journal_id: int) -> str:
    """Return message for missing workflow journal entry."""
    return f"Workflow journal entry {journal_id} not found"


def duplicate_sku(sku: str) -> str:
    """Return message for duplicate product SKU."""
    return f"Product with SKU '{sku}' already exists"


def customer_delete_blocked(customer_id: int, order_count: int) -> str:
    """Return message when a customer still has orders."""
    return (
        f"Cannot delete customer {customer_id}: it has "
        f"{order_count} order{'s' if order_count != 1 else ''}. "
        "Delete the orders first."
    )


def product_delete_blocked(product_id: int, line_count: int) -> str:
    """Return message when a product is referenced by order or purchase lines."""
    return (
        f"Cannot delete product {product_id}: it is referenced by "
        f"{line_count} order or purchase line{'s' if line_count != 1 else ''}."
    )


def partial_write(
    operation: str,
    journal_id: Optional[int],
    completed_steps: Sequence[str],
    failed_step: str,
) -> str:
    """Return message for a workflow that stopped after committing some writes."""
    done = ", ".join(completed_steps) if completed_steps else "none"
    return (
        f"{operation} failed at step '{failed_step}' after committing: {done}. "
        f"Manual reconciliation may be needed (journal entry {journal_id})."
    )
