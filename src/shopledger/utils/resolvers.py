"""Utilities for resolving user-supplied names to IDs."""

from shopledger.domain.customer import CustomerService
from shopledger.domain.product import ProductService


def resolve_customer(customer_service: CustomerService, customer: str | int) -> int:
    """Resolve customer name or ID to customer ID.

    Args:
        customer_service: CustomerService instance
        customer: Customer ID or exact customer name

    Returns:
        Customer ID

    Raises:
        ValueError: If the customer is not found or the name is ambiguous
    """
    try:
        customer_id = int(customer)
    except (ValueError, TypeError):
        customer_id = None

    if customer_id is not None:
        if customer_service.get_customer(customer_id) is None:
            raise ValueError(f"Customer ID {customer_id} not found")
        return customer_id

    matches = [c for c in customer_service.list_customers(search=customer) if c.name == customer]
    if not matches:
        raise ValueError(f"Customer '{customer}' not found")
    if len(matches) > 1:
        raise ValueError(f"Customer name '{customer}' is ambiguous; use the customer ID")
    return matches[0].id


def resolve_product(product_service: ProductService, product: str | int) -> int:
    """Resolve product SKU or ID to product ID.

    A SKU match wins over an ID, since SKUs may be numeric.

    Raises:
        ValueError: If the product is not found
    """
    by_sku = product_service.get_product_by_sku(str(product))
    if by_sku is not None:
        return by_sku.id

    try:
        product_id = int(product)
    except (ValueError, TypeError):
        raise ValueError(f"Product '{product}' not found")

    if product_service.get_product(product_id) is None:
        raise ValueError(f"Product ID {product_id} not found")
    return product_id
