"""Input checks shared by the domain services.

All of these raise ValidationError before anything is written.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from shopledger.domain.entities import OrderStatus, PaymentMode, PurchaseStatus
from shopledger.domain.errors import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: Any, field_name: str) -> Decimal:
    """Coerce ``value`` to Decimal, rejecting non-finite values and fractions of a cent."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    try:
        cents = amount.quantize(CENT)
    except InvalidOperation:
        raise ValidationError(f"{field_name} is out of range")
    if amount != cents:
        raise ValidationError(f"{field_name} cannot have more than two decimal places")
    return amount


def non_negative_money(value: Any, field_name: str) -> Decimal:
    amount = to_money(value, field_name)
    if amount < ZERO:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def positive_money(value: Any, field_name: str) -> Decimal:
    amount = to_money(value, field_name)
    if amount <= ZERO:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def positive_quantity(value: Any, field_name: str = "Quantity") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive whole number")
    return value


def non_negative_quantity(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field_name} must be a whole number of zero or more")
    return value


def required_text(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def _choice(value: Optional[str], allowed: list[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    if value not in allowed:
        raise ValidationError(
            f"Invalid {field_name} '{value}'. Allowed: {', '.join(allowed)}"
        )
    return value


def payment_mode(value: Optional[str]) -> Optional[str]:
    return _choice(value, [m.value for m in PaymentMode], "payment mode")


def order_status(value: Optional[str]) -> Optional[str]:
    return _choice(value, [s.value for s in OrderStatus], "order status")


def purchase_status(value: Optional[str]) -> Optional[str]:
    return _choice(value, [s.value for s in PurchaseStatus], "purchase status")
