"""Parsing of line items given on the command line.

Order lines look like ``PRODUCT:QTY[+FREE][@PRICE]`` and purchase lines
like ``PRODUCT:QTY[@COST]``, where PRODUCT is a product ID or SKU. When the
price is omitted, the caller fills it from the product record.
"""

import re
from decimal import Decimal
from typing import NamedTuple, Optional

from shopledger.utils.amount_parser import parse_amount

_LINE_RE = re.compile(
    r"^(?P<product>[^:]+):(?P<qty>\d+)(?:\+(?P<free>\d+))?(?:@(?P<price>.+))?$"
)


class ParsedLine(NamedTuple):
    product: str
    quantity: int
    free_quantity: int
    price: Optional[Decimal]


def parse_line(line_str: str) -> ParsedLine:
    """Parse one ``PRODUCT:QTY[+FREE][@PRICE]`` line item.

    Raises:
        ValueError: If the line is malformed
    """
    match = _LINE_RE.match(line_str.strip())
    if match is None:
        raise ValueError(
            f"Invalid line '{line_str}'. Expected PRODUCT:QTY[+FREE][@PRICE], e.g. SKU-1:3+1@25.00"
        )

    price = match.group("price")
    return ParsedLine(
        product=match.group("product").strip(),
        quantity=int(match.group("qty")),
        free_quantity=int(match.group("free") or 0),
        price=parse_amount(price) if price is not None else None,
    )
