import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from bson import ObjectId

from .errors import InvalidInput

REQUIRED_ORDER_FIELDS = (
    "productId",
    "productName",
    "email",
    "phone",
    "quantity",
    "price",
    "address",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DELIVERED = "delivered"


ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED},
    OrderStatus.ACCEPTED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
}


def can_transition(current: Optional[str], target: OrderStatus) -> bool:
    """Forward-only check; re-applying the current status counts as allowed."""
    try:
        current_status = OrderStatus(current)
    except ValueError:
        return False
    return current_status == target or target in ALLOWED_TRANSITIONS[current_status]


@dataclass
class Account:
    email: str
    phone: str
    passwordHash: bytes

    def to_document(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class Order:
    productId: str
    productName: str
    email: str
    phone: str
    quantity: int
    price: float
    address: str
    status: str = OrderStatus.PENDING.value
    createdAt: datetime = field(default_factory=utcnow)

    @classmethod
    def new(cls, fields: Dict[str, object], now: Optional[datetime] = None) -> "Order":
        return cls(
            **{name: fields[name] for name in REQUIRED_ORDER_FIELDS},
            status=OrderStatus.PENDING.value,
            createdAt=now or utcnow(),
        )

    def to_document(self) -> Dict[str, object]:
        return asdict(self)


def validate_order_fields(payload: Optional[Dict]) -> Dict[str, object]:
    """Presence (truthiness) check on every required field, then numeric coercion.

    ``0`` for quantity or price is rejected the same way as a missing value.
    """
    if not isinstance(payload, dict):
        raise InvalidInput()
    if any(not payload.get(name) for name in REQUIRED_ORDER_FIELDS):
        raise InvalidInput()

    fields = {name: payload[name] for name in REQUIRED_ORDER_FIELDS}
    try:
        quantity = float(fields["quantity"])
        price = float(fields["price"])
    except (TypeError, ValueError):
        raise InvalidInput("Quantity and price must be numeric")
    if not math.isfinite(quantity) or not math.isfinite(price):
        raise InvalidInput("Quantity and price must be numeric")
    if quantity != int(quantity):
        raise InvalidInput("Quantity must be a whole number")
    if quantity <= 0 or price <= 0:
        raise InvalidInput("Quantity and price must be positive")
    fields["quantity"] = int(quantity)
    fields["price"] = price
    return fields


def public_account(account_document) -> Dict[str, str]:
    if not account_document:
        return {}
    return {
        "email": account_document.get("email", "") or "",
        "phone": account_document.get("phone", "") or "",
    }


def format_timestamp(value) -> Optional[str]:
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).isoformat()
    return f"{value.isoformat()}Z"


def serialize_order(order_document) -> Optional[Dict[str, object]]:
    if not order_document:
        return None

    order_id = order_document.get("_id")
    return {
        "_id": str(order_id) if isinstance(order_id, ObjectId) else order_id,
        "productId": order_document.get("productId"),
        "productName": order_document.get("productName"),
        "email": order_document.get("email"),
        "phone": order_document.get("phone"),
        "quantity": order_document.get("quantity"),
        "price": order_document.get("price"),
        "address": order_document.get("address"),
        "status": order_document.get("status", OrderStatus.PENDING.value),
        "createdAt": format_timestamp(order_document.get("createdAt")),
    }
