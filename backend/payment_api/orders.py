"""Order intake, queries and the pending -> accepted -> delivered pipeline."""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .errors import Conflict, InvalidInput, NotFound
from .models import (
    Order,
    OrderStatus,
    can_transition,
    serialize_order,
    utcnow,
    validate_order_fields,
)
from .stores import OrderStore

logger = logging.getLogger(__name__)


class OrderIntakeService:
    def __init__(self, store: OrderStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    def submit_order(self, payload: Optional[Dict]) -> str:
        fields = validate_order_fields(payload)
        order = Order.new(fields, now=self.clock())
        order_id = self.store.insert(order.to_document())
        logger.info("Saved order %s for product %s", order_id, order.productId)
        return str(order_id)


class OrderQueryService:
    def __init__(self, store: OrderStore):
        self.store = store

    def list_orders_by_email(self, email: Optional[str]) -> List[Dict]:
        if not email:
            raise InvalidInput("Email is required")
        documents = self.store.find({"email": email}, newest_first=True)
        return [serialize_order(document) for document in documents]

    def list_orders_by_status(self, status: OrderStatus) -> List[Dict]:
        # Admin queues read oldest request first.
        documents = self.store.find({"status": OrderStatus(status).value}, newest_first=False)
        return [serialize_order(document) for document in documents]


class OrderLifecycleService:
    """Moves orders along the status pipeline by identifier.

    By default a transition overwrites whatever status the order holds,
    matching how the admin dashboard has always behaved.  With
    ``enforce_order`` set, only forward moves from ``ALLOWED_TRANSITIONS``
    (or re-applying the current status) are accepted.
    """

    def __init__(self, store: OrderStore, enforce_order: bool = False):
        self.store = store
        self.enforce_order = enforce_order

    def accept(self, order_id: str) -> Dict:
        return self.transition(order_id, OrderStatus.ACCEPTED)

    def deliver(self, order_id: str) -> Dict:
        return self.transition(order_id, OrderStatus.DELIVERED)

    def transition(self, order_id: str, target: OrderStatus) -> Dict:
        from_statuses = None
        if self.enforce_order:
            from_statuses = [
                status.value for status in OrderStatus if can_transition(status.value, target)
            ]

        updated = self.store.set_status(order_id, target.value, from_statuses=from_statuses)
        if not updated:
            current = self.store.get(order_id) if self.enforce_order else None
            if not current:
                raise NotFound("Request not found")
            raise Conflict(
                f"Request cannot move from {current.get('status')} to {target.value}"
            )
        logger.info("Order %s is now %s", order_id, target.value)
        return serialize_order(updated)
