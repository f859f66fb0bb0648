"""Order lifecycle: one state machine shared by every endpoint that moves an order.

Each actor gets its own edge set over the same ``OrderStatus`` field:

- logistics partners can only ship an open order and then deliver it;
- customers can only cancel before the order leaves the warehouse;
- admins have an operational override and may set any status.

Side effects of reaching a status (``delivered_at``, ``cancelled_at``)
are applied here, so every call site stamps them identically.
"""

import enum
import uuid
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from libs.common.datetime_utils import utc_now
from services.marketplace_service.models import Order, OrderStatus


class Actor(str, enum.Enum):
    ADMIN = "admin"
    LOGISTICS = "logistics"
    CUSTOMER = "customer"


class InvalidTransitionError(ValueError):
    """Requested status change is not an edge for this actor."""

    def __init__(self, current: OrderStatus, target: OrderStatus, actor: Actor):
        self.current = current
        self.target = target
        self.actor = actor
        super().__init__(f"Cannot transition from {current.value} to {target.value}")


OPEN_STATUSES = frozenset(
    {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}
)
TERMINAL_STATUSES = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
)

LOGISTICS_TRANSITIONS: Mapping[OrderStatus, frozenset] = MappingProxyType(
    {
        OrderStatus.PENDING: frozenset({OrderStatus.SHIPPED}),
        OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED}),
        OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED}),
        OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    }
)

CUSTOMER_TRANSITIONS: Mapping[OrderStatus, frozenset] = MappingProxyType(
    {
        OrderStatus.PENDING: frozenset({OrderStatus.CANCELLED}),
        OrderStatus.CONFIRMED: frozenset({OrderStatus.CANCELLED}),
    }
)


class OrderStateMachine:
    """Transition policy for ``Order.status``.

    ``ADMIN`` may set any status from any status.
    """

    _tables: Mapping[Actor, Mapping[OrderStatus, frozenset]] = {
        Actor.LOGISTICS: LOGISTICS_TRANSITIONS,
        Actor.CUSTOMER: CUSTOMER_TRANSITIONS,
    }

    def allowed_targets(self, current: OrderStatus, actor: Actor) -> frozenset:
        if actor == Actor.ADMIN:
            return frozenset(status for status in OrderStatus if status != current)
        return self._tables[actor].get(current, frozenset())

    def can_transition(
        self, current: OrderStatus, target: OrderStatus, actor: Actor
    ) -> bool:
        if actor == Actor.ADMIN:
            return True
        return target in self.allowed_targets(current, actor)

    def apply(
        self,
        order: Order,
        target: OrderStatus,
        actor: Actor,
        now: Optional[datetime] = None,
    ) -> OrderStatus:
        """Move ``order`` to ``target`` or raise InvalidTransitionError.

        Returns the previous status.
        """
        current = OrderStatus(order.status)
        if not self.can_transition(current, target, actor):
            raise InvalidTransitionError(current, target, actor)

        now = now or utc_now()
        order.status = target
        if target == OrderStatus.DELIVERED:
            order.delivered_at = now
        elif target == OrderStatus.CANCELLED:
            order.cancelled_at = now
        return current

    def assign(
        self,
        order: Order,
        logistics_id: Optional[uuid.UUID],
        now: Optional[datetime] = None,
    ) -> None:
        """Route ``order`` to a logistics partner, or unassign it with ``None``.

        Only the assignment fields change; callers that want the order to
        move send a status alongside.
        """
        if logistics_id is None:
            order.assigned_to = None
            order.assigned_at = None
            return

        order.assigned_to = logistics_id
        order.assigned_at = now or utc_now()


state_machine = OrderStateMachine()
