"""
Order status state machine.

Orders move along a fixed sequence:

    pending -> accepted -> rider_assigned -> preparing -> ready
            -> picked_up -> on_the_way -> delivered

`cancelled` can be reached from any status before pickup. `delivered` and
`cancelled` are terminal. Each actor owns a fixed set of steps; everything
else is rejected with InvalidTransitionError.
"""
import enum
from typing import Dict, FrozenSet, Set

from app.core.errors import InvalidTransitionError


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    RIDER_ASSIGNED = "rider_assigned"
    PREPARING = "preparing"
    READY = "ready"
    PICKED_UP = "picked_up"
    ON_THE_WAY = "on_the_way"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Actor(str, enum.Enum):
    RESTAURANT = "restaurant"
    RIDER = "rider"
    CUSTOMER = "customer"
    ADMIN = "admin"
    DISPATCH = "dispatch"  # rider assignment step


ORDER_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.ACCEPTED,
    OrderStatus.RIDER_ASSIGNED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED_UP,
    OrderStatus.ON_THE_WAY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

# Orders a rider is working on (rider dashboard)
ACTIVE_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {
        OrderStatus.RIDER_ASSIGNED,
        OrderStatus.ACCEPTED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.PICKED_UP,
        OrderStatus.ON_THE_WAY,
    }
)

# Orders that keep a kitchen from closing
OPEN_STATUSES: FrozenSet[OrderStatus] = ACTIVE_STATUSES | {OrderStatus.PENDING}

# Rider location updates are pushed to orders in these statuses
IN_TRANSIT_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.PICKED_UP, OrderStatus.ON_THE_WAY}
)

CANCELLABLE_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.ACCEPTED,
        OrderStatus.RIDER_ASSIGNED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
    }
)

CANCELLING_ACTORS: FrozenSet[Actor] = frozenset(
    {Actor.RESTAURANT, Actor.CUSTOMER, Actor.ADMIN}
)

# actor -> {current status: next status}
ADVANCE_STEPS: Dict[Actor, Dict[OrderStatus, OrderStatus]] = {
    Actor.RESTAURANT: {
        OrderStatus.PENDING: OrderStatus.ACCEPTED,
        OrderStatus.RIDER_ASSIGNED: OrderStatus.PREPARING,
        OrderStatus.PREPARING: OrderStatus.READY,
    },
    Actor.DISPATCH: {
        OrderStatus.ACCEPTED: OrderStatus.RIDER_ASSIGNED,
    },
    Actor.RIDER: {
        OrderStatus.READY: OrderStatus.PICKED_UP,
        OrderStatus.PICKED_UP: OrderStatus.ON_THE_WAY,
        OrderStatus.ON_THE_WAY: OrderStatus.DELIVERED,
    },
}


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_targets(actor: Actor, current: OrderStatus) -> Set[OrderStatus]:
    """Statuses `actor` may move an order to from `current`."""
    if is_terminal(current):
        return set()

    targets = set()
    step = ADVANCE_STEPS.get(actor, {}).get(current)
    if step is not None:
        targets.add(step)
    if actor in CANCELLING_ACTORS and current in CANCELLABLE_STATUSES:
        targets.add(OrderStatus.CANCELLED)
    return targets


def check_transition(actor: Actor, current: OrderStatus, target: OrderStatus) -> None:
    if is_terminal(current):
        raise InvalidTransitionError(
            f"Order is already {current.value} and can no longer change",
            currentStatus=current.value,
        )

    if target not in allowed_targets(actor, current):
        raise InvalidTransitionError(
            f"A {actor.value} cannot move an order from {current.value} to {target.value}",
            currentStatus=current.value,
            requestedStatus=target.value,
        )
