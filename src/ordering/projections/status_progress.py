"""Status ordering shared by the order read models.

Read models may see the same event twice or out of order. A status update is
only applied when it moves the document forward, so every delivery order
converges on the same final document.
"""

from ordering.order.order import OrderStatus

_RANK = {
    OrderStatus.PENDING.value: 0,
    OrderStatus.PREPARING.value: 1,
    OrderStatus.READY.value: 2,
    OrderStatus.COMPLETED.value: 3,
    OrderStatus.CANCELLED.value: 3,
}


def moves_forward(current: str | None, new: str) -> bool:
    if current is None:
        return True
    return _RANK[new] > _RANK[current]
