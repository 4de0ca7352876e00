"""
Order queue filters.
Status, priority, tag and free-text predicates, all of which must pass.
"""
from typing import List, Union

from pydantic import BaseModel

from intake_board.models.intake import IntakeOrder, IntakeStatus, OrderPriority

ALL = "all"


class OrderFilter(BaseModel):
    """
    User-selected queue filters. Each field accepts the ALL sentinel to
    disable that predicate; a blank search disables the text match.
    """
    status: Union[IntakeStatus, str] = ALL
    priority: Union[OrderPriority, str] = ALL
    tag: str = ALL
    search: str = ""

    @property
    def is_empty(self) -> bool:
        return (
            self.status == ALL and self.priority == ALL and self.tag == ALL
            and not self.search.strip()
        )


def search_haystack(order: IntakeOrder) -> str:
    """Text the free-text search matches against, lower-cased"""
    return " ".join([
        order.order_id, order.customer_name, order.device_label, " ".join(order.tags)
    ]).lower()


def matches(order: IntakeOrder, order_filter: OrderFilter) -> bool:
    if order_filter.status != ALL and order.status != order_filter.status:
        return False

    if order_filter.priority != ALL and order.priority != order_filter.priority:
        return False

    if order_filter.tag != ALL and order_filter.tag not in order.tags:
        return False

    if order_filter.search.strip():
        if order_filter.search.lower() not in search_haystack(order):
            return False

    return True


def apply_filters(orders: List[IntakeOrder], order_filter: OrderFilter) -> List[IntakeOrder]:
    """Return a new list with the orders that pass every active predicate"""
    if orders is None:
        raise TypeError("apply_filters() requires a list of orders, got None")
    return [order for order in orders if matches(order, order_filter)]
