"""
Queue ranking.
Orders intake work by priority first, then by time spent waiting.
"""
from typing import List

from intake_board.models.intake import IntakeOrder, PRIORITY_WEIGHT

NEXT_ACTIONS_LIMIT = 3


def ranking_key(order: IntakeOrder):
    return (-PRIORITY_WEIGHT[order.priority], -order.hours_in_queue)


def sort_orders(orders: List[IntakeOrder]) -> List[IntakeOrder]:
    """
    Return a new list sorted by priority weight descending, then hours in
    queue descending. sorted() is stable, so full ties keep input order.
    """
    if orders is None:
        raise TypeError("sort_orders() requires a list of orders, got None")
    return sorted(orders, key=ranking_key)


def next_actions(orders: List[IntakeOrder], limit: int = NEXT_ACTIONS_LIMIT) -> List[IntakeOrder]:
    """The orders the desk should pick up next"""
    return sort_orders(orders)[:limit]
