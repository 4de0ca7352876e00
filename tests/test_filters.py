"""
Order queue filters.
"""
import pytest

from intake_board.engine.filters import ALL, OrderFilter, apply_filters
from intake_board.models.intake import IntakeStatus, OrderPriority


@pytest.fixture
def orders(make_order):
    return [
        make_order(order_id="ST-10234", customer="Javier Moreno", device="MacBook Air A1466",
                   status=IntakeStatus.INTAKE, priority=OrderPriority.HIGH, tags=["no power", "water damage"]),
        make_order(order_id="ST-10235", customer="Lucia Fernandez", device="Samsung Galaxy S21",
                   status=IntakeStatus.DIAGNOSIS, priority=OrderPriority.MEDIUM, tags=["not charging"]),
        make_order(order_id="ST-10238", customer="Jose Luis Rojas", device="ASUS TUF Gaming",
                   status=IntakeStatus.QUOTE, priority=OrderPriority.MEDIUM, tags=["no power"]),
        make_order(order_id="ST-10239", customer="Andrea Ramirez", device="iPad Pro 11",
                   status=IntakeStatus.INTAKE, priority=OrderPriority.LOW, tags=["broken screen"]),
    ]


def ids(orders):
    return [order.order_id for order in orders]


def test_default_filter_keeps_everything(orders):
    assert OrderFilter().is_empty
    assert apply_filters(orders, OrderFilter()) == orders


def test_status_filter(orders):
    result = apply_filters(orders, OrderFilter(status=IntakeStatus.INTAKE))
    assert ids(result) == ["ST-10234", "ST-10239"]


def test_status_filter_accepts_plain_value(orders):
    result = apply_filters(orders, OrderFilter(status="Diagnosis"))
    assert ids(result) == ["ST-10235"]


def test_priority_filter(orders):
    result = apply_filters(orders, OrderFilter(priority=OrderPriority.MEDIUM))
    assert ids(result) == ["ST-10235", "ST-10238"]


def test_tag_filter(orders):
    result = apply_filters(orders, OrderFilter(tag="no power"))
    assert ids(result) == ["ST-10234", "ST-10238"]


@pytest.mark.parametrize("search,expected", [
    ("macbook", ["ST-10234"]),
    ("LUCIA", ["ST-10235"]),
    ("st-1023", ["ST-10234", "ST-10235", "ST-10238", "ST-10239"]),
    ("broken scr", ["ST-10239"]),
    ("nothing matches", []),
])
def test_search_is_case_insensitive_substring(orders, search, expected):
    assert ids(apply_filters(orders, OrderFilter(search=search))) == expected


def test_whitespace_search_is_no_filter(orders):
    assert apply_filters(orders, OrderFilter(search="   ")) == orders


def test_predicates_are_combined(orders):
    order_filter = OrderFilter(status=IntakeStatus.INTAKE, priority=OrderPriority.HIGH, tag="no power", search="javier")
    assert ids(apply_filters(orders, order_filter)) == ["ST-10234"]

    order_filter = OrderFilter(status=IntakeStatus.QUOTE, tag="broken screen")
    assert apply_filters(orders, order_filter) == []


def test_filter_is_idempotent(orders):
    order_filter = OrderFilter(priority=OrderPriority.MEDIUM, search="s")
    once = apply_filters(orders, order_filter)
    assert apply_filters(once, order_filter) == once


def test_filter_does_not_mutate_input(orders):
    snapshot = list(orders)
    apply_filters(orders, OrderFilter(status=IntakeStatus.QUOTE))
    assert orders == snapshot


def test_all_sentinel(orders):
    order_filter = OrderFilter(status=ALL, priority=ALL, tag=ALL)
    assert len(apply_filters(orders, order_filter)) == len(orders)


def test_missing_orders_rejected():
    with pytest.raises(TypeError):
        apply_filters(None, OrderFilter())
