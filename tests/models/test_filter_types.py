"""Tests for the filter AST models."""

import pytest
from pydantic import ValidationError

from view_filters.models.filter_types import (
    AdvancedFilter,
    Condition,
    FilterGroup,
    NoValue,
    RangeValue,
    RelativeValue,
    SingleValue,
)
from view_filters.models.types import LogicalOperator


def test_condition_from_wire_shape():
    condition = Condition.model_validate(
        {"id": "c1", "field": "age", "operator": "between", "valueFrom": 30, "valueTo": 40}
    )
    assert condition.value_from == 30
    assert condition.value_to == 40
    assert condition.operand == RangeValue(value_from=30, value_to=40)


def test_condition_defaults():
    condition = Condition()
    assert condition.id
    assert condition.field == ""
    assert condition.operator == ""
    assert condition.is_blank
    assert condition.operand == NoValue()


def test_condition_null_keys_become_blank():
    condition = Condition.model_validate({"id": None, "field": None, "operator": None})
    assert condition.id
    assert condition.field == ""
    assert condition.operator == ""


def test_condition_is_immutable():
    condition = Condition(id="c1", field="status")
    with pytest.raises(ValidationError):
        condition.field = "stage"


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"value": "x"}, SingleValue(value="x")),
        ({"value": 0}, SingleValue(value=0)),
        ({"value": False}, SingleValue(value=False)),
        ({"value": ["a", "b"]}, SingleValue(value=["a", "b"])),
        ({"value_from": 1}, RangeValue(value_from=1)),
        ({"date_relative": "today"}, RelativeValue(period="today")),
        ({"value": "x", "date_relative": "today"}, RelativeValue(period="today")),
        ({"value": "x", "value_to": 9}, RangeValue(value_to=9)),
        ({}, NoValue()),
    ],
)
def test_operand_precedence(kwargs, expected):
    """Relative period wins over a range, which wins over a single value."""
    assert Condition(field="f", operator="equals", **kwargs).operand == expected


def test_with_operand_clears_other_shapes():
    condition = Condition(id="c1", field="age", operator="equals", value=5, date_relative="today")
    ranged = condition.with_operand(RangeValue(value_from=1, value_to=2))
    assert ranged.value is None
    assert ranged.date_relative is None
    assert (ranged.value_from, ranged.value_to) == (1, 2)
    assert ranged.with_operand(NoValue()).to_wire() == {"id": "c1", "field": "age", "operator": "equals"}


def test_condition_to_wire_uses_camel_case():
    condition = Condition(id="c1", field="createdAt", operator="date_is_relative", date_relative="last_7_days")
    assert condition.to_wire() == {
        "id": "c1",
        "field": "createdAt",
        "operator": "date_is_relative",
        "dateRelative": "last_7_days",
    }


def test_unknown_operator_survives_round_trip():
    condition = Condition.model_validate({"id": "c1", "field": "name", "operator": "sounds_like", "value": "jo"})
    assert Condition.model_validate(condition.to_wire()) == condition


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("and", LogicalOperator.AND),
        ("or", LogicalOperator.OR),
        ("OR", LogicalOperator.OR),
        ("xor", LogicalOperator.AND),
        (None, LogicalOperator.AND),
        (LogicalOperator.OR, LogicalOperator.OR),
    ],
)
def test_group_logical_operator_coercion(raw, expected):
    assert FilterGroup.model_validate({"logicalOperator": raw}).logical_operator == expected


def test_group_null_children():
    group = FilterGroup.model_validate({"id": "g", "conditions": None, "groups": None})
    assert group.conditions == []
    assert group.groups == []


def test_group_iter_conditions_order():
    group = FilterGroup(
        id="g",
        conditions=[Condition(id="a")],
        groups=[
            FilterGroup(id="x", conditions=[Condition(id="b")], groups=[FilterGroup(id="y", conditions=[Condition(id="c")])]),
            FilterGroup(id="z", conditions=[Condition(id="d")]),
        ],
    )
    assert [condition.id for condition in group.iter_conditions()] == ["a", "b", "c", "d"]


def test_advanced_filter_is_active():
    assert not AdvancedFilter().is_active
    assert not AdvancedFilter(groups=[FilterGroup(conditions=[Condition()])]).is_active
    active = AdvancedFilter(groups=[FilterGroup(conditions=[Condition(field="status", operator="is_empty")])])
    assert active.is_active


def test_advanced_filter_get_group():
    advanced_filter = AdvancedFilter(groups=[FilterGroup(id="g1"), FilterGroup(id="g2")])
    assert advanced_filter.get_group("g2").id == "g2"
    assert advanced_filter.get_group("g3") is None


def test_advanced_filter_null_global_operator():
    advanced_filter = AdvancedFilter.model_validate({"groups": None, "globalLogicalOperator": None})
    assert advanced_filter.groups == []
    assert advanced_filter.global_logical_operator == LogicalOperator.AND
