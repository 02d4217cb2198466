"""Tests for the pure filter editing operations."""

import pytest

from view_filters import editor
from view_filters.compiler import advanced_filter_to_predicate
from view_filters.models.field import FieldDefinition
from view_filters.models.filter_types import AdvancedFilter, Condition, FilterGroup, NoValue, RangeValue, SingleValue
from view_filters.models.operators import find_operator
from view_filters.models.types import FieldType, LogicalOperator


@pytest.fixture
def sample_filter():
    return AdvancedFilter(
        groups=[
            FilterGroup(
                id="g1",
                conditions=[
                    Condition(id="c1", field="status", operator="equals", value="active"),
                    Condition(id="c2", field="", operator=""),
                ],
            ),
            FilterGroup(id="g2", logical_operator="or", conditions=[Condition(id="c3", field="age", operator="is_empty")]),
        ]
    )


def test_empty_filter_has_one_blank_row():
    advanced_filter = editor.create_empty_filter()
    assert len(advanced_filter.groups) == 1
    assert len(advanced_filter.groups[0].conditions) == 1
    assert advanced_filter.groups[0].conditions[0].is_blank
    assert not advanced_filter.is_active
    assert advanced_filter_to_predicate(advanced_filter) == {}


def test_clear_filter_resets():
    cleared = editor.clear_filter()
    assert not cleared.is_active
    assert cleared.global_logical_operator == LogicalOperator.AND


def test_fresh_ids_are_unique():
    ids = {editor.create_empty_condition().id for _ in range(50)}
    assert len(ids) == 50


def test_add_and_remove_group(sample_filter):
    added = editor.add_group(sample_filter)
    assert len(added.groups) == 3
    assert len(sample_filter.groups) == 2
    removed = editor.remove_group(added, "g1")
    assert [group.id for group in removed.groups][0] == "g2"
    assert len(removed.groups) == 2


def test_add_condition(sample_filter):
    updated = editor.add_condition(sample_filter, "g2")
    assert len(updated.get_group("g2").conditions) == 2
    assert updated.get_group("g2").conditions[-1].is_blank
    assert len(sample_filter.get_group("g2").conditions) == 1

    explicit = Condition(id="c9", field="email", operator="contains", value="acme")
    updated = editor.add_condition(sample_filter, "g1", explicit)
    assert updated.get_group("g1").conditions[-1] == explicit


def test_unknown_group_is_noop(sample_filter):
    assert editor.add_condition(sample_filter, "missing") is sample_filter
    assert editor.update_condition(sample_filter, "missing", "c1", value="x") is sample_filter
    assert editor.remove_condition(sample_filter, "missing", "c1") is sample_filter
    assert editor.toggle_logical_operator(sample_filter, "missing") is sample_filter


def test_update_condition_keeps_id(sample_filter):
    updated = editor.update_condition(sample_filter, "g1", "c1", value="inactive", operator="not_equals")
    condition = updated.get_group("g1").conditions[0]
    assert condition.id == "c1"
    assert condition.value == "inactive"
    assert condition.operator == "not_equals"
    assert sample_filter.get_group("g1").conditions[0].value == "active"


def test_update_condition_switches_operand(sample_filter):
    updated = editor.update_condition(sample_filter, "g2", "c3", operator="between", value_from=1, value_to=5)
    assert updated.get_group("g2").conditions[0].operand == RangeValue(value_from=1, value_to=5)


def test_remove_condition(sample_filter):
    updated = editor.remove_condition(sample_filter, "g1", "c2")
    assert [condition.id for condition in updated.get_group("g1").conditions] == ["c1"]


def test_toggle_logical_operator(sample_filter):
    toggled = editor.toggle_logical_operator(sample_filter, "g1")
    assert toggled.get_group("g1").logical_operator == LogicalOperator.OR
    assert toggled.get_group("g2").logical_operator == LogicalOperator.OR
    assert editor.toggle_logical_operator(toggled, "g1").get_group("g1").logical_operator == LogicalOperator.AND


def test_set_global_logical_operator(sample_filter):
    assert editor.set_global_logical_operator(sample_filter, "or").global_logical_operator == LogicalOperator.OR
    assert sample_filter.global_logical_operator == LogicalOperator.AND


@pytest.mark.parametrize(
    "field_type, operator, expected",
    [
        (FieldType.TEXT, "contains", SingleValue(value="")),
        (FieldType.TEXT, "is_empty", NoValue()),
        (FieldType.NUMBER, "between", RangeValue()),
        (FieldType.DATE, "date_this_month", NoValue()),
        (FieldType.DATE, "date_is", SingleValue(value="")),
    ],
)
def test_initial_operand(field_type, operator, expected):
    assert editor.initial_operand(find_operator(field_type, operator)) == expected


def test_initial_operand_for_relative_dates():
    operand = editor.initial_operand(find_operator(FieldType.DATE, "date_is_relative"))
    assert operand.kind == "relative"
    assert operand.period == ""


def test_select_field_resets_operator_and_value():
    condition = Condition(id="c1", field="status", operator="equals", value="active")
    age = FieldDefinition(field="age", header_name="Age", type=FieldType.NUMBER)
    updated = editor.select_field(condition, age)
    assert updated.id == "c1"
    assert updated.field == "age"
    assert updated.operator == "equals"
    assert updated.operand == SingleValue(value="")

    birthday = FieldDefinition(field="birthday", header_name="Birthday", type=FieldType.DATE)
    assert editor.select_field(condition, birthday).operator == "date_is"


def test_select_operator_clears_previous_value():
    condition = Condition(id="c1", field="age", operator="equals", value=30)
    updated = editor.select_operator(condition, find_operator(FieldType.NUMBER, "between"))
    assert updated.operator == "between"
    assert updated.value is None
    assert (updated.value_from, updated.value_to) == (None, None)

    emptied = editor.select_operator(updated, find_operator(FieldType.NUMBER, "is_empty"))
    assert emptied.operand == NoValue()
    assert emptied.to_wire() == {"id": "c1", "field": "age", "operator": "is_empty"}


def test_flatten_includes_nested_groups():
    nested = FilterGroup(id="inner", conditions=[Condition(id="n1", field="stage", operator="equals", value="lead")])
    advanced_filter = AdvancedFilter(
        groups=[FilterGroup(id="g", conditions=[Condition(id="c1", field="status", operator="is_empty")], groups=[nested])]
    )
    assert [condition.id for condition in editor.flatten(advanced_filter)] == ["c1", "n1"]


def test_to_simple_filters_drops_blank_rows(sample_filter):
    assert [condition.id for condition in editor.to_simple_filters(sample_filter)] == ["c1", "c3"]


def test_expand_empty_list_yields_blank_row():
    expanded = editor.expand([])
    assert len(expanded.groups) == 1
    assert len(expanded.groups[0].conditions) == 1
    assert expanded.groups[0].conditions[0].is_blank


def test_flatten_expand_round_trip():
    """Expanding a flat list and flattening it back gives the same list."""
    conditions = [
        Condition(id="c1", field="status", operator="equals", value="active"),
        Condition(id="c2", field="age", operator="between", value_from=30, value_to=40),
        Condition(id="c3", field="createdAt", operator="date_is_relative", date_relative="last_7_days"),
    ]
    assert editor.flatten(editor.expand(conditions)) == conditions
    assert editor.to_simple_filters(editor.expand(conditions)) == conditions


def test_expand_is_and_of_conditions(now):
    conditions = [
        Condition(id="c1", field="status", operator="equals", value="active"),
        Condition(id="c2", field="age", operator="greater_than", value=30),
    ]
    assert advanced_filter_to_predicate(editor.expand(conditions), now=now) == {
        "$and": [{"status": {"$eq": "active"}}, {"age": {"$gt": 30}}]
    }


def test_simple_filter_list_operations():
    email = FieldDefinition(field="email", header_name="Email addresses", type=FieldType.EMAIL)
    filters = editor.add_simple_filter([], email)
    assert len(filters) == 1
    chip = filters[0]
    assert chip.field == "email"
    assert chip.operator == "contains"
    assert chip.value == ""

    filters = editor.update_simple_filter(filters, chip.id, value="acme")
    assert filters[0].value == "acme"
    assert filters[0].id == chip.id

    assert editor.remove_simple_filter(filters, chip.id) == []
    assert editor.remove_simple_filter(filters, "missing") == filters
