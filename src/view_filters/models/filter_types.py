"""AST models for advanced filters: conditions, groups and the root filter."""

from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from view_filters.models.types import LogicalOperator


def generate_id() -> str:
    """Return a fresh opaque identifier for a condition or group."""
    return uuid4().hex


class NoValue(BaseModel):
    """Operand of operators that take no value (is empty, this week, ...)."""

    kind: Literal["none"] = "none"

    model_config = {"frozen": True}


class SingleValue(BaseModel):
    """Operand holding one scalar or list value."""

    kind: Literal["value"] = "value"
    value: Any = Field(description="Scalar or list compared against the field")

    model_config = {"frozen": True}


class RangeValue(BaseModel):
    """Operand holding an inclusive from/to pair."""

    kind: Literal["range"] = "range"
    value_from: Any = Field(default=None, description="Inclusive lower bound")
    value_to: Any = Field(default=None, description="Inclusive upper bound")

    model_config = {"frozen": True}


class RelativeValue(BaseModel):
    """Operand holding a symbolic relative period key such as ``this_week``."""

    kind: Literal["relative"] = "relative"
    period: str = Field(description="Relative period key")

    model_config = {"frozen": True}


Operand = Annotated[Union[NoValue, SingleValue, RangeValue, RelativeValue], Field(discriminator="kind")]


def _coerce_logical_operator(v: Any) -> LogicalOperator:
    # Anything other than "or" combines with AND, as persisted views always have
    if isinstance(v, str) and v.strip().lower() == LogicalOperator.OR.value:
        return LogicalOperator.OR
    return LogicalOperator.AND


class Condition(BaseModel):
    """A single field/operator/value predicate.

    The wire shape keeps ``value``, ``valueFrom``/``valueTo`` and ``dateRelative``
    as sibling keys; :attr:`operand` exposes whichever one is populated.
    The operator is kept as a raw string so an unknown key survives a round
    trip through storage instead of failing validation.
    """

    id: str = Field(default_factory=generate_id, description="Stable identifier across edits")
    field: str = Field(default="", description="Target attribute, dots address nested paths")
    operator: str = Field(default="", description="Operator key")
    value: Any = Field(default=None, description="Scalar or list value")
    value_from: Any = Field(default=None, alias="valueFrom", description="Inclusive range start")
    value_to: Any = Field(default=None, alias="valueTo", description="Inclusive range end")
    date_relative: Optional[str] = Field(default=None, alias="dateRelative", description="Relative period key")

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        if v is None or v == "":
            return generate_id()
        return str(v)

    @field_validator("field", "operator", mode="before")
    @classmethod
    def validate_key(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def is_blank(self) -> bool:
        return not self.field.strip()

    @property
    def operand(self) -> Union[NoValue, SingleValue, RangeValue, RelativeValue]:
        """The populated value shape, relative period first, then range, then value."""
        if self.date_relative:
            return RelativeValue(period=self.date_relative)
        if self.value_from is not None or self.value_to is not None:
            return RangeValue(value_from=self.value_from, value_to=self.value_to)
        if self.value is not None:
            return SingleValue(value=self.value)
        return NoValue()

    def with_operand(self, operand: Union[NoValue, SingleValue, RangeValue, RelativeValue]) -> "Condition":
        """Return a copy holding exactly ``operand`` and nothing else."""
        update: Dict[str, Any] = {"value": None, "value_from": None, "value_to": None, "date_relative": None}
        if isinstance(operand, SingleValue):
            update["value"] = operand.value
        elif isinstance(operand, RangeValue):
            update["value_from"] = operand.value_from
            update["value_to"] = operand.value_to
        elif isinstance(operand, RelativeValue):
            update["date_relative"] = operand.period
        return self.model_copy(update=update)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape stored on a view."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FilterGroup(BaseModel):
    """Conditions and nested groups combined by one logical operator.

    The operator applies to every child uniformly; mixing AND and OR requires
    a nested group.
    """

    id: str = Field(default_factory=generate_id, description="Group identifier")
    logical_operator: LogicalOperator = Field(default=LogicalOperator.AND, alias="logicalOperator")
    conditions: List[Condition] = Field(default_factory=list, description="Ordered conditions")
    groups: List["FilterGroup"] = Field(default_factory=list, description="Ordered nested groups")

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        if v is None or v == "":
            return generate_id()
        return str(v)

    @field_validator("logical_operator", mode="before")
    @classmethod
    def validate_logical_operator(cls, v: Any) -> LogicalOperator:
        return _coerce_logical_operator(v)

    @field_validator("conditions", "groups", mode="before")
    @classmethod
    def validate_children(cls, v: Any) -> Any:
        return [] if v is None else v

    def iter_conditions(self) -> Iterator[Condition]:
        """Yield this group's conditions, then those of nested groups depth-first."""
        stack: List[FilterGroup] = [self]
        while stack:
            group = stack.pop()
            yield from group.conditions
            stack.extend(reversed(group.groups))

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AdvancedFilter(BaseModel):
    """Root of the filter AST: top-level groups combined by one global operator."""

    groups: List[FilterGroup] = Field(default_factory=list, description="Ordered top-level groups")
    global_logical_operator: LogicalOperator = Field(default=LogicalOperator.AND, alias="globalLogicalOperator")

    model_config = {"frozen": True, "populate_by_name": True, "extra": "ignore"}

    @field_validator("global_logical_operator", mode="before")
    @classmethod
    def validate_global_logical_operator(cls, v: Any) -> LogicalOperator:
        return _coerce_logical_operator(v)

    @field_validator("groups", mode="before")
    @classmethod
    def validate_groups(cls, v: Any) -> Any:
        return [] if v is None else v

    def iter_conditions(self) -> Iterator[Condition]:
        for group in self.groups:
            yield from group.iter_conditions()

    @property
    def is_active(self) -> bool:
        """True when at least one condition has a field selected."""
        return any(not condition.is_blank for condition in self.iter_conditions())

    def get_group(self, group_id: str) -> Optional[FilterGroup]:
        return next((group for group in self.groups if group.id == group_id), None)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


FilterGroup.model_rebuild()
