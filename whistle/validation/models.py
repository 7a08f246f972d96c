"""
Validation Models — Parsed form rules.

A rule string such as ``type=number required min=4 max=17`` is parsed once
into a tuple of constraints. Constraints keep the literal text they were
written with so error messages quote the rule unchanged.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union


class ConstraintKind(str, Enum):
    """Kinds of constraint a rule token can declare."""
    REQUIRED = "required"
    TYPE = "type"
    MIN = "min"
    MAX = "max"
    MIN_LENGTH = "minlength"
    MAX_LENGTH = "maxlength"


class FieldType(str, Enum):
    """Value types a field can be declared as (``type=...``)."""
    NUMBER = "number"
    DATE = "date"
    TIME = "time"


@dataclass(frozen=True)
class Required:
    kind = ConstraintKind.REQUIRED


@dataclass(frozen=True)
class TypeOf:
    of: FieldType
    kind = ConstraintKind.TYPE


@dataclass(frozen=True)
class Min:
    """Lower bound; ``value`` is parsed according to the field type."""
    literal: str
    value: object
    kind = ConstraintKind.MIN


@dataclass(frozen=True)
class Max:
    """Upper bound; ``value`` is parsed according to the field type."""
    literal: str
    value: object
    kind = ConstraintKind.MAX


@dataclass(frozen=True)
class MinLength:
    literal: str
    length: int
    kind = ConstraintKind.MIN_LENGTH


@dataclass(frozen=True)
class MaxLength:
    literal: str
    length: int
    kind = ConstraintKind.MAX_LENGTH


Constraint = Union[Required, TypeOf, Min, Max, MinLength, MaxLength]


@dataclass(frozen=True)
class FieldRules:
    """All constraints declared for one field, in token order."""
    field: str
    constraints: tuple[Constraint, ...]
    source: str = ""

    @property
    def required(self) -> bool:
        return any(c.kind == ConstraintKind.REQUIRED for c in self.constraints)

    @property
    def type(self) -> Optional[FieldType]:
        for c in self.constraints:
            if c.kind == ConstraintKind.TYPE:
                return c.of
        return None

    def checks(self) -> list[Constraint]:
        """Constraints evaluated after the presence and type gates."""
        return [
            c for c in self.constraints
            if c.kind not in (ConstraintKind.REQUIRED, ConstraintKind.TYPE)
        ]


@dataclass(frozen=True)
class RuleSet:
    """
    Parsed rules for a form, keyed by field name.

    Field order is the declaration order and is the order in which
    fields are validated and errors reported.
    """
    fields: tuple[FieldRules, ...] = ()

    def __iter__(self) -> Iterator[FieldRules]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return any(f.field == name for f in self.fields)

    def field_names(self) -> list[str]:
        return [f.field for f in self.fields]

    def get(self, name: str) -> Optional[FieldRules]:
        for f in self.fields:
            if f.field == name:
                return f
        return None

    def to_dict(self) -> dict[str, str]:
        """Rule strings by field, as they were declared."""
        return {f.field: f.source for f in self.fields}
