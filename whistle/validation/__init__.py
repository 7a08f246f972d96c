"""
Form Validation

Rule-string driven validation of submitted form records.

    >>> validate({"age": "nine"}, {"age": "type=number required min=4 max=17"})
    ['“age” must be a number']
"""

from whistle.validation.engine import RuleValidator, validate
from whistle.validation.errors import ConfigurationError
from whistle.validation.models import (
    Constraint,
    ConstraintKind,
    FieldRules,
    FieldType,
    RuleSet,
)
from whistle.validation.parser import parse_rule_spec, parse_rules

__all__ = [
    "RuleValidator",
    "validate",
    "ConfigurationError",
    "Constraint",
    "ConstraintKind",
    "FieldRules",
    "FieldType",
    "RuleSet",
    "parse_rule_spec",
    "parse_rules",
]
