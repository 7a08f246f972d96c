"""
Rule Validator — Evaluate form rules against a submitted record.

Validation is a pure function of (record, rules): no state is kept
between calls and the record is never modified, so a validator can be
shared across concurrent requests.

Per field, in declaration order:
1. Presence: an absent or blank value fails ``required``; without
   ``required`` the field is optional and skipped. Either way nothing
   else is checked on that field.
2. Type: a value that does not parse as the declared type is reported
   once, and min/max are not checked.
3. Remaining constraints in token order.
"""

from typing import Mapping, Optional, Union

from whistle.core.logging import LogChannel, get_logger
from whistle.validation.models import (
    ConstraintKind,
    FieldRules,
    FieldType,
    RuleSet,
)
from whistle.validation.parser import parse_rules
from whistle.validation.values import PARSERS, char_length

log = get_logger(LogChannel.VALIDATION)

Record = Mapping[str, Optional[str]]

_TYPE_MESSAGES = {
    FieldType.NUMBER: "must be a number",
    FieldType.DATE: "must be a valid date",
    FieldType.TIME: "must be a valid time",
}


def _quoted(field: str) -> str:
    return f"“{field}”"


class RuleValidator:
    """
    Validator for a fixed set of form rules.

    Rules are parsed on construction, so a malformed rule string raises
    ConfigurationError before any record is seen.
    """

    def __init__(self, rules: Union[RuleSet, Mapping[str, str]]) -> None:
        self._rules = parse_rules(rules)

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def validate(self, record: Record) -> list[str]:
        """
        Validate a record.

        Args:
            record: Field name to submitted text (absent or None = not given)

        Returns:
            Error messages in field order; empty if the record is valid
        """
        errors: list[str] = []
        for field_rules in self._rules:
            errors.extend(self._validate_field(field_rules, record.get(field_rules.field)))

        if errors:
            log.verbose(
                "validation_failed",
                fields=len(self._rules),
                errors=len(errors),
            )
        else:
            log.debug("validation_passed", fields=len(self._rules))
        return errors

    def _validate_field(self, rules: FieldRules, raw: Optional[str]) -> list[str]:
        name = _quoted(rules.field)

        if raw is not None and not isinstance(raw, str):
            raw = str(raw)
        if raw is None or raw.strip() == "":
            return [f"{name} is required"] if rules.required else []

        parsed = None
        if rules.type is not None:
            parsed = PARSERS[rules.type](raw)
            if parsed is None:
                return [f"{name} {_TYPE_MESSAGES[rules.type]}"]

        errors = []
        for constraint in rules.checks():
            kind = constraint.kind
            if kind == ConstraintKind.MIN and parsed < constraint.value:
                errors.append(f"{name} must have a minimum value of {constraint.literal}")
            elif kind == ConstraintKind.MAX and parsed > constraint.value:
                errors.append(f"{name} must have a maximum value of {constraint.literal}")
            elif kind == ConstraintKind.MIN_LENGTH and char_length(raw) < constraint.length:
                errors.append(f"{name} must have a minimum length of {constraint.literal}")
            elif kind == ConstraintKind.MAX_LENGTH and char_length(raw) > constraint.length:
                errors.append(f"{name} must have a maximum length of {constraint.literal}")
        return errors


def validate(record: Record, rules: Union[RuleSet, Mapping[str, str]]) -> list[str]:
    """
    Validate a record against rules.

    Convenience wrapper around RuleValidator; ``rules`` may be a mapping
    of field name to rule string or a parsed RuleSet.
    """
    return RuleValidator(rules).validate(record)
