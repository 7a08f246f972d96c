"""
Rule Parser — Turn rule strings into constraints.

Rule strings are whitespace-separated tokens, either a bare keyword
(``required``) or ``key=value`` (``type=date``, ``min=2001-01-01``).
Anything the validator cannot act on is rejected here with a
ConfigurationError, so a malformed rule never silently skips a check.
"""

from typing import Mapping, Union

from whistle.core.logging import LogChannel, get_logger
from whistle.validation.errors import ConfigurationError
from whistle.validation.models import (
    Constraint,
    ConstraintKind,
    FieldRules,
    FieldType,
    Max,
    MaxLength,
    Min,
    MinLength,
    Required,
    RuleSet,
    TypeOf,
)
from whistle.validation.values import PARSERS

log = get_logger(LogChannel.CONFIG)

_KEYED = {
    ConstraintKind.TYPE,
    ConstraintKind.MIN,
    ConstraintKind.MAX,
    ConstraintKind.MIN_LENGTH,
    ConstraintKind.MAX_LENGTH,
}


def parse_rule_spec(field: str, spec: str) -> FieldRules:
    """
    Parse the rule string for a single field.

    Args:
        field: Field name (used in error messages)
        spec: Rule string, e.g. "type=number required min=4 max=17"

    Returns:
        FieldRules with constraints in token order

    Raises:
        ConfigurationError: If any token is unknown or inconsistent
    """
    if not isinstance(field, str) or not field:
        raise ConfigurationError(f"Invalid field name: {field!r}")
    if not isinstance(spec, str):
        raise ConfigurationError(
            f"Rules for “{field}” must be a string, got {type(spec).__name__}",
            field=field,
        )

    # First pass: split tokens, check keys and values are well-formed
    tokens: list[tuple[ConstraintKind, str, str]] = []
    seen: set[ConstraintKind] = set()
    for token in spec.split():
        key, sep, value = token.partition("=")
        try:
            kind = ConstraintKind(key)
        except ValueError:
            raise ConfigurationError(
                f"Unknown rule “{token}” for “{field}”", field=field, token=token
            ) from None

        if kind in _KEYED and not value:
            raise ConfigurationError(
                f"Rule “{token}” for “{field}” needs a value ({key}=...)",
                field=field, token=token,
            )
        if kind == ConstraintKind.REQUIRED and sep:
            raise ConfigurationError(
                f"Rule “required” for “{field}” takes no value", field=field, token=token
            )
        if kind in seen:
            raise ConfigurationError(
                f"Rule “{key}” given more than once for “{field}”", field=field, token=token
            )
        seen.add(kind)
        tokens.append((kind, value, token))

    field_type = None
    for kind, value, token in tokens:
        if kind == ConstraintKind.TYPE:
            try:
                field_type = FieldType(value)
            except ValueError:
                raise ConfigurationError(
                    f"Unknown type “{value}” for “{field}”", field=field, token=token
                ) from None

    # Second pass: build constraints now the field type is known
    constraints: list[Constraint] = []
    for kind, value, token in tokens:
        if kind == ConstraintKind.REQUIRED:
            constraints.append(Required())
        elif kind == ConstraintKind.TYPE:
            constraints.append(TypeOf(of=field_type))
        elif kind in (ConstraintKind.MIN, ConstraintKind.MAX):
            bound = _parse_bound(field, token, value, field_type)
            cls = Min if kind == ConstraintKind.MIN else Max
            constraints.append(cls(literal=value, value=bound))
        else:
            length = _parse_length(field, token, value, field_type)
            cls = MinLength if kind == ConstraintKind.MIN_LENGTH else MaxLength
            constraints.append(cls(literal=value, length=length))

    rules = FieldRules(field=field, constraints=tuple(constraints), source=spec)
    log.debug("rule_parsed", field=field, constraints=len(constraints))
    return rules


def _parse_bound(field: str, token: str, value: str, field_type) -> object:
    if field_type is None:
        raise ConfigurationError(
            f"Rule “{token}” for “{field}” needs a type=number, type=date or type=time",
            field=field, token=token,
        )
    bound = PARSERS[field_type](value)
    if bound is None:
        raise ConfigurationError(
            f"Rule “{token}” for “{field}” is not a valid {field_type.value}",
            field=field, token=token,
        )
    return bound


def _parse_length(field: str, token: str, value: str, field_type) -> int:
    if field_type is not None:
        raise ConfigurationError(
            f"Rule “{token}” for “{field}” only applies to text, not type={field_type.value}",
            field=field, token=token,
        )
    if not (value.isascii() and value.isdigit()):
        raise ConfigurationError(
            f"Rule “{token}” for “{field}” must be a whole number",
            field=field, token=token,
        )
    return int(value)


def parse_rules(rules: Union[RuleSet, Mapping[str, str]]) -> RuleSet:
    """
    Parse a mapping of field name to rule string.

    An already-parsed RuleSet is returned unchanged.
    """
    if isinstance(rules, RuleSet):
        return rules
    if not isinstance(rules, Mapping):
        raise ConfigurationError(
            f"Rules must be a mapping of field to rule string, got {type(rules).__name__}"
        )
    return RuleSet(fields=tuple(parse_rule_spec(f, s) for f, s in rules.items()))
