"""
Form Loader — Load form specifications from YAML files.

Specifications live in ``whistle/forms/specs/<id>.yaml``; set
WHISTLE_FORMS_DIR to load them from another directory instead.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from whistle.core.logging import LogChannel, get_logger
from whistle.forms.schema import FormSpecification
from whistle.validation.engine import RuleValidator
from whistle.validation.errors import ConfigurationError

log = get_logger(LogChannel.CONFIG)

# Default specification directory
SPECS_DIR = Path(__file__).parent / "specs"


def get_specs_dir() -> Path:
    """Directory form specifications are read from."""
    override = os.environ.get("WHISTLE_FORMS_DIR")
    return Path(override) if override else SPECS_DIR


def load_form(path: Union[Path, str]) -> FormSpecification:
    """
    Load a form specification from a YAML file.

    The form id defaults to the file stem when the file does not set one.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is not a valid specification
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Form specification not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", source=str(path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Form specification must be a mapping", source=str(path)
        )
    data.setdefault("id", path.stem)

    try:
        form = FormSpecification.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(_describe(e), source=str(path)) from e

    log.verbose(
        "form_loaded",
        form=form.id,
        fields=len(form.fields),
        pages=len(form.pages),
    )
    return form


def _describe(error: ValidationError) -> str:
    """One line per problem, e.g. ``pages.3: Unknown rule “mni=4” for “age”``."""
    lines = []
    for item in error.errors():
        where = ".".join(str(p) for p in item["loc"])
        message = item["msg"]
        # pydantic prefixes messages raised from validators
        message = message.removeprefix("Value error, ")
        lines.append(f"{where}: {message}" if where else message)
    return "; ".join(lines)


# Cache for loaded forms
_cache: dict[str, FormSpecification] = {}


def get_form(form_id: str, use_cache: bool = True) -> FormSpecification:
    """
    Get a form specification by id, using the cache by default.

    Raises:
        FileNotFoundError: If no specification has this id
        ConfigurationError: If the specification is invalid
    """
    if use_cache and form_id in _cache:
        return _cache[form_id]

    form = load_form(get_specs_dir() / f"{form_id}.yaml")
    _cache[form_id] = form
    return form


def list_forms() -> list[str]:
    """List available form ids."""
    specs_dir = get_specs_dir()
    if not specs_dir.exists():
        return []
    return sorted(p.stem for p in specs_dir.glob("*.yaml"))


def clear_cache() -> None:
    """Clear the form cache."""
    _cache.clear()


def validate_form(
    record: Mapping[str, Optional[str]],
    form_id: str,
    page: Optional[Union[int, str]] = None,
) -> list[str]:
    """
    Validate a record against a named form page.

    Args:
        record: Submitted field values
        form_id: Form specification id
        page: Page number, or None / "*" for the whole form

    Returns:
        Error messages; empty if the record is valid
    """
    form = get_form(form_id)
    return RuleValidator(form.rules_for(page)).validate(record)
