"""
Form Specifications

Named rule sets for the application's forms, loaded from YAML.
"""

from whistle.forms.loader import (
    clear_cache,
    get_form,
    list_forms,
    load_form,
    validate_form,
)
from whistle.forms.schema import ALL_PAGES, FormSpecification

__all__ = [
    "ALL_PAGES",
    "FormSpecification",
    "clear_cache",
    "get_form",
    "list_forms",
    "load_form",
    "validate_form",
]
