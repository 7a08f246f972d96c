"""
Form Specification Schema

Pydantic models for the YAML form specifications.

A form specification contains:
- Metadata (id, name, description)
- ``fields``: rules for a single-page form
- ``pages``: rules per page of a multi-step form

Every rule string is parsed during model validation, so a specification
that loads is guaranteed to have usable rules.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from whistle.validation.models import RuleSet
from whistle.validation.parser import parse_rules

ALL_PAGES = "*"


def _check_rules(rules: dict[str, str]) -> dict[str, str]:
    # ConfigurationError is a ValueError, which pydantic reports per field
    parse_rules(rules)
    return rules


class FormSpecification(BaseModel):
    """Validation rules for one form."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1, description="Form identifier (file stem)")
    name: str = Field("", description="Human-readable form name")
    description: str = Field("", description="What the form is for")
    fields: dict[str, str] = Field(
        default_factory=dict,
        description="Field name -> rule string, for single-page forms",
    )
    pages: dict[int, dict[str, str]] = Field(
        default_factory=dict,
        description="Page number -> field rules, for multi-step forms",
    )

    _rulesets: dict = PrivateAttr(default_factory=dict)

    @field_validator("fields")
    @classmethod
    def _fields_parse(cls, v: dict[str, str]) -> dict[str, str]:
        return _check_rules(v)

    @field_validator("pages")
    @classmethod
    def _pages_parse(cls, v: dict[int, dict[str, str]]) -> dict[int, dict[str, str]]:
        for page, rules in v.items():
            if page < 1:
                raise ValueError(f"Page numbers start at 1, got {page}")
            _check_rules(rules)
        return v

    @property
    def page_numbers(self) -> list[int]:
        return sorted(self.pages)

    def rules_for(self, page: Optional[Union[int, str]] = None) -> RuleSet:
        """
        Get the parsed rules for a page.

        Args:
            page: Page number, or None / "*" for the whole form. The whole
                form is ``fields`` followed by each page in page order; the
                first declaration of a field wins.

        Raises:
            KeyError: If the form has no such page
        """
        key = ALL_PAGES if page is None else str(page)
        if key in self._rulesets:
            return self._rulesets[key]

        if key == ALL_PAGES:
            combined: dict[str, str] = dict(self.fields)
            for number in self.page_numbers:
                for field, spec in self.pages[number].items():
                    combined.setdefault(field, spec)
            ruleset = parse_rules(combined)
        else:
            try:
                number = int(key)
            except ValueError:
                raise KeyError(f"Form '{self.id}' has no page {page!r}") from None
            if number not in self.pages:
                raise KeyError(f"Form '{self.id}' has no page {page!r}")
            ruleset = parse_rules(self.pages[number])

        self._rulesets[key] = ruleset
        return ruleset
