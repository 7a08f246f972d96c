"""
Unit tests for form specification loading.
"""

import pytest
from pydantic import ValidationError

from whistle.forms import (
    FormSpecification,
    get_form,
    list_forms,
    load_form,
    validate_form,
)
from whistle.validation import ConfigurationError


WIZARD_YAML = """\
name: Wizard
pages:
  1:
    name: required
  2:
    age: type=number required min=4
    name: required minlength=10
"""


class TestBundledForms:
    """Tests for the specifications shipped with the package."""

    def test_bundled_forms_listed(self):
        forms = list_forms()

        assert {"centre", "resource", "report", "grn-report"} <= set(forms)

    @pytest.mark.parametrize("form_id", ["centre", "resource", "report", "grn-report"])
    def test_bundled_forms_load(self, form_id):
        form = get_form(form_id)

        assert form.id == form_id
        assert len(form.rules_for()) > 0

    def test_centre_requires_coordinates(self):
        errors = validate_form({"name": "Hope Centre", "lat": "north"}, "centre")

        assert errors == ["“lat” must be a number", "“lon” is required"]

    def test_admin_report_form(self):
        """The admin edit form checks the same fields as the whole wizard."""
        errors = validate_form(
            {"date": "2019-03-01", "time": "7pm", "brief-description": "Followed home"},
            "report",
        )

        assert errors == ["“time” must be a valid time", "“location-address” is required"]
        assert get_form("report").rules_for().field_names() == [
            "date", "time", "brief-description", "location-address",
        ]

    def test_report_page(self):
        errors = validate_form({"date": "2019-02-30", "time": "14:05"}, "grn-report", page=3)

        assert errors == ["“date” must be a valid date"]

    def test_report_review_page_checks_everything(self):
        """Page * combines every page of the report wizard."""
        errors = validate_form({}, "grn-report", page="*")

        assert errors == [
            "“date” is required",
            "“time” is required",
            "“brief-description” is required",
            "“location-address” is required",
        ]

    def test_report_page_without_rules(self):
        form = get_form("grn-report")

        with pytest.raises(KeyError):
            form.rules_for(2)

    def test_cache(self):
        cached = get_form("centre")

        assert get_form("centre") is cached
        assert get_form("centre", use_cache=False) is not cached


class TestLoading:
    """Tests for loading specifications from disk."""

    def test_id_defaults_to_file_stem(self, forms_dir):
        (forms_dir / "contact.yaml").write_text("fields:\n  email: required\n")

        form = get_form("contact")

        assert form.id == "contact"
        assert form.fields == {"email": "required"}
        assert list_forms() == ["contact"]

    def test_pages_in_page_order(self, forms_dir):
        (forms_dir / "wizard.yaml").write_text(WIZARD_YAML)
        form = get_form("wizard")

        assert form.page_numbers == [1, 2]
        assert form.rules_for(2).field_names() == ["age", "name"]
        assert form.rules_for("2") is form.rules_for(2)

    def test_whole_form_first_declaration_wins(self, forms_dir):
        (forms_dir / "wizard.yaml").write_text(WIZARD_YAML)
        form = get_form("wizard")

        whole = form.rules_for("*")

        assert whole.field_names() == ["name", "age"]
        assert whole.get("name").source == "required"
        assert form.rules_for(None) is whole

    def test_unknown_page(self, forms_dir):
        (forms_dir / "wizard.yaml").write_text(WIZARD_YAML)

        with pytest.raises(KeyError):
            get_form("wizard").rules_for(7)
        with pytest.raises(KeyError):
            get_form("wizard").rules_for("last")

    def test_missing_form(self, forms_dir):
        with pytest.raises(FileNotFoundError):
            get_form("nope")

    def test_empty_directory(self, forms_dir):
        assert list_forms() == []


class TestInvalidSpecifications:
    """Broken specifications raise ConfigurationError naming the file."""

    def test_bad_rule(self, forms_dir):
        path = forms_dir / "broken.yaml"
        path.write_text("fields:\n  age: type=number mni=4\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_form(path)

        message = str(exc_info.value)
        assert str(path) in message
        assert "mni=4" in message

    def test_bad_rule_on_page(self, forms_dir):
        path = forms_dir / "broken.yaml"
        path.write_text("pages:\n  3:\n    date: type=dat required\n")

        with pytest.raises(ConfigurationError):
            load_form(path)

    def test_page_zero(self, forms_dir):
        path = forms_dir / "broken.yaml"
        path.write_text("pages:\n  0:\n    name: required\n")

        with pytest.raises(ConfigurationError):
            load_form(path)

    def test_unknown_key(self, forms_dir):
        path = forms_dir / "broken.yaml"
        path.write_text("feilds:\n  name: required\n")

        with pytest.raises(ConfigurationError):
            load_form(path)

    def test_not_a_mapping(self, forms_dir):
        path = forms_dir / "broken.yaml"
        path.write_text("- name\n- age\n")

        with pytest.raises(ConfigurationError):
            load_form(path)

    def test_invalid_yaml(self, forms_dir):
        path = forms_dir / "broken.yaml"
        path.write_text("fields: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_form(path)


class TestSchema:
    """Tests for the pydantic model directly."""

    def test_model_validate(self):
        form = FormSpecification.model_validate({
            "id": "centre",
            "fields": {"name": "required"},
        })

        assert form.rules_for().field_names() == ["name"]

    def test_frozen(self):
        form = FormSpecification(id="centre")

        with pytest.raises(ValidationError):
            form.name = "changed"
