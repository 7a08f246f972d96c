import pytest

from whistle.forms.loader import clear_cache

# Rules exercising number, date and length constraints together
EXAMPLE_RULES = {
    "name": "required",
    "age": "type=number required min=4 max=17",
    "guardian": "required minlength=6",
    "reported": "type=date required min=2001-01-01",
}


@pytest.fixture
def rules():
    return dict(EXAMPLE_RULES)


@pytest.fixture
def valid_record():
    return {
        "name": "Adèle",
        "age": "9",
        "guardian": "Rochester",
        "reported": "2001-01-01",
    }


@pytest.fixture
def forms_dir(tmp_path, monkeypatch):
    """Point the form loader at an empty temporary directory."""
    monkeypatch.setenv("WHISTLE_FORMS_DIR", str(tmp_path))
    clear_cache()
    yield tmp_path
    clear_cache()


@pytest.fixture(autouse=True)
def _fresh_form_cache():
    clear_cache()
    yield
    clear_cache()
