import pytest

from panelgen.conditioning import reset_condition_composer
from panelgen.engine import reset_config_engine
from panelgen.models import reset_model_resolver


@pytest.fixture(autouse=True)
def fresh_defaults(monkeypatch):
    """Clear environment overrides and process-wide instances around each test."""
    monkeypatch.delenv("PANELGEN_DEFAULT_MODEL", raising=False)
    monkeypatch.delenv("PANELGEN_PAGE_SIZE", raising=False)
    reset_config_engine()
    reset_model_resolver()
    reset_condition_composer()
    yield
    reset_config_engine()
    reset_model_resolver()
    reset_condition_composer()
