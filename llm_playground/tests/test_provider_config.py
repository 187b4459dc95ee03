"""ProviderConfig DTO validation."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from llm_playground.base.dto import ProviderConfig
from llm_playground.base.models import ProviderFamily


def test_valid_config_and_family_parsing():
    cfg = ProviderConfig(family="Google", model="gemini-x", api_key="k", base_url="  ")
    assert cfg.family is ProviderFamily.GEMINI and cfg.base_url is None  # nosec B101
    assert cfg.resolved_base_url("https://default/") == "https://default"  # nosec B101


def test_api_key_hidden_from_repr():
    cfg = ProviderConfig(family="openai", model="m", api_key="sk-very-secret")
    assert "sk-very-secret" not in repr(cfg)  # nosec B101


def test_frozen():
    cfg = ProviderConfig(family="openai", model="m", api_key="k")
    with pytest.raises(ValidationError):
        cfg.model = "other"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"family": "openai", "model": "m"},
        {"family": "openai", "model": "", "api_key": "k"},
        {"family": "openai_compatible", "model": "m"},
        {"family": "openai", "model": "m", "api_key": "k", "temperature": 2.5},
        {"family": "openai", "model": "m", "api_key": "k", "max_tokens": 0},
        {"family": "cohere", "model": "m", "api_key": "k"},
    ],
)
def test_invalid_configs(kwargs):
    with pytest.raises(ValidationError):
        ProviderConfig(**kwargs)
