"""
Notes API: Configuration Tests
==================================

What:  Tests for Settings validation and derived properties.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from notes_api.config import Settings


class TestSettings:

    def test_invalid_environment_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(environment="staging")

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_cors_wildcard_outside_production(self):
        settings = Settings(environment="development", cors_origins="https://a.example")
        assert settings.cors_origins_list == ["*"]

    def test_cors_allow_list_in_production(self):
        settings = Settings(
            environment="production", cors_origins="https://a.example, https://b.example"
        )
        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
        settings.validate_for_production()

    def test_production_rejects_wildcard(self):
        settings = Settings(environment="production", cors_origins="*")
        with pytest.raises(ValueError, match="explicit origins"):
            settings.validate_for_production()

    @pytest.mark.parametrize(
        "environment, override, expected",
        [
            ("development", None, True),
            ("test", None, False),
            ("production", None, False),
            ("production", True, True),
            ("development", False, False),
        ],
    )
    def test_should_seed_sample_data(self, environment, override, expected):
        settings = Settings(environment=environment, seed_sample_data=override)
        assert settings.should_seed_sample_data is expected
