"""Tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ignition_scan.config.models import ScanConfig, ScannerSettings


class TestScannerSettings:
    def test_defaults(self):
        settings = ScannerSettings()
        assert settings.cache_ttl_seconds == 300
        assert settings.debounce_seconds == 1.0
        assert settings.batch_concurrency == 3
        assert settings.watch is True

    @pytest.mark.parametrize(
        "field, value",
        [
            ("cache_ttl_seconds", 0),
            ("debounce_seconds", -1),
            ("batch_concurrency", 0),
            ("batch_concurrency", 33),
        ],
    )
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            ScannerSettings(**{field: value})

    def test_string_values_coerced(self):
        settings = ScannerSettings(cache_ttl_seconds="60", watch="false")
        assert settings.cache_ttl_seconds == 60.0
        assert settings.watch is False


class TestScanConfig:
    def test_defaults(self):
        config = ScanConfig()
        assert config.project_paths == []
        assert config.default_format == "table"
        assert config.resource_types == []

    def test_invalid_format(self):
        with pytest.raises(ValidationError, match="Format must be one of"):
            ScanConfig(default_format="xml")

    def test_resource_types_from_dicts(self):
        config = ScanConfig(resource_types=[
            {"resource_type_id": "report", "directory_paths": ["com.inductiveautomation.reporting/reports"]},
        ])
        (descriptor,) = config.resource_types
        assert descriptor.resource_type_id == "report"
        assert descriptor.is_singleton is False
