"""
Tests for CommissionSettings.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from commission_ledger.config import CommissionSettings
from commission_ledger.errors import ValidationError as CommissionValidationError


class TestDefaults:
    def test_defaults(self):
        settings = CommissionSettings()
        assert settings.multi_tier is False
        assert settings.calculation == "percentage"
        assert settings.rate == Decimal("10")
        assert settings.minimum == 0
        assert settings.maximum == Decimal("100")
        assert [t.name for t in settings.tiers] == ["Bronze", "Silver", "Gold"]
        assert [(r.threshold, r.bonus) for r in settings.volume_bonuses] == [
            (Decimal("1000"), Decimal("2")),
            (Decimal("5000"), Decimal("5")),
            (Decimal("10000"), Decimal("10")),
        ]
        assert settings.require_known_affiliate is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("COMMISSION_MULTI_TIER", "true")
        monkeypatch.setenv("COMMISSION_RATE", "12.5")
        settings = CommissionSettings()
        assert settings.multi_tier is True
        assert settings.rate == Decimal("12.5")


class TestValidation:
    @pytest.mark.parametrize("rate", [-1, 101])
    def test_rate_bounds(self, rate):
        with pytest.raises(ValidationError):
            CommissionSettings(rate=rate)

    def test_negative_minimum(self):
        with pytest.raises(ValidationError):
            CommissionSettings(minimum=-5)

    def test_minimum_above_maximum(self):
        with pytest.raises(ValidationError, match="must not exceed maximum"):
            CommissionSettings(minimum=200, maximum=100)

    def test_minimum_with_disabled_maximum(self):
        settings = CommissionSettings(minimum=200, maximum=0)
        assert settings.minimum == Decimal("200")

    def test_unsupported_calculation(self):
        with pytest.raises(ValidationError):
            CommissionSettings(calculation="fixed")

    def test_duplicate_tier_levels(self):
        with pytest.raises(ValidationError, match="unique"):
            CommissionSettings(tiers=[
                {"level": 1, "rate": 10, "name": "A"},
                {"level": 1, "rate": 20, "name": "B"},
            ])

    def test_invalid_volume_bonus(self):
        with pytest.raises(ValidationError):
            CommissionSettings(volume_bonuses=[{"threshold": 0, "bonus": 5}])


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@db/aff", "postgresql+asyncpg://u:p@db/aff"),
            ("postgresql://u:p@db/aff", "postgresql+asyncpg://u:p@db/aff"),
            ("postgresql+asyncpg://u:p@db/aff", "postgresql+asyncpg://u:p@db/aff"),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ],
    )
    def test_conversion(self, url, expected):
        assert CommissionSettings(database_url=url).database_url == expected


class TestFromOptions:
    def test_camel_case_keys(self):
        settings = CommissionSettings.from_options({
            "multiTier": True,
            "rate": 15,
            "minimum": 5,
            "maximum": 0,
            "volumeBonuses": [{"threshold": 500, "bonus": 1}],
            "requireKnownAffiliate": True,
        })
        assert settings.multi_tier is True
        assert settings.rate == Decimal("15")
        assert settings.maximum == 0
        assert len(settings.volume_bonuses) == 1
        assert settings.require_known_affiliate is True

    def test_snake_case_passthrough(self):
        settings = CommissionSettings.from_options({"multi_tier": True})
        assert settings.multi_tier is True

    def test_invalid_value_rejected(self):
        with pytest.raises(CommissionValidationError, match="Invalid configuration: rate") as exc_info:
            CommissionSettings.from_options({"rate": 150})
        assert exc_info.value.errors

    def test_limit_conflict_rejected(self):
        with pytest.raises(CommissionValidationError, match="must not exceed maximum"):
            CommissionSettings.from_options({"minimum": 200, "maximum": 100})
