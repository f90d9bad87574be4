"""Tests for engine configuration."""

from datetime import timedelta

import pytest

from app.core.config import Settings
from app.services.engine_config import EngineConfig, Tier
from app.utils.enums import TableChannel


class TestEngineConfig:
    """Test EngineConfig construction and validation."""

    def test_from_mapping_accepts_string_keys(self):
        """JSON-style keys are converted to tiers."""
        config = EngineConfig.from_mapping(
            {'ONLINE': {'2': 3, '4': 6}},
            channel_shift_lead_minutes=15,
            slot_duration_minutes=90,
        )

        assert config.quotas == {
            Tier(2, TableChannel.ONLINE): 3,
            Tier(4, TableChannel.ONLINE): 6,
        }
        assert config.channel_shift_lead == timedelta(minutes=15)
        assert config.slot_duration == timedelta(minutes=90)

    def test_defaults(self):
        """Defaults match the documented engine settings."""
        config = EngineConfig()

        assert config.max_tables_per_combination == 4
        assert config.max_tables_per_staff == 3
        assert config.channel_shift_lead == timedelta(minutes=10)
        assert config.slot_duration == timedelta(hours=1)
        assert config.small_party_tier_capacity == 2
        assert config.max_guest_number == 100

    @pytest.mark.parametrize(
        'kwargs',
        [
            {'max_tables_per_combination': 0},
            {'max_tables_per_staff': 0},
            {'slot_duration': timedelta(0)},
            {'channel_shift_lead': timedelta(minutes=-1)},
            {'quotas': {Tier(2, TableChannel.ONLINE): -1}},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        """Inconsistent settings fail at construction."""
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_unknown_channel_rejected(self):
        """Only known channels may carry quotas."""
        with pytest.raises(ValueError):
            EngineConfig.from_mapping({'PHONE': {2: 1}})

    def test_settings_build_engine_config(self):
        """Application settings convert into the engine configuration."""
        settings = Settings(
            RESERVATION_QUOTAS={'ONLINE': {2: 1}},
            MAX_TABLES_PER_STAFF=5,
            TIMEZONE='Europe/Moscow',
            MAX_GUEST_NUMBER=150,
        )

        config = settings.engine_config()

        assert config.quotas == {Tier(2, TableChannel.ONLINE): 1}
        assert config.max_tables_per_staff == 5
        assert config.max_guest_number == 150
        assert str(config.timezone) == 'Europe/Moscow'
