"""Tests for refinement configuration."""

import pytest

from resume_refiner.config import MAX_PASSES, RefinementConfig


class TestRefinementConfig:
    """Tests for RefinementConfig defaults and validation."""

    def test_defaults(self):
        config = RefinementConfig()

        assert config.max_passes == MAX_PASSES == 3
        assert config.boost_keyword_limit == 18
        assert config.follow_up_keyword_limit == 18
        assert config.must_include_limit == 12
        assert config.match_variants is False

    @pytest.mark.parametrize("value", [0, -1, 4, 10])
    def test_max_passes_out_of_range(self, value):
        with pytest.raises(ValueError, match="max_passes"):
            RefinementConfig(max_passes=value)

    def test_limits_must_be_positive(self):
        with pytest.raises(ValueError, match="boost_keyword_limit"):
            RefinementConfig(boost_keyword_limit=0)

    def test_allows_pass(self):
        config = RefinementConfig(max_passes=2)

        assert config.allows_pass(1)
        assert config.allows_pass(2)
        assert not config.allows_pass(3)

    def test_frozen(self):
        config = RefinementConfig()
        with pytest.raises(AttributeError):
            config.max_passes = 1


class TestPresets:
    """Tests for the preset constructors."""

    def test_single_pass(self):
        config = RefinementConfig.single_pass()

        assert config.max_passes == 1
        assert not config.enable_follow_up
        assert not config.enable_skill_backfill

    def test_thorough(self):
        config = RefinementConfig.thorough()

        assert config.max_passes == MAX_PASSES
        assert config.match_variants

    def test_preset_overrides(self):
        config = RefinementConfig.thorough(match_variants=False, max_passes=2)

        assert config.max_passes == 2
        assert not config.match_variants
