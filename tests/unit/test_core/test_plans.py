import pytest

from homebase.core.exception import UpgradeRequiredException
from homebase.core.plans import (
    PLAN_FEATURES,
    Feature,
    PlanTier,
    available_features,
    can_access,
    feature_flags,
    require_feature,
    required_plan_for,
    upgrade_required_features,
    validate_plan_table,
)


@pytest.mark.unit
class TestFeatureGate:
    """Unit tests for the static plan/feature table."""

    def test_free_plan_basics(self):
        assert can_access(PlanTier.FREE, Feature.MEAL_PLANNER)
        assert can_access(PlanTier.FREE, Feature.SHOPPING_LISTS)
        assert not can_access(PlanTier.FREE, Feature.FINANCE_ENABLED)
        assert not can_access(PlanTier.FREE, Feature.CONFLICT_DETECTION)

    @pytest.mark.parametrize(
        "feature",
        [
            Feature.AVAILABILITY_RESOLVER,
            Feature.MULTI_HOUSEHOLD,
            Feature.ADMIN_TOOLS,
            Feature.UNLIMITED_AUTOMATIONS,
            Feature.UNLIMITED_NOTIFICATIONS,
        ],
    )
    def test_household_admin_features_come_with_pro(self, feature):
        assert not can_access(PlanTier.FREE, feature)
        assert can_access(PlanTier.PRO, feature)
        assert can_access(PlanTier.PRO_PLUS, feature)

    def test_pro_plus_unlocks_no_extra_features(self):
        """Pro plus only raises the entitlement limits."""
        assert feature_flags(PlanTier.PRO_PLUS) == feature_flags(PlanTier.PRO)
        assert upgrade_required_features(PlanTier.PRO) == []

    def test_tiers_are_monotonic(self):
        """Every feature of a lower tier is available on the higher ones."""
        for feature in Feature:
            if can_access(PlanTier.FREE, feature):
                assert can_access(PlanTier.PRO, feature)
            if can_access(PlanTier.PRO, feature):
                assert can_access(PlanTier.PRO_PLUS, feature)

    def test_answers_are_deterministic(self):
        first = feature_flags(PlanTier.PRO)
        second = feature_flags(PlanTier.PRO)
        assert first == second
        assert available_features(PlanTier.PRO) == available_features(PlanTier.PRO)

    def test_flags_cover_every_feature(self):
        flags = feature_flags(PlanTier.FREE)
        assert set(flags) == {f.value for f in Feature}
        assert flags["finance_enabled"] is False
        assert flags["leaderboard"] is True

    def test_pro_plus_needs_no_upgrade(self):
        assert upgrade_required_features(PlanTier.PRO_PLUS) == []
        assert Feature.FINANCE_ENABLED in upgrade_required_features(PlanTier.FREE)

    def test_required_plan_is_lowest_tier(self):
        assert required_plan_for(Feature.CALENDAR) == PlanTier.FREE
        assert required_plan_for(Feature.FINANCE_ENABLED) == PlanTier.PRO
        assert required_plan_for(Feature.ADMIN_TOOLS) == PlanTier.PRO

    def test_require_feature_raises_upgrade_required(self):
        with pytest.raises(UpgradeRequiredException) as exc_info:
            require_feature(PlanTier.FREE, Feature.FINANCE_ENABLED)

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == "UPGRADE_REQUIRED"
        assert exc_info.value.details == {
            "feature": "finance_enabled",
            "required_plan": "pro",
            "current_plan": "free",
        }

    def test_require_feature_allows_included_feature(self):
        require_feature(PlanTier.PRO, Feature.FINANCE_ENABLED)


@pytest.mark.unit
class TestPlanTableValidation:
    """The plan table is checked when the module loads."""

    def test_shipped_table_is_valid(self):
        validate_plan_table(PLAN_FEATURES)

    def test_missing_tier_rejected(self):
        table = {PlanTier.FREE: PLAN_FEATURES[PlanTier.FREE], PlanTier.PRO: PLAN_FEATURES[PlanTier.PRO]}
        with pytest.raises(ValueError):
            validate_plan_table(table)

    def test_unknown_feature_key_rejected(self):
        table = dict(PLAN_FEATURES)
        table[PlanTier.PRO_PLUS] = PLAN_FEATURES[PlanTier.PRO_PLUS] | {"teleportation"}
        with pytest.raises(ValueError, match="Unknown feature"):
            validate_plan_table(table)

    def test_non_monotonic_table_rejected(self):
        table = dict(PLAN_FEATURES)
        table[PlanTier.PRO] = PLAN_FEATURES[PlanTier.PRO] - {Feature.LEADERBOARD}
        with pytest.raises(ValueError, match="must include"):
            validate_plan_table(table)

    def test_orphaned_feature_rejected(self):
        table = {tier: features - {Feature.ADMIN_TOOLS} for tier, features in PLAN_FEATURES.items()}
        with pytest.raises(ValueError, match="not granted"):
            validate_plan_table(table)
