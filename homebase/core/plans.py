"""
Plan tiers and the features each tier unlocks.

Everything here is pure: `can_access` and friends do no I/O and may be
called on every request. Stateful quota checks live in
`homebase.services.entitlement_service`.
"""
import enum
from typing import Dict, FrozenSet, List, Mapping, Optional

from homebase.core.exception import UpgradeRequiredException


class PlanTier(str, enum.Enum):
    """Subscription tiers, lowest first"""

    FREE = "free"
    PRO = "pro"
    PRO_PLUS = "pro_plus"


TIER_ORDER: List[PlanTier] = [PlanTier.FREE, PlanTier.PRO, PlanTier.PRO_PLUS]


class Feature(str, enum.Enum):
    """Capability keys checked by feature gates"""

    # Free
    BASIC_CALENDAR = "basic_calendar"
    BASIC_RECURRENCE = "basic_recurrence"
    MEAL_PLANNER_MANUAL = "meal_planner_manual"
    MEAL_PLANNER = "meal_planner"
    CALENDAR = "calendar"
    SHOPPING_LISTS = "shopping_lists"
    CHORES = "chores"
    ICS_EXPORT = "ics_export"
    LEADERBOARD = "leaderboard"
    BASIC_REMINDERS = "basic_reminders"
    TEMPLATES_STARTER = "templates_starter"
    BASIC_ANALYTICS = "basic_analytics"
    BRAND_ASSETS_V1 = "brand_assets_v1"
    ONBOARDING_TOUR = "onboarding_tour"
    CONSENT_OPTOUT = "consent_optout"

    # Pro
    ADVANCED_RRULE = "advanced_rrule"
    CONFLICT_DETECTION = "conflict_detection"
    CALENDAR_TEMPLATES = "calendar_templates"
    GOOGLE_IMPORT = "google_import"
    GOOGLE_CALENDAR_READ = "google_calendar_read"
    GOOGLE_CALENDAR_SYNC = "google_calendar_sync"
    CALENDAR_SYNC = "calendar_sync"
    DIGEST_MAX_PER_DAY = "digest_max_per_day"
    DAILY_DIGEST = "daily_digest"
    QUIET_HOURS = "quiet_hours"
    HISTORY_MONTHS = "history_months"
    MEAL_AUTOMATION = "meal_automation"
    GROCERY_AUTO_GEN = "grocery_auto_gen"
    ADVANCED_ANALYTICS = "advanced_analytics"
    AI_INSIGHTS = "ai_insights"
    ASK_BOX_ENABLED = "ask_box_enabled"
    AUTOMATION_RULES = "automation_rules"
    PRIORITY_SUPPORT = "priority_support"
    DATA_EXPORT = "data_export"
    PROJECTS = "projects"
    PROJECTS_BETA = "projects_beta"
    BUDGET_ENVELOPES = "budget_envelopes"
    SPENDING_TRACKING = "spending_tracking"
    BILL_MANAGEMENT = "bill_management"
    FINANCE_ENABLED = "finance_enabled"
    FINANCE_ANALYTICS = "finance_analytics"
    PUSH_NOTIFICATIONS = "push_notifications"
    ENHANCED_NOTIFICATIONS = "enhanced_notifications"
    NOTIFICATIONS_MINIMAL = "notifications_minimal"
    AVAILABILITY_RESOLVER = "availability_resolver"
    MULTI_HOUSEHOLD = "multi_household"
    ADMIN_TOOLS = "admin_tools"
    UNLIMITED_AUTOMATIONS = "unlimited_automations"
    UNLIMITED_NOTIFICATIONS = "unlimited_notifications"


_FREE = frozenset({
    Feature.BASIC_CALENDAR,
    Feature.BASIC_RECURRENCE,
    Feature.MEAL_PLANNER_MANUAL,
    Feature.MEAL_PLANNER,
    Feature.CALENDAR,
    Feature.SHOPPING_LISTS,
    Feature.CHORES,
    Feature.ICS_EXPORT,
    Feature.LEADERBOARD,
    Feature.BASIC_REMINDERS,
    Feature.TEMPLATES_STARTER,
    Feature.BASIC_ANALYTICS,
    Feature.BRAND_ASSETS_V1,
    Feature.ONBOARDING_TOUR,
    Feature.CONSENT_OPTOUT,
})

_PRO = _FREE | {
    Feature.ADVANCED_RRULE,
    Feature.CONFLICT_DETECTION,
    Feature.CALENDAR_TEMPLATES,
    Feature.GOOGLE_IMPORT,
    Feature.GOOGLE_CALENDAR_READ,
    Feature.GOOGLE_CALENDAR_SYNC,
    Feature.CALENDAR_SYNC,
    Feature.DIGEST_MAX_PER_DAY,
    Feature.DAILY_DIGEST,
    Feature.QUIET_HOURS,
    Feature.HISTORY_MONTHS,
    Feature.MEAL_AUTOMATION,
    Feature.GROCERY_AUTO_GEN,
    Feature.ADVANCED_ANALYTICS,
    Feature.AI_INSIGHTS,
    Feature.ASK_BOX_ENABLED,
    Feature.AUTOMATION_RULES,
    Feature.PRIORITY_SUPPORT,
    Feature.DATA_EXPORT,
    Feature.PROJECTS,
    Feature.PROJECTS_BETA,
    Feature.BUDGET_ENVELOPES,
    Feature.SPENDING_TRACKING,
    Feature.BILL_MANAGEMENT,
    Feature.FINANCE_ENABLED,
    Feature.FINANCE_ANALYTICS,
    Feature.PUSH_NOTIFICATIONS,
    Feature.ENHANCED_NOTIFICATIONS,
    Feature.NOTIFICATIONS_MINIMAL,
    Feature.AVAILABILITY_RESOLVER,
    Feature.MULTI_HOUSEHOLD,
    Feature.ADMIN_TOOLS,
    Feature.UNLIMITED_AUTOMATIONS,
    Feature.UNLIMITED_NOTIFICATIONS,
}

# Pro plus differs from pro only in its entitlement limits
_PRO_PLUS = _PRO


def validate_plan_table(table: Mapping[PlanTier, FrozenSet[Feature]]) -> None:
    """
    Raise ValueError unless `table` covers every tier, only holds Feature
    members, grants every feature somewhere and grows monotonically by tier.
    """
    if set(table) != set(PlanTier):
        raise ValueError(f"Plan table must define exactly {sorted(t.value for t in PlanTier)}")

    for tier, features in table.items():
        unknown = [f for f in features if not isinstance(f, Feature)]
        if unknown:
            raise ValueError(f"Unknown feature keys for {tier.value}: {unknown}")

    granted = frozenset().union(*table.values())
    orphaned = set(Feature) - granted
    if orphaned:
        raise ValueError(f"Features not granted by any tier: {sorted(f.value for f in orphaned)}")

    for lower, higher in zip(TIER_ORDER, TIER_ORDER[1:]):
        if not table[lower] <= table[higher]:
            missing = sorted(f.value for f in table[lower] - table[higher])
            raise ValueError(f"{higher.value} must include every {lower.value} feature, missing {missing}")


PLAN_FEATURES: Dict[PlanTier, FrozenSet[Feature]] = {
    PlanTier.FREE: _FREE,
    PlanTier.PRO: frozenset(_PRO),
    PlanTier.PRO_PLUS: frozenset(_PRO_PLUS),
}

validate_plan_table(PLAN_FEATURES)


def can_access(plan: PlanTier, feature: Feature) -> bool:
    return feature in PLAN_FEATURES.get(plan, frozenset())


def available_features(plan: PlanTier) -> List[Feature]:
    return sorted(PLAN_FEATURES[plan], key=lambda f: f.value)


def required_plan_for(feature: Feature) -> Optional[PlanTier]:
    """The lowest tier that unlocks `feature`."""
    for tier in TIER_ORDER:
        if feature in PLAN_FEATURES[tier]:
            return tier
    return None


def upgrade_required_features(plan: PlanTier) -> List[Feature]:
    return sorted(set(Feature) - PLAN_FEATURES[plan], key=lambda f: f.value)


def feature_flags(plan: PlanTier) -> Dict[str, bool]:
    return {feature.value: can_access(plan, feature) for feature in Feature}


def require_feature(plan: PlanTier, feature: Feature) -> None:
    if not can_access(plan, feature):
        required = required_plan_for(feature)
        raise UpgradeRequiredException(
            feature=feature.value,
            required_plan=required.value if required else None,
            current_plan=plan.value,
        )
