from homebase.models.base import Base, BaseModel
from homebase.models.associations import household_members
from homebase.models.user import User
from homebase.models.household import Household, GameMode
from homebase.models.entitlement import Entitlement
from homebase.models.recipe import Recipe
from homebase.models.meal_plan import MealPlan, MealSlot, Weekday
from homebase.models.shopping import ShoppingList, ShoppingItem
from homebase.models.calendar import Event, CalendarConflict, ConflictType
from homebase.models.finance import Bill
from homebase.models.chores import Chore, ChoreCompletion
from homebase.models.rewards import Reward, RewardRedemption
from homebase.models.audit import AuditLog
from homebase.models.rate_limit import RateLimit

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Users and households
    "User",
    "household_members",
    "Household",
    "GameMode",
    "Entitlement",
    # Meals
    "Recipe",
    "MealPlan",
    "MealSlot",
    "Weekday",
    # Shopping
    "ShoppingList",
    "ShoppingItem",
    # Calendar
    "Event",
    "CalendarConflict",
    "ConflictType",
    # Finance
    "Bill",
    # Chores and rewards
    "Chore",
    "ChoreCompletion",
    "Reward",
    "RewardRedemption",
    # Operational
    "AuditLog",
    "RateLimit",
]
