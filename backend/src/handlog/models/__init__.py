from .foods import FoodItem
from .hand_conditions import HandCondition
from .meals import Meal, MealItem, MealType, SuspiciousMeal

__all__ = [
    "FoodItem",
    "HandCondition",
    "Meal",
    "MealItem",
    "MealType",
    "SuspiciousMeal",
]
