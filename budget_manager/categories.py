# budget_manager/categories.py

from enum import Enum

class ExpenseCategory(str, Enum):
    FOOD_AND_DINING = "Food & Dining"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS_AND_UTILITIES = "Bills & Utilities"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    PERSONAL_CARE = "Personal Care"
    HOME_AND_GARDEN = "Home & Garden"
    SPORTS_AND_FITNESS = "Sports & Fitness"
    OTHER = "Other"
