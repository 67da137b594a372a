from __future__ import annotations

MIN_OPTIONS = 2
MAX_OPTIONS = 6

TRUE_OPTION_TEXT = "True"
FALSE_OPTION_TEXT = "False"

CATEGORY_PATH_SEPARATOR = " > "
MAX_BANK_CATEGORIES = 20

DEFAULT_MAX_GENERATED_QUESTIONS = 50
MAX_SOP_GENERATED_QUESTIONS = 30

# Matched as case-insensitive substrings of a menu category name.
DEFAULT_BEVERAGE_CATEGORY_KEYWORDS: tuple[str, ...] = (
    "beverage",
    "drink",
    "coffee",
    "tea",
    "soda",
    "wine",
    "beer",
    "cocktail",
    "juice",
    "smoothie",
    "milkshake",
    "water",
    "spirit",
    "liqueur",
)

GENERIC_ERROR_MESSAGE = "An error occurred. Please try again."
