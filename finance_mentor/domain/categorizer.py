"""Category and type resolution for imported transactions"""

from typing import Optional, Tuple

from finance_mentor.domain.models import Category, TransactionType

# Ordered: the first entry with a keyword found in the description wins.
KEYWORD_RULES: Tuple[Tuple[Tuple[str, ...], Category], ...] = (
    (("grocery", "food", "mart"), Category.FOOD),
    (("rent", "mortgage"), Category.HOUSING),
    (("salary", "payroll", "deposit"), Category.INCOME),
    (("uber", "lyft", "gas", "fuel"), Category.TRANSPORT),
    (("electric", "water", "internet"), Category.UTILITIES),
    (("netflix", "movie", "cinema"), Category.ENTERTAINMENT),
    (("pharmacy", "doctor"), Category.HEALTH),
    (("amazon", "store"), Category.SHOPPING),
)

INCOME_TYPE_MARKERS = frozenset({"income", "credit", "cr"})

NEEDS = "needs"
WANTS = "wants"
SAVINGS = "savings"


def match_category_label(category_cell: Optional[str]) -> Optional[Category]:
    """Exact, case-insensitive match against the category labels"""
    if not category_cell:
        return None
    wanted = category_cell.strip().lower()
    for category in Category:
        if category.value.lower() == wanted:
            return category
    return None


def guess_category(description: Optional[str]) -> Category:
    """Keyword heuristic over the description, MISCELLANEOUS when nothing matches"""
    text = (description or "").lower()
    for keywords, category in KEYWORD_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return Category.MISCELLANEOUS


def resolve(
    category_cell: Optional[str],
    type_cell: Optional[str],
    description: Optional[str],
) -> Tuple[Category, TransactionType]:
    """
    Resolve (category, type) for a raw row.

    Precedence:
    1. Exact label match on the category cell
    2. Keyword scan of the description
    3. MISCELLANEOUS

    An INCOME category always yields INCOME type. Otherwise a type cell of
    income/credit/cr makes the row INCOME and overrides the category to INCOME,
    keeping category == INCOME <=> type == INCOME.

    Example:
        resolve("Food & Dining", "", "rent-a-car") -> (FOOD, EXPENSE)
        resolve("Shopping", "credit", "refund")   -> (INCOME, INCOME)
    """
    category = match_category_label(category_cell)
    if category is None:
        category = guess_category(description)

    if category == Category.INCOME:
        return category, TransactionType.INCOME

    if (type_cell or "").strip().lower() in INCOME_TYPE_MARKERS:
        return Category.INCOME, TransactionType.INCOME

    return category, TransactionType.EXPENSE


def budget_bucket(category: Category) -> str:
    """Map a category onto the 50/30/20 rule (needs, wants, savings)"""
    if category == Category.HOUSING:
        return NEEDS
    elif category == Category.FOOD:
        return NEEDS
    elif category == Category.TRANSPORT:
        return NEEDS
    elif category == Category.UTILITIES:
        return NEEDS
    elif category == Category.HEALTH:
        return NEEDS
    elif category == Category.ENTERTAINMENT:
        return WANTS
    elif category == Category.SHOPPING:
        return WANTS
    elif category == Category.MISCELLANEOUS:
        return WANTS
    elif category == Category.INVESTMENT:
        return SAVINGS
    elif category == Category.INCOME:
        return SAVINGS
    raise ValueError(f"Unhandled category: {category!r}")
