from typing import Final

ROLES: Final[tuple[str, ...]] = ("admin", "trainer", "customer")

ALLOWED_IMAGE_TYPES: Final[frozenset[str]] = frozenset({"image/jpeg", "image/png", "image/webp"})
MAX_IMAGE_SIZE: Final[int] = 5 * 1024 * 1024  # 5MB

GOAL_STATUSES: Final[tuple[str, ...]] = ("active", "achieved", "paused")
ASSIGNMENT_STATUSES: Final[tuple[str, ...]] = ("active", "completed", "paused")
INTENSITIES: Final[tuple[str, ...]] = ("low", "moderate", "high", "gentle", "intensive")

DATE_FORMAT: Final[str] = "%Y-%m-%d"
PDF_DATE_FORMAT: Final[str] = "%B %d, %Y"

PDF_BRAND_NAME: Final[str] = "EvoFit Meals"
PDF_BRAND_TAGLINE: Final[str] = "Transform Your Nutrition, Transform Your Life"
PDF_COLORS: Final[dict[str, str]] = {
    "primary": "#EB5757",
    "accent": "#27AE60",
    "text": "#333333",
    "grey": "#F2F2F2",
}

PROTOCOL_PROMPT_TEMPLATE: Final[str] = (
    """
    You are assisting a certified fitness trainer. Given the health protocol below,
    return a JSON list of short, practical recommendations (strings only).
    Never give medical diagnoses; refer to a healthcare provider where relevant.

    """
)
