"""
Presence validation for submitted articles.
"""
from typing import Any, Dict, List, Tuple

REQUIRED_FIELDS = ("title", "content", "category", "author")


class ArticleValidator:
    """Checks that a submitted article carries every required field."""

    def __init__(self, required_fields: Tuple[str, ...] = REQUIRED_FIELDS):
        """
        Initialize validator.

        Args:
            required_fields: Field names that must be present and non-blank
        """
        self.required_fields = required_fields

    def validate(self, fields: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate a submitted article payload.

        Args:
            fields: Submitted article fields

        Returns:
            Tuple of (is_valid, list_of_missing_fields)
        """
        missing = [name for name in self.required_fields if self.is_missing(fields.get(name))]
        return len(missing) == 0, missing

    @staticmethod
    def is_missing(value: Any) -> bool:
        """A value is missing when absent, None, or a blank string."""
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        return False
