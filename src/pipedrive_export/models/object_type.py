"""Supported Pipedrive object types."""

from enum import Enum


class ObjectType(str, Enum):
    """Record kinds that can be exported."""

    DEAL = "deal"
    PRODUCT = "product"
    ACTIVITY = "activity"
    LEAD = "lead"
    PERSON = "person"

    @classmethod
    def parse(cls, value: "str | ObjectType") -> "ObjectType":
        """Parse a case-insensitive name, accepting plurals like 'deals'."""
        if isinstance(value, ObjectType):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Object type must be a string, got {type(value).__name__}: {value!r}")
        name = value.strip().lower()
        for member in cls:
            if name in (member.value, member.plural):
                return member
        raise ValueError(
            f"Unknown object type: {value}. Available: {[m.value for m in cls]}"
        )

    @property
    def plural(self) -> str:
        if self is ObjectType.ACTIVITY:
            return "activities"
        return f"{self.value}s"
