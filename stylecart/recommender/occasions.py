"""Occasions offered on the stylist page and the catalog tags they match."""

from __future__ import annotations

from enum import Enum


class Occasion(str, Enum):
    """Event types a shopper can dress for."""

    CASUAL = "casual"
    OFFICE = "office"
    PARTY = "party"
    FORMAL = "formal"
    SUMMER = "summer"
    WINTER = "winter"

    @classmethod
    def parse(cls, value: "str | Occasion") -> "Occasion":
        """Return the occasion for ``value``; raises ``ValueError`` if unknown."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            known = ", ".join(occasion.value for occasion in cls)
            raise ValueError(f"Unknown occasion {value!r}; expected one of: {known}") from exc

    @property
    def tags(self) -> frozenset[str]:
        return OCCASION_TAGS[self]


OCCASION_TAGS: dict[Occasion, frozenset[str]] = {
    Occasion.CASUAL: frozenset({"casual", "everyday", "comfortable"}),
    Occasion.OFFICE: frozenset({"office", "professional", "formal"}),
    Occasion.PARTY: frozenset({"party", "evening", "trendy"}),
    Occasion.FORMAL: frozenset({"formal", "elegant"}),
    Occasion.SUMMER: frozenset({"summer", "lightweight"}),
    Occasion.WINTER: frozenset({"winter", "cozy"}),
}
