"""Enums used by the user listing query."""
from enum import Enum


class SortField(str, Enum):
    NAME = "name"
    EMAIL = "email"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @staticmethod
    def parse(raw: str | None) -> "SortOrder":
        """Only an explicit ``desc`` sorts descending."""
        if raw and raw.strip().lower() == SortOrder.DESC.value:
            return SortOrder.DESC
        return SortOrder.ASC

    @property
    def descending(self) -> bool:
        return self is SortOrder.DESC


class SearchField(str, Enum):
    NAME = "name"
    EMAIL = "email"
