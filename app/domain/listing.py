"""Value objects for the paginated user listing.

Sort and search arrive from the query string as ``"field:value"`` strings.
They are parsed here into validated specs so the repositories never see raw
input and malformed values are rejected before touching the store.
"""
import math
from dataclasses import dataclass, field

from app.domain.enums import SearchField, SortField, SortOrder
from app.domain.errors import InvalidQueryError

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT = "email:asc"


def _split_spec(raw: str) -> tuple[str, str | None]:
    if ":" not in raw:
        return raw.strip(), None
    name, value = raw.split(":", 1)
    return name.strip(), value


@dataclass(frozen=True)
class SortSpec:
    field: SortField = SortField.EMAIL
    order: SortOrder = SortOrder.ASC

    @classmethod
    def parse(cls, raw: str | None) -> "SortSpec":
        """Parse ``"field:order"``. An absent order means ascending."""
        if raw is None or not raw.strip():
            raw = DEFAULT_SORT
        name, order = _split_spec(raw)
        try:
            sort_field = SortField(name.lower())
        except ValueError:
            allowed = ", ".join(f.value for f in SortField)
            raise InvalidQueryError(
                f"Unknown sort field '{name}'. Allowed: {allowed}."
            ) from None
        return cls(field=sort_field, order=SortOrder.parse(order))

    def __str__(self) -> str:
        return f"{self.field.value}:{self.order.value}"


@dataclass(frozen=True)
class SearchSpec:
    """Case-insensitive substring filter on one user field."""

    field: SearchField
    term: str

    @classmethod
    def parse(cls, raw: str | None) -> "SearchSpec | None":
        """Parse ``"field:term"``; a bare term searches by email.

        Returns None when there is nothing to filter on.
        """
        if raw is None or not raw.strip():
            return None
        name, term = _split_spec(raw)
        if term is None:
            name, term = SearchField.EMAIL.value, name
        if not name:
            raise InvalidQueryError("Search field is missing.")
        try:
            search_field = SearchField(name.lower())
        except ValueError:
            allowed = ", ".join(f.value for f in SearchField)
            raise InvalidQueryError(
                f"Unknown search field '{name}'. Allowed: {allowed}."
            ) from None
        if not term:
            return None
        return cls(field=search_field, term=term)

    def matches(self, value: str | None) -> bool:
        return value is not None and self.term.lower() in value.lower()


@dataclass
class PagedResult:
    page_number: int
    page_size: int
    total: int
    data: list = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.data)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    def to_dict(self) -> dict:
        return {
            "page_number": self.page_number,
            "page_size": self.page_size,
            "count": self.count,
            "total_pages": self.total_pages,
            "has_previous_page": self.has_previous_page,
            "has_next_page": self.has_next_page,
            "data": self.data,
        }


def validate_page(page_number: int, page_size: int) -> None:
    if page_number < 1:
        raise InvalidQueryError("page_number must be 1 or greater.")
    if page_size < 1:
        raise InvalidQueryError("page_size must be 1 or greater.")
