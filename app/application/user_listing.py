"""Use case: filtered, sorted, paginated view over the credential store."""
from app.domain.listing import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    PagedResult,
    SearchSpec,
    SortSpec,
    validate_page,
)


def list_users(
    user_repo,
    page_number: int = DEFAULT_PAGE_NUMBER,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort: str | None = DEFAULT_SORT,
    search: str | None = None,
) -> PagedResult:
    """
    Count every user matching ``search``, then fetch one sorted page.
    ``data`` holds User entities; projection is the caller's job.
    Raises InvalidQueryError on bad paging, sort or search input.
    """
    validate_page(page_number, page_size)
    sort_spec = SortSpec.parse(sort)
    search_spec = SearchSpec.parse(search)

    total = user_repo.count_matching(search_spec)
    users = user_repo.find_matching(
        search_spec,
        sort_spec,
        skip=(page_number - 1) * page_size,
        limit=page_size,
    )
    return PagedResult(
        page_number=page_number,
        page_size=page_size,
        total=total,
        data=users,
    )
