"""Page and list-state entities for paginated resources."""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Pagination:
    """Pagination block attached to list responses."""

    page: Optional[int] = None
    total_pages: Optional[int] = None
    limit: Optional[int] = None
    total: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pagination":
        return cls(
            page=_as_int(data.get("page")),
            total_pages=_as_int(data.get("totalPages")),
            limit=_as_int(data.get("limit")),
            total=_as_int(data.get("total")),
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One server batch of list items plus optional pagination metadata."""

    items: List[T]
    page_number: int
    pagination: Optional[Pagination] = None

    @classmethod
    def from_response(cls, response: Any, page_number: int) -> "Page[Any]":
        """Accept ``{data: [...], pagination: {...}}``, a bare list or anything else.

        Anything that is neither shape is an empty page.
        """
        items: List[Any] = []
        pagination = None
        if isinstance(response, dict) and isinstance(response.get("data"), list):
            items = list(response["data"])
            if isinstance(response.get("pagination"), dict):
                pagination = Pagination.from_dict(response["pagination"])
        elif isinstance(response, list):
            items = list(response)
        return cls(items=items, page_number=page_number, pagination=pagination)

    def resolve_position(self, page_size: int) -> Tuple[int, int]:
        """Return ``(current_page, total_pages)`` after this page is applied.

        Without pagination metadata a short page is taken as the last one and
        a full page as a sign that one more page exists. The guess can be
        wrong both ways when the backend omits metadata.
        """
        if self.pagination is not None:
            current = self.pagination.page or self.page_number
            total = self.pagination.total_pages or 1
            return current, total
        if len(self.items) < page_size:
            return self.page_number, self.page_number
        return self.page_number, self.page_number + 1


@dataclass
class ListState(Generic[T]):
    """Accumulated list for one screen."""

    items: List[T] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 1
    is_loading_initial: bool = False
    is_loading_more: bool = False

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
