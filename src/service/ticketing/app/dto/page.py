import math
from typing import Generic, List, TypeVar

import attrs


_T = TypeVar('_T')

MAX_PAGE_LIMIT = 100


@attrs.frozen
class PageRequest:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@attrs.frozen
class Page(Generic[_T]):
    items: List[_T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
