"""
Page/size arithmetic shared by every list endpoint.
Out-of-range values are rejected, never clamped.
"""
import math
from dataclasses import dataclass
from typing import Optional
from app.config import settings
from app.utils.exceptions import ValidationError


@dataclass(frozen=True)
class Pager:
    page: int
    size: int

    @classmethod
    def from_params(cls, page: Optional[int] = None, size: Optional[int] = None) -> "Pager":
        page = 1 if page is None else page
        size = settings.DEFAULT_PAGE_SIZE if size is None else size

        errors = []
        if page < 1:
            errors.append({"field": "page", "message": "Page must be a positive integer"})
        if size < 1 or size > settings.MAX_PAGE_SIZE:
            errors.append({
                "field": "limit",
                "message": f"Limit must be between 1 and {settings.MAX_PAGE_SIZE}",
            })
        if errors:
            raise ValidationError("Validation errors", field_errors=errors)

        return cls(page=page, size=size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    def pages(self, total: int) -> int:
        return math.ceil(total / self.size) if total else 0

    def meta(self, total: int, count: int) -> dict:
        """Pagination block merged into list responses"""
        return {
            "count": count,
            "total": total,
            "page": self.page,
            "pages": self.pages(total),
        }
