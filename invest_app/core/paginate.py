import math


class PaginatePage:
    max_per_page: int = 100

    def clamp(self, page: int, per_page: int) -> tuple[int, int]:
        page = max(page, 1)
        per_page = min(max(per_page, 1), self.max_per_page)
        return page, per_page

    def offset(self, page: int, per_page: int) -> int:
        return (page - 1) * per_page

    def meta(self, page: int, per_page: int, total: int) -> dict:
        return {
            "page": page,
            "limit": per_page,
            "total": total,
            "pages": math.ceil(total / per_page) if per_page else 0,
        }
