PAGE_SIZE = 10


class Paginator:
    def __init__(self, total_rows: int, page_size: int = PAGE_SIZE):
        self.page_size = max(1, page_size)
        self.page_index = 0
        self.total_rows = max(0, total_rows)
        self._clamp()

    def _clamp(self):
        max_page = self.page_count - 1
        self.page_index = max(0, min(self.page_index, max_page))

    def update_total_rows(self, total_rows: int):
        self.total_rows = max(0, total_rows)
        self._clamp()

    def set_page(self, page: int):
        """Jump to a 1-based page number, clamped into range."""
        self.page_index = page - 1
        self._clamp()

    def first_page(self):
        self.page_index = 0

    def last_page(self):
        self.page_index = self.page_count - 1

    def next_page(self):
        if self.page_end < self.total_rows:
            self.page_index += 1
            self._clamp()

    def prev_page(self):
        if self.page_index > 0:
            self.page_index -= 1
            self._clamp()

    @property
    def current_page(self) -> int:
        return self.page_index + 1

    @property
    def has_prev(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.page_count - 1

    @property
    def page_start(self) -> int:
        return self.page_index * self.page_size

    @property
    def page_end(self) -> int:
        return min(self.total_rows, self.page_start + self.page_size)

    @property
    def page_count(self) -> int:
        if self.total_rows == 0:
            return 1
        return (self.total_rows - 1) // self.page_size + 1
