import curses


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_ROW_ACTIVE = 2
    PAIR_EDIT_FIELD = 3
    MAX_COL_WIDTH = 40
    CHECK_W = 3
    HEADERS = (("name", "Name"), ("email", "Email"), ("role", "Role"))

    def __init__(self):
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(
                self.PAIR_ROW_ACTIVE, curses.COLOR_BLACK, curses.COLOR_WHITE
            )
            curses.init_pair(self.PAIR_EDIT_FIELD, curses.COLOR_BLACK, curses.COLOR_CYAN)
        except curses.error:
            pass

        self.curr_row = 0  # index into the current page slice

    # ---------- cursor ----------
    def clamp_cursor(self, n_rows: int):
        self.curr_row = max(0, min(self.curr_row, max(0, n_rows - 1)))

    def move_down(self, n_rows: int):
        self.curr_row = min(max(0, n_rows - 1), self.curr_row + 1)

    def move_up(self):
        self.curr_row = max(0, self.curr_row - 1)

    def focused_id(self, page_records):
        if not page_records:
            return None
        self.clamp_cursor(len(page_records))
        return page_records[self.curr_row]["id"]

    # ---------- layout ----------
    def compute_widths(self, page_records, width: int) -> list[int]:
        widths = []
        for key, title in self.HEADERS:
            max_len = len(title)
            for rec in page_records:
                max_len = max(max_len, len(str(rec.get(key, ""))))
            widths.append(min(self.MAX_COL_WIDTH, max_len + 2))

        # shrink the widest column until the row fits
        avail = max(len(widths), width - (self.CHECK_W + 1) - len(widths))
        while sum(widths) > avail and max(widths) > 1:
            i = widths.index(max(widths))
            widths[i] -= 1
        return widths

    @staticmethod
    def _checkbox(checked: bool) -> str:
        return "[x]" if checked else "[ ]"

    # ---------- rendering ----------
    def draw(self, win, state, editor=None, active=True):
        win.erase()
        try:
            win.bkgd(" ", curses.color_pair(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()

        page_records = state.page_records()
        self.clamp_cursor(len(page_records))
        widths = self.compute_widths(page_records, w)

        # header
        try:
            win.addnstr(0, 0, self._checkbox(state.select_all_checked), self.CHECK_W, curses.A_BOLD)
            x = self.CHECK_W + 1
            for (_, title), cw in zip(self.HEADERS, widths):
                win.addnstr(0, x, title.ljust(cw), cw, curses.A_BOLD)
                x += cw + 1
        except curses.error:
            pass

        if not page_records:
            msg = "No matching records" if state.query else "No records"
            try:
                win.addnstr(2, self.CHECK_W + 1, msg, max(1, w - self.CHECK_W - 2))
            except curses.error:
                pass
            win.refresh()
            return

        base_y = 1
        for i, rec in enumerate(page_records):
            y = base_y + i
            if y >= h:
                break
            rid = rec["id"]
            focused = active and i == self.curr_row
            row_attr = (
                curses.color_pair(self.PAIR_ROW_ACTIVE)
                if focused
                else curses.color_pair(self.PAIR_CELL_TEXT)
            )
            editing = bool(rec.get("editing"))
            try:
                win.addnstr(y, 0, self._checkbox(state.is_selected(rid)), self.CHECK_W, row_attr)
                x = self.CHECK_W + 1
                for (key, _), cw in zip(self.HEADERS, widths):
                    text = str(rec.get(key, ""))
                    attr = row_attr
                    if editing:
                        attr = row_attr | curses.A_UNDERLINE
                        if (
                            editor is not None
                            and editor.active
                            and editor.record_id == rid
                            and editor.field == key
                        ):
                            attr = curses.color_pair(self.PAIR_EDIT_FIELD)
                            # keep the edit cursor inside the cell
                            start = max(0, editor.cursor - cw + 1)
                            text = editor.buffer[start:]
                    win.addnstr(y, x, text[:cw].ljust(cw), cw, attr)
                    x += cw + 1
            except curses.error:
                pass

        win.refresh()
