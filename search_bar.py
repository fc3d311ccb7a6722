import curses


class SearchBar:
    """Single-line search input; every edit re-filters the table live."""

    PROMPT = "Search: "

    def __init__(self, state):
        self.state = state
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.active = False

    # ---------- state helpers ----------
    def activate(self):
        self.active = True
        self.cursor = max(0, min(self.cursor, len(self.buffer)))

    def sync(self):
        """Pull the buffer back from the engine (after a reload resets the query)."""
        if self.buffer != self.state.query:
            self.buffer = self.state.query
            self.cursor = len(self.buffer)
            self.hscroll = 0

    def _set_buffer(self, text, cursor):
        changed = text != self.buffer
        self.buffer = text
        self.cursor = cursor
        if changed:
            self.state.set_filter_query(self.buffer)

    @staticmethod
    def _is_word_char(ch: str) -> bool:
        return ch.isalnum() or ch == "_"

    def _word_boundary_left(self):
        i = self.cursor
        while i > 0 and not self._is_word_char(self.buffer[i - 1]):
            i -= 1
        while i > 0 and self._is_word_char(self.buffer[i - 1]):
            i -= 1
        return i

    # ---------- input handling ----------
    def handle_key(self, ch):
        if not self.active:
            return None

        if ch in (10, 13, 27):  # Enter / Esc
            self.active = False
            return "done"

        if ch == 23:  # Ctrl+W, delete word backward
            start = self._word_boundary_left()
            if start < self.cursor:
                self._set_buffer(self.buffer[:start] + self.buffer[self.cursor :], start)
            return None

        if ch == 21:  # Ctrl+U, kill to line start
            if self.cursor > 0:
                self._set_buffer(self.buffer[self.cursor :], 0)
            return None

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self._set_buffer(
                    self.buffer[: self.cursor - 1] + self.buffer[self.cursor :],
                    self.cursor - 1,
                )
            return None

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return None

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None

        if ch in (curses.KEY_HOME, 1):  # Home or Ctrl+A
            self.cursor = 0
            return None

        if ch in (curses.KEY_END, 5):  # End or Ctrl+E
            self.cursor = len(self.buffer)
            return None

        if 32 <= ch <= 126:
            self._set_buffer(
                self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :],
                self.cursor + 1,
            )
            return None

        return None

    # ---------- rendering ----------
    def draw(self, win):
        win.erase()
        h, w = win.getmaxyx()
        prompt = self.PROMPT
        text_w = max(1, w - len(prompt) - 1)

        # adjust scroll to keep cursor visible
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]
        attr = curses.A_BOLD if self.active else curses.A_DIM

        try:
            win.addnstr(0, 0, prompt, len(prompt), attr)
            win.addnstr(0, len(prompt), visible, text_w)
        except curses.error:
            pass

        if self.active:
            cx = len(prompt) + (self.cursor - self.hscroll)
            try:
                win.move(0, max(0, min(cx, w - 1)))
            except curses.error:
                pass

        win.refresh()
