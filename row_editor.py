import curses

from table_state import EDITABLE_FIELDS


class RowEditor:
    """Inline editor for one row; writes through to the state on every keystroke."""

    def __init__(self, state, set_status_cb):
        self.state = state
        self._set_status = set_status_cb

        self.active = False
        self.record_id = None
        self.field_idx = 0
        self.buffer = ""
        self.cursor = 0

    @property
    def field(self) -> str:
        return EDITABLE_FIELDS[self.field_idx]

    # ---------- lifecycle ----------
    def start(self, record_id, field: str = "name"):
        if self.state.record(record_id) is None:
            return False
        if self.active and self.record_id != record_id:
            self.commit()
        self.state.begin_edit(record_id)
        self.active = True
        self.record_id = record_id
        self.field_idx = EDITABLE_FIELDS.index(field) if field in EDITABLE_FIELDS else 0
        self._load_field()
        self._set_status("Editing (Tab: next field, Enter: save)", 3)
        return True

    def commit(self):
        if not self.active:
            return
        self.state.commit_edit(self.record_id)
        self._reset()

    def _reset(self):
        self.active = False
        self.record_id = None
        self.field_idx = 0
        self.buffer = ""
        self.cursor = 0

    def _load_field(self):
        rec = self.state.record(self.record_id)
        self.buffer = "" if rec is None else str(rec.get(self.field, ""))
        self.cursor = len(self.buffer)

    def _cycle_field(self, delta: int):
        self.field_idx = (self.field_idx + delta) % len(EDITABLE_FIELDS)
        self._load_field()

    def _write(self, text, cursor):
        self.buffer = text
        self.cursor = cursor
        self.state.set_field(self.record_id, self.field, self.buffer)

    # ---------- input handling ----------
    def handle_key(self, ch):
        if not self.active:
            return None

        # row deleted from under us (reload or race)
        if self.state.record(self.record_id) is None:
            self._reset()
            return "done"

        if ch in (10, 13, 27):  # Enter / Esc both keep the typed values
            self.commit()
            return "done"

        if ch == 9:  # Tab
            self._cycle_field(1)
            return None

        if ch == curses.KEY_BTAB:
            self._cycle_field(-1)
            return None

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self._write(
                    self.buffer[: self.cursor - 1] + self.buffer[self.cursor :],
                    self.cursor - 1,
                )
            return None

        if ch == 21:  # Ctrl+U
            if self.cursor > 0:
                self._write(self.buffer[self.cursor :], 0)
            return None

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return None

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None

        if ch in (curses.KEY_HOME, 1):
            self.cursor = 0
            return None

        if ch in (curses.KEY_END, 5):
            self.cursor = len(self.buffer)
            return None

        if 32 <= ch <= 126:
            self._write(
                self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :],
                self.cursor + 1,
            )
            return None

        return None
