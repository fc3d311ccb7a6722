import curses
import time

from grid_pane import GridPane
from record_source import LoadFailure
from row_editor import RowEditor
from screen_layout import ScreenLayout
from search_bar import SearchBar
from status_bar import render_status


HELP_TEXT = (
    "j/k move  space select  a all  D delete selected  d delete row  "
    "e edit  / search  n/p page  g/G first/last  <N>Enter go to page  "
    "r reload  q quit"
)


class Orchestrator:
    def __init__(self, stdscr, table_state, source=None):
        self.stdscr = stdscr
        self.state = table_state
        self.source = source

        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane()
        self.search = SearchBar(table_state)
        self.editor = RowEditor(table_state, self._set_status)

        self.focus = "table"  # table | search | edit
        self.exit_requested = False
        self.pending_page: int | None = None

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        self.state.set_status_callback(self._set_status)

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _focused_id(self):
        return self.grid.focused_id(self.state.page_records())

    def _page_len(self):
        return len(self.state.page_slice())

    def _status_context(self):
        p = self.state.paginator
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": {"table": "TABLE", "search": "SEARCH", "edit": "EDIT"}[self.focus],
            "source": self.source.describe() if self.source is not None else "",
            "query": self.state.query,
            "selected": self.state.visible_selected_count,
            "page_index": p.current_page,
            "page_total": p.page_count,
            "page_start": p.page_start,
            "page_end": p.page_end,
            "total_rows": p.total_rows,
            "record_total": self.state.record_count,
        }

    # ---------------- commands ----------------

    def apply_initial_load(self, load_state):
        if load_state.error is not None:
            self._set_status(f"Load failed: {load_state.error} (r to retry)", 8)
            return False
        try:
            self.state.load(load_state.records or [])
        except LoadFailure as exc:
            self._set_status(f"Load failed: {exc} (r to retry)", 8)
            return False
        self.search.sync()
        self.grid.curr_row = 0
        return True

    def reload(self):
        if self.source is None:
            self._set_status("No source to reload from", 3)
            return False
        if self.editor.active:
            self.editor.commit()
        ok = self.state.load_from(self.source)
        self.search.sync()
        self.grid.curr_row = 0
        return ok

    def _change_page(self, action):
        p = self.state.paginator
        if action in ("next", "last") and not p.has_next:
            self._set_status("Already on last page", 2)
            return
        if action in ("prev", "first") and not p.has_prev:
            self._set_status("Already on first page", 2)
            return
        {
            "next": self.state.next_page,
            "prev": self.state.prev_page,
            "first": self.state.first_page,
            "last": self.state.last_page,
        }[action]()
        self.grid.curr_row = 0

    def _push_page_digit(self, digit: int):
        if self.pending_page is None:
            self.pending_page = digit
        else:
            self.pending_page = min(9999, self.pending_page * 10 + digit)
        self._set_status(f"Go to page: {self.pending_page}", 3)

    def _jump_to_pending_page(self):
        page = self.pending_page
        self.pending_page = None
        self.state.set_page(page)
        self.grid.curr_row = 0
        self._set_status(f"Page {self.state.current_page}/{self.state.page_count}", 2)

    def _delete_selected(self):
        if not self.state.can_delete:
            self._set_status("Nothing selected", 2)
            return
        self.state.delete_selected()
        self.grid.clamp_cursor(self._page_len())

    def _delete_focused(self):
        rid = self._focused_id()
        if rid is None:
            self._set_status("No rows", 2)
            return
        if self.editor.active and self.editor.record_id == rid:
            self.editor.commit()
        self.state.delete_row(rid)
        self.grid.clamp_cursor(self._page_len())

    def _start_edit(self):
        rid = self._focused_id()
        if rid is None:
            self._set_status("No rows", 2)
            return
        if self.editor.start(rid):
            self.focus = "edit"

    # ---------------- input ----------------

    def handle_key(self, ch):
        if ch == 24:  # Ctrl+X quits from any focus
            self.exit_requested = True
            return

        if self.focus == "search":
            result = self.search.handle_key(ch)
            self.grid.curr_row = 0
            if result == "done":
                self.focus = "table"
            return

        if self.focus == "edit":
            result = self.editor.handle_key(ch)
            if result == "done":
                self.focus = "table"
                self.grid.clamp_cursor(self._page_len())
            return

        if ord("0") <= ch <= ord("9"):
            self._push_page_digit(ch - ord("0"))
            return
        if ch in (10, 13) and self.pending_page is not None:
            self._jump_to_pending_page()
            return
        self.pending_page = None

        if ch in (ord("q"), 3):  # q / Ctrl+C
            self.exit_requested = True
        elif ch in (ord("j"), curses.KEY_DOWN):
            self.grid.move_down(self._page_len())
        elif ch in (ord("k"), curses.KEY_UP):
            self.grid.move_up()
        elif ch == ord(" "):
            rid = self._focused_id()
            if rid is not None:
                self.state.toggle_select(rid)
        elif ch == ord("a"):
            self.state.toggle_select_all()
        elif ch == ord("D"):
            self._delete_selected()
        elif ch == ord("d"):
            self._delete_focused()
        elif ch in (ord("e"), 10, 13):
            self._start_edit()
        elif ch == ord("/"):
            self.search.activate()
            self.focus = "search"
        elif ch in (ord("n"), curses.KEY_NPAGE):
            self._change_page("next")
        elif ch in (ord("p"), curses.KEY_PPAGE):
            self._change_page("prev")
        elif ch in (ord("g"), curses.KEY_HOME):
            self._change_page("first")
        elif ch in (ord("G"), curses.KEY_END):
            self._change_page("last")
        elif ch == ord("r"):
            self.reload()
        elif ch == ord("?"):
            self._set_status(HELP_TEXT, 8)

    # ---------------- UI ----------------

    def redraw(self):
        try:
            curses.curs_set(1 if self.focus == "search" else 0)
        except curses.error:
            pass

        self.grid.draw(
            self.layout.table_win,
            self.state,
            editor=self.editor,
            active=(self.focus != "search"),
        )

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        text = render_status(self._status_context(), w)
        try:
            sw.addnstr(0, 0, text, max(1, w - 1))
        except curses.error:
            pass
        sw.refresh()

        # search bar last so it keeps the terminal cursor
        self.search.draw(self.layout.search_win)

    # ---------------- main loop ----------------

    def run(self):
        curses.raw()
        self.stdscr.keypad(True)
        self.layout.table_win.keypad(True)
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while not self.exit_requested:
            ch = self.stdscr.getch()
            if ch == -1:
                self.redraw()
                continue
            self.handle_key(ch)
            self.redraw()
