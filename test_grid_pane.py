import pytest

import grid_pane
from grid_pane import GridPane
from row_editor import RowEditor
from table_state import TableState
from test_table_state import _members


class DummyWin:
    def __init__(self, h=14, w=80):
        self._h = h
        self._w = w
        self.lines = {}

    def getmaxyx(self):
        return self._h, self._w

    def erase(self):
        self.lines = {}

    def bkgd(self, *_):
        pass

    def refresh(self):
        pass

    def addnstr(self, y, x, text, n, attr=0):
        row = self.lines.setdefault(y, [" "] * self._w)
        for i, ch in enumerate(text[:n]):
            if x + i < self._w:
                row[x + i] = ch

    def text(self, y):
        return "".join(self.lines.get(y, [])).rstrip()


@pytest.fixture
def no_colors(monkeypatch):
    monkeypatch.setattr(grid_pane.curses, "color_pair", lambda _n: 0)


def _state(n=25):
    state = TableState()
    state.load(_members(n))
    return state


def test_compute_widths_fits_longest_value():
    grid = GridPane()
    recs = [{"name": "Ann", "email": "ann@example.com", "role": "admin"}]
    assert grid.compute_widths(recs, 120) == [6, 17, 7]


def test_compute_widths_shrinks_to_window():
    grid = GridPane()
    recs = [{"name": "n" * 40, "email": "e" * 40, "role": "r" * 40}]
    widths = grid.compute_widths(recs, 60)
    assert sum(widths) + len(widths) + GridPane.CHECK_W + 1 <= 60


def test_focused_id_clamps_cursor_to_page():
    grid = GridPane()
    state = _state(25)
    state.last_page()
    grid.curr_row = 9
    assert grid.focused_id(state.page_records()) == "25"
    assert grid.curr_row == 4
    assert grid.focused_id([]) is None


def test_draw_renders_checkboxes_and_page(no_colors):
    grid = GridPane()
    state = _state(25)
    state.toggle_select("2")
    win = DummyWin()

    grid.draw(win, state)

    assert win.text(0).startswith("[ ] Name")
    assert win.text(1).startswith("[ ] Member 1 ")
    assert win.text(2).startswith("[x] Member 2 ")
    assert win.text(10).startswith("[ ] Member 10")
    assert win.text(11) == ""


def test_draw_select_all_header_and_empty_view(no_colors):
    grid = GridPane()
    state = _state(25)
    state.set_filter_query("adm")
    state.toggle_select_all()
    win = DummyWin()
    grid.draw(win, state)
    assert win.text(0).startswith("[x]")

    state.set_filter_query("nobody")
    grid.draw(win, state)
    assert win.text(0).startswith("[ ]")
    assert "No matching records" in win.text(2)


def test_draw_shows_editor_buffer(no_colors):
    grid = GridPane()
    state = _state(3)
    editor = RowEditor(state, lambda *_: None)
    editor.start("1")
    editor.handle_key(ord("!"))
    win = DummyWin()
    grid.draw(win, state, editor=editor)
    assert "Member 1!" in win.text(1)
