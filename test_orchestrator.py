import unittest
from unittest.mock import patch

import orchestrator
from loading_screen import LoadState
from record_source import LoadFailure
from table_state import TableState
from test_table_state import FakeSource, _members


class DummyLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr


class OrchestratorKeyTests(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(orchestrator, "ScreenLayout", DummyLayout)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _orch(self, n=25, source=None):
        state = TableState()
        orch = orchestrator.Orchestrator(object(), state, source)
        load_state = LoadState()
        load_state.records = _members(n)
        orch.apply_initial_load(load_state)
        return orch, state

    def _keys(self, orch, keys):
        for k in keys:
            orch.handle_key(ord(k) if isinstance(k, str) else k)

    def test_space_toggles_focused_row(self):
        orch, state = self._orch()
        self._keys(orch, ["j", "j", " "])
        self.assertEqual(state.selection, frozenset({"3"}))
        self._keys(orch, [" "])
        self.assertEqual(state.selection, frozenset())

    def test_search_then_select_all_then_delete(self):
        orch, state = self._orch()
        self._keys(orch, ["/", "a", "d", "m", 10])
        self.assertEqual(orch.focus, "table")
        self.assertEqual(state.query, "adm")

        self._keys(orch, ["a", "D"])

        self.assertEqual(state.record_count, 22)
        self.assertEqual(state.selection, frozenset())
        self.assertEqual(orch.status_msg, "Deleted 3 rows")

    def test_delete_selected_disabled_when_nothing_selected(self):
        orch, state = self._orch()
        self._keys(orch, ["D"])
        self.assertEqual(state.record_count, 25)
        self.assertEqual(orch.status_msg, "Nothing selected")

    def test_per_row_delete_removes_focused_row_only(self):
        orch, state = self._orch()
        self._keys(orch, [" ", "j", "d"])
        self.assertIsNone(state.record("2"))
        self.assertEqual(state.selection, frozenset({"1"}))

    def test_page_keys_respect_boundaries(self):
        orch, state = self._orch()
        self._keys(orch, ["p"])
        self.assertEqual(orch.status_msg, "Already on first page")
        self._keys(orch, ["j", "n"])
        self.assertEqual(state.current_page, 2)
        self.assertEqual(orch.grid.curr_row, 0)
        self._keys(orch, ["G"])
        self.assertEqual(state.current_page, 3)
        self._keys(orch, ["n"])
        self.assertEqual(orch.status_msg, "Already on last page")
        self._keys(orch, ["g"])
        self.assertEqual(state.current_page, 1)

    def test_edit_flow(self):
        orch, state = self._orch()
        self._keys(orch, ["j", "e"])
        self.assertEqual(orch.focus, "edit")
        self.assertTrue(state.is_editing("2"))
        self._keys(orch, [21] + list("Alice") + [10])
        self.assertEqual(orch.focus, "table")
        self.assertEqual(state.record("2")["name"], "Alice")
        self.assertFalse(state.is_editing("2"))

    def test_quit_keys(self):
        orch, _ = self._orch()
        self._keys(orch, ["/"])
        self._keys(orch, ["q"])
        self.assertFalse(orch.exit_requested)
        self._keys(orch, [24])
        self.assertTrue(orch.exit_requested)

    def test_failed_initial_load_then_retry(self):
        source = FakeSource(error=LoadFailure("Fetch failed: offline"))
        state = TableState()
        orch = orchestrator.Orchestrator(object(), state, source)
        load_state = LoadState()
        load_state.error = LoadFailure("Fetch failed: offline")

        self.assertFalse(orch.apply_initial_load(load_state))
        self.assertIn("r to retry", orch.status_msg)

        self._keys(orch, ["r"])
        self.assertEqual(state.record_count, 0)
        self.assertIn("Load failed", orch.status_msg)

        source.error = None
        source.records = _members(12)
        self._keys(orch, ["r"])
        self.assertEqual(state.record_count, 12)
        self.assertEqual(orch.status_msg, "Loaded 12 records")

    def test_reload_resets_search_bar(self):
        orch, state = self._orch(source=FakeSource(records=_members(4)))
        self._keys(orch, ["/", "a", "d", 27, "r"])
        self.assertEqual(state.query, "")
        self.assertEqual(orch.search.buffer, "")
        self.assertEqual(state.record_count, 4)

    def test_status_context_reflects_page(self):
        orch, state = self._orch()
        state.set_page(3)
        ctx = orch._status_context()
        self.assertEqual(ctx["page_index"], 3)
        self.assertEqual(ctx["page_total"], 3)
        self.assertEqual((ctx["page_start"], ctx["page_end"]), (20, 25))
        self.assertEqual(ctx["record_total"], 25)

    def test_digits_then_enter_jump_to_page(self):
        orch, state = self._orch()
        self._keys(orch, ["j", "2"])
        self.assertEqual(orch.status_msg, "Go to page: 2")
        self._keys(orch, [10])
        self.assertEqual(state.current_page, 2)
        self.assertEqual(orch.grid.curr_row, 0)
        self.assertEqual(orch.focus, "table")
        self.assertEqual(orch.status_msg, "Page 2/3")

    def test_page_jump_is_clamped(self):
        orch, state = self._orch()
        self._keys(orch, ["9", "9", 13])
        self.assertEqual(state.current_page, 3)
        self._keys(orch, ["0", 10])
        self.assertEqual(state.current_page, 1)

    def test_other_key_cancels_pending_page(self):
        orch, state = self._orch()
        self._keys(orch, ["2", "j", 10])
        self.assertIsNone(orch.pending_page)
        self.assertEqual(state.current_page, 1)
        self.assertEqual(orch.focus, "edit")

    def test_enter_without_digits_still_edits(self):
        orch, state = self._orch()
        self._keys(orch, [10])
        self.assertEqual(orch.focus, "edit")
        self.assertTrue(state.is_editing("1"))


if __name__ == "__main__":
    unittest.main()
