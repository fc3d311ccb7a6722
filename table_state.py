import numpy as np
import pandas as pd

from pagination import PAGE_SIZE, Paginator
from record_source import RECORD_FIELDS, LoadFailure


SEARCH_FIELDS = ("name", "email", "role")
EDITABLE_FIELDS = ("name", "email", "role")
COLUMNS = RECORD_FIELDS + ("editing",)


class TableState:
    """Owns the record set and keeps filter, selection, edit flags and page consistent.

    Every command recomputes what it invalidates before returning: the
    filtered view first, then the page clamp. Unknown ids are ignored
    rather than raised.
    """

    def __init__(self, set_status_cb=None, page_size: int = PAGE_SIZE):
        self._set_status = set_status_cb or (lambda _msg, _seconds=3: None)
        self._df = self._empty_frame()
        self._view = self._df
        self._query = ""
        self._selection: set[str] = set()
        self.paginator = Paginator(total_rows=0, page_size=page_size)

    def set_status_callback(self, cb):
        self._set_status = cb

    # ---------- loading ----------
    @staticmethod
    def _empty_frame() -> pd.DataFrame:
        return pd.DataFrame({c: pd.Series(dtype="object") for c in COLUMNS})

    def _build_frame(self, records) -> pd.DataFrame:
        rows = []
        seen = set()
        for idx, rec in enumerate(records or []):
            if not isinstance(rec, dict):
                raise LoadFailure(f"Record {idx} is not a mapping")
            missing = [f for f in RECORD_FIELDS if f not in rec]
            if missing:
                raise LoadFailure(f"Record {idx} missing {', '.join(missing)}")
            rid = str(rec["id"])
            if rid in seen:
                raise LoadFailure(f"Duplicate record id '{rid}'")
            seen.add(rid)
            row = {f: "" if rec[f] is None else str(rec[f]) for f in RECORD_FIELDS}
            row["editing"] = False
            rows.append(row)
        if not rows:
            return self._empty_frame()
        df = pd.DataFrame(rows, columns=list(COLUMNS))
        return df.astype({f: "object" for f in RECORD_FIELDS})

    def load(self, records):
        """Replace the record set wholesale and reset query, selection and page.

        Raises LoadFailure without touching current state if the records
        are malformed.
        """
        df = self._build_frame(records)
        self._df = df
        self._query = ""
        self._selection = set()
        self.paginator.first_page()
        self._recompute()
        n = len(df)
        self._set_status(f"Loaded {n} record{'s' if n != 1 else ''}", 3)

    def load_from(self, source) -> bool:
        try:
            records = source.fetch()
            self.load(records)
        except LoadFailure as exc:
            self._set_status(f"Load failed: {exc}", 6)
            return False
        return True

    # ---------- derivation ----------
    def _match_mask(self, df: pd.DataFrame) -> np.ndarray:
        if not self._query:
            return np.ones(len(df), dtype=bool)
        mask = np.zeros(len(df), dtype=bool)
        for field in SEARCH_FIELDS:
            hits = df[field].astype(str).str.contains(
                self._query, case=False, regex=False
            )
            mask |= hits.to_numpy(dtype=bool)
        return mask

    def _recompute(self):
        self._view = self._df[self._match_mask(self._df)]
        self.paginator.update_total_rows(len(self._view))

    def _row_mask(self, record_id) -> pd.Series:
        return self._df["id"] == str(record_id)

    def _visible_ids(self) -> set[str]:
        return set(self._view["id"])

    # ---------- filter ----------
    def set_filter_query(self, text: str):
        self._query = text or ""
        self._recompute()
        self.paginator.first_page()

    # ---------- selection ----------
    def toggle_select(self, record_id):
        rid = str(record_id)
        if rid not in self._visible_ids():
            return
        if rid in self._selection:
            self._selection.remove(rid)
        else:
            self._selection.add(rid)

    def toggle_select_all(self):
        if self.select_all_checked:
            self._selection = set()
        else:
            self._selection = self._visible_ids()

    def is_selected(self, record_id) -> bool:
        return str(record_id) in self._selection

    # ---------- deletion ----------
    def delete_selected(self) -> int:
        if not self._selection:
            self._set_status("Nothing selected", 2)
            return 0
        before = len(self._df)
        keep = ~self._df["id"].isin(self._selection)
        self._df = self._df[keep].reset_index(drop=True)
        self._selection = set()
        self._recompute()
        deleted = before - len(self._df)
        self._set_status(f"Deleted {deleted} row{'s' if deleted != 1 else ''}", 2)
        return deleted

    def delete_row(self, record_id) -> bool:
        """Delete one row by id, leaving the rest of the selection alone."""
        mask = self._row_mask(record_id)
        if not mask.any():
            return False
        self._df = self._df[~mask].reset_index(drop=True)
        self._selection.discard(str(record_id))
        self._recompute()
        self._set_status("Deleted 1 row", 2)
        return True

    # ---------- editing ----------
    def begin_edit(self, record_id):
        mask = self._row_mask(record_id)
        if mask.any():
            self._df.loc[mask, "editing"] = True
            self._recompute()

    def commit_edit(self, record_id):
        mask = self._row_mask(record_id)
        if mask.any():
            self._df.loc[mask, "editing"] = False
            self._recompute()
            self._set_status("Saved", 2)

    def set_field(self, record_id, field: str, value: str):
        # Permitted outside edit mode; the editing flag only drives rendering.
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' is not editable")
        mask = self._row_mask(record_id)
        if not mask.any():
            return
        self._df.loc[mask, field] = "" if value is None else str(value)
        self._recompute()

    def is_editing(self, record_id) -> bool:
        mask = self._row_mask(record_id)
        if not mask.any():
            return False
        return bool(self._df.loc[mask, "editing"].iloc[0])

    # ---------- pagination ----------
    def set_page(self, page: int):
        self.paginator.set_page(page)

    def first_page(self):
        self.paginator.first_page()

    def last_page(self):
        self.paginator.last_page()

    def next_page(self):
        self.paginator.next_page()

    def prev_page(self):
        self.paginator.prev_page()

    def page_slice(self) -> pd.DataFrame:
        start = self.paginator.page_start
        end = self.paginator.page_end
        return self._view.iloc[start:end].copy()

    def page_records(self) -> list[dict]:
        return self.page_slice().to_dict(orient="records")

    # ---------- read-only views ----------
    @property
    def records(self) -> pd.DataFrame:
        return self._df.copy()

    @property
    def record_count(self) -> int:
        return len(self._df)

    @property
    def filtered_view(self) -> pd.DataFrame:
        return self._view.copy()

    @property
    def query(self) -> str:
        return self._query

    @property
    def selection(self) -> frozenset:
        return frozenset(self._selection)

    @property
    def current_page(self) -> int:
        return self.paginator.current_page

    @property
    def page_count(self) -> int:
        return self.paginator.page_count

    @property
    def has_prev_page(self) -> bool:
        return self.paginator.has_prev

    @property
    def has_next_page(self) -> bool:
        return self.paginator.has_next

    @property
    def select_all_checked(self) -> bool:
        return bool(self._selection) and self._selection == self._visible_ids()

    @property
    def can_delete(self) -> bool:
        return bool(self._selection)

    @property
    def visible_selected_count(self) -> int:
        return len(self._selection & self._visible_ids())

    def record(self, record_id) -> dict | None:
        mask = self._row_mask(record_id)
        if not mask.any():
            return None
        return self._df[mask].iloc[0].to_dict()
