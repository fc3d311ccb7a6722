import curses
import threading
import time

from record_source import LoadFailure


class LoadState:
    def __init__(self):
        self.loaded = False
        self.aborted = False
        self.records = None
        self.error = None


class LoadingScreen:
    SPINNER = "|/-\\"

    def __init__(self, stdscr, fetch_fn, load_state: LoadState, label: str = ""):
        self.stdscr = stdscr
        self.fetch_fn = fetch_fn
        self.state = load_state
        self.label = label
        self.frame = 0
        self.started = time.time()

    def start_loader(self):
        t = threading.Thread(target=self._load, daemon=True)
        t.start()
        return t

    def _load(self):
        if self.state.aborted:
            return
        records = None
        try:
            records = self.fetch_fn()
        except LoadFailure as exc:
            self.state.error = exc
        finally:
            # the spinner waits on loaded, so it must be set however fetch ends
            if records is None and self.state.error is None:
                self.state.error = LoadFailure("Loader stopped unexpectedly")
            if not self.state.aborted:
                self.state.records = records
                self.state.loaded = True

    def run(self):
        curses.curs_set(0)
        self.stdscr.nodelay(True)
        self.start_loader()
        while not self.state.aborted and not self.state.loaded:
            self.draw()
            ch = self.stdscr.getch()
            if ch == 24:  # Ctrl+X
                self.state.aborted = True
                break
            time.sleep(0.05)
        self.stdscr.nodelay(False)

    def draw(self):
        self.stdscr.erase()
        h, w = self.stdscr.getmaxyx()
        elapsed = time.time() - self.started
        glyph = self.SPINNER[self.frame % len(self.SPINNER)]
        self.frame += 1
        source = f" from {self.label}" if self.label else ""
        line = f"{glyph} Loading records{source} ({elapsed:.1f}s)"
        hint = "Ctrl+X to abort"
        try:
            self.stdscr.addnstr(h // 2, max(0, (w - len(line)) // 2), line, w - 1)
            self.stdscr.addnstr(
                h // 2 + 1, max(0, (w - len(hint)) // 2), hint, w - 1, curses.A_DIM
            )
        except curses.error:
            pass
        self.stdscr.refresh()
