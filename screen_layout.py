import curses


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: search bar (1 line), table (main), status bar (1 line)
        self.search_h = 1
        self.status_h = 1

        self.table_h = max(1, self.H - self.search_h - self.status_h)

        self.search_win = curses.newwin(self.search_h, self.W, 0, 0)

        self.table_win = curses.newwin(self.table_h, self.W, self.search_h, 0)
        # grid pane must never own cursor
        self.table_win.leaveok(True)

        self.status_win = curses.newwin(
            self.status_h, self.W, self.search_h + self.table_h, 0
        )
        # do not let status bar steal cursor
        self.status_win.leaveok(True)
