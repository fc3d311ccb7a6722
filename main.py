import curses
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from config_paths import ensure_config_dirs, load_config
from loading_screen import LoadingScreen, LoadState
from orchestrator import Orchestrator
from record_source import RecordSource
from table_state import TableState

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")

try:
    __version__ = version("rostertable")
except PackageNotFoundError:
    __version__ = "0.0.0"


USAGE = (
    "rostertable - terminal admin table for member records\n\n"
    "Usage:\n  rostertable [url-or-path]\n  rostertable -v\n  rostertable -h\n"
)


def resolve_source(args, config) -> RecordSource:
    location = args[0] if args else config["SOURCE_URL"]
    return RecordSource.for_location(location, timeout=config["TIMEOUT_SECONDS"])


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args or "--help" in args:
        print(USAGE)
        return

    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    ensure_config_dirs()
    source = resolve_source(args, load_config())
    load_state = LoadState()

    def curses_main(stdscr):
        loader = LoadingScreen(stdscr, source.fetch, load_state, label=source.describe())
        loader.run()
        if load_state.aborted:
            return
        orchestrator = Orchestrator(stdscr, TableState(), source)
        orchestrator.apply_initial_load(load_state)
        orchestrator.run()

    curses.wrapper(curses_main)

    if load_state.aborted:
        print("Load aborted", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
