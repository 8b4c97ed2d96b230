import logging
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEventHandler

from config import WATCH_USE_POLLING

if WATCH_USE_POLLING:
    from watchdog.observers.polling import PollingObserver as Observer

    OBSERVER_NAME = "PollingObserver"
else:
    from watchdog.observers import Observer

    OBSERVER_NAME = "Observer"

logger = logging.getLogger(__name__)

# Quiet period after the last event before the file is reloaded
DEBOUNCE_SEC = 0.5


class PatternFileEventHandler(FileSystemEventHandler):
    """
    Calls `on_change` once the watched pattern file has settled.

    Every write, create or move onto the file re-arms a timer; the reload runs
    `delay` seconds after the last event, so it sees the finished file rather
    than an editor's intermediate truncate.
    """

    def __init__(self, path: Path, on_change: Callable[[], None], delay: float = DEBOUNCE_SEC):
        super().__init__()
        self.path = path.resolve()
        self.on_change = on_change
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def _is_target(self, src: str) -> bool:
        return Path(src).resolve() == self.path

    def on_modified(self, event) -> None:
        if not event.is_directory and self._is_target(event.src_path):
            self._schedule()

    def on_created(self, event) -> None:
        if not event.is_directory and self._is_target(event.src_path):
            self._schedule()

    def on_moved(self, event) -> None:
        if event.is_directory:
            return
        # atomic saves write a temp file and rename it over the target
        dest_path = getattr(event, "dest_path", event.src_path)
        if self._is_target(dest_path):
            self._schedule()

    def _schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._timer is threading.current_thread():
                self._timer = None
        logger.info("Pattern file %s changed; reloading", self.path.name)
        try:
            self.on_change()
        except Exception as exc:
            # keep watching; the previous library stays active
            logger.error("Reload of %s failed: %s", self.path, exc, exc_info=True)


def start_watcher(path: Path, on_change: Callable[[], None]):
    """Start observing the directory of `path`; returns the running observer."""
    handler = PatternFileEventHandler(path, on_change)
    observer = Observer()
    observer.schedule(handler, str(handler.path.parent), recursive=False)
    observer.start()
    logger.info("Watching %s for changes (using %s)", handler.path, OBSERVER_NAME)
    return observer


def stop_watcher(observer) -> None:
    observer.stop()
    observer.join()
