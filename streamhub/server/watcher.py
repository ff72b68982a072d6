# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class MediaDirHandler(FileSystemEventHandler):
    """
    Collects changes to media files and reports them in one batch once no
    new change has arrived for `debounce_seconds`.
    """

    def __init__(self, callback: Callable[[List[str]], None], extensions: Iterable[str],
                 debounce_seconds: float = 10):
        self.callback = callback
        self.extensions = {ext.lower() for ext in extensions}
        self.debounce_seconds = debounce_seconds
        self._pending: Dict[str, str] = {}
        self._flush_timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def _is_media(self, path) -> bool:
        return Path(str(path)).suffix.lower() in self.extensions

    def on_created(self, event):
        if not event.is_directory and self._is_media(event.src_path):
            self._record(event.src_path, f"Created: {event.src_path}")

    def on_deleted(self, event):
        # A deleted directory may have held media files
        if event.is_directory or self._is_media(event.src_path):
            self._record(event.src_path, f"Deleted: {event.src_path}")

    def on_moved(self, event):
        if event.is_directory or self._is_media(event.src_path) or self._is_media(event.dest_path):
            self._record(event.dest_path, f"Moved: {event.src_path} -> {event.dest_path}")

    def _record(self, path: str, description: str):
        with self._lock:
            self._pending[str(path)] = description
            if self._flush_timer is not None:
                self._flush_timer.cancel()
            self._flush_timer = threading.Timer(self.debounce_seconds, self._flush)
            self._flush_timer.daemon = True
            self._flush_timer.start()

    def _flush(self):
        with self._lock:
            batch = sorted(self._pending.values())
            self._pending = {}
            self._flush_timer = None
        if batch:
            logger.debug(f"{len(batch)} media changes detected")
            self.callback(batch)


class MediaWatcher:
    """
    Watches the local media directory recursively.
    """

    def __init__(self, media_root: Path, callback: Callable[[List[str]], None],
                 extensions: Iterable[str], debounce_seconds: float = 10):
        self.media_root = Path(media_root)
        self.handler = MediaDirHandler(callback, extensions, debounce_seconds)
        self.observer = Observer()

    def start(self):
        logger.info(f"Watching {self.media_root} for media changes")
        self.observer.schedule(self.handler, str(self.media_root), recursive=True)
        self.observer.start()

    def stop(self):
        self.observer.stop()
        self.observer.join()
