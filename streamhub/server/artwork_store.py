# Copyright (c) 2025 Trae AI. All rights reserved.

import hashlib
import threading
from typing import Dict, Optional, Tuple


class ArtworkStore:
    """
    Content-addressed store for embedded cover art.
    """

    def __init__(self):
        self._images: Dict[str, Tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def put(self, data: bytes, mime: str = "image/jpeg") -> str:
        ref = hashlib.sha1(data).hexdigest()[:16]
        with self._lock:
            self._images.setdefault(ref, (data, mime))
        return ref

    def get(self, ref: str) -> Optional[Tuple[bytes, str]]:
        with self._lock:
            return self._images.get(ref)

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)
