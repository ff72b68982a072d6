# Copyright (c) 2025 Trae AI. All rights reserved.

import threading
from watchdog.events import DirDeletedEvent, FileCreatedEvent, FileMovedEvent
from streamhub.server.watcher import MediaDirHandler


def _handler():
    done = threading.Event()
    received = []

    def callback(changes):
        received.append(changes)
        done.set()

    return MediaDirHandler(callback, [".mp4", ".mkv"], debounce_seconds=0.05), received, done


def test_media_changes_are_batched():
    handler, received, done = _handler()
    handler.on_created(FileCreatedEvent("/media/Films/a.mp4"))
    handler.on_moved(FileMovedEvent("/media/Films/b.part", "/media/Films/b.MKV"))

    assert done.wait(2)
    assert len(received) == 1
    assert received[0] == [
        "Created: /media/Films/a.mp4",
        "Moved: /media/Films/b.part -> /media/Films/b.MKV",
    ]


def test_other_files_are_ignored():
    handler, received, done = _handler()
    handler.on_created(FileCreatedEvent("/media/Films/notes.txt"))
    assert not done.wait(0.2)
    assert received == []


def test_deleted_directory_triggers():
    handler, received, done = _handler()
    handler.on_deleted(DirDeletedEvent("/media/Films/Saga"))
    assert done.wait(2)
    assert received == [["Deleted: /media/Films/Saga"]]
