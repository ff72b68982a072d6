# Copyright (c) 2025 Trae AI. All rights reserved.

from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from mutagen import MutagenError
from streamhub.infrastructure.audio_tags import AudioTagReader, extract_cover
from streamhub.server.artwork_store import ArtworkStore


class FakeID3(dict):
    def __init__(self, frames):
        super().__init__()
        self.frames = frames

    def getall(self, key):
        return self.frames if key == "APIC" else []


def _easy(**tags):
    return MagicMock(tags={key: [value] for key, value in tags.items()})


def test_reads_easy_tags():
    with patch("mutagen.File", return_value=_easy(title="Intro", artist="Band", album="First", date="1999-04-01", genre="Rock")):
        tags = AudioTagReader().read("/music/track.mp3")

    assert tags.title == "Intro"
    assert tags.artist == "Band"
    assert tags.album == "First"
    assert tags.year == 1999
    assert tags.genre == "Rock"
    assert tags.cover_ref is None


def test_blank_tags_are_missing():
    with patch("mutagen.File", return_value=_easy(title="  ", date="unknown")):
        tags = AudioTagReader().read("/music/track.mp3")
    assert tags.title is None
    assert tags.year is None


def test_unreadable_file_gives_none():
    with patch("mutagen.File", side_effect=MutagenError("bad header")):
        assert AudioTagReader().read("/music/broken.mp3") is None
    with patch("mutagen.File", return_value=None):
        assert AudioTagReader().read("/music/unknown.bin") is None


def test_cover_goes_to_artwork_store():
    store = ArtworkStore()
    flac = SimpleNamespace(pictures=[SimpleNamespace(data=b"png-bytes", mime="image/png")])
    with patch("mutagen.File", side_effect=[_easy(title="Song"), flac]):
        tags = AudioTagReader(store).read("/music/song.flac")

    assert tags.cover_ref is not None
    assert store.get(tags.cover_ref) == (b"png-bytes", "image/png")


def test_extract_cover_from_id3():
    frame = SimpleNamespace(data=b"jpg-bytes", mime="")
    audio = SimpleNamespace(tags=FakeID3([frame]))
    assert extract_cover(audio) == (b"jpg-bytes", "image/jpeg")


def test_extract_cover_without_art():
    assert extract_cover(SimpleNamespace(tags=None)) is None
    assert extract_cover(SimpleNamespace(tags=FakeID3([]))) is None
