# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import pytest
from streamhub.core.config import Config
from streamhub.core.identity import generate_id
from streamhub.core.models import Category, MediaItem
from streamhub.core.normalizer import format_title
from streamhub.infrastructure.listing import ListingError


class FakeLister:
    """
    In-memory stand-in for the local/SSH listers.
    """

    def __init__(self, files=None, failing=None):
        self.files = files or {}
        self.failing = set(failing or [])
        self.calls = []

    def list_directories(self):
        if "__root__" in self.failing:
            raise ListingError("unreachable")
        return sorted(self.files)

    def list_files(self, directory):
        self.calls.append(directory)
        if directory in self.failing:
            raise ListingError(f"cannot list {directory}")
        return list(self.files.get(directory, []))

    def web_path(self, file_path):
        return file_path

    def local_path(self, file_path):
        return file_path

    def resolve(self, web_path):
        return web_path


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def fake_lister():
    return FakeLister


@pytest.fixture
def make_item():
    def _make(file_name, category=Category.FILMS, directory="Films"):
        return MediaItem(
            id=generate_id(file_name, category.value),
            title=format_title(file_name),
            original_file_name=os.path.splitext(file_name)[0],
            path=f"/{directory}/{file_name}",
            type=category.kind,
        )
    return _make
