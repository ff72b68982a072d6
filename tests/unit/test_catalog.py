# Copyright (c) 2025 Trae AI. All rights reserved.

import pytest
from unittest.mock import MagicMock
from streamhub.core.models import Category
from streamhub.server.catalog import CatalogCache


@pytest.fixture
def library(make_item):
    library = MagicMock()
    library.available_categories.return_value = [Category.FILMS, Category.SERIES]
    library.get_category_items.side_effect = lambda category: [
        make_item(f"{category.value}.mp4", category)
    ]
    return library


def test_get_is_cached(library):
    catalog = CatalogCache(library)
    first = catalog.get("films")
    second = catalog.get(Category.FILMS)
    assert first is second
    library.get_category_items.assert_called_once_with(Category.FILMS)


def test_invalidate_forces_reload(library):
    catalog = CatalogCache(library)
    catalog.get("films")
    catalog.invalidate(["Created: /media/Films/new.mp4"])
    assert catalog.status() == {}
    catalog.get("films")
    assert library.get_category_items.call_count == 2


def test_all_items(library):
    catalog = CatalogCache(library)
    assert [item.title for item in catalog.all_items()] == ["Films", "Series"]


def test_refresh_reports_progress_and_drops_stale(library):
    catalog = CatalogCache(library)
    catalog.get("musiques")
    progress = MagicMock()

    total = catalog.refresh(progress)

    assert total == 2
    assert set(catalog.status()) == {"films", "series"}
    assert [c[0][0] for c in progress.call_args_list] == [0, 50]
