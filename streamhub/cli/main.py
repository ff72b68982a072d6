# Copyright (c) 2025 Trae AI. All rights reserved.

import typer
from rich.console import Console
from rich.table import Table
from ..core.config import Config
from ..core.models import Category, GroupItem, UnknownCategoryError
from ..core.searcher import Searcher
from ..infrastructure.audio_tags import AudioTagReader
from ..infrastructure.listing import LocalLister, create_lister
from ..services.library_service import LibraryService

app = typer.Typer(help="StreamHub - Browse and stream your media library.")
console = Console()


def _load_library(config_path: str) -> LibraryService:
    try:
        config = Config.load(config_path)
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1)

    lister = create_lister(config)
    searcher = Searcher(config.tmdb_api_key, language=config.tmdb_language)
    tag_reader = AudioTagReader() if isinstance(lister, LocalLister) else None
    return LibraryService(config, lister, searcher, tag_reader)


@app.command("categories")
def list_categories(config_path: str = "config.yaml"):
    """
    Show the categories found on the media source.
    """
    library = _load_library(config_path)
    categories = library.available_categories()
    if not categories:
        console.print("[yellow]No categories found.[/yellow]")
        return
    for category in categories:
        console.print(f"[cyan]{category.value}[/cyan] ({library.config.directory_for(category)})")


@app.command("list")
def list_items(category: str, config_path: str = "config.yaml"):
    """
    List the items of a category with their series and sagas.
    """
    library = _load_library(config_path)
    try:
        parsed = Category.parse(category)
    except UnknownCategoryError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    items = library.get_category_items(parsed)

    table = Table(title=f"{library.config.directory_for(parsed)}")
    table.add_column("Title", style="magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Year", style="green")
    table.add_column("Path", style="yellow")

    for item in items:
        if isinstance(item, GroupItem):
            table.add_row(f"[bold]{item.title}[/bold] ({item.episode_count})", item.id, "", "")
            for child in item.episodes:
                label = child.episode_code or f"#{child.sequel_number}"
                table.add_row(f"  {label} {child.title}", child.id, str(child.year or ""), child.path)
        else:
            table.add_row(item.title, item.id, str(item.year or ""), item.path)

    console.print(table)
    console.print(f"\nFound [bold]{len(items)}[/bold] items.")


@app.command("search")
def search(query: str, config_path: str = "config.yaml"):
    """
    Search every category by title.
    """
    library = _load_library(config_path)
    items = []
    for category in library.available_categories():
        items.extend(library.get_category_items(category))

    results = library.search(query, items, limit=library.config.search_limit)
    if not results:
        console.print(f"[yellow]No results for '{query}'.[/yellow]")
        return

    table = Table(title=f"Results for '{query}'")
    table.add_column("Title", style="magenta")
    table.add_column("Type", style="green")
    table.add_column("Id", style="cyan")
    for item in results:
        table.add_row(item.title, item.type.value, item.id)
    console.print(table)


if __name__ == "__main__":
    app()
