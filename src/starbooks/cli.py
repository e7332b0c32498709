"""Command-line interface for starbooks.

Built with Typer for commands and Rich for beautiful output.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import get_config
from .db import get_db
from .export import JSONExporter
from .library import StarBooks
from .shelves.schemas import Book, BookCreate, BookUpdate, HangarSortOrder, Shelf

# Create the main app
app = typer.Typer(
    name="starbooks",
    help="StarBooks Command: track your Wishlist, Archives and Hangar.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()

# Shortest id prefix accepted as a book reference
MIN_ID_PREFIX = 4


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def configure_logging(verbose: bool = False) -> None:
    """Send starbooks logs to stderr through Rich."""
    logger = logging.getLogger("starbooks")
    logger.setLevel(logging.DEBUG if verbose else get_config().log_level_value)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(
            RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
        )


def format_shelf_table(books: list[Book], shelf: Shelf) -> Table:
    """Create a rich table for displaying one shelf."""
    table = Table(title=shelf.display_name, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Rating", justify="center", style="yellow")
    table.add_column("Notes", max_width=30, no_wrap=True)

    for position, book in enumerate(books, 1):
        table.add_row(
            str(position),
            str(book.id)[:8],
            book.title,
            book.author,
            book.stars if book.rating else "-",
            book.notes,
        )

    return table


def open_library() -> StarBooks:
    """Open the shelves stored in the configured database."""
    return StarBooks(get_db())


def resolve_book(library: StarBooks, ref: str) -> tuple[Shelf, Book]:
    """Find a book by id, unique id prefix, or exact title.

    Exits with an error if nothing or more than one book matches.
    """
    ref = ref.strip()
    snapshot = library.shelves.snapshot()
    candidates = [(shelf, book) for shelf in Shelf for book in snapshot.shelf(shelf)]

    matches = [(s, b) for s, b in candidates if str(b.id) == ref.lower()]
    if not matches and len(ref) >= MIN_ID_PREFIX:
        matches = [(s, b) for s, b in candidates if str(b.id).startswith(ref.lower())]
    if not matches:
        matches = [(s, b) for s, b in candidates if b.title.casefold() == ref.casefold()]

    if not matches:
        print_error(f"No book found matching: {ref}")
        raise typer.Exit(1)
    if len(matches) > 1:
        print_error(f"'{ref}' matches {len(matches)} books, use the book ID instead:")
        for shelf, book in matches:
            console.print(f"  {str(book.id)[:8]}  {book.display_title} [dim]({shelf.value})[/dim]")
        raise typer.Exit(1)

    return matches[0]


# ============================================================================
# Book Commands
# ============================================================================


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Track your reading across the Wishlist, Archives and Hangar."""
    configure_logging(verbose)


@app.command()
def add(
    title: str = typer.Option(..., "--title", "-t", prompt="Book title"),
    author: str = typer.Option(..., "--author", "-a", prompt="Author"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
    rating: int = typer.Option(0, "--rating", "-r", help="Rating 0-5 (clamped)"),
) -> None:
    """Add a book to the Wishlist."""
    library = open_library()
    book = library.shelves.add_book(
        BookCreate(title=title, author=author, notes=notes, rating=rating)
    )
    print_success(f"Added: {book.display_title}")
    console.print(f"[dim]ID: {book.id}[/dim]")


@app.command("list")
def list_books(
    shelf: Optional[Shelf] = typer.Argument(None, help="Shelf to show (default: all)"),
) -> None:
    """List books on one or all shelves."""
    library = open_library()
    shelves = [shelf] if shelf else list(Shelf)

    for current in shelves:
        if current == Shelf.HANGAR:
            books = library.shelves.sorted_hangar()
        else:
            books = list(library.shelves.books(current))

        if not books:
            console.print(f"[dim]{current.display_name} is empty.[/dim]")
            continue

        console.print(format_shelf_table(books, current))
        if current == Shelf.HANGAR and library.shelves.sort_order != HangarSortOrder.DEFAULT:
            console.print(f"[dim]Sorted by {library.shelves.sort_order.display_name}[/dim]")


@app.command()
def pick() -> None:
    """Show wishlist books that can be moved into the Hangar."""
    library = open_library()
    books = library.shelves.selectable_wishlist()

    if not books:
        console.print("[dim]No wishlist books to pick from.[/dim]")
        return

    console.print(format_shelf_table(books, Shelf.WISHLIST))


@app.command()
def move(
    ref: str = typer.Argument(..., help="Book ID, ID prefix, or title"),
    to: Shelf = typer.Option(..., "--to", help="Destination shelf"),
) -> None:
    """Move a book to another shelf.

    Moving a book from the Wishlist straight to the Archives clears its rating.
    """
    library = open_library()
    source, book = resolve_book(library, ref)

    if source == to:
        print_warning(f"{book.title} is already in {to.display_name}")
        raise typer.Exit(1)

    moved = library.shelves.move(book.id, source, to)
    if moved is None:
        print_error(f"Could not move {book.title}")
        raise typer.Exit(1)

    print_success(f"Moved {moved.title}: {source.display_name} -> {to.display_name}")


@app.command()
def rate(
    ref: str = typer.Argument(..., help="Book ID, ID prefix, or title"),
    value: int = typer.Argument(..., help="Rating 0-5 (clamped)"),
) -> None:
    """Set a book's rating."""
    library = open_library()
    shelf, book = resolve_book(library, ref)

    rated = library.shelves.set_rating(shelf, book.id, value)
    if rated is None:
        print_error(f"Could not rate {book.title}")
        raise typer.Exit(1)

    print_success(f"Rated {rated.title}: {rated.stars}")


@app.command()
def star(
    ref: str = typer.Argument(..., help="Book ID, ID prefix, or title"),
    number: int = typer.Argument(..., min=1, max=5, help="Star to tap (1-5)"),
) -> None:
    """Tap a rating star. Tapping the current rating clears it."""
    library = open_library()
    shelf, book = resolve_book(library, ref)

    rated = library.shelves.tap_star(shelf, book.id, number)
    if rated is None:
        print_error(f"Could not rate {book.title}")
        raise typer.Exit(1)

    stars = rated.stars if rated.rating else "unrated"
    print_success(f"Rated {rated.title}: {stars}")


@app.command()
def edit(
    ref: str = typer.Argument(..., help="Book ID, ID prefix, or title"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="New notes"),
    rating: Optional[int] = typer.Option(None, "--rating", "-r", help="New rating 0-5"),
) -> None:
    """Edit a book's details."""
    updates = {
        key: value
        for key, value in {"title": title, "author": author, "notes": notes, "rating": rating}.items()
        if value is not None
    }
    if not updates:
        print_warning("Nothing to update")
        raise typer.Exit(1)

    library = open_library()
    shelf, book = resolve_book(library, ref)

    edited = library.shelves.edit_book(shelf, book.id, BookUpdate(**updates))
    if edited is None:
        print_error(f"Could not edit {book.title}")
        raise typer.Exit(1)

    print_success(f"Updated: {edited.display_title}")


# ============================================================================
# Hangar Commands
# ============================================================================


@app.command()
def reorder(
    positions: List[int] = typer.Argument(..., help="Hangar positions to move (1-based)"),
    to: int = typer.Option(..., "--to", help="New position (1-based)"),
) -> None:
    """Reorder books in the Hangar.

    Only available while the Hangar uses the default sort order.
    """
    library = open_library()

    if library.shelves.sort_order != HangarSortOrder.DEFAULT:
        print_error(
            f"Hangar is sorted by {library.shelves.sort_order.display_name}; "
            "run 'starbooks sort default' to reorder"
        )
        raise typer.Exit(1)

    moved = library.shelves.reorder(Shelf.HANGAR, [p - 1 for p in positions], to - 1)
    if not moved:
        print_error("Invalid hangar positions")
        raise typer.Exit(1)

    print_success("Hangar reordered")


@app.command()
def sort(
    order: Optional[HangarSortOrder] = typer.Argument(None, help="New sort order"),
) -> None:
    """Show or change the Hangar sort order."""
    library = open_library()

    if order is None:
        console.print(f"Hangar sort order: [cyan]{library.shelves.sort_order.display_name}[/cyan]")
        return

    library.shelves.set_sort_order(order)
    print_success(f"Hangar sorted by {order.display_name}")


# ============================================================================
# Backup Commands
# ============================================================================


@app.command("export")
def export_json(
    output: Path = typer.Argument(..., help="Output JSON file"),
    compact: bool = typer.Option(False, "--compact", help="Don't pretty-print"),
) -> None:
    """Export all shelves to JSON."""
    result = JSONExporter(get_db()).export_all(output, pretty=not compact)

    if not result.success:
        print_error(f"Export failed: {result.error}")
        raise typer.Exit(1)

    print_success(f"Exported {result.books_exported} books to {result.file_path}")


@app.command("import")
def import_json(
    input_file: Path = typer.Argument(..., help="JSON file written by 'starbooks export'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Replace all shelves with a JSON export."""
    if not yes and not typer.confirm("Replace all shelves with this file?", default=False):
        console.print("[dim]Cancelled.[/dim]")
        raise typer.Exit(0)

    result = JSONExporter(get_db()).import_all(input_file)

    if not result.success:
        print_error(f"Import failed: {result.error}")
        raise typer.Exit(1)

    print_success(f"Imported {result.books_exported} books from {result.file_path}")


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"starbooks version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
