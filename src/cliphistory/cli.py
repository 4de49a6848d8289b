import time
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from cliphistory.config import RETENTION_CHOICES, AppSettings, get_settings
from cliphistory.logger import setup_logging
from cliphistory.models import ContentKind, HistoryItem, NotificationKind
from cliphistory.service import ClipboardHistoryService

console = Console(color_system="auto")

app = typer.Typer(name="cliphistory", help="Record and reuse clipboard history.")

KIND_LABELS = {
    ContentKind.TEXT: "Text",
    ContentKind.FILE_PATH: "Path",
    ContentKind.UNSUPPORTED: "Unsupported",
}


def _service(prune_on_start: bool = True) -> ClipboardHistoryService:
    logger = setup_logging(get_settings(AppSettings))
    service = ClipboardHistoryService.from_settings(logger)
    service.initialize(start_monitor=False, prune_on_start=prune_on_start)
    return service


def _render(items: list[HistoryItem], title: str) -> None:
    if not items:
        console.print("[dim]Copy something to start.[/dim]")
        return
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Copied", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Preview")
    for item in items:
        table.add_row(
            item.id,
            item.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            KIND_LABELS[item.kind],
            item.preview,
        )
    console.print(table)


def _flush_notifications(service: ClipboardHistoryService) -> None:
    for notification in service.notifications.drain():
        if notification.kind in (
            NotificationKind.STORAGE_ERROR,
            NotificationKind.OPEN_FAILED,
            NotificationKind.CLIPBOARD_ERROR,
        ):
            console.print(f"[bold red]Error:[/bold red] {notification.message}")


def _require_item(service: ClipboardHistoryService, item_id: str) -> HistoryItem:
    item = service.get_item(item_id)
    if item is None:
        _flush_notifications(service)
        console.print(f"[bold red]No history item with id {item_id}.[/bold red]")
        raise typer.Exit(code=1)
    return item


@app.command(name="watch", help="Record clipboard changes until interrupted.")
def watch():
    service = _service()

    def announce(items: tuple[HistoryItem, ...]) -> None:
        if items:
            console.print(f"[green]+[/green] {KIND_LABELS[items[0].kind]}: {items[0].preview}")

    service.subscribe(announce)
    service.monitor.start()
    console.print("[bold green]Watching the clipboard. Press Ctrl-C to stop.[/bold green]")
    try:
        while True:
            time.sleep(0.5)
            _flush_notifications(service)
    except KeyboardInterrupt:
        console.print("[bold]Stopping...[/bold]")
    finally:
        service.shutdown()


@app.command(name="list", help="Show recent history, newest first.")
def list_items(
    all_items: bool = typer.Option(False, "--all", "-a", help="Show the full history."),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Number of items to show."),
):
    service = _service()
    if all_items:
        items = service.history()
        title = f"Clipboard History ({len(items)} items)"
    else:
        items = service.recent_history(limit)
        title = "Recent Clipboard History"
    _flush_notifications(service)
    _render(items, title)


@app.command(name="prune", help="Delete items older than the retention window.")
def prune_items():
    service = _service(prune_on_start=False)
    if service.retention.retains_forever:
        console.print("Retention is set to 'Forever'. Nothing was deleted.")
        return
    deleted = service.force_prune()
    _flush_notifications(service)
    console.print(
        f"Deleted {deleted} items older than {service.retention.effective_days} days."
    )


@app.command(name="clear", help="Delete every history item.")
def clear_items(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
):
    if not yes:
        typer.confirm(
            "This will immediately delete ALL history items. Continue?", abort=True
        )
    service = _service()
    deleted = service.clear_all()
    _flush_notifications(service)
    console.print(f"Deleted {deleted} items.")


@app.command(name="delete", help="Delete one history item.")
def delete_item(item_id: str = typer.Argument(..., help="ID of the item to delete.")):
    service = _service()
    if not service.delete_item(item_id):
        _flush_notifications(service)
        console.print(f"[bold red]No history item with id {item_id}.[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"Deleted {item_id}.")


@app.command(name="paste", help="Copy a history item back to the clipboard.")
def paste_item(
    item_id: str = typer.Argument(..., help="ID of the item to paste."),
    open_file: bool = typer.Option(
        False, "--open", "-o", help="Open a file item instead of copying its reference."
    ),
):
    service = _service()
    item = _require_item(service, item_id)
    if not service.paste_item(item, open_file=open_file):
        _flush_notifications(service)
        if item.kind is ContentKind.UNSUPPORTED:
            console.print("Unsupported items cannot be pasted.")
        raise typer.Exit(code=1)
    console.print(f"{'Opened' if open_file and item.kind is ContentKind.FILE_PATH else 'Copied'} {item.preview}.")


@app.command(name="retention", help="Show or set the retention window in days (0 = forever).")
def retention(
    days: Optional[int] = typer.Argument(None, help=f"New window in days, e.g. {RETENTION_CHOICES}."),
):
    service = _service()
    if days is not None:
        try:
            service.set_retention_days(days)
        except ValidationError:
            console.print("[bold red]Retention days must be 0 or more.[/bold red]")
            raise typer.Exit(code=1)
    config = service.retention
    label = "Forever" if config.retains_forever else f"{config.effective_days} Days"
    suffix = "" if config.is_configured else " (default)"
    console.print(f"Retention Period: {label}{suffix}")


if __name__ == "__main__":
    app()
