"""Photo Taker CLI - run the app server and inspect local snapshots."""

from __future__ import annotations

import json
import sys
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from phototaker import __version__
from phototaker.config import Config, load_config
from phototaker.errors import ConfigError

app = typer.Typer(
    name="phototaker",
    help="Photo Taker app for smart glasses",
    no_args_is_help=True,
)
console = Console()


def get_config(config_path: Optional[str] = None) -> Config:
    """Load configuration, exiting with a readable message on errors."""
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/] {e}")
        sys.exit(1)


@app.command()
def serve(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="HTTP port"),
    mock: bool = typer.Option(False, "--mock", help="Attach mock glasses instead of real sessions"),
    dev_user: str = typer.Option("dev@example.com", "--dev-user", help="User id of the mock glasses"),
):
    """Run the app server."""
    from phototaker.app import PhotoTakerApp
    from phototaker.sdk import MockAppSession

    cfg = get_config(config_path)
    if port is not None:
        cfg.server.port = port
    if mock:
        cfg.mock_mode = True
        cfg.auth.dev_user_id = cfg.auth.dev_user_id or dev_user

    if not cfg.mock_mode:
        try:
            cfg.require_credentials()
        except ConfigError as e:
            console.print(f"[red]Configuration error:[/] {e}")
            sys.exit(1)

    console.print(
        Panel(
            f"http://{cfg.server.host}:{cfg.server.port}/webview\n"
            f"Snapshots: {cfg.snapshots_path}\n"
            f"Upload bucket: {cfg.storage.bucket or '[dim]disabled[/]'}",
            title=f"Photo Taker v{__version__}" + (" [yellow](mock)[/]" if cfg.mock_mode else ""),
        )
    )

    server = PhotoTakerApp(cfg, mock_mode=cfg.mock_mode)
    sessions = []
    if cfg.mock_mode:
        sessions.append(MockAppSession(user_id=cfg.auth.dev_user_id or dev_user))
        console.print(
            f"[dim]Press the mock button with: "
            f"curl -X POST 'http://localhost:{cfg.server.port}/mock/button?press=short'[/]"
        )

    server.run(initial_sessions=sessions)


@app.command()
def snapshots(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum files to show"),
):
    """List saved snapshot files, newest first."""
    from phototaker.app.snapshots import SnapshotWriter

    cfg = get_config(config_path)
    writer = SnapshotWriter(cfg.snapshots_path)
    files = writer.list_files(limit=limit)

    if not files:
        console.print(f"[dim]No snapshots in {writer.directory}[/]")
        return

    table = Table(title=f"Snapshots ({writer.directory})")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Modified")

    for path in files:
        stat = path.stat()
        table.add_row(
            path.name,
            f"{stat.st_size / 1024:.1f} KB",
            datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]Photo Taker[/] v{__version__}")


@app.command()
def config(
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    json_output: bool = False,
):
    """Show configuration."""
    cfg = get_config(config_path)

    if json_output:
        data = cfg.model_dump()
        if data.get("api_key"):
            data["api_key"] = "***"
        print(json.dumps(data, indent=2, default=str))
        return

    console.print("[bold]Configuration[/]")
    console.print(f"  Package: {cfg.package_name or '[red]not set[/]'}")
    console.print(f"  API key: {'set' if cfg.api_key else '[red]not set[/]'}")
    console.print(f"  Mode: {cfg.device.mode}")
    console.print(f"  Mock Mode: {cfg.mock_mode}")
    console.print(f"\n[bold]Server[/]")
    console.print(f"  Listen: {cfg.server.host}:{cfg.server.port}")
    console.print(f"\n[bold]Capture[/]")
    console.print(f"  Photos kept per user: {cfg.capture.max_photos_per_user}")
    console.print(f"  Auto-capture tick: {cfg.capture.auto_capture_interval_seconds}s")
    console.print(f"  Follow-up capture: {cfg.capture.follow_up_capture}")
    console.print(f"\n[bold]Storage[/]")
    console.print(f"  Snapshots: {cfg.snapshots_path}")
    console.print(f"  Bucket: {cfg.storage.bucket or 'disabled'}")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
