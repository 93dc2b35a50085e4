"""
Command-line interface for the track relay.
Provides commands for serving the relay and one-off lookups.
"""

import asyncio
import sys

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from pathlib import Path

from trackrelay import __version__

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="FedEx Track Relay")
def cli():
    """FedEx Track Relay - batch shipment tracking over HTTP"""
    pass


@cli.command()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file"
)
@click.option("--host", help="Interface to bind (overrides HOST)")
@click.option("--port", "-p", type=int, help="Port to listen on (overrides PORT)")
def serve(config, host, port):
    """Run the relay HTTP server."""
    from trackrelay.config import init_config
    from trackrelay.logging_config import setup_logging
    from trackrelay.server import run_server

    cfg = init_config(config)
    if host:
        cfg.host = host
    if port:
        cfg.port = port

    errors = cfg.validate()
    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        sys.exit(1)

    setup_logging(cfg)

    console.print(Panel.fit(
        f"[bold blue]FedEx Track Relay v{__version__}[/bold blue]\n"
        f"Listening on http://{cfg.host}:{cfg.port}\n"
        "Press Ctrl+C to stop",
        title="Starting Relay"
    ))

    run_server(cfg)


@cli.command()
@click.argument("numbers", nargs=-1, required=True)
@click.option("--delay-ms", type=int, help="Pause between lookups (overrides REQUEST_DELAY_MS)")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def track(numbers, delay_ms, verbose):
    """Look up one or more tracking numbers."""
    from trackrelay.config import init_config
    from trackrelay.logging_config import setup_logging
    from trackrelay.server import build_manager

    cfg = init_config()
    if delay_ms is not None:
        cfg.request_delay_ms = delay_ms
    if not verbose:
        cfg.log_level = "WARNING"
    setup_logging(cfg)

    manager = build_manager(cfg)
    manager.pause_after_last = False

    response = asyncio.run(manager.track_batch(list(numbers)))

    table = Table(title=f"Tracking results ({response.count})")
    table.add_column("Tracking #", style="cyan")
    table.add_column("Status")
    table.add_column("Last update")
    table.add_column("Location")
    table.add_column("Delivered")
    table.add_column("Service")

    for result in response.results:
        if result.ok:
            table.add_row(
                result.tracking_number,
                f"[green]{result.last_status}[/green]",
                result.last_update_local,
                result.location,
                "yes" if result.delivered else "no",
                result.service,
            )
        else:
            table.add_row(result.tracking_number, f"[red]{result.error}[/red]", "", "", "", "")

    console.print(table)

    if response.failed:
        sys.exit(1)


@cli.command()
def status():
    """Show the effective configuration."""
    console.print(Panel.fit(
        f"[bold]FedEx Track Relay v{__version__}[/bold]",
        title="Status"
    ))

    from trackrelay.config import RelayConfig
    config = RelayConfig.from_env()

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Listen", f"{config.host}:{config.port}")
    table.add_row("Carrier URL", config.carrier_url)
    table.add_row("Locale", config.locale)
    table.add_row("Request Delay", f"{config.request_delay_ms}ms")
    table.add_row("Request Timeout", f"{config.request_timeout}s" if config.request_timeout else "[dim]default[/dim]")
    table.add_row("Max Body", f"{config.max_body_bytes} bytes")
    table.add_row("Static Dir", config.static_dir)
    table.add_row("Log File", config.log_file or "[dim]Console only[/dim]")

    console.print(table)

    for error in config.validate():
        console.print(f"[yellow]! {error}[/yellow]")


@cli.command()
@click.argument("config_path", type=click.Path())
def init(config_path):
    """Initialize configuration file."""
    config_path = Path(config_path)

    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    template = '''# FedEx Track Relay Configuration

# HTTP Server
HOST=0.0.0.0
PORT=3000
MAX_BODY_BYTES=1048576
STATIC_DIR=public

# Carrier
FEDEX_TRACK_URL=https://www.fedex.com/trackingCal/track
FEDEX_LOCALE=es_MX
REQUEST_DELAY_MS=800
REQUEST_TIMEOUT=

# Logging
LOG_LEVEL=INFO
LOG_FILE=
'''

    config_path.write_text(template, encoding='utf-8')
    console.print(f"[green]✓ Configuration file created: {config_path}[/green]")
    console.print("\nEdit this file with your settings, then run:")
    console.print(f"  trackrelay serve --config {config_path}")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
