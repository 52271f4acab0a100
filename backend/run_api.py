#!/usr/bin/env python
"""
Run the SaaS Kit billing API server.

Usage:
    python run_api.py
    python run_api.py --reload        # Development mode
    python run_api.py --check         # Report missing configuration and exit

The server refuses to start while STRIPE_SECRET_KEY, SUPABASE_URL,
SUPABASE_SERVICE_ROLE_KEY or APP_URL is unset; this script reports them up
front instead of failing inside uvicorn's startup.
"""

import argparse
import sys

import uvicorn
from rich.console import Console
from rich.table import Table

from shared.config import Settings, get_settings

console = Console()


def print_configuration(settings: Settings) -> list[str]:
    """Print which optional features are enabled; return missing required settings."""
    missing = settings.missing_required()

    table = Table(title=f"{settings.app_name} {settings.app_version}")
    table.add_column("Setting")
    table.add_column("Status")
    for name in ("STRIPE_SECRET_KEY", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "APP_URL"):
        table.add_row(name, "[red]missing[/red]" if name in missing else "[green]set[/green]")
    table.add_row(
        "STRIPE_WEBHOOK_SECRET",
        "[green]set[/green]" if settings.stripe_webhook_secret else "[yellow]webhooks rejected[/yellow]",
    )
    table.add_row(
        "Account linking secret",
        "[green]set[/green]" if settings.linking_secret else "[yellow]linking disabled[/yellow]",
    )
    console.print(table)
    return missing


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description=f"Run the {settings.app_name} server")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--host", type=str, help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to bind to")
    parser.add_argument("--check", action="store_true", help="Check configuration and exit")
    args = parser.parse_args()

    missing = print_configuration(settings)
    if missing:
        console.print(f"[red]Error:[/red] missing required configuration: {', '.join(missing)}")
        sys.exit(1)
    if args.check:
        return

    uvicorn.run(
        "api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
