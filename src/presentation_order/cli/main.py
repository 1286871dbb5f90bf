"""
Main CLI application using Typer with router-based command dispatch.

All command groups are registered through the centralized CliRouter.
"""

from __future__ import annotations

import typer

from ..infra.logging import configure_logging
from .commands import order, session
from .router import get_router

app = typer.Typer(help="Presentation order operator CLI")

router = get_router(app)

router.register(
    "session",
    session.app,
    help_text="Presentation session registration and lookup",
)

router.register(
    "order",
    order.app,
    help_text="Presentation order (slot) operations",
)


def cli() -> None:
    """Console-script entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    cli()
