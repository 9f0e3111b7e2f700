"""Main entry point for the spillcache command line tool.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from typing import Any, Dict, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from spillcache.core.command_handler import CommandHandler, READ_ORDERS

# --- Domain Layer ---
from spillcache.domain.models.common import PromotionCallback

# --- Infrastructure Layer ---
from spillcache.infrastructure.cache.file_backed_cache import FileBackedCache
from spillcache.infrastructure.cli.display import ConsoleDisplay
from spillcache.infrastructure.config.settings import (
    effective_configuration,
    get_log_file,
    get_log_level,
    get_scratch_parent,
    get_scratch_prefix,
    load_configuration,
)
from spillcache.infrastructure.monitoring.logger_setup import setup_logging

logger = logging.getLogger(__name__)

# --- Dependency Injection Container (Manual) ---

def build_cache(memory_capacity: int, on_promote: Optional[PromotionCallback] = None) -> FileBackedCache:
    """Cache factory handed to the CommandHandler; scratch location comes from settings."""
    return FileBackedCache(
        memory_capacity=memory_capacity,
        on_promote=on_promote,
        scratch_parent=get_scratch_parent(),
        scratch_prefix=get_scratch_prefix(),
    )


def create_dependencies(verbose: bool = False) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First, then logging driven by it
    load_configuration()
    setup_logging(log_level=logging.DEBUG if verbose else get_log_level(), log_file=get_log_file())
    logger.debug("Configuration and logging initialized.")

    # 2. Adapters
    dependencies['ui'] = ConsoleDisplay()

    # 3. Command handler
    dependencies['command_handler'] = CommandHandler(
        cache_factory=build_cache,
        ui=dependencies['ui'],
        config_provider=effective_configuration,
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


app = typer.Typer(
    name="spillcache",
    help="spillcache: an LRU in-memory map that spills to per-entry files on disk.",
    add_completion=False,
    no_args_is_help=True,
)

CapacityOption = Annotated[
    int,
    typer.Option("--capacity", "-c", min=1, help="Number of entries kept in memory before spilling to disk.")
]

CountOption = Annotated[
    int,
    typer.Option("--count", "-n", min=1, help="Number of entries to store.")
]


def _handler(ctx: typer.Context) -> CommandHandler:
    return ctx.obj['command_handler']


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every spill and promotion.")] = False,
):
    """Build the dependencies shared by every command."""
    if ctx.obj is None:
        ctx.obj = create_dependencies(verbose=verbose)


@app.command()
def demo(ctx: typer.Context, capacity: CapacityOption = 3, count: CountOption = 5):
    """Put keys 1..COUNT, then read them back newest first and show which reads hit disk."""
    raise typer.Exit(code=_handler(ctx).handle_demo(capacity=capacity, count=count))


@app.command()
def tune(
    ctx: typer.Context,
    capacity: CapacityOption = 100,
    count: CountOption = 1000,
    value_size: Annotated[int, typer.Option("--value-size", "-s", min=0, help="Payload size in bytes.")] = 1024,
    order: Annotated[str, typer.Option("--order", "-o", help=f"Read order: {', '.join(READ_ORDERS)}.")] = "reverse",
    seed: Annotated[Optional[int], typer.Option("--seed", help="Seed for payloads and random order.")] = None,
):
    """Measure spills, promotions and timings for a given memory capacity."""
    raise typer.Exit(code=_handler(ctx).handle_tune(
        capacity=capacity, count=count, value_size=value_size, order=order, seed=seed,
    ))


@app.command()
def info(ctx: typer.Context):
    """Show the configuration caches are built with."""
    raise typer.Exit(code=_handler(ctx).handle_info())


def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
