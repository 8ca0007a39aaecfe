"""Command-line interface for kvgraph.

Commands take a MODELS reference of the form ``package.module:attribute``
where the attribute is an iterable of Model subclasses.
"""

import asyncio
import importlib
import sys
from typing import Any, NoReturn

import click
from graphql import print_schema

from kvgraph import __version__
from kvgraph.core.config import get_settings
from kvgraph.core.exceptions import StoreError
from kvgraph.core.logging import configure_logging, get_logger
from kvgraph.infrastructure.graphql.model_fields import build_schema
from kvgraph.infrastructure.persistence.memory_store import MemoryStore
from kvgraph.infrastructure.persistence.model import Model
from kvgraph.infrastructure.persistence.redis_store import create_store


def load_models(reference: str) -> list[type[Model]]:
    """Import the model classes named by ``module:attribute``.

    Raises:
        click.BadParameter: If the reference cannot be resolved.
    """
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter("expected 'module:attribute'", param_hint="MODELS")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="MODELS") from e

    target: Any = getattr(module, attribute, None)
    if target is None:
        raise click.BadParameter(f"{module_name} has no attribute {attribute}", param_hint="MODELS")

    if isinstance(target, type):
        models = [target]
    else:
        try:
            models = list(target)
        except TypeError:
            models = []
    invalid = [m for m in models if not (isinstance(m, type) and issubclass(m, Model))]
    if invalid or not models:
        raise click.BadParameter(f"{reference} must list Model subclasses", param_hint="MODELS")
    return models


@click.group()
@click.version_option(version=__version__, prog_name="kvgraph")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides KVGRAPH_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """kvgraph - declarative models over a key-value store."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = settings


@cli.command("print-schema")
@click.argument("models")
def print_schema_command(models: str) -> None:
    """Print the GraphQL SDL generated for MODELS."""
    store = MemoryStore()
    schema = build_schema(*(model(store) for model in load_models(models)))
    click.echo(print_schema(schema))


@cli.command()
@click.argument("models")
@click.option(
    "--redis-url",
    type=str,
    default=None,
    help="Redis URL (overrides KVGRAPH_REDIS_URL)",
)
@click.pass_obj
def stats(settings: Any, models: str, redis_url: str | None) -> None:
    """Print the number of stored documents for each of MODELS."""
    model_classes = load_models(models)
    store_settings = settings
    if redis_url:
        store_settings = settings.model_copy(update={"redis_url": redis_url})
    logger = get_logger(__name__)

    async def collect() -> list[tuple[str, int]]:
        store = create_store(store_settings)
        try:
            bound = [model(store, namespace=settings.namespace) for model in model_classes]
            return [(model.model_name, await model.count()) for model in bound]
        finally:
            await store.close()

    try:
        counts = asyncio.run(collect())
    except StoreError as e:
        logger.error("Failed to read counts", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for name, count in counts:
        click.echo(f"{name}\t{count}")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()
