"""Helpers shared by the franzpy command groups."""
import functools
import logging

import click
from confluent_kafka import KafkaException

from franzpy.config.store import ContextStore
from franzpy.connection import resolve_connection_properties
from franzpy.exceptions import EXIT_KAFKA, FranzPyException
from franzpy.kafka.client import KafkaSession

logger = logging.getLogger(__name__)


def get_store(ctx: click.Context) -> ContextStore:
    """ContextStore for the document selected by --config / settings."""
    obj = ctx.find_root().obj or {}
    return ContextStore(obj.get('config_path'))


def open_session(ctx: click.Context) -> KafkaSession:
    """Resolve the selected context and return an unopened KafkaSession."""
    obj = ctx.find_root().obj or {}
    properties = resolve_connection_properties(obj.get('context'), store=get_store(ctx))
    return KafkaSession(properties)


def report_error(ctx: click.Context, error: FranzPyException) -> None:
    """Print ``error`` on one line to stderr and exit with its code."""
    obj = ctx.find_root().obj or {}
    if obj.get('debug'):
        click.echo(f"Error: {error.get_user_message()}", err=True)
        if error.details:
            click.echo(f"Details: {error.details}", err=True)
    else:
        click.echo(f"Error: {error.message}", err=True)
    ctx.exit(error.exit_code)


def handle_errors(func):
    """Map franzpy and Kafka exceptions to messages and exit codes."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except FranzPyException as e:
            report_error(ctx, e)
        except KafkaException as e:
            logger.debug("Kafka operation failed", exc_info=True)
            click.echo(f"Error: Kafka operation failed: {e}", err=True)
            ctx.exit(EXIT_KAFKA)
    return wrapper
