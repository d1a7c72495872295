"""CLI interface for franzpy."""
import click
from pydantic import ValidationError

from franzpy import __version__
from franzpy.cli_acls import acls
from franzpy.cli_common import report_error
from franzpy.cli_config import config
from franzpy.cli_groups import groups
from franzpy.cli_topics import cluster, topics
from franzpy.config.settings import Settings
from franzpy.exceptions import ConfigValidationError
from franzpy.logging_config import configure_logging


def load_settings(ctx: click.Context) -> Settings:
    """Read FRANZPY_* settings, exiting with one line if any is invalid."""
    try:
        return Settings()
    except ValidationError as e:
        first = e.errors()[0]
        name = "_".join(str(part) for part in first.get("loc", ())).upper()
        report_error(ctx, ConfigValidationError(
            message=f"Invalid setting FRANZPY_{name}: {first['msg']}",
            details=str(e),
        ))


@click.group()
@click.version_option(version=__version__, prog_name="franzpy")
@click.option('--context', 'context_name', metavar='NAME',
              help='Context to use instead of the current context')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Path to the configuration file [default: ~/.franz/config]')
@click.option('--debug', is_flag=True, help='Enable debug logging and detailed errors')
@click.option('--log-format', type=click.Choice(['text', 'json']),
              help='Log output format')
@click.pass_context
def cli(ctx, context_name, config_path, debug, log_format):
    """A kubeconfig-style command line client for Apache Kafka."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    settings = load_settings(ctx)

    ctx.obj['context'] = context_name
    ctx.obj['config_path'] = config_path or settings.config_path

    configure_logging(
        level="DEBUG" if debug else settings.log_level,
        json_format=(log_format or settings.log_format) == "json",
        log_file=settings.log_file
    )


cli.add_command(config)
cli.add_command(topics)
cli.add_command(groups)
cli.add_command(acls)
cli.add_command(cluster)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
