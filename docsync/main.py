import logging
import logging.config
from pathlib import Path

import click

from docsync.commands.fetch import fetch
from docsync.commands.markdownize import markdownize_command
from docsync.commands.push import push
from docsync.commands.validate import validate
from docsync.exceptions import DocsyncError
from docsync.models.config import DEFAULT_API_BASE_URL, DEFAULT_CONFIG_FILE, SyncConfig

logger = logging.getLogger(__name__)

LOG_FORMATS = {
    "text": "%(levelname)s %(name)s: %(message)s",
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
}


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                name: {"format": pattern} for name, pattern in LOG_FORMATS.items()
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": fmt,
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                # Request lines from httpx are only useful when debugging
                "httpx": {"level": "WARNING"},
            },
        }
    )


class DocsyncGroup(click.Group):
    """Turns domain errors into clean CLI errors instead of tracebacks."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except DocsyncError as exc:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(exc)) from exc


@click.group(cls=DocsyncGroup)
@click.version_option(version="1.0.0")
@click.option("-k", "--apikey", envvar="APIKEY", default=None, help="API key for readme.io.")
@click.option(
    "-v",
    "--docsversion",
    envvar="DOCSVERSION",
    default=None,
    help="Documentation version to act upon.",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    envvar="CONFIG_FILE",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to the YAML configuration file listing the categories.",
)
@click.option("--api-url", envvar="README_API_URL", default=DEFAULT_API_BASE_URL, show_default=True)
@click.option("--timeout", default=10.0, show_default=True, help="Network timeout in seconds.")
@click.option("--strict", is_flag=True, help="Abort when a content file cannot be parsed.")
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
@click.option("--log-format", default="text", show_default=True, type=click.Choice(sorted(LOG_FORMATS)))
@click.pass_context
def cli(ctx, apikey, docsversion, config_file, api_url, timeout, strict, log_level, log_format):
    """Sync content back and forth between a local docs directory and readme.io.

    The global options `apikey` and `docsversion` are required by `fetch` and
    `push`; give them before the command name or through the APIKEY and
    DOCSVERSION environment variables.
    """
    configure_logging(log_level.upper(), log_format)
    ctx.obj = SyncConfig(
        api_key=apikey,
        docs_version=docsversion,
        config_file=Path(config_file),
        api_base_url=api_url,
        timeout=timeout,
        strict=strict,
    )


cli.add_command(fetch)
cli.add_command(push)
cli.add_command(markdownize_command)
cli.add_command(validate)


if __name__ == "__main__":
    cli()
