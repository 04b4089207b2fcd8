"""Command-line entry point for the Trojan-Go exporter."""

import logging

import click
import uvicorn
from pydantic import ValidationError

from trojan_go_exporter.core.config import Settings
from trojan_go_exporter.core.log import configure_logging
from trojan_go_exporter.main import create_app

logger = logging.getLogger(__name__)


def _load_settings(**overrides) -> Settings:
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc


@click.command()
@click.version_option(package_name="trojan-go-exporter", prog_name="trojan-go-exporter")
@click.option(
    "--listen", "-l", metavar="[ADDR]:PORT", help="Listen address [default: :9550]"
)
@click.option(
    "--metrics-path", "-m", metavar="PATH", help="Metrics path [default: /scrape]"
)
@click.option(
    "--trojan-go-endpoint",
    "-e",
    metavar="HOST:PORT",
    help="Trojan-Go API endpoint [default: 127.0.0.1:10000]",
)
@click.option(
    "--scrape-timeout",
    "-t",
    type=int,
    metavar="N",
    help="The timeout in seconds for every individual scrape [default: 3]",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    help="Logging level [default: INFO]",
)
def main(
    listen: str | None,
    metrics_path: str | None,
    trojan_go_endpoint: str | None,
    scrape_timeout: int | None,
    log_level: str | None,
):
    """Export Trojan-Go per-user traffic as Prometheus metrics."""
    settings = _load_settings(
        LISTEN=listen,
        METRICS_PATH=metrics_path,
        TROJAN_GO_ENDPOINT=trojan_go_endpoint,
        SCRAPE_TIMEOUT=scrape_timeout,
        LOG_LEVEL=log_level,
    )
    configure_logging(settings.LOG_LEVEL)

    logger.info("Listening on %s:%d", settings.listen_host, settings.listen_port)
    uvicorn.run(
        create_app(settings),
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
