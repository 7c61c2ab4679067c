"""Command line interface for the XRPL.Sale SDK."""

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import click
import structlog
from dotenv import load_dotenv

from xrpl_sale.client import XRPLSaleClient
from xrpl_sale.config import ClientConfig
from xrpl_sale.errors import XRPLSaleError
from xrpl_sale.log_config import configure_logging
from xrpl_sale.models import ProjectListOptions
from xrpl_sale.signature import verify_signature

logger = structlog.get_logger(__name__)


def _echo_json(value: Any) -> None:
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json")
    click.echo(json.dumps(value, indent=2, default=str))


@click.group()
@click.option("--debug", is_flag=True, envvar="XRPLSALE_DEBUG", help="Log request/response bodies")
@click.option("--env-file", type=click.Path(dir_okay=False), help="Load variables from a .env file")
@click.pass_context
def cli(ctx, debug: bool, env_file: Optional[str]):
    """XRPL.Sale API command line tool."""
    load_dotenv(env_file)
    configure_logging(debug=debug)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


def _client(ctx) -> XRPLSaleClient:
    config = ClientConfig.from_env()
    if ctx.obj.get("debug") and not config.debug:
        config = replace(config, debug=True)
    return XRPLSaleClient(config)


@cli.command("verify-webhook")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--signature", required=True, help="Signature header value (sha256=<hex>)")
@click.option(
    "--secret", envvar="XRPLSALE_WEBHOOK_SECRET", required=True, help="Webhook shared secret"
)
def verify_webhook(payload_file: Path, signature: str, secret: str):
    """Check a saved webhook body against its signature.

    Exits with status 1 when the signature does not match.
    """
    if verify_signature(payload_file.read_bytes(), secret, signature):
        click.echo("Signature valid")
        return
    click.echo("Signature invalid", err=True)
    sys.exit(1)


@cli.group()
def projects():
    """Query token sale projects."""


@projects.command("list")
@click.option("--status", help="Filter by status (active, upcoming, completed)")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=10, show_default=True)
@click.pass_context
def list_projects(ctx, status: Optional[str], page: int, limit: int):
    """List projects."""
    try:
        with _client(ctx) as client:
            result = client.projects.list(
                ProjectListOptions(status=status, page=page, limit=limit)
            )
    except XRPLSaleError as e:
        logger.error("projects_list_failed", error=str(e), status_code=e.status_code)
        ctx.exit(1)
    _echo_json(result)


@projects.command("get")
@click.argument("project_id")
@click.pass_context
def get_project(ctx, project_id: str):
    """Show one project."""
    try:
        with _client(ctx) as client:
            result = client.projects.get(project_id)
    except XRPLSaleError as e:
        logger.error("project_get_failed", error=str(e), status_code=e.status_code)
        ctx.exit(1)
    _echo_json(result)


@projects.command("stats")
@click.argument("project_id")
@click.pass_context
def project_stats(ctx, project_id: str):
    """Show funding statistics of a project."""
    try:
        with _client(ctx) as client:
            result = client.projects.get_stats(project_id)
    except XRPLSaleError as e:
        logger.error("project_stats_failed", error=str(e), status_code=e.status_code)
        ctx.exit(1)
    _echo_json(result)
