"""
CosmosREST Command-Line Interface

Read, query and modify Cosmos DB documents from the shell, and print
authorization tokens for troubleshooting signature mismatches.

Author: CosmosREST Team
Date: 2026-10-14
"""

import sys
import json
import uuid
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import click
import httpx
from pydantic import ValidationError

from cosmosrest import __version__
from cosmosrest.auth.exceptions import AuthenticationError
from cosmosrest.auth.masterkey import build_authorization_token, build_string_to_sign
from cosmosrest.core.config_manager import ConfigManager
from cosmosrest.core.exceptions import ConfigurationError
from cosmosrest.core.logging_config import set_correlation_id, setup_logging
from cosmosrest.cosmosdb.client import CosmosClient
from cosmosrest.cosmosdb.exceptions import RemoteError
from cosmosrest.cosmosdb.models import QuerySpec
from cosmosrest.cosmosdb.transport import format_http_date

logger = logging.getLogger("cosmosrest.cli")

EXIT_REMOTE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _parse_json(value: str, what: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"{what} is not valid JSON: {e}")


def _parse_partition_key(value: str) -> Any:
    """Partition keys given as JSON (e.g. 42, true) keep their type; anything else is a string."""
    try:
        return json.loads(value)
    except ValueError:
        return value


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _run(ctx: click.Context, operation: Callable[[CosmosClient], Awaitable[Any]]) -> Any:
    """Build a client from the group options, run one operation, map errors to exit codes."""
    options = ctx.obj

    async def runner() -> Any:
        manager = ConfigManager()
        config = manager.load(
            config_file=options.get("config_file"),
            overrides=options.get("overrides"),
        )
        logger.debug(f"Using database '{config.database_id}' at {config.endpoint}")
        async with CosmosClient(config) as client:
            return await operation(client)

    try:
        return asyncio.run(runner())
    except ConfigurationError as e:
        click.echo(f"[ERROR] {e.message}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except AuthenticationError as e:
        click.echo(f"[ERROR] {e.message}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        click.echo(f"[ERROR] Invalid input: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except RemoteError as e:
        code = f" {e.code}" if e.code else ""
        click.echo(f"[ERROR] {e.status_code}{code}: {e.message}", err=True)
        sys.exit(EXIT_REMOTE_ERROR)
    except httpx.HTTPError as e:
        click.echo(f"[ERROR] Request failed: {e}", err=True)
        sys.exit(EXIT_REMOTE_ERROR)


@click.group()
@click.version_option(version=__version__, prog_name="cosmosrest")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
@click.option("--endpoint", help="Account endpoint, overrides COSMOS_DB_ENDPOINT")
@click.option("--database", "database_id", help="Database id, overrides COSMOS_DB_DATABASE_ID")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level",
    show_default=True,
)
@click.option(
    "--log-format",
    default="text",
    type=click.Choice(["text", "json"]),
    show_default=True,
)
@click.pass_context
def cli(ctx, config_file: Optional[Path], endpoint: Optional[str], database_id: Optional[str],
        log_level: str, log_format: str):
    """
    CosmosREST - Azure Cosmos DB REST client

    Connection settings come from COSMOS_DB_ENDPOINT, COSMOS_DB_KEY and
    COSMOS_DB_DATABASE_ID, a config file, or the options above.
    """
    setup_logging(log_level.upper(), format_type=log_format)
    set_correlation_id(str(uuid.uuid4()))
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = str(config_file) if config_file else None
    ctx.obj["overrides"] = {"endpoint": endpoint, "database_id": database_id}


@cli.command()
@click.argument("container")
@click.argument("document_id")
@click.option("--partition-key", "-p", required=True, help="Partition key value")
@click.pass_context
def read(ctx, container: str, document_id: str, partition_key: str):
    """
    Read a document.

    Examples:
        cosmosrest read notes note-1 -p u1
    """
    pk = _parse_partition_key(partition_key)
    document = _run(
        ctx,
        lambda client: client.read_document(client.container_id(container), document_id, pk),
    )
    _echo_json(document)


@cli.command()
@click.argument("container")
@click.argument("sql")
@click.option(
    "--param",
    "params",
    multiple=True,
    help="Query parameter as @name=JSON (repeatable), e.g. --param @userId='\"u1\"'",
)
@click.option("--partition-key", "-p", help="Scope the query to one partition")
@click.option("--cross-partition", is_flag=True, help="Fan the query out across partitions")
@click.pass_context
def query(ctx, container: str, sql: str, params: tuple, partition_key: Optional[str],
          cross_partition: bool):
    """
    Run a SQL query and print the matching documents.

    Examples:
        cosmosrest query notes "SELECT * FROM c WHERE c.userId = @userId" --param @userId='"u1"' -p u1
        cosmosrest query users "SELECT TOP 1 * FROM c" --cross-partition
    """
    parameters = {}
    for param in params:
        if "=" not in param:
            raise click.BadParameter(f"Expected @name=value, got: {param}")
        name, raw = param.split("=", 1)
        parameters[name] = _parse_partition_key(raw)

    try:
        spec = QuerySpec.build(sql, parameters)
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise click.BadParameter(messages, param_hint="SQL or --param")

    kwargs: dict = {"cross_partition": cross_partition}
    if partition_key is not None:
        kwargs["partition_key"] = _parse_partition_key(partition_key)

    rows = _run(
        ctx,
        lambda client: client.query_documents(
            client.container_id(container), spec.query, spec.parameters, **kwargs
        ),
    )
    _echo_json(rows)


@cli.command()
@click.argument("container")
@click.argument("document")
@click.option("--partition-key", "-p", required=True, help="Partition key value")
@click.pass_context
def create(ctx, container: str, document: str, partition_key: str):
    """
    Create a document from a JSON string.

    Examples:
        cosmosrest create notes '{"id": "note-1", "userId": "u1"}' -p u1
    """
    body = _parse_json(document, "Document")
    pk = _parse_partition_key(partition_key)
    _echo_json(_run(
        ctx,
        lambda client: client.create_document(client.container_id(container), body, pk),
    ))


@cli.command()
@click.argument("container")
@click.argument("document")
@click.option("--partition-key", "-p", required=True, help="Partition key value")
@click.pass_context
def upsert(ctx, container: str, document: str, partition_key: str):
    """Create or replace a document from a JSON string."""
    body = _parse_json(document, "Document")
    pk = _parse_partition_key(partition_key)
    _echo_json(_run(
        ctx,
        lambda client: client.upsert_document(client.container_id(container), body, pk),
    ))


@cli.command()
@click.argument("container")
@click.argument("document_id")
@click.argument("document")
@click.option("--partition-key", "-p", required=True, help="Partition key value")
@click.pass_context
def replace(ctx, container: str, document_id: str, document: str, partition_key: str):
    """Replace an existing document with a JSON string."""
    body = _parse_json(document, "Document")
    pk = _parse_partition_key(partition_key)
    _echo_json(_run(
        ctx,
        lambda client: client.replace_document(
            client.container_id(container), document_id, body, pk
        ),
    ))


@cli.command()
@click.argument("container")
@click.argument("document_id")
@click.option("--partition-key", "-p", required=True, help="Partition key value")
@click.pass_context
def delete(ctx, container: str, document_id: str, partition_key: str):
    """Delete a document."""
    pk = _parse_partition_key(partition_key)
    _run(
        ctx,
        lambda client: client.delete_document(client.container_id(container), document_id, pk),
    )
    click.echo(f"[OK] Deleted '{document_id}'")


@cli.command()
@click.argument("verb")
@click.argument("resource_type")
@click.argument("resource_id")
@click.option("--date", help="RFC 1123 date (default: now)")
@click.option("--key", envvar="COSMOS_DB_KEY", required=True, help="Base64 master key")
@click.option("--show-payload", is_flag=True, help="Also print the string that was signed")
def sign(verb: str, resource_type: str, resource_id: str, date: Optional[str], key: str,
         show_payload: bool):
    """
    Print the authorization token for a request.

    Examples:
        cosmosrest sign GET docs dbs/app/colls/notes/docs/note-1
    """
    date = date or format_http_date()
    try:
        token = build_authorization_token(verb, resource_type, resource_id, date, key)
    except AuthenticationError as e:
        click.echo(f"[ERROR] {e.message}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    click.echo(f"x-ms-date: {date}")
    click.echo(f"authorization: {token}")
    if show_payload:
        click.echo(repr(build_string_to_sign(verb, resource_type, resource_id, date)))


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
