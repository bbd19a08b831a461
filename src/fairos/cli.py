# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/cli.py

"""
FairOS Command Line Interface

Thin wrapper around the Client. Commands that need a session log in with
--username/--password and log out when done.
"""

import asyncio
import functools
import json
import sys
from contextlib import asynccontextmanager
from dataclasses import asdict
from pathlib import Path

import click

from fairos import config as config_module
from fairos.client import Client
from fairos.errors import CouldNotConnectError, FairOSError
from fairos.mnemonic import generate_mnemonic
from fairos.types import BlockSize, Compression, Expr


def handle_api_error(func):
    """Decorator to catch API and connection errors."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CouldNotConnectError as e:
            click.echo("Error: Could not connect to FairOS server", err=True)
            click.echo(f"  {e}", err=True)
            click.echo("  Check --url, FAIROS_URL or the config file", err=True)
            sys.exit(1)
        except FairOSError as e:
            click.echo(f"Error: {type(e).__name__}: {e}", err=True)
            sys.exit(1)
    return wrapper


def validate_block_size(ctx, param, value):
    try:
        return BlockSize.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@asynccontextmanager
async def _session(ctx, username: str, password: str):
    """Yield a logged-in Client, logging out afterwards."""
    async with Client(url=ctx.obj["url"], config=ctx.obj["config"]) as client:
        await client.login(username, password)
        try:
            yield client
        except Exception:
            # keep the command's own error; a failed logout is only reported
            try:
                await client.logout(username)
            except FairOSError as e:
                click.echo(f"Warning: logout failed: {type(e).__name__}: {e}", err=True)
            raise
        await client.logout(username)


def session_options(func):
    func = click.option(
        "--password",
        envvar="FAIROS_PASSWORD",
        prompt=True,
        hide_input=True,
        help="Account password (or FAIROS_PASSWORD)",
    )(func)
    func = click.option("--username", required=True, help="FairOS user name")(func)
    return func


@click.group()
@click.option(
    "--config-file",
    type=click.Path(exists=True, path_type=Path),
    help="Config file path (default: ~/.config/fairos/client.toml)",
)
@click.option("--url", help="Server URL, overrides config (e.g. http://localhost:9090/v1)")
@click.pass_context
def cli(ctx, config_file: Path, url: str):
    """FairOS-dfs command line client."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = config_module.load_config(config_file)
    except ValueError as e:
        raise click.ClickException(str(e))
    ctx.obj["url"] = url


@cli.command()
@click.option("--validate-only", is_flag=True, help="Only validate config, don't display it")
@click.pass_context
def config(ctx, validate_only: bool) -> None:
    """
    Display and validate client configuration.

    Examples:

        fairos config

        fairos --url https://fairos.example.org/v1 config --validate-only
    """
    cfg = ctx.obj["config"]
    if ctx.obj["url"]:
        cfg.url = ctx.obj["url"]
    errors, warnings = cfg.validate()

    if not validate_only:
        click.echo("Settings:")
        for key, value in cfg.to_dict().items():
            click.echo(f"  {key}: {value}")
        click.echo()

    if errors:
        click.echo("Errors:", err=True)
        for e in errors:
            click.echo(f"  ✗ {e}", err=True)
    if warnings:
        click.echo("Warnings:")
        for w in warnings:
            click.echo(f"  ⚠ {w}")
    if not errors and not warnings:
        click.echo("✓ Config is valid")

    sys.exit(1 if errors else 0)


@cli.command()
def mnemonic() -> None:
    """Print a new 12-word mnemonic for signup or import."""
    click.echo(generate_mnemonic())


@cli.command("user-exists")
@click.argument("username")
@click.pass_context
@handle_api_error
def user_exists(ctx, username: str) -> None:
    """Check whether USERNAME is registered. Exit code 1 if not."""
    async def run():
        async with Client(url=ctx.obj["url"], config=ctx.obj["config"]) as client:
            return await client.user_exists(username)

    present = asyncio.run(run())
    click.echo("present" if present else "not present")
    sys.exit(0 if present else 1)


@cli.command()
@session_options
@click.pass_context
@handle_api_error
def pods(ctx, username: str, password: str) -> None:
    """List own and shared pods."""
    async def run():
        async with _session(ctx, username, password) as client:
            return await client.list_pods(username)

    _echo_json(asdict(asyncio.run(run())))


@cli.command()
@click.argument("pod")
@click.argument("path", default="/")
@click.option("--pod-password", help="Pod password if the pod must be opened first")
@session_options
@click.pass_context
@handle_api_error
def ls(ctx, pod: str, path: str, pod_password: str, username: str, password: str) -> None:
    """List directory PATH in POD."""
    async def run():
        async with _session(ctx, username, password) as client:
            await client.open_pod(username, pod, pod_password or password)
            return await client.ls(username, pod, path)

    _echo_json(asdict(asyncio.run(run())))


@cli.command()
@click.argument("local_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("pod")
@click.argument("dir", default="/")
@click.option("--block-size", default="1M", callback=validate_block_size, help="Block size, e.g. 512K")
@click.option("--compression", type=click.Choice([c.value for c in Compression]))
@click.option("--pod-password", help="Pod password if the pod must be opened first")
@session_options
@click.pass_context
@handle_api_error
def upload(
    ctx, local_path: Path, pod: str, dir: str, block_size: BlockSize,
    compression: str, pod_password: str, username: str, password: str,
) -> None:
    """Upload LOCAL_PATH into DIR of POD."""
    async def run():
        async with _session(ctx, username, password) as client:
            await client.open_pod(username, pod, pod_password or password)
            return await client.upload_file(
                username, pod, dir, local_path, block_size,
                Compression(compression) if compression else None,
            )

    name = asyncio.run(run())
    click.echo(f"uploaded {local_path} as {dir.rstrip('/')}/{name}")


@cli.command()
@click.argument("pod")
@click.argument("remote_path")
@click.option("--output", type=click.Path(path_type=Path), required=True)
@click.option("--pod-password", help="Pod password if the pod must be opened first")
@session_options
@click.pass_context
@handle_api_error
def download(
    ctx, pod: str, remote_path: str, output: Path, pod_password: str,
    username: str, password: str,
) -> None:
    """Download REMOTE_PATH from POD to --output."""
    async def run():
        async with _session(ctx, username, password) as client:
            await client.open_pod(username, pod, pod_password or password)
            await client.download_file(username, pod, remote_path, output)

    asyncio.run(run())
    click.echo(f"downloaded {remote_path} to {output}")


@cli.command("kv-get")
@click.argument("pod")
@click.argument("store")
@click.argument("key")
@click.option("--pod-password", help="Pod password if the pod must be opened first")
@session_options
@click.pass_context
@handle_api_error
def kv_get(
    ctx, pod: str, store: str, key: str, pod_password: str, username: str, password: str,
) -> None:
    """Print the value stored under KEY in STORE."""
    async def run():
        async with _session(ctx, username, password) as client:
            await client.open_pod(username, pod, pod_password or password)
            await client.open_kv_store(username, pod, store)
            return await client.get_kv_pair(username, pod, store, key)

    _echo_json(asyncio.run(run()))


@cli.command()
@click.argument("pod")
@click.argument("database")
@click.option("--field", "field_name", help="Field to compare (omit to match all)")
@click.option("--op", type=click.Choice(["eq", "gt", "gte", "lt", "lte"]), default="eq")
@click.option("--value", help="Value to compare against")
@click.option("--number", is_flag=True, help="Treat --value as a number")
@click.option("--limit", type=int)
@click.option("--pod-password", help="Pod password if the pod must be opened first")
@session_options
@click.pass_context
@handle_api_error
def find(
    ctx, pod: str, database: str, field_name: str, op: str, value: str, number: bool,
    limit: int, pod_password: str, username: str, password: str,
) -> None:
    """
    Find documents in DATABASE.

    Examples:

        fairos find --username alice mypod people --field age --op gt --value 30 --number
    """
    if field_name is None:
        expr = Expr.all()
    elif value is None:
        raise click.UsageError("--value is required with --field")
    else:
        try:
            expr = getattr(Expr, op)(field_name, int(value) if number else value)
        except ValueError:
            raise click.BadParameter(f"'{value}' is not a number", param_hint="--value")

    async def run():
        async with _session(ctx, username, password) as client:
            await client.open_pod(username, pod, pod_password or password)
            await client.open_doc_database(username, pod, database)
            return await client.find_documents(username, pod, database, expr, limit)

    _echo_json(asyncio.run(run()))
