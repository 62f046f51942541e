"""
CLI entrypoint for the salt-api client.

Connection options are written into the settings layer first, so every command
builds its client from :func:`~salt_netapi.config.get_settings`.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional

import typer
from loguru import logger

from .auth import AuthModule
from .calls import RunnerCall
from .client import SaltClient
from .config import Settings, configure_settings, get_settings
from .errors import SaltError
from .formatters import format_job, format_records, format_result
from .modules import smbios

app = typer.Typer(help="Call Salt master functions over salt-api.", no_args_is_help=True)


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format="<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>")
    else:
        logger.add(sys.stderr, level="WARNING", format="<level>{level: <8}</level> | <level>{message}</level>")
    logger.enable("salt_netapi")


def _open_client(settings: Settings) -> SaltClient:
    return SaltClient.from_settings(settings)


def _parse_kwargs(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into a mapping, decoding JSON values where possible."""
    kwargs: Dict[str, Any] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--kwarg")
        key, raw = pair.split("=", 1)
        try:
            kwargs[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            kwargs[key.strip()] = raw
    return kwargs


def _require_credentials(settings: Settings) -> None:
    if not settings.has_credentials:
        typer.echo("Error: username and password are required (--username/--password or SALT_API_USER/SALT_API_PASSWORD)", err=True)
        raise typer.Exit(code=1)
    try:
        AuthModule(settings.eauth)
    except ValueError:
        typer.echo(f"Error: unknown eauth module {settings.eauth!r}", err=True)
        raise typer.Exit(code=1) from None


@app.callback()
def main(
    url: str = typer.Option(None, help="salt-api base URL"),
    username: str = typer.Option(None, help="User for inline authentication"),
    password: str = typer.Option(None, help="Password for inline authentication"),
    eauth: str = typer.Option(None, help="External authentication module"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request"),
) -> None:
    """Configure the connection shared by all commands."""
    configure_settings(url=url, username=username, password=password, eauth=eauth)
    _configure_logging(verbose)


@app.command()
def runner(
    function: str = typer.Argument(..., help="Runner function, e.g. manage.status"),
    kwarg: List[str] = typer.Option(None, "--kwarg", "-k", help="Keyword argument as key=value"),
    run_async: bool = typer.Option(False, "--async", help="Schedule the job and print its id"),
) -> None:
    """Run a runner module function on the master."""
    settings = get_settings()
    _require_credentials(settings)
    kwargs = _parse_kwargs(kwarg)
    call: RunnerCall[Any] = RunnerCall(function, kwargs=kwargs or None)

    with _open_client(settings) as client:
        try:
            if run_async:
                job = call.call_async(client, settings.username, settings.password, settings.eauth)
                typer.echo(format_job(job))
            else:
                result = call.call_sync(client, settings.username, settings.password, settings.eauth)
                typer.echo(json.dumps(format_result(result), indent=2, default=str))
        except SaltError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)


@app.command("smbios")
def smbios_records(
    target: str = typer.Option("*", help="Minion glob"),
    rec_type: str = typer.Option(None, "--rec-type", help="Record type name, e.g. BIOS"),
) -> None:
    """Show SMBIOS (DMI) records of the targeted minions."""
    settings = get_settings()
    _require_credentials(settings)

    record_type = None
    if rec_type:
        try:
            record_type = smbios.RecordType[rec_type.strip().upper()]
        except KeyError:
            raise typer.BadParameter(f"unknown record type {rec_type!r}", param_hint="--rec-type") from None

    call = smbios.records(record_type)
    with _open_client(settings) as client:
        try:
            per_minion = call.call_sync(client, settings.username, settings.password, settings.eauth, target=target)
        except SaltError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)
    typer.echo(format_records(per_minion))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
