# file: e164lookup/cli.py
"""
e164lookup CLI.

Commands:
  - lookup: look up a phone number against the e164.com API
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from e164lookup import __version__
from e164lookup.client import E164Client
from e164lookup.config import E164Settings, load_settings
from e164lookup.logging_config import configure_logging
from e164lookup.response import LookupResult

logger = logging.getLogger(__name__)


async def lookup_async(number: str, *, settings: E164Settings) -> LookupResult:
    async with E164Client.from_settings(settings) as e164:
        return await e164.lookup(number)


def _human_text(number: str, result: LookupResult) -> str:
    lines: list[str] = [f"Lookup: {number}"]
    if not result.is_success():
        lines.append(f"  Status: {result.status_code}")
        lines.append(f"  Error: {result.error}")
        return "\n".join(lines) + "\n"

    for name, value in result.fields().items():
        lines.append(f"  {name}: {'' if value is None else value}")
    return "\n".join(lines) + "\n"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def main() -> None:
    """Phone number lookups against the e164.com API."""


@main.command("lookup")
@click.argument("number", type=str)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write the JSON result to a file.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
def lookup_cmd(
    number: str, as_json: bool, output_path: Path | None, config_path: Path | None
) -> None:
    """
    Look up NUMBER (digits, optionally with + and -).
    """

    try:
        settings = load_settings(yaml_path=config_path)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)
    logger.debug("Using API at %s", settings.base_url)

    result = asyncio.run(lookup_async(number, settings=settings))
    payload = json.dumps(result.to_dict(), indent=2, sort_keys=True)

    if output_path is not None:
        output_path.write_text(payload, encoding="utf-8")

    if as_json:
        click.echo(payload)
    else:
        click.echo(_human_text(number, result), nl=False)

    if not result.is_success():
        raise click.ClickException(f"Lookup failed ({result.status_code}): {result.error}")
