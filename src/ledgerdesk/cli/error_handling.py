"""CLI error handling helpers."""

import json
from dataclasses import asdict, is_dataclass

import click

from ledgerdesk.domain.errors import DomainError, OperationError


def _describe_response(response) -> str:
    if is_dataclass(response) and not isinstance(response, type):
        response = asdict(response)
    if isinstance(response, (dict, list)):
        return json.dumps(response, default=str, ensure_ascii=False)
    return str(response)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    With ``--verbose`` the backend response behind an OperationError is
    printed as well.
    """
    click.echo(f"Error: {error}", err=True)
    verbose = bool((ctx.obj or {}).get("verbose"))
    if verbose and isinstance(error, OperationError) and error.response is not None:
        click.echo(f"Backend response: {_describe_response(error.response)}", err=True)
    ctx.exit(1)
