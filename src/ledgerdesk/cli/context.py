"""Helpers shared by the command modules."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, TypeVar

import click

from ledgerdesk.domain.entities import ACTIVE
from ledgerdesk.domain.repository import EntityRepository

R = TypeVar("R", bound=EntityRepository)


def repository(ctx: click.Context, repository_cls: type[R], **kwargs: Any) -> R:
    """Build a repository from the collaborators in ``ctx.obj``."""
    obj = ctx.obj
    return repository_cls(obj["backend"], obj["cache"], obj["session"], **kwargs)


def parse_meta(values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``--meta key=value`` options into a dict."""
    metadata = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"'{item}' is not KEY=VALUE", param_hint="--meta")
        metadata[key.strip()] = value.strip()
    return metadata


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def status_marker(register_status: str) -> str:
    return "" if register_status == ACTIVE else f" [{register_status}]"
