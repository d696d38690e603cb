"""Run one command's async work against the configured service."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click
from rich.console import Console

from auditor_cli.surface import ConsoleSurface
from auditor_core.session import SessionController

T = TypeVar("T")


def run_service(ctx: click.Context, work: Callable[[Any], Awaitable[T]]) -> T:
    """Await ``work(service)`` on a fresh event loop and close the service afterwards."""
    service = ctx.obj["service"]

    async def _main() -> T:
        try:
            return await work(service)
        finally:
            await service.close()

    return asyncio.run(_main())


def run_session(
    ctx: click.Context,
    console: Console,
    work: Callable[[SessionController, ConsoleSurface], Awaitable[T]],
) -> tuple[T, ConsoleSurface]:
    """Drive a SessionController backed by a ConsoleSurface; return the result and the surface."""
    surface = ConsoleSurface(console)

    async def _work(service) -> T:
        controller = SessionController(service, surface, ctx.obj["config"])
        return await work(controller, surface)

    return run_service(ctx, _work), surface
