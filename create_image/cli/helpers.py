# create_image/cli/helpers.py
# Shared CLI helpers for orchestrator access & manager construction

from __future__ import annotations

import signal
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer

from ..core.cancellation import CancelToken
from ..orchestrator import ImageOrchestrator
from ..template_io import (
    ActiveTemplateManager,
    DomainKnowledgeManager,
    StyleReferenceManager,
)


# ---------------------------------------------------------------------------
# ORCHESTRATOR ACCESS PATTERN
# ---------------------------------------------------------------------------
# The root callback stores an ImageOrchestrator on ctx.obj (tests may inject one):
#   orchestrator = get_orchestrator(ctx)
#   config = orchestrator.config
# ---------------------------------------------------------------------------


def get_orchestrator(ctx: typer.Context) -> ImageOrchestrator:
    root = ctx.find_root()
    if not isinstance(root.obj, ImageOrchestrator):
        root.obj = ImageOrchestrator()
    return root.obj


def get_repository_path(ctx: typer.Context) -> Path:
    return Path(get_orchestrator(ctx).config.repository_path)


def get_style_reference_manager(ctx: typer.Context) -> StyleReferenceManager:
    return StyleReferenceManager(get_repository_path(ctx))


def get_domain_knowledge_manager(ctx: typer.Context) -> DomainKnowledgeManager:
    return DomainKnowledgeManager(get_repository_path(ctx))


def get_active_template_manager(ctx: typer.Context) -> ActiveTemplateManager:
    return ActiveTemplateManager(get_repository_path(ctx))


# explicit template name, else the active template
def resolve_template_name(ctx: typer.Context, template: str | None) -> str:
    if template:
        return template
    return get_active_template_manager(ctx).get_active_template()


# * Route Ctrl+C/SIGTERM into a cancel token while a long operation runs
# the running loop stops cooperatively & kills any child process; handlers restored on exit
@contextmanager
def cancel_on_interrupt(cancel: CancelToken) -> Iterator[CancelToken]:
    # signal handlers can only be installed from the main thread
    if threading.current_thread() is not threading.main_thread():
        yield cancel
        return

    original_sigint = signal.getsignal(signal.SIGINT)
    original_sigterm = signal.getsignal(signal.SIGTERM)

    def interrupt(signum, frame):
        cancel.cancel("Interrupted by user")

    signal.signal(signal.SIGINT, interrupt)
    signal.signal(signal.SIGTERM, interrupt)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, original_sigint)
        signal.signal(signal.SIGTERM, original_sigterm)
