# create_image/core/verbose.py
# Verbose logging helpers - delegate to the registered output manager w/ categories for
# provider calls, fallback decisions, pipeline stages & file writes

from __future__ import annotations

from pathlib import Path
from typing import Any

from .output import get_output_manager, set_output_manager, OutputLevel


# * Initialize verbose logging for a CLI session
def init_verbose(enabled: bool = False, log_file: Path | None = None) -> None:
    requested_level = OutputLevel.VERBOSE if enabled else OutputLevel.NORMAL

    from ..cli.output_manager import OutputManager

    manager = OutputManager()
    manager.initialize(requested_level=requested_level, log_file=log_file)
    set_output_manager(manager)


# * Core verbose logging function
def vlog(category: str, message: str, detail: str | None = None) -> None:
    get_output_manager().verbose(message, category, detail)


# * Log image API call (before making the call)
def vlog_ai_request(
    provider: str,
    model: str,
    prompt_length: int,
    attempt: int | None = None,
    max_attempts: int | None = None,
) -> None:
    attempt_str = f", attempt {attempt}/{max_attempts}" if attempt is not None else ""
    detail = f"Model: {model}, Prompt: {prompt_length:,} chars{attempt_str}"
    get_output_manager().verbose(f"Request to {provider}", "AI", detail)


# * Log image API response
def vlog_ai_response(
    provider: str,
    model: str,
    response_size: int,
    success: bool,
    duration_ms: float | None = None,
    error: str | None = None,
) -> None:
    duration_str = f" in {duration_ms:.0f}ms" if duration_ms else ""
    if success:
        detail = f"Model: {model}, Image: {response_size:,} bytes"
        get_output_manager().verbose(
            f"Response from {provider}{duration_str}", "AI", detail
        )
    else:
        detail = f"Model: {model}, Error: {error}"
        get_output_manager().verbose(
            f"[red]Error from {provider}[/]{duration_str}", "AI", detail
        )


# * Log provider selection & fallback decisions
def vlog_provider(message: str, detail: str | None = None) -> None:
    get_output_manager().verbose(message, "PROVIDER", detail)


# * Log file read operation
def vlog_file_read(path: Path, size: int | None = None) -> None:
    size_str = f" ({size:,} bytes)" if size is not None else ""
    get_output_manager().verbose(f"Read: {path}{size_str}", "FILE")


# * Log file write operation
def vlog_file_write(path: Path, size: int | None = None) -> None:
    size_str = f" ({size:,} bytes)" if size is not None else ""
    get_output_manager().verbose(f"Write: {path}{size_str}", "FILE")


# * Log pipeline stage start
def vlog_stage(stage: str, description: str | None = None) -> None:
    if description:
        get_output_manager().verbose(f"{stage}: {description}", "STAGE")
    else:
        get_output_manager().verbose(stage, "STAGE")


# * Log configuration values being used
def vlog_config(key: str, value: Any) -> None:
    get_output_manager().verbose(f"{key} = {value}", "CONFIG")


# * Log a thought/reasoning step
def vlog_think(thought: str) -> None:
    get_output_manager().verbose(thought, "THINK")


# * Warning that should reach the user even w/o --verbose
def vlog_warning(message: str) -> None:
    get_output_manager().warning(message)


# * Cleanup verbose logging
def cleanup_verbose() -> None:
    get_output_manager().end_session()
