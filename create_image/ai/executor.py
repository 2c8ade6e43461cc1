# create_image/ai/executor.py
# Provider execution collaborator: runs the image-generator CLI for one provider attempt
#
# * Synchronous request/response over a child process w/ explicit timeout & cancellation
# * Credentials are injected per provider via environment variables

from __future__ import annotations

import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Protocol

from .models import GEMINI, OPENROUTER, VERTEXAI
from .types import GenerationRequest
from ..config.settings import DEFAULT_LOCATION, ProviderConfig
from ..core.cancellation import CancelToken
from ..core.verbose import vlog

# how often a running process is polled for cancellation
POLL_INTERVAL_SECONDS = 0.25


# * Outcome of one provider process run
@dataclass(slots=True)
class ExecutionOutcome:
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    output_path: str = ""
    timed_out: bool = False
    cancelled: bool = False
    spawn_error: str = ""

    @property
    def success(self) -> bool:
        return (
            self.returncode == 0
            and not self.timed_out
            and not self.cancelled
            and not self.spawn_error
        )

    # human-readable failure detail
    @property
    def error(self) -> str:
        if self.spawn_error:
            return f"Failed to spawn process: {self.spawn_error}"
        if self.cancelled:
            return "Generation cancelled"
        if self.timed_out:
            return "Generation timed out"
        if self.success:
            return ""
        return (
            self.stderr.strip()
            or self.stdout.strip()
            or f"Process exited with code {self.returncode}"
        )


# * Anything able to run one provider attempt (tests inject fakes)
class ProviderRunner(Protocol):
    def run(
        self,
        provider: ProviderConfig,
        request: GenerationRequest,
        cancel: Optional[CancelToken] = None,
    ) -> ExecutionOutcome: ...


# * Build the provider-specific environment for the child process
def build_provider_env(
    provider: ProviderConfig, base_env: Optional[Mapping[str, str]] = None
) -> dict[str, str]:
    env = dict(os.environ if base_env is None else base_env)

    if provider.name == GEMINI:
        env["GOOGLE_API_KEY"] = provider.api_key or ""
    elif provider.name == OPENROUTER:
        env["OPENROUTER_API_KEY"] = provider.api_key or ""
    elif provider.name == VERTEXAI:
        env["GOOGLE_CLOUD_PROJECT"] = (
            provider.project or env.get("GOOGLE_CLOUD_PROJECT") or ""
        )
        env["GOOGLE_CLOUD_LOCATION"] = (
            provider.location or env.get("GOOGLE_CLOUD_LOCATION") or DEFAULT_LOCATION
        )
        env["GOOGLE_GENAI_USE_VERTEXAI"] = "true"

    return env


# * Default output filename when the request does not name one
def default_output_path(clock: Callable[[], float] = time.time) -> str:
    return f"image_{int(clock() * 1000)}.png"


# * Build CLI arguments (optional flags omitted when absent)
def build_generator_args(
    provider: ProviderConfig, request: GenerationRequest, output_path: str
) -> list[str]:
    args = ["--provider", provider.name]
    if provider.model:
        args += ["--model", provider.model]
    if request.template:
        args += ["--template", request.template]
    if request.type:
        args += ["--type", request.type]
    args += ["--prompt", request.prompt]
    args += ["--output", output_path]
    if request.style_grid_path:
        args += ["--style-grid", request.style_grid_path]
    return args


# * Runs the generator CLI in the image-generator repository
class ProviderExecutor:
    def __init__(
        self,
        repository_path: Path | str,
        command: tuple[str, ...] = ("node", "scripts/generate.js"),
        timeout: float = 300.0,
        base_env: Optional[Mapping[str, str]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.repository_path = Path(repository_path)
        self.command = command
        self.timeout = timeout
        self.base_env = base_env
        self._clock = clock

    def run(
        self,
        provider: ProviderConfig,
        request: GenerationRequest,
        cancel: Optional[CancelToken] = None,
    ) -> ExecutionOutcome:
        output_path = request.output_path or default_output_path(self._clock)
        argv = list(self.command) + build_generator_args(provider, request, output_path)
        env = build_provider_env(provider, self.base_env)

        vlog("EXEC", f"Running generator for {provider.name}", " ".join(argv[:2]))

        try:
            proc = subprocess.Popen(
                argv,
                cwd=self.repository_path,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            return ExecutionOutcome(
                returncode=None, output_path=output_path, spawn_error=str(e)
            )

        return self._wait(proc, output_path, cancel)

    # poll the process until exit, timeout or cancellation
    # ! the child is killed & reaped if polling is interrupted (e.g. KeyboardInterrupt)
    def _wait(
        self,
        proc: subprocess.Popen,
        output_path: str,
        cancel: Optional[CancelToken],
    ) -> ExecutionOutcome:
        deadline = time.monotonic() + self.timeout

        try:
            stdout, stderr, interrupted = self._poll(proc, deadline, cancel)
        except BaseException:
            proc.kill()
            proc.wait()
            raise

        if interrupted is not None:
            return ExecutionOutcome(
                returncode=proc.returncode,
                stdout=stdout,
                stderr=stderr,
                output_path=output_path,
                cancelled=interrupted == "cancelled",
                timed_out=interrupted == "timed_out",
            )

        if stdout:
            vlog("EXEC", "Generator output", stdout.strip())
        if stderr:
            vlog("EXEC", "Generator errors", stderr.strip())

        return ExecutionOutcome(
            returncode=proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
            output_path=output_path,
        )

    # (stdout, stderr, None) on exit; "cancelled" / "timed_out" after killing the child
    def _poll(
        self,
        proc: subprocess.Popen,
        deadline: float,
        cancel: Optional[CancelToken],
    ) -> tuple[str, str, str | None]:
        while True:
            try:
                stdout, stderr = proc.communicate(timeout=POLL_INTERVAL_SECONDS)
                return stdout or "", stderr or "", None
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.cancelled:
                    return *self._kill(proc), "cancelled"
                if time.monotonic() >= deadline:
                    return *self._kill(proc), "timed_out"

    @staticmethod
    def _kill(proc: subprocess.Popen) -> tuple[str, str]:
        proc.kill()
        stdout, stderr = proc.communicate()
        return stdout or "", stderr or ""
