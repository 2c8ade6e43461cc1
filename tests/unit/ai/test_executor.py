# tests/unit/ai/test_executor.py
# Unit tests for the provider process runner (args, env, timeout & cancellation)

import sys
from pathlib import Path

import pytest

from create_image.ai.executor import (
    ExecutionOutcome,
    ProviderExecutor,
    build_generator_args,
    build_provider_env,
    default_output_path,
)
from create_image.ai.fallback import ProviderManager
from create_image.ai.health import ProviderHealthTracker
from create_image.ai.types import GenerationRequest
from create_image.config.settings import GlobalConfig, ProviderConfig
from create_image.core.cancellation import CancelToken


def _python(code: str) -> tuple[str, ...]:
    return (sys.executable, "-c", code)


class TestBuildGeneratorArgs:
    # * Verify optional flags are omitted when absent
    def test_minimal(self):
        args = build_generator_args(
            ProviderConfig(name="gemini"), GenerationRequest(prompt="a cat"), "out.png"
        )
        assert args == ["--provider", "gemini", "--prompt", "a cat", "--output", "out.png"]

    # * Verify all flags in order
    def test_full(self):
        args = build_generator_args(
            ProviderConfig(name="openrouter", model="m"),
            GenerationRequest(
                prompt="p", template="sports/illustrative", type="diagram", style_grid_path="g.png"
            ),
            "o.png",
        )
        assert args == [
            "--provider", "openrouter",
            "--model", "m",
            "--template", "sports/illustrative",
            "--type", "diagram",
            "--prompt", "p",
            "--output", "o.png",
            "--style-grid", "g.png",
        ]

    # * Verify default output name uses epoch milliseconds
    def test_default_output_path(self):
        assert default_output_path(lambda: 1700000000.123) == "image_1700000000123.png"


class TestBuildProviderEnv:
    # * Verify gemini key injected
    def test_gemini(self):
        env = build_provider_env(ProviderConfig(name="gemini", api_key="g"), {"PATH": "/bin"})
        assert env["GOOGLE_API_KEY"] == "g"
        assert env["PATH"] == "/bin"

    # * Verify openrouter key injected
    def test_openrouter(self):
        env = build_provider_env(ProviderConfig(name="openrouter", api_key="o"), {})
        assert env["OPENROUTER_API_KEY"] == "o"

    # * Verify vertex project, location default & vertex flag
    def test_vertex(self):
        env = build_provider_env(ProviderConfig(name="vertexai", project="proj"), {})
        assert env["GOOGLE_CLOUD_PROJECT"] == "proj"
        assert env["GOOGLE_CLOUD_LOCATION"] == "global"
        assert env["GOOGLE_GENAI_USE_VERTEXAI"] == "true"

    # * Verify vertex falls back to inherited env values
    def test_vertex_inherits_env(self):
        env = build_provider_env(
            ProviderConfig(name="vertexai"),
            {"GOOGLE_CLOUD_PROJECT": "env-proj", "GOOGLE_CLOUD_LOCATION": "europe-west4"},
        )
        assert env["GOOGLE_CLOUD_PROJECT"] == "env-proj"
        assert env["GOOGLE_CLOUD_LOCATION"] == "europe-west4"


class TestExecutionOutcome:
    # * Verify error text precedence: stderr, stdout, exit code
    def test_error_precedence(self):
        assert ExecutionOutcome(returncode=2, stderr=" bad \n", stdout="x").error == "bad"
        assert ExecutionOutcome(returncode=2, stdout="only stdout").error == "only stdout"
        assert ExecutionOutcome(returncode=2).error == "Process exited with code 2"
        assert ExecutionOutcome(returncode=0).error == ""


class TestProviderExecutor:
    # * Verify exit code 0 is a success & cwd is the repository
    def test_success(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path, command=_python("import os, sys; print(os.getcwd())")
        )
        outcome = executor.run(
            ProviderConfig(name="gemini", api_key="g"),
            GenerationRequest(prompt="p", output_path="o.png"),
        )

        assert outcome.success is True
        assert outcome.output_path == "o.png"
        assert Path(outcome.stdout.strip()).resolve() == tmp_path.resolve()

    # * Verify credentials reach the child process
    def test_env_injected(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path,
            command=_python("import os; print(os.environ['OPENROUTER_API_KEY'])"),
            base_env={},
        )
        outcome = executor.run(
            ProviderConfig(name="openrouter", api_key="secret"), GenerationRequest(prompt="p")
        )
        assert outcome.stdout.strip() == "secret"

    # * Verify non-zero exit reports stderr
    def test_failure_stderr(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path, command=_python("import sys; sys.stderr.write('quota'); sys.exit(3)")
        )
        outcome = executor.run(ProviderConfig(name="gemini"), GenerationRequest(prompt="p"))

        assert outcome.success is False
        assert outcome.returncode == 3
        assert outcome.error == "quota"

    # * Verify spawn failure is reported, not raised
    def test_spawn_failure(self, tmp_path):
        executor = ProviderExecutor(tmp_path, command=("definitely-not-a-real-binary-xyz",))
        outcome = executor.run(ProviderConfig(name="gemini"), GenerationRequest(prompt="p"))

        assert outcome.success is False
        assert outcome.error.startswith("Failed to spawn process:")

    # * Verify the process is killed once the timeout elapses
    def test_timeout(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path, command=_python("import time; time.sleep(30)"), timeout=0.5
        )
        outcome = executor.run(ProviderConfig(name="gemini"), GenerationRequest(prompt="p"))

        assert outcome.timed_out is True
        assert outcome.success is False
        assert outcome.error == "Generation timed out"

    # * Verify cancellation kills the running process
    def test_cancelled(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path, command=_python("import time; time.sleep(30)"), timeout=60
        )
        cancel = CancelToken()
        cancel.cancel()
        outcome = executor.run(
            ProviderConfig(name="gemini"), GenerationRequest(prompt="p"), cancel
        )

        assert outcome.cancelled is True
        assert outcome.error == "Generation cancelled"

    # * Verify undecodable output bytes are replaced rather than raised
    def test_invalid_utf8_output(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path,
            command=_python(
                "import sys; sys.stderr.buffer.write(b'bad \\xff\\xfe'); sys.exit(1)"
            ),
        )
        outcome = executor.run(ProviderConfig(name="gemini"), GenerationRequest(prompt="p"))

        assert outcome.success is False
        assert outcome.error.startswith("bad ")
        assert "�" in outcome.stderr

    # * Verify undecodable output from one provider still lets the next one run
    def test_invalid_utf8_keeps_fallback_chain(self, tmp_path):
        executor = ProviderExecutor(
            tmp_path,
            command=_python(
                "import sys; sys.stderr.buffer.write(b'bad \\xff\\xfe'); sys.exit(1)"
            ),
        )
        config = GlobalConfig(
            repository_path=str(tmp_path),
            providers=(
                ProviderConfig(name="gemini", api_key="g", priority=1),
                ProviderConfig(name="openrouter", api_key="o", priority=2),
            ),
        )
        manager = ProviderManager(executor, ProviderHealthTracker(environ={}))

        result = manager.generate_with_fallback(GenerationRequest(prompt="p"), config)

        assert result.success is False
        assert [a.provider for a in result.attempts] == ["gemini", "openrouter"]

    # * Verify an interrupt while waiting kills & reaps the child before propagating
    def test_interrupt_kills_child(self, tmp_path, monkeypatch):
        started = []

        def interrupted_poll(self, proc, deadline, cancel):
            started.append(proc)
            raise KeyboardInterrupt

        monkeypatch.setattr(ProviderExecutor, "_poll", interrupted_poll)
        executor = ProviderExecutor(
            tmp_path, command=_python("import time; time.sleep(30)"), timeout=60
        )

        with pytest.raises(KeyboardInterrupt):
            executor.run(ProviderConfig(name="gemini"), GenerationRequest(prompt="p"))

        assert started[0].returncode is not None
