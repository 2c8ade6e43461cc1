# tests/unit/template_io/test_generics.py
# Unit tests for generic filesystem helpers

import pytest
import typer

from create_image.core.exceptions import FileReadError, JSONParsingError
from create_image.template_io.generics import (
    exit_with_error,
    read_json_safe,
    read_text_safe,
    write_json_safe,
    write_text_safe,
)


class TestJsonHelpers:
    # * Verify write creates parents & read returns the dict
    def test_write_then_read(self, tmp_path):
        path = tmp_path / "nested" / "data.json"
        write_json_safe({"a": 1}, path)
        assert read_json_safe(path) == {"a": 1}

    # * Verify invalid JSON error shows a marked snippet
    def test_invalid_json_snippet(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{\n  "a": 1,\n  "b": \n}', encoding="utf-8")

        with pytest.raises(JSONParsingError) as exc:
            read_json_safe(path)

        message = str(exc.value)
        assert f"Invalid JSON in {path}" in message
        assert ">>> " in message


class TestTextHelpers:
    # * Verify missing file raises FileReadError
    def test_missing(self, tmp_path):
        with pytest.raises(FileReadError, match="File not found") as exc:
            read_text_safe(tmp_path / "ghost.txt")
        assert exc.value.path == tmp_path / "ghost.txt"

    # * Verify UTF-8 content survives
    def test_utf8(self, tmp_path):
        path = tmp_path / "deep" / "t.txt"
        write_text_safe(path, "café")
        assert read_text_safe(path) == "café"


class TestExitWithError:
    # * Verify typer.Exit raised w/ code
    def test_exit(self, capsys):
        with pytest.raises(typer.Exit) as exc:
            exit_with_error("nope", code=2)
        assert exc.value.exit_code == 2
        assert "nope" in capsys.readouterr().err
