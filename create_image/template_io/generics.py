# create_image/template_io/generics.py
# Generic utilities for template I/O operations & filesystem helpers

from pathlib import Path
from typing import Any, Union
import json

from ..core.exceptions import FileReadError, FileWriteError, JSONParsingError
from ..core.verbose import vlog_file_read, vlog_file_write


def ensure_parent(path: Union[Path, str]) -> None:
    # create parent directories for any file path
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)


# write JSON w/ UTF-8 encoding, creating parent dirs as needed
def write_json_safe(obj: dict[str, Any], path: Path) -> None:
    ensure_parent(path)
    content = json.dumps(obj, indent=2)
    try:
        Path(path).write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileWriteError(f"Could not write {path}: {e}", path) from e
    vlog_file_write(path, len(content))


# read JSON w/ UTF-8 encoding, return dict
def read_json_safe(path: Path) -> dict[str, Any]:
    text = read_text_safe(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        # create a trimmed snippet of the offending JSON for the error message
        lines = text.split("\n")
        # JSONDecodeError uses 1-based line numbers
        line_num = e.lineno - 1
        snippet_start = max(0, line_num - 2)
        snippet_end = min(len(lines), line_num + 3)
        snippet_lines = lines[snippet_start:snippet_end]

        numbered_lines = []
        for i, line in enumerate(snippet_lines, start=snippet_start + 1):
            marker = ">>> " if i == e.lineno else "    "
            numbered_lines.append(f"{marker}{i:3}: {line}")

        snippet = "\n".join(numbered_lines)
        raise JSONParsingError(f"Invalid JSON in {path}:\n{snippet}\nError: {e.msg}")


# read UTF-8 text, wrapping OS errors
def read_text_safe(path: Union[Path, str]) -> str:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileReadError(f"File not found: {path}", path) from e
    except OSError as e:
        raise FileReadError(f"Could not read {path}: {e}", path) from e
    vlog_file_read(Path(path), len(text))
    return text


# write UTF-8 text, creating parent dirs as needed
def write_text_safe(path: Union[Path, str], content: str) -> None:
    ensure_parent(path)
    try:
        Path(path).write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileWriteError(f"Could not write {path}: {e}", path) from e
    vlog_file_write(Path(path), len(content.encode("utf-8")))


# exit CLI w/ standardized error handling
def exit_with_error(msg: str, code: int = 1) -> None:
    # local import to avoid hard dependency when utils is used outside CLI
    import typer

    typer.echo(msg, err=True)
    raise typer.Exit(code)
