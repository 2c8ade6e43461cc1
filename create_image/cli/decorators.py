# create_image/cli/decorators.py
# CLI decorators for error handling w/ Rich output

import functools
from typing import Callable, TypeVar, Any, cast

import typer

from ..core.exceptions import (
    CreateImageError,
    JSONParsingError,
    AIError,
    ConfigurationError,
    GenerationCancelledError,
    TemplateError,
    FileOperationError,
    format_error_message,
)

F = TypeVar("F", bound=Callable[..., Any])


# * Decorator for handling create-image errors in CLI commands w/ Rich output
def handle_create_image_error(func: F) -> F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        # ! Lazy import to avoid circular dependencies
        from ..ui.console import console

        try:
            return func(*args, **kwargs)
        except (typer.Exit, typer.Abort):
            raise
        except JSONParsingError as e:
            console.print(format_error_message("JSON Parsing Error", str(e)))
            raise SystemExit(1)
        except AIError as e:
            console.print(format_error_message("AI Error", str(e)))
            raise SystemExit(1)
        except ConfigurationError as e:
            console.print(format_error_message("Configuration Error", str(e)))
            raise SystemExit(1)
        except TemplateError as e:
            console.print(format_error_message("Template Error", str(e)))
            raise SystemExit(1)
        except FileOperationError as e:
            console.print(format_error_message("File Error", str(e)))
            raise SystemExit(1)
        except GenerationCancelledError as e:
            console.print(format_error_message("Cancelled", str(e)))
            raise SystemExit(130)
        except CreateImageError as e:
            console.print(format_error_message("Error", str(e)))
            raise SystemExit(1)
        except Exception as e:
            console.print(format_error_message("Unexpected Error", str(e)))
            raise SystemExit(1)

    return cast(F, wrapper)
