# create_image/core/exceptions.py
# Custom exception hierarchy for create-image (pure - no I/O operations)

from pathlib import Path
from typing import Any


# * Format error message for display (pure string formatting, no I/O)
def format_error_message(error_type: str, message: str) -> str:
    return f"[red]{error_type}:[/] {message}"


# * Base exception for create-image
class CreateImageError(Exception):
    pass


# * Configuration errors (no usable credentials, invalid settings)
class ConfigurationError(CreateImageError):
    pass


# * Settings value validation failed
class SettingsValidationError(ConfigurationError):
    def __init__(self, message: str, setting_name: str, value: Any):
        super().__init__(message)
        self.setting_name = setting_name
        self.value = value

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"setting_name={self.setting_name!r}, value={self.value!r})"
        )


# * Required API key not found
class MissingAPIKeyError(ConfigurationError):
    def __init__(self, message: str, provider: str, env_var: str):
        super().__init__(message)
        self.provider = provider
        self.env_var = env_var

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"provider={self.provider!r}, env_var={self.env_var!r})"
        )


# * AI-related exceptions
class AIError(CreateImageError):
    pass


# * Provider-specific error
class ProviderError(AIError):
    def __init__(self, message: str, provider: str):
        super().__init__(message)
        self.provider = provider

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, provider={self.provider!r})"
        )


# * HTTP non-2xx or network failure (retryable)
class TransientProviderError(ProviderError):
    def __init__(self, message: str, provider: str, status_code: int | None = None):
        super().__init__(message, provider)
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.args[0]!r}, "
            f"provider={self.provider!r}, status_code={self.status_code!r})"
        )


# * Provider failed its configuration-readiness check
class ProviderUnhealthyError(ProviderError):
    pass


# * Successful response w/o the expected image payload (not retryable)
class ContentError(AIError):
    pass


# * Caller cancelled a running generation
class GenerationCancelledError(CreateImageError):
    pass


# * Wall-clock budget for a generation ran out
class GenerationTimeoutError(CreateImageError):
    pass


# * JSON parsing errors
class JSONParsingError(CreateImageError):
    pass


# * Base error for template loading & management
class TemplateError(CreateImageError):
    pass


# * Template directory not found
class TemplateNotFoundError(TemplateError):
    def __init__(self, message: str, template_name: str):
        super().__init__(message)
        self.template_name = template_name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, template_name={self.template_name!r})"


# * Style reference image not found in template
class StyleReferenceNotFoundError(TemplateError):
    pass


# * Base error for file I/O operations
class FileOperationError(CreateImageError):
    def __init__(self, message: str, path: Path | str):
        super().__init__(message)
        self.path = Path(path) if isinstance(path, str) else path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, path={self.path!r})"


# * Failed to read file
class FileReadError(FileOperationError):
    pass


# * Failed to write file
class FileWriteError(FileOperationError):
    pass
