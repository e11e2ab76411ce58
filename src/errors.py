"""
Exception types for the Lambda scaffolding and deployment tool.
"""


class LambdaScaffoldError(Exception):
    """Base class for errors reported to the user by the CLI."""


class NotConfigured(LambdaScaffoldError):
    """Raised when a command needs lambda_config.json and there is none."""


class ConfigCorrupt(LambdaScaffoldError):
    """Raised when lambda_config.json exists but cannot be used."""


class ConfigValidationError(LambdaScaffoldError, ValueError):
    """Raised when a configuration record breaks the schema."""


class RemoteError(LambdaScaffoldError):
    """Raised when a call to the function service fails."""

    def __init__(self, message: str, code: str = ""):
        super().__init__(message)
        self.message = message
        self.code = code


class PayloadParseError(LambdaScaffoldError):
    """Raised when the local payload file cannot be read or parsed."""


class PackagingError(LambdaScaffoldError, OSError):
    """Raised when the source directory cannot be packaged."""


class HandlerNotFound(LambdaScaffoldError):
    """Raised when a handler reference cannot be resolved locally."""
