"""
Data models for the Lambda scaffolding and deployment tool.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from errors import ConfigValidationError

DEFAULT_REGION = "eu-west-1"
DEFAULT_FUNCTION_NAME = "my-lambda"
DEFAULT_HANDLER = "index.handler"
DEFAULT_MEMORY_SIZE = 128
DEFAULT_TIMEOUT = 3
DEFAULT_RUNTIME = "python3.12"

# Persisted key -> dataclass attribute
OPTION_KEYS = {
    "FunctionName": "function_name",
    "Description": "description",
    "Role": "role",
    "Handler": "handler",
    "MemorySize": "memory_size",
    "Timeout": "timeout",
    "Runtime": "runtime",
}


@dataclass
class FunctionOptions:
    """Options describing the remote function."""

    function_name: str = DEFAULT_FUNCTION_NAME
    role: str = ""  # IAM role ARN, no sensible default
    description: str = ""
    handler: str = DEFAULT_HANDLER
    memory_size: int = DEFAULT_MEMORY_SIZE  # MB
    timeout: int = DEFAULT_TIMEOUT  # seconds
    runtime: str = DEFAULT_RUNTIME

    def validate(self) -> None:
        """
        Check every field against the schema.

        Raises:
            ConfigValidationError: If a required field is empty or a
                numeric field is not a positive integer
        """
        errors: List[str] = []
        for attr in ("function_name", "role", "handler", "runtime"):
            value = getattr(self, attr)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"{attr} is required")
        if not isinstance(self.description, str):
            errors.append("description must be a string")
        for attr in ("memory_size", "timeout"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                errors.append(f"{attr} must be a positive integer")
        if errors:
            raise ConfigValidationError("; ".join(errors))

    def to_api(self) -> Dict[str, Any]:
        """Return the options keyed the way the Lambda API expects them."""
        return {key: getattr(self, attr) for key, attr in OPTION_KEYS.items()}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FunctionOptions":
        missing = [key for key in OPTION_KEYS if key not in data]
        # Description is optional in hand-edited files
        missing = [key for key in missing if key != "Description"]
        if missing:
            raise ConfigValidationError(f"missing keys: {', '.join(missing)}")
        values = {attr: data[key] for key, attr in OPTION_KEYS.items() if key in data}
        if values.get("description") is None:
            values["description"] = ""
        return cls(**values)


@dataclass
class LambdaConfig:
    """The persisted configuration record for one workspace."""

    region: str
    function_options: FunctionOptions

    @property
    def function_name(self) -> str:
        return self.function_options.function_name

    def validate(self) -> None:
        if not isinstance(self.region, str) or not self.region.strip():
            raise ConfigValidationError("region is required")
        self.function_options.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Region": self.region,
            "ConfigOptions": self.function_options.to_api(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LambdaConfig":
        """
        Build a record from its persisted form.

        Args:
            data: Parsed contents of lambda_config.json

        Returns:
            Validated LambdaConfig

        Raises:
            ConfigValidationError: If keys are missing or values are invalid
        """
        if "Region" not in data or "ConfigOptions" not in data:
            raise ConfigValidationError("expected Region and ConfigOptions keys")
        options = data["ConfigOptions"]
        if not isinstance(options, dict):
            raise ConfigValidationError("ConfigOptions must be an object")
        config = cls(
            region=data["Region"],
            function_options=FunctionOptions.from_api(options),
        )
        config.validate()
        return config

    @classmethod
    def defaults(cls) -> "LambdaConfig":
        """Hardcoded defaults offered when no record exists yet."""
        return cls(region=DEFAULT_REGION, function_options=FunctionOptions())


@dataclass
class InvokeResult:
    """Result of a synchronous remote invocation."""

    status_code: int
    body: str = ""
    function_error: Optional[str] = None
    executed_version: Optional[str] = None


@dataclass
class LogEvent:
    """A single log line read from the function's log group."""

    timestamp: int  # milliseconds since epoch
    message: str
    log_stream_name: str = ""
    event_id: str = ""


@dataclass
class ProjectAnswers:
    """Answers collected when scaffolding a new project."""

    name: str = "test-lambda"
    version: str = "0.0.0"
    description: str = ""
    author_name: str = ""
    author_email: str = ""
    repo_type: str = "git"
    repo_url: str = ""
    license: str = "MIT"

    def validate(self) -> None:
        """
        Check the project name is usable as a single folder name.

        Raises:
            ConfigValidationError: If the name is empty, "." or "..", or
                contains a path separator
        """
        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            raise ConfigValidationError("project name is required")
        if name in (".", "..") or any(sep in name for sep in ("/", "\\")):
            raise ConfigValidationError(
                f"project name {self.name!r} must be a plain folder name"
            )

    def tokens(self) -> Dict[str, str]:
        """Template tokens and the values that replace them."""
        return {
            "%name%": self.name,
            "%version%": self.version,
            "%description%": self.description,
            "%author_name%": self.author_name,
            "%author_email%": self.author_email,
            "%repoType%": self.repo_type,
            "%repoUrl%": self.repo_url,
            "%license%": self.license,
        }


@dataclass
class UserDefaults:
    """Answers remembered between scaffolding runs."""

    author_name: str = ""
    author_email: str = ""
    repo_type: str = "git"
    license: str = "MIT"

    @classmethod
    def from_answers(cls, answers: ProjectAnswers) -> "UserDefaults":
        return cls(
            author_name=answers.author_name,
            author_email=answers.author_email,
            repo_type=answers.repo_type,
            license=answers.license,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserDefaults":
        known = {k: str(v) for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class CommandResult:
    """Outcome of one dispatched command."""

    command: str
    failed_steps: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_steps
