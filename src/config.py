"""
Configuration management for the Lambda scaffolding and deployment tool.

Two kinds of configuration live here: the run options given on the command
line (RunConfig) and the per-workspace function record persisted in
lambda_config.json (ConfigStore).
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from errors import ConfigCorrupt, ConfigValidationError, PayloadParseError
from models import LambdaConfig, UserDefaults

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lambda_config.json"
PAYLOAD_FILENAME = "test-payload.json"
SOURCE_DIRNAME = "src"
MANIFEST_FILENAME = "manifest.json"
USER_DEFAULTS_PATH = Path.home() / ".lambda_scaffold_defaults.json"


@dataclass
class RunConfig:
    """Options for a single CLI run."""

    workspace: Path
    verbose: bool = False
    log_file: Optional[str] = None
    poll_interval: float = 2.0

    @classmethod
    def from_args(cls, args) -> "RunConfig":
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed argparse arguments

        Returns:
            RunConfig instance
        """
        return cls(
            workspace=Path(args.workspace or os.getcwd()).resolve(),
            verbose=args.verbose,
            log_file=args.log_file,
            poll_interval=args.poll_interval,
        )


class ConfigStore:
    """Reads and writes lambda_config.json in a workspace."""

    def __init__(self, workspace: Path):
        self.workspace = Path(workspace)
        self.path = self.workspace / CONFIG_FILENAME

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[LambdaConfig]:
        """
        Load the persisted record.

        Returns:
            LambdaConfig, or None when the workspace is not configured

        Raises:
            ConfigCorrupt: If the file exists but is not a valid record
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise ConfigCorrupt(f"{self.path} is not valid UTF-8: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigCorrupt(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigCorrupt(f"{self.path} must contain a JSON object")

        try:
            return LambdaConfig.from_dict(data)
        except (ConfigValidationError, TypeError) as e:
            raise ConfigCorrupt(f"{self.path} is not a valid configuration: {e}") from e

    def save(self, config: LambdaConfig) -> None:
        """
        Validate and write the full record, replacing any existing one.

        Raises:
            ConfigValidationError: If the record breaks the schema
            OSError: If the file cannot be written
        """
        config.validate()
        self.path.write_text(
            json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8"
        )
        logger.debug(f"Wrote {self.path}")


class UserDefaultsStore:
    """Remembers author and licence answers between `init` runs."""

    def __init__(self, path: Path = USER_DEFAULTS_PATH):
        self.path = Path(path)

    def load(self) -> UserDefaults:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return UserDefaults()
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable user defaults {self.path}: {e}")
            return UserDefaults()
        if not isinstance(data, dict):
            return UserDefaults()
        return UserDefaults.from_dict(data)

    def save(self, defaults: UserDefaults) -> None:
        try:
            self.path.write_text(
                json.dumps(defaults.to_dict(), indent=2) + "\n", encoding="utf-8"
            )
        except OSError as e:
            logger.error(f"Could not save user defaults to {self.path}: {e}")


def read_payload(path: Path) -> Optional[Any]:
    """
    Read the local invocation payload.

    Args:
        path: Path to the payload JSON file

    Returns:
        Parsed payload, or None if the file does not exist

    Raises:
        PayloadParseError: If the file exists but cannot be read or parsed
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise PayloadParseError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise PayloadParseError(f"{path} is not valid UTF-8: {e}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadParseError(f"{path} is not valid JSON: {e}") from e
