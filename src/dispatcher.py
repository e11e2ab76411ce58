"""
Command dispatcher: runs one lifecycle command against the workspace.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import click

import local_runner
import packager
import scaffold
from clients import LambdaClient
from config import (
    MANIFEST_FILENAME,
    PAYLOAD_FILENAME,
    SOURCE_DIRNAME,
    ConfigStore,
    UserDefaultsStore,
    read_payload,
)
from errors import ConfigCorrupt, NotConfigured, PayloadParseError, RemoteError
from models import CommandResult, LambdaConfig, UserDefaults
from prompter import Prompter

logger = logging.getLogger(__name__)

# name -> one-line description, in the order `help` lists them
COMMANDS: Dict[str, str] = {
    "init": "Scaffold a new function project in a new folder",
    "configure": "Set the function name, region, role and runtime options",
    "create": "Package src/ and create the function",
    "update": "Run update-config then update-code",
    "update-config": "Push the configuration options to the function",
    "update-code": "Package src/ and upload it as the function code",
    "delete": "Delete the remote function (keeps lambda_config.json)",
    "invoke": f"Invoke the function remotely with {PAYLOAD_FILENAME}",
    "invoke-local": f"Run the handler from src/ in-process with {PAYLOAD_FILENAME}",
    "logs": "Tail the function logs until interrupted",
    "help": "List the available commands",
}


def parse_response(body: str) -> Tuple[Any, bool]:
    """
    Try to decode a response body as JSON.

    Returns:
        Tuple of (value, parsed); value is the raw text when parsing fails
    """
    try:
        return json.loads(body), True
    except (TypeError, ValueError):
        return body, False


def format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2)
    except (TypeError, ValueError):
        return repr(value)


class CommandDispatcher:
    """Maps command names to steps against the store, packager and service."""

    def __init__(
        self,
        workspace: Path,
        store: Optional[ConfigStore] = None,
        service_factory: Optional[Callable[[str], LambdaClient]] = None,
        build_archive: Optional[Callable[[Path], bytes]] = None,
        prompter: Optional[Prompter] = None,
        run_local: Optional[Callable[..., Any]] = None,
        user_defaults: Optional[UserDefaultsStore] = None,
        poll_interval: float = 2.0,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
        echo: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            workspace: Project directory holding lambda_config.json and src/
            store: Configuration store; defaults to one for the workspace
            service_factory: Builds a function service client for a region
            build_archive: Packages a source directory into zip bytes
            prompter: Interactive prompts for init/configure
            run_local: Calls the handler in-process for invoke-local
            user_defaults: Store for answers remembered by init
            poll_interval: Seconds between log polls
            sleep: Sleep function used by the log poller
            clock: Time source used for the initial log position
            echo: Writes command output to the user
        """
        self.workspace = Path(workspace)
        self.store = store or ConfigStore(self.workspace)
        self.service_factory = service_factory or LambdaClient
        self.build_archive = build_archive or packager.build_archive
        self.prompter = prompter or Prompter()
        self.run_local = run_local or local_runner.run
        self.user_defaults = user_defaults or UserDefaultsStore()
        self.poll_interval = poll_interval
        self.sleep = sleep or time.sleep
        self.clock = clock or time.time
        self.echo = echo or click.echo

        self.handlers: Dict[str, Callable[[CommandResult], None]] = {
            "init": self.init,
            "configure": self.configure,
            "create": self.create,
            "update": self.update,
            "update-config": self.update_config,
            "update-code": self.update_code,
            "delete": self.delete,
            "invoke": self.invoke,
            "invoke-local": self.invoke_local,
            "logs": self.logs,
            "help": self.help,
        }

    @property
    def source_dir(self) -> Path:
        return self.workspace / SOURCE_DIRNAME

    def run(self, command: str) -> CommandResult:
        """
        Run one command.

        Args:
            command: Command name from COMMANDS

        Returns:
            CommandResult listing any failed steps

        Raises:
            ValueError: If the command is unknown
            NotConfigured: If the command needs a configuration record and there is none
            ConfigCorrupt: If the configuration record cannot be read
        """
        handler = self.handlers.get(command)
        if handler is None:
            raise ValueError(f"Unknown command: {command}")
        result = CommandResult(command=command)
        handler(result)
        return result

    def require_config(self) -> LambdaConfig:
        config = self.store.load()
        if config is None:
            raise NotConfigured(
                f"{self.store.path.name} not found! Run `lambda-scaffold configure` "
                "to set up your lambda details."
            )
        return config

    def _report_failure(self, result: CommandResult, step: str, error: RemoteError) -> None:
        logger.error(f"FAILED - {error.message}")
        if error.code:
            logger.debug(f"{step} error code: {error.code}")
        result.failed_steps.append(step)

    def _load_payload(self) -> Optional[Any]:
        try:
            return read_payload(self.workspace / PAYLOAD_FILENAME)
        except PayloadParseError as e:
            logger.warning(f"{e}; invoking without a payload")
            return None

    # ------------------------------------------------------------------
    # Commands that do not need a configuration record
    # ------------------------------------------------------------------

    def help(self, result: CommandResult) -> None:
        width = max(len(name) for name in COMMANDS)
        self.echo("Available commands:")
        for name, description in COMMANDS.items():
            self.echo(f"  {name.ljust(width)}  {description}")

    def init(self, result: CommandResult) -> None:
        """Scaffold a new project folder under the workspace."""
        answers = self.prompter.collect_project(self.user_defaults.load())
        answers.validate()
        self.user_defaults.save(UserDefaults.from_answers(answers))

        try:
            scaffold.create_project(answers, self.workspace)
        except FileExistsError:
            project_dir = self.workspace / answers.name
            if not self.prompter.confirm_overwrite(answers.name):
                logger.warning("! Scaffolding process aborted.")
                result.failed_steps.append("init")
                return
            scaffold.remove_project(project_dir)
            scaffold.create_project(answers, self.workspace)

    def configure(self, result: CommandResult) -> None:
        """Collect, validate and save the configuration record."""
        try:
            defaults = self.store.load()
        except ConfigCorrupt as e:
            logger.warning(f"Ignoring existing configuration: {e}")
            defaults = None

        config = self.prompter.collect_config(defaults or LambdaConfig.defaults())
        self.store.save(config)
        self._sync_manifest(config)

        self.echo(json.dumps(config.to_dict(), indent=2))
        logger.info("Lambda configuration saved")

    def _sync_manifest(self, config: LambdaConfig) -> None:
        """Keep src/manifest.json name and description in line with the record."""
        if not self.source_dir.is_dir():
            logger.warning(
                f"No {SOURCE_DIRNAME}/ directory in {self.workspace}; "
                f"skipping {MANIFEST_FILENAME}"
            )
            return

        manifest_path = self.source_dir / MANIFEST_FILENAME
        manifest: Dict[str, Any] = {}
        if manifest_path.exists():
            try:
                loaded = json.loads(manifest_path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning(f"Rewriting unparseable {manifest_path}: {e}")
            else:
                if isinstance(loaded, dict):
                    manifest = loaded

        manifest["name"] = config.function_options.function_name
        manifest["description"] = config.function_options.description
        manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")

    # ------------------------------------------------------------------
    # Commands against the remote function
    # ------------------------------------------------------------------

    def create(self, result: CommandResult) -> None:
        config = self.require_config()
        archive = self.build_archive(self.source_dir)
        service = self.service_factory(config.region)

        try:
            data = service.create_function(config.function_options, archive)
        except RemoteError as e:
            self._report_failure(result, "create", e)
            return
        name = data.get("FunctionName", config.function_name)
        logger.info(f"SUCCESS - lambda {name} created")

    def update(self, result: CommandResult) -> None:
        """Push configuration then code; the code step runs even if the first fails."""
        config = self.require_config()
        self._update_config(config, result)
        self._update_code(config, result)

    def update_config(self, result: CommandResult) -> None:
        self._update_config(self.require_config(), result)

    def update_code(self, result: CommandResult) -> None:
        self._update_code(self.require_config(), result)

    def _update_config(self, config: LambdaConfig, result: CommandResult) -> None:
        service = self.service_factory(config.region)
        try:
            data = service.update_function_configuration(config.function_options)
        except RemoteError as e:
            self._report_failure(result, "update-config", e)
            return
        name = data.get("FunctionName", config.function_name)
        logger.info(f"SUCCESS - lambda {name} config updated")
        logger.debug(f"Update response: {data}")

    def _update_code(self, config: LambdaConfig, result: CommandResult) -> None:
        archive = self.build_archive(self.source_dir)
        service = self.service_factory(config.region)
        try:
            data = service.update_function_code(config.function_name, archive)
        except RemoteError as e:
            self._report_failure(result, "update-code", e)
            return
        name = data.get("FunctionName", config.function_name)
        logger.info(f"SUCCESS - lambda {name} code updated")
        logger.debug(f"Update response: {data}")

    def delete(self, result: CommandResult) -> None:
        config = self.require_config()
        service = self.service_factory(config.region)
        try:
            service.delete_function(config.function_name)
        except RemoteError as e:
            self._report_failure(result, "delete", e)
            return
        logger.info(f"SUCCESS - lambda {config.function_name} deleted")

    def invoke(self, result: CommandResult) -> None:
        config = self.require_config()
        payload = self._load_payload()
        service = self.service_factory(config.region)

        try:
            response = service.invoke(config.function_name, payload)
        except RemoteError as e:
            self._report_failure(result, "invoke", e)
            return

        if response.function_error:
            logger.warning(
                f"Function {config.function_name} raised an error "
                f"({response.function_error})"
            )
        value, _ = parse_response(response.body)
        self.echo(format_value(value))

    def invoke_local(self, result: CommandResult) -> None:
        config = self.require_config()
        payload = self._load_payload()
        options = config.function_options

        try:
            value = self.run_local(
                self.source_dir, options.handler, payload, options, region=config.region
            )
        except Exception as e:
            logger.error(f"FAILED - {options.handler} raised {type(e).__name__}: {e}")
            result.failed_steps.append("invoke-local")
            return
        self.echo(format_value(value))

    def logs(self, result: CommandResult) -> None:
        """Poll the function's log group forever, printing new lines."""
        config = self.require_config()
        service = self.service_factory(config.region)
        start_time = int(self.clock() * 1000)
        logger.info(
            f"Tailing logs for {config.function_name} every {self.poll_interval}s "
            "(Ctrl-C to stop)"
        )

        while True:
            start_time = self._print_new_events(service, config.function_name, start_time)
            self.sleep(self.poll_interval)

    def _print_new_events(self, service: LambdaClient, function_name: str, start_time: int) -> int:
        """Print events since start_time and return the next start time."""
        try:
            events = service.fetch_log_events(function_name, start_time)
        except RemoteError as e:
            logger.warning(f"Log poll failed - {e.message}")
            return start_time

        for event in events:
            self.echo(event.message.rstrip("\n"))
            start_time = max(start_time, event.timestamp + 1)
        return start_time
