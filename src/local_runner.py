"""
Runs the function handler in-process for local testing.
"""

import importlib
import logging
import sys
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from errors import HandlerNotFound
from models import FunctionOptions

logger = logging.getLogger(__name__)


@dataclass
class LocalContext:
    """Stand-in for the context object the service passes to handlers."""

    function_name: str
    memory_limit_in_mb: int
    timeout: int
    region: str = ""
    function_version: str = "$LATEST"
    aws_request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: float = field(default_factory=time.time)

    @property
    def invoked_function_arn(self) -> str:
        return f"arn:aws:lambda:{self.region}:000000000000:function:{self.function_name}"

    @property
    def log_group_name(self) -> str:
        return f"/aws/lambda/{self.function_name}"

    @property
    def log_stream_name(self) -> str:
        return f"local/{self.aws_request_id}"

    def get_remaining_time_in_millis(self) -> int:
        elapsed = time.time() - self.started_at
        return max(0, int((self.timeout - elapsed) * 1000))


def resolve_handler(source_dir: Path, handler: str) -> Callable:
    """
    Import the module named by a `module.function` handler reference.

    Args:
        source_dir: Directory the module is imported from
        handler: Handler reference, e.g. 'index.handler'

    Returns:
        The handler callable

    Raises:
        HandlerNotFound: If the reference is malformed or cannot be resolved
    """
    module_name, _, func_name = handler.rpartition(".")
    if not module_name or not func_name:
        raise HandlerNotFound(f"Handler must look like 'module.function': {handler!r}")

    source = str(Path(source_dir).resolve())
    sys.path.insert(0, source)
    try:
        # Drop a cached copy so edits between runs are picked up
        sys.modules.pop(module_name, None)
        importlib.invalidate_caches()
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerNotFound(f"Cannot import {module_name} from {source}: {e}") from e
    finally:
        if sys.path and sys.path[0] == source:
            sys.path.pop(0)

    func = getattr(module, func_name, None)
    if not callable(func):
        raise HandlerNotFound(f"{module_name} has no callable {func_name!r}")
    return func


def run(
    source_dir: Path,
    handler: str,
    payload: Optional[Any],
    options: FunctionOptions,
    region: str = "",
) -> Any:
    """
    Call the handler with the payload and a local context.

    Args:
        source_dir: Directory holding the function source
        handler: Handler reference, e.g. 'index.handler'
        payload: Event passed to the handler
        options: Function options used to build the context
        region: Region reported by the context

    Returns:
        Whatever the handler returns; exceptions raised by the handler propagate
    """
    func = resolve_handler(source_dir, handler)
    context = LocalContext(
        function_name=options.function_name,
        memory_limit_in_mb=options.memory_size,
        timeout=options.timeout,
        region=region,
    )
    logger.debug(f"Calling {handler} locally (request {context.aws_request_id})")
    return func(payload, context)
