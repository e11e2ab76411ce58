"""
AWS Lambda project scaffolding and deployment tool.
"""

from clients import LambdaClient
from config import ConfigStore, RunConfig
from dispatcher import CommandDispatcher
from log_utils import setup_logging
from models import FunctionOptions, InvokeResult, LambdaConfig, LogEvent

__all__ = [
    "LambdaClient",
    "ConfigStore",
    "RunConfig",
    "CommandDispatcher",
    "setup_logging",
    "FunctionOptions",
    "InvokeResult",
    "LambdaConfig",
    "LogEvent",
]
