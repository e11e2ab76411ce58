"""
AWS Lambda client used by the deployment commands.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from errors import RemoteError
from models import FunctionOptions, InvokeResult, LogEvent

logger = logging.getLogger(__name__)

LOG_GROUP_PREFIX = "/aws/lambda/"

# A failed call is reported to the user, never retried
CLIENT_CONFIG = Config(retries={"max_attempts": 1, "mode": "standard"})


class LambdaClient:
    """Thin wrapper around the boto3 Lambda and CloudWatch Logs clients."""

    def __init__(self, region: str, session: Optional[boto3.session.Session] = None):
        """
        Initialize the Lambda client.

        Args:
            region: AWS region every call targets
            session: Optional boto3 session; the default session is used if omitted
        """
        self.region = region
        factory = session.client if session is not None else boto3.client
        self.lambda_api = factory("lambda", region_name=region, config=CLIENT_CONFIG)
        self.logs_api = factory("logs", region_name=region, config=CLIENT_CONFIG)

    def _call(self, api, operation: str, **kwargs) -> Dict[str, Any]:
        """
        Execute a single API call, converting SDK failures to RemoteError.

        Args:
            api: boto3 client to call
            operation: Client method name
            **kwargs: Request parameters

        Returns:
            Response dictionary

        Raises:
            RemoteError: If the call fails for any reason
        """
        logger.debug(f"{operation} ({self.region})")
        try:
            return getattr(api, operation)(**kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            raise RemoteError(
                error.get("Message") or str(e), code=error.get("Code", "")
            ) from e
        except BotoCoreError as e:
            raise RemoteError(str(e)) from e

    def create_function(self, options: FunctionOptions, archive: bytes) -> Dict:
        """
        Create the function from a zip archive.

        Args:
            options: Function options from the configuration record
            archive: Zip archive bytes

        Returns:
            Function configuration returned by the service

        Raises:
            RemoteError: If the service rejects the request
        """
        params = options.to_api()
        params["Code"] = {"ZipFile": archive}
        return self._call(self.lambda_api, "create_function", **params)

    def update_function_configuration(self, options: FunctionOptions) -> Dict:
        """
        Replace the function configuration with the given options.

        Raises:
            RemoteError: If the service rejects the request
        """
        return self._call(
            self.lambda_api, "update_function_configuration", **options.to_api()
        )

    def update_function_code(self, function_name: str, archive: bytes) -> Dict:
        """
        Upload a new zip archive for the function.

        Raises:
            RemoteError: If the service rejects the request
        """
        return self._call(
            self.lambda_api,
            "update_function_code",
            FunctionName=function_name,
            ZipFile=archive,
        )

    def delete_function(self, function_name: str) -> None:
        """
        Delete the function.

        Raises:
            RemoteError: If the service rejects the request
        """
        self._call(self.lambda_api, "delete_function", FunctionName=function_name)

    def invoke(self, function_name: str, payload: Optional[Any] = None) -> InvokeResult:
        """
        Invoke the function synchronously.

        Args:
            function_name: Name of the function
            payload: JSON-serialisable event; None sends no body

        Returns:
            InvokeResult with the decoded response body

        Raises:
            RemoteError: If the invocation request fails
        """
        params: Dict[str, Any] = {
            "FunctionName": function_name,
            "InvocationType": "RequestResponse",
            "LogType": "None",
        }
        if payload is not None:
            params["Payload"] = json.dumps(payload)

        response = self._call(self.lambda_api, "invoke", **params)

        body = ""
        stream = response.get("Payload")
        if stream is not None:
            try:
                raw = stream.read()
            except BotoCoreError as e:
                raise RemoteError(f"Failed reading invoke response: {e}") from e
            body = raw.decode("utf-8", errors="replace") if raw else ""

        return InvokeResult(
            status_code=response.get("StatusCode", 0),
            body=body,
            function_error=response.get("FunctionError"),
            executed_version=response.get("ExecutedVersion"),
        )

    def fetch_log_events(self, function_name: str, start_time: int) -> List[LogEvent]:
        """
        Read log events written since start_time.

        Args:
            function_name: Name of the function
            start_time: Earliest event timestamp in milliseconds

        Returns:
            List of LogEvent objects in the order the service returned them

        Raises:
            RemoteError: If the log group cannot be read
        """
        params: Dict[str, Any] = {
            "logGroupName": f"{LOG_GROUP_PREFIX}{function_name}",
            "startTime": start_time,
        }
        events: List[LogEvent] = []

        while True:
            data = self._call(self.logs_api, "filter_log_events", **params)
            for item in data.get("events", []):
                events.append(
                    LogEvent(
                        timestamp=item.get("timestamp", 0),
                        message=item.get("message", ""),
                        log_stream_name=item.get("logStreamName", ""),
                        event_id=item.get("eventId", ""),
                    )
                )

            next_token = data.get("nextToken")
            if not next_token or next_token == params.get("nextToken"):
                break
            params["nextToken"] = next_token

        return events
