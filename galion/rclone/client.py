# Galion rclone Client
# Calls to the rclone remote control API over HTTP

import logging
import threading
from typing import Any, Optional

import httpx

from galion.errors import RcloneDecodeError, RcloneError, StatusDecodeError
from galion.jobs.model import JobStatus

logger = logging.getLogger(__name__)

DEFAULT_RC_URL = "http://127.0.0.1:5572"


def _require(payload: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    """Fetch a typed field from a status payload."""
    if key not in payload:
        raise StatusDecodeError(f"Job status is missing '{key}': {payload}")
    value = payload[key]
    # bool is an int subclass, never accept it as a number
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise StatusDecodeError(f"Job status field '{key}' has unexpected type: {value!r}")
    return value


def decode_job_status(payload: dict[str, Any]) -> JobStatus:
    """
    Decode a 'job/status' response.

    Raises:
        StatusDecodeError: If a required field is missing or mistyped.
    """
    error = payload.get("error") or ""
    start_time = payload.get("startTime") or ""
    if not isinstance(error, str) or not isinstance(start_time, str):
        raise StatusDecodeError(f"Job status has malformed error/startTime: {payload}")
    return JobStatus(
        finished=_require(payload, "finished", bool),
        success=_require(payload, "success", bool),
        duration_seconds=float(_require(payload, "duration", (int, float))),
        error=error,
        start_time=start_time,
    )


class RcloneClient:
    """
    Client for the rclone rc API ('rclone rcd').

    Every call is serialized: at most one request is in flight at a time,
    whichever thread issues it.
    """

    def __init__(
        self,
        url: str = DEFAULT_RC_URL,
        *,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            url: Base URL of the rc server.
            user: Optional basic auth user.
            password: Optional basic auth password.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        auth = (user, password or "") if user else None
        self.url = url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.url,
            auth=auth,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._lock = threading.Lock()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def __enter__(self) -> "RcloneClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def call(self, method: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Call an rc method.

        Args:
            method: rc method, e.g. "job/status".
            params: JSON parameters.

        Returns:
            The decoded JSON response.

        Raises:
            RcloneError: On connection failures and rc error responses.
            RcloneDecodeError: If the response is not a JSON object.
        """
        with self._lock:
            try:
                response = self._http.post(f"/{method}", json=params or {})
            except httpx.HTTPError as e:
                raise RcloneError(f"rclone call '{method}' failed", cause=e)

        if response.status_code != httpx.codes.OK:
            raise RcloneError(
                f"rclone '{method}' failed: {self._error_message(response)}",
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RcloneDecodeError(f"rclone '{method}' returned invalid JSON", cause=e)
        if not isinstance(payload, dict):
            raise RcloneDecodeError(f"rclone '{method}' returned {type(payload).__name__}, expected an object")
        return payload

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text.strip() or f"HTTP {response.status_code}"
        if isinstance(payload, dict) and isinstance(payload.get("error"), str):
            return payload["error"]
        return str(payload)

    def noop(self, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Echo the parameters back, used to check the server is up."""
        return self.call("rc/noop", params)

    def get_options(self) -> dict[str, Any]:
        """Get the global rclone options."""
        return self.call("options/get")

    def set_options(self, options: dict[str, Any]) -> dict[str, Any]:
        """Set global rclone options, e.g. {"main": {"LogLevel": "CRITICAL"}}."""
        return self.call("options/set", options)

    def set_config_path(self, config_path: str) -> dict[str, Any]:
        """Point rclone to another configuration file."""
        return self.call("config/setpath", {"path": config_path})

    def dump_config(self) -> dict[str, Any]:
        """Dump the rclone configuration. Fails if it cannot be decrypted."""
        return self.call("config/dump")

    def list_remotes(self) -> list[str]:
        """Names of the remotes in the rclone configuration."""
        payload = self.call("config/listremotes")
        remotes = payload.get("remotes") or []
        if not isinstance(remotes, list):
            raise RcloneDecodeError(f"Bad response - remotes is not a list: {payload}")
        return [remote for remote in remotes if isinstance(remote, str)]

    def get_remote(self, name: str) -> dict[str, Any]:
        """Parameters of one remote from the rclone configuration."""
        return self.call("config/get", {"name": name})

    def submit_sync(self, source: str, destination: str, is_async: bool = True) -> int:
        """
        Start a 'sync/sync' job.

        Returns:
            The job id assigned by rclone.
        """
        payload = self.call("sync/sync", {"srcFs": source, "dstFs": destination, "_async": is_async})
        job_id = payload.get("jobid")
        if not isinstance(job_id, int) or isinstance(job_id, bool):
            raise RcloneDecodeError(f"Bad response - no job id: {payload}")
        logger.debug("rclone accepted sync %s -> %s as job %d", source, destination, job_id)
        return job_id

    def list_active_jobs(self) -> list[int]:
        """Ids of the jobs rclone knows about."""
        payload = self.call("job/list")
        job_ids = payload.get("jobids") or []
        if not isinstance(job_ids, list):
            raise RcloneDecodeError(f"Bad response - jobids is not a list: {payload}")
        return [job_id for job_id in job_ids if isinstance(job_id, int)]

    def job_status(self, job_id: int) -> JobStatus:
        """
        Status of one job.

        Raises:
            RcloneError: If rclone cannot be reached or does not know the job.
            StatusDecodeError: If the status payload is malformed.
        """
        return decode_job_status(self.call("job/status", {"jobid": job_id}))
