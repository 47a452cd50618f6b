"""Conduit (Phabricator API) client"""
import json
from typing import Any, Dict, List, Optional

import requests

from phab_build_status.constants import DEFAULT_TIMEOUT, METHOD_WHOAMI
from phab_build_status.exceptions import ConduitError
from phab_build_status.logging_config import get_logger

logger = get_logger(__name__)


class ConduitClient:
    """Calls Conduit methods over HTTP with an API token."""

    def __init__(
        self,
        uri: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.uri = uri.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @property
    def api_uri(self) -> str:
        return f"{self.uri}/api"

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Call a Conduit method and return its result.

        Raises:
            ConduitError: Transport failure, HTTP error or a Conduit error code
        """
        payload = dict(params or {})
        payload["__conduit__"] = {"token": self.token}
        data = {
            "params": json.dumps(payload),
            "output": "json",
            "__conduit__": "1",
        }

        logger.debug(f"[Conduit] Calling {method}")
        try:
            response = self.session.post(
                f"{self.api_uri}/{method}", data=data, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise ConduitError(method, f"timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ConduitError(method, str(e)) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ConduitError(method, "response was not valid JSON") from e

        if not isinstance(body, dict):
            raise ConduitError(method, "unexpected response shape")

        if body.get("error_code"):
            info = body.get("error_info")
            message = f"{body['error_code']}: {info}" if info else body["error_code"]
            raise ConduitError(method, message)

        return body.get("result")

    def search(
        self,
        method: str,
        constraints: Optional[Dict[str, Any]] = None,
        query_key: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Run a *.search method, following the result cursor to the last page."""
        records: List[Dict[str, Any]] = []
        after: Optional[str] = None

        while True:
            params: Dict[str, Any] = {}
            if query_key:
                params["queryKey"] = query_key
            if constraints:
                params["constraints"] = constraints
            if after:
                params["after"] = after

            result = self.call(method, params) or {}
            records.extend(result.get("data") or [])

            after = (result.get("cursor") or {}).get("after")
            if not after:
                break

        logger.debug(f"[Conduit] {method} returned {len(records)} records")
        return records

    def whoami(self) -> Dict[str, Any]:
        """Return the user the token belongs to."""
        return self.call(METHOD_WHOAMI) or {}

    def close(self) -> None:
        self.session.close()
