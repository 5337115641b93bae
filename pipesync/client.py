"""
Concourse control plane client.

This module defines the team-scoped operations the reconciliation engine needs
from a control plane (as protocols) and a synchronous httpx implementation of
them against the Concourse ATC REST API.
"""

from typing import Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from pipesync.exceptions import ControlPlaneAPIError, ControlPlaneAuthError
from pipesync.models import (
    ConfigWarning,
    PipelineConfigResponse,
    PipelineInfo,
    SaveConfigResult,
)
from pipesync.types import JSONDict
from pipesync.utils.logger import logger

CONFIG_VERSION_HEADER = "X-Concourse-Config-Version"


class TeamHandle(Protocol):
    """Team-scoped pipeline operations.

    Not-found is reported through the return value (``None`` or ``False``);
    transport and backend failures are raised.
    """

    def get_pipeline(self, name: str) -> PipelineInfo | None: ...

    def get_pipeline_config(self, name: str) -> PipelineConfigResponse | None: ...

    def create_or_update_pipeline_config(
        self, name: str, version: str, config: bytes, check_credentials: bool
    ) -> SaveConfigResult: ...

    def expose_pipeline(self, name: str) -> bool: ...

    def hide_pipeline(self, name: str) -> bool: ...

    def pause_pipeline(self, name: str) -> bool: ...

    def unpause_pipeline(self, name: str) -> bool: ...

    def delete_pipeline(self, name: str) -> bool: ...


class ControlPlane(Protocol):
    """Entry point handing out team handles."""

    def team(self, team_name: str) -> TeamHandle: ...


class ConcourseClient:
    """Client for interacting with the Concourse API.

    Example:
        ```python
        with ConcourseClient("https://ci.example.com", token="...") as client:
            team = client.team("main")
            info = team.get_pipeline("deploy")
        ```
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        log_requests: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Concourse client.

        Args:
            base_url: Base URL of the Concourse web node (e.g., "http://localhost:8080")
            token: Bearer token used for every request (optional)
            timeout: HTTP request timeout in seconds
            log_requests: Enable request/response logging (default: False)
            transport: Custom httpx transport, mostly useful for tests
        """
        self.base_url = base_url.rstrip("/")
        self.log_requests = log_requests

        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> "ConcourseClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def team(self, team_name: str) -> "TeamClient":
        """Get a handle for pipeline operations within a team."""
        return TeamClient(self, team_name)

    def _log_request(self, method: str, url: str, **kwargs: Any) -> None:
        """Log HTTP request if logging is enabled."""
        if self.log_requests:
            logger.debug(f"API Request: {method} {url}", extra={"request_data": kwargs})

    def _log_response(self, response: httpx.Response) -> None:
        """Log HTTP response if logging is enabled."""
        if self.log_requests:
            logger.debug(
                f"API Response: {response.status_code}",
                extra={"response_data": response.text},
            )

    def _request(
        self,
        method: str,
        endpoint: str,
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make HTTP request to API.

        Args:
            method: HTTP method (GET, PUT, etc.)
            endpoint: API endpoint (e.g., "/api/v1/teams/main/pipelines")
            allow_not_found: Return 404 responses instead of raising
            **kwargs: Additional arguments passed to httpx request

        Returns:
            HTTP response

        Raises:
            ControlPlaneAPIError: On API errors
            ControlPlaneAuthError: On authentication errors
        """
        url = f"{self.base_url}{endpoint}"
        self._log_request(method, url, **kwargs)

        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during request: {e}")
            raise ControlPlaneAPIError(f"HTTP error: {e!s}") from e

        self._log_response(response)

        if response.status_code == 401:
            raise ControlPlaneAuthError(
                "Authentication required or token expired",
                status_code=401,
                detail=response.text,
            )
        if response.status_code == 403:
            raise ControlPlaneAuthError(
                "Access forbidden",
                status_code=403,
                detail=response.text,
            )
        if response.status_code == 404 and allow_not_found:
            return response
        if response.status_code >= 400:
            detail: Any
            try:
                detail = response.json()
            except ValueError:
                detail = response.text

            raise ControlPlaneAPIError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        return response


class TeamClient:
    """Pipeline operations scoped to a single Concourse team."""

    def __init__(self, client: ConcourseClient, team_name: str) -> None:
        self._client = client
        self.team_name = team_name

    def _pipeline_url(self, name: str, suffix: str = "") -> str:
        team, pipeline = quote(self.team_name, safe=""), quote(name, safe="")
        return f"/api/v1/teams/{team}/pipelines/{pipeline}{suffix}"

    @staticmethod
    def _malformed(response: httpx.Response, reason: str) -> ControlPlaneAPIError:
        return ControlPlaneAPIError(
            f"Malformed response ({response.status_code}): {reason}",
            status_code=response.status_code,
            detail=response.text,
        )

    def _json_object(self, response: httpx.Response) -> JSONDict:
        """Decode a response body that must be a JSON object."""
        try:
            body = response.json()
        except ValueError as e:
            raise self._malformed(response, f"body is not JSON: {e}") from e
        if not isinstance(body, dict):
            raise self._malformed(
                response, f"expected a JSON object, got {type(body).__name__}"
            )
        return body

    def get_pipeline(self, name: str) -> PipelineInfo | None:
        """Get pipeline summary, or None when the pipeline does not exist."""
        response = self._client._request("GET", self._pipeline_url(name), allow_not_found=True)
        if response.status_code == 404:
            return None
        body = self._json_object(response)
        try:
            return PipelineInfo.model_validate(body)
        except ValidationError as e:
            raise self._malformed(response, str(e)) from e

    def get_pipeline_config(self, name: str) -> PipelineConfigResponse | None:
        """Get the stored config and its version token.

        Returns:
            The config, or None when the pipeline has no config
        """
        response = self._client._request(
            "GET", self._pipeline_url(name, "/config"), allow_not_found=True
        )
        if response.status_code == 404:
            return None

        body = self._json_object(response)
        if body.get("config") is None:
            raise self._malformed(response, "no config in body")
        try:
            return PipelineConfigResponse(
                raw=response.content,
                config=body["config"],
                version=response.headers.get(CONFIG_VERSION_HEADER, ""),
            )
        except ValidationError as e:
            raise self._malformed(response, str(e)) from e

    def create_or_update_pipeline_config(
        self, name: str, version: str, config: bytes, check_credentials: bool
    ) -> SaveConfigResult:
        """Save a pipeline config.

        Args:
            name: Pipeline name
            version: Version token the caller believes is current
            config: JSON encoded config document
            check_credentials: Ask the server to validate credentials only

        Returns:
            Whether the pipeline was created or updated, plus any warnings
        """
        params = {"check_creds": ""} if check_credentials else None
        response = self._client._request(
            "PUT",
            self._pipeline_url(name, "/config"),
            content=config,
            params=params,
            headers={CONFIG_VERSION_HEADER: version, "Content-Type": "application/json"},
        )

        warnings: list[ConfigWarning] = []
        if response.content:
            body = self._json_object(response)
            try:
                warnings = [ConfigWarning.model_validate(w) for w in body.get("warnings") or []]
            except (TypeError, ValidationError) as e:
                raise self._malformed(response, str(e)) from e

        return SaveConfigResult(
            created=response.status_code == 201,
            updated=response.status_code == 200,
            warnings=warnings,
        )

    def _put_flag(self, name: str, action: str) -> bool:
        response = self._client._request(
            "PUT", self._pipeline_url(name, f"/{action}"), allow_not_found=True
        )
        return response.status_code != 404

    def expose_pipeline(self, name: str) -> bool:
        return self._put_flag(name, "expose")

    def hide_pipeline(self, name: str) -> bool:
        return self._put_flag(name, "hide")

    def pause_pipeline(self, name: str) -> bool:
        return self._put_flag(name, "pause")

    def unpause_pipeline(self, name: str) -> bool:
        return self._put_flag(name, "unpause")

    def delete_pipeline(self, name: str) -> bool:
        """Delete a pipeline.

        Returns:
            False when the pipeline did not exist
        """
        response = self._client._request("DELETE", self._pipeline_url(name), allow_not_found=True)
        return response.status_code != 404
