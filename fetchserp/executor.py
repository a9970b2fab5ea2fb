"""
Request executor shared by every FetchSERP endpoint.

Performs exactly one authenticated round trip per call:
build URL and query, send with a bounded deadline, decode by content
type, and turn non-2xx answers into APIError.
"""

import asyncio
import json
import logging
import time
from typing import Any, Optional

import httpx

from .config import ClientConfig
from .errors import (
    APIError,
    DecodeError,
    RateLimitError,
    RequestTimeoutError,
    TransportError,
    UnauthorizedError,
)
from .models import RequestDescriptor

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class RequestExecutor:
    """
    Sends RequestDescriptors to the API.

    Usage:
        executor = RequestExecutor(ClientConfig(api_key="your_key"))
        data = await executor.execute(RequestDescriptor("GET", "/api/v1/user"))
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Immutable client configuration
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.config = config
        self._transport = transport

    def build_url(self, path: str) -> str:
        """Join the base URL and a server-relative path."""
        return self.config.base_url.rstrip("/") + path

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": JSON_CONTENT_TYPE,
            "Authorization": f"Bearer {self.config.api_key}",
        }

    async def execute(self, request: RequestDescriptor) -> Any:
        """
        Perform the request and return the decoded body.

        Args:
            request: Verb, path, query params and optional JSON body

        Returns:
            Parsed JSON for JSON responses, text otherwise

        Raises:
            RequestTimeoutError: no response within config.timeout ms
            TransportError: network failure
            APIError: non-2xx status
            DecodeError: JSON content type with an unparseable body
        """
        url = self.build_url(request.path)
        params = request.query_items()

        logger.info("FetchSERP %s %s", request.method, request.path)
        logger.debug("Query params: %s", params)

        start_time = time.time()
        try:
            # Deadline spans headers and body; httpx reads the body inside request().
            response = await asyncio.wait_for(
                self._send(request, url, params),
                timeout=self.config.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(
                "FetchSERP %s %s timed out after %dms",
                request.method, request.path, self.config.timeout,
            )
            raise RequestTimeoutError(
                f"Request to {request.path} timed out after {self.config.timeout}ms"
            ) from None
        except httpx.RequestError as e:
            logger.warning("FetchSERP %s %s failed: %s", request.method, request.path, e)
            raise TransportError(f"Request to {request.path} failed: {e}") from e

        elapsed = int((time.time() - start_time) * 1000)
        logger.debug(
            "FetchSERP %s %s -> %d (%dms)",
            request.method, request.path, response.status_code, elapsed,
        )

        data = self.decode(response)
        self._handle_errors(response, data)
        return data

    async def _send(
        self,
        request: RequestDescriptor,
        url: str,
        params: list[tuple[str, str]],
    ) -> httpx.Response:
        kwargs = {}
        if request.body is not None:
            kwargs["content"] = json.dumps(request.body)

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self.config.timeout_seconds),
        ) as client:
            return await client.request(
                request.method,
                url,
                params=params,
                headers=self.headers(),
                **kwargs,
            )

    def decode(self, response: httpx.Response) -> Any:
        """Parse JSON when the server declares it, otherwise return text."""
        content_type = response.headers.get("content-type", "")

        if JSON_CONTENT_TYPE not in content_type.lower():
            return response.text

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"Invalid JSON in response (status {response.status_code}): {e}",
                status_code=response.status_code,
                text=response.text,
            ) from e

    def _handle_errors(self, response: httpx.Response, data: Any) -> None:
        """Raise the matching APIError for non-2xx responses."""
        if response.is_success:
            return

        status = response.status_code
        message = None
        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
        if not message:
            message = (
                response.reason_phrase
                or httpx.codes.get_reason_phrase(status)
                or f"HTTP {status}"
            )

        logger.warning("FetchSERP error %d: %s", status, message)

        if status in (401, 403):
            raise UnauthorizedError(message, status, data)
        elif status == 429:
            raise RateLimitError(message, status, data)
        raise APIError(message, status, data)
