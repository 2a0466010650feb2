"""
Gemini API Client

Thin async wrapper around the Gemini REST API covering the two call
shapes the broadcast needs: one-shot `generateContent` and long-running
`predictLongRunning` operations that are polled by name.

Requires GEMINI_API_KEY environment variable.
"""

import asyncio
import logging
import os
import time
from typing import Any, Optional

import httpx


logger = logging.getLogger(__name__)


class GeminiClientError(Exception):
    """Base exception for Gemini client errors."""
    pass


class GeminiRateLimitError(GeminiClientError):
    """Raised when rate limited by the API."""
    pass


class GeminiAPIError(GeminiClientError):
    """Raised for API errors."""
    def __init__(self, message: str, status_code: int, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GeminiClient:
    """
    Async client for the Gemini API.

    Usage:
        async with GeminiClient() as client:  # Uses GEMINI_API_KEY env var
            data = await client.generate_content(
                "gemini-2.5-flash",
                {"contents": [{"parts": [{"text": "Hello!"}]}]},
            )
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: API key. Defaults to GEMINI_API_KEY env var.
            max_retries: Maximum attempts for transient errors.
            retry_delay: Base delay between retries (exponential backoff).
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY environment variable not set. "
                "Get an API key from https://aistudio.google.com/app/apikey"
            )

        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None
        self._request_count = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _model_url(self, model: str, method: str) -> str:
        """Build the API URL for a model method."""
        return f"{self.BASE_URL}/models/{model}:{method}?key={self.api_key}"

    def with_key(self, uri: str) -> str:
        """Append the access credential to a generated resource locator."""
        separator = "&" if "?" in uri else "?"
        return f"{uri}{separator}key={self.api_key}"

    async def generate_content(self, model: str, body: dict[str, Any]) -> dict[str, Any]:
        """
        Call `generateContent` on a model.

        Args:
            model: Model name, e.g. gemini-2.5-flash.
            body: Request body (contents, systemInstruction, generationConfig).

        Returns:
            Decoded JSON response.

        Raises:
            GeminiRateLimitError: If rate limited after retries.
            GeminiAPIError: For other API errors.
        """
        return await self._request("POST", self._model_url(model, "generateContent"), body)

    async def start_operation(self, model: str, body: dict[str, Any]) -> dict[str, Any]:
        """Submit a long-running `predictLongRunning` job. Returns the operation."""
        return await self._request("POST", self._model_url(model, "predictLongRunning"), body)

    async def get_operation(self, name: str) -> dict[str, Any]:
        """Fetch the current status of a long-running operation by name."""
        return await self._request("GET", f"{self.BASE_URL}/{name}?key={self.api_key}")

    async def _request(
        self,
        method: str,
        url: str,
        body: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Send a request, retrying rate limits, server errors and timeouts."""
        client = await self._get_client()
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                start_time = time.perf_counter()
                response = await client.request(method, url, json=body)
                latency_ms = (time.perf_counter() - start_time) * 1000

                if response.status_code == 200:
                    self._request_count += 1
                    logger.debug(f"{method} {response.url.path} ok in {latency_ms:.0f}ms")
                    try:
                        return response.json()
                    except ValueError as e:
                        raise GeminiAPIError(
                            "Non-JSON response", response.status_code, response.text
                        ) from e

                elif response.status_code == 429:
                    # Rate limited - exponential backoff
                    delay = self.retry_delay * (2 ** attempt)
                    logger.warning(f"Rate limited, retrying in {delay:.1f}s (attempt {attempt + 1})")
                    await asyncio.sleep(delay)
                    last_error = GeminiRateLimitError("Rate limited by Gemini API")

                elif response.status_code >= 500:
                    # Server error - retry
                    delay = self.retry_delay * (2 ** attempt)
                    logger.warning(f"Server error {response.status_code}, retrying in {delay:.1f}s")
                    await asyncio.sleep(delay)
                    last_error = GeminiAPIError(
                        f"Server error: {response.status_code}",
                        response.status_code,
                        response.text,
                    )

                else:
                    # Client error - don't retry
                    raise GeminiAPIError(
                        f"API error: {response.status_code}",
                        response.status_code,
                        response.text,
                    )

            except httpx.TimeoutException:
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(f"Request timeout, retrying in {delay:.1f}s (attempt {attempt + 1})")
                await asyncio.sleep(delay)
                last_error = GeminiClientError("Request timed out")

            except httpx.RequestError as e:
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(f"Request error: {e}, retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
                last_error = GeminiClientError(f"Request error: {e}")

        # All retries exhausted
        if last_error:
            raise last_error
        raise GeminiClientError("Failed after all retries")

    @property
    def request_count(self) -> int:
        """Total number of successful requests made."""
        return self._request_count
