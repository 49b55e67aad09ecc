"""Gateway to the Gemini generateContent endpoint."""
import time
from typing import Any, Dict, Optional
import httpx
import logging

from config import GeminiConfig
from models.request import ComposedRequest

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for failed calls, carrying structured error information."""

    code = "GATEWAY_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class TransportError(GatewayError):
    """No response was received (connection refused, DNS, reset...)."""

    code = "TRANSPORT_ERROR"

    def __init__(self, cause: Exception, details: Optional[Dict[str, Any]] = None):
        self.cause = cause
        super().__init__(str(cause), details)


class RequestTimeoutError(TransportError):
    """The transport gave up waiting for the remote side."""

    code = "TIMEOUT_ERROR"

    def __init__(self, cause: Exception, details: Optional[Dict[str, Any]] = None):
        super().__init__(cause, details)
        if not self.message:
            self.message = "Request timed out"
            self.args = (self.message,)


class ApiError(GatewayError):
    """The endpoint answered with a non-success status."""

    code = "API_ERROR"

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        super().__init__(message, details)

    def __str__(self) -> str:
        return f"API Error: {self.message}"


class PayloadTooLargeError(ApiError):
    """The endpoint rejected the request body as too large."""

    code = "PAYLOAD_TOO_LARGE"


class GeminiGateway:
    """Issues single, non-retried calls to the generative-language endpoint."""

    def __init__(self, config: GeminiConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the gateway.

        Args:
            config: Endpoint, credential, safety settings and timeout
            http_client: Optional pre-built client (tests inject a mock transport)
        """
        if not config.api_key:
            raise ValueError("GeminiConfig.api_key must be set")

        self.config = config
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=config.timeout_seconds)
        logger.info(f"GeminiGateway initialized for model {config.model}")

    def build_body(self, composed: ComposedRequest) -> Dict[str, Any]:
        """Attach the configured safety settings to the composed payload."""
        body = composed.to_payload()
        body["safetySettings"] = [dict(s) for s in self.config.safety_settings]
        return body

    async def send(self, composed: ComposedRequest) -> Optional[Any]:
        """
        Send one request and return the decoded response body.

        Args:
            composed: Request produced by the RequestComposer

        Returns:
            Decoded JSON body, or None when a success response is not JSON

        Raises:
            TransportError: No response received (RequestTimeoutError on timeout)
            ApiError: Non-success HTTP status (PayloadTooLargeError for 413)
        """
        start_time = time.time()
        model = self.config.model

        try:
            logger.debug(f"Sending {len(composed.contents)} contents to model: {model}")
            response = await self.client.post(
                self.config.endpoint_url,
                params={"key": self.config.api_key},
                json=self.build_body(composed),
                timeout=self.config.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = RequestTimeoutError(e, details={"model": model, "latency_ms": latency_ms})
            logger.error(
                f"Timeout error: model={model}, latency={latency_ms}ms, error={e!r}",
                extra={"error_code": error.code, "error_details": error.details}
            )
            raise error from e
        except httpx.HTTPError as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = TransportError(e, details={"model": model, "latency_ms": latency_ms})
            logger.error(
                f"Transport error: model={model}, latency={latency_ms}ms, error={e!r}",
                extra={"error_code": error.code, "error_details": error.details}
            )
            raise error from e

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            message = self._extract_error_message(response)
            details = {"model": model, "latency_ms": latency_ms, "status_code": response.status_code}
            error_cls = PayloadTooLargeError if response.status_code == 413 else ApiError
            error = error_cls(response.status_code, message, details=details)
            logger.error(
                f"API error: model={model}, status={response.status_code}, latency={latency_ms}ms, message={message}",
                extra={"error_code": error.code, "error_details": error.details}
            )
            raise error

        logger.info(f"Received response: model={model}, status={response.status_code}, latency={latency_ms}ms")

        try:
            return response.json()
        except ValueError:
            logger.warning(f"Success response from {model} was not valid JSON")
            return None

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        """Pull `error.message` from an error body, falling back to the reason phrase."""
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])

        return response.reason_phrase or f"HTTP {response.status_code}"

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this gateway created it."""
        if self._owns_client:
            await self.client.aclose()
