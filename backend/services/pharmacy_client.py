"""Client for the pharmacy registry REST backend."""
import logging
from typing import Any, Dict, List, Optional
import httpx

from config import PHARMACY_API_URL, PHARMACY_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class PharmacyApiError(Exception):
    """Raised when the registry backend answers with a non-success status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class PharmacyClient:
    """List, create, update and delete pharmacy records over HTTP."""

    def __init__(self, base_url: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            base_url: Collection URL (defaults to PHARMACY_API_URL)
            http_client: Optional pre-built httpx client
        """
        self.base_url = (base_url or PHARMACY_API_URL).rstrip("/")
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=PHARMACY_TIMEOUT_SECONDS)
        logger.info(f"PharmacyClient initialized for {self.base_url}")

    def list_pharmacies(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Fetch pharmacy records, optionally filtered by query parameters.

        Raises:
            PharmacyApiError: On a non-success status
            httpx.HTTPError: If no response was received
        """
        response = self.client.get(self.base_url, params=params or {})
        return self._handle_response(response)

    def create_pharmacy(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = self.client.post(self.base_url, json=data)
        record = self._handle_response(response)
        logger.info(f"Created pharmacy: {data.get('name')}")
        return record

    def update_pharmacy(self, pharmacy_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        response = self.client.put(f"{self.base_url}/{pharmacy_id}", json=data)
        record = self._handle_response(response)
        logger.info(f"Updated pharmacy {pharmacy_id}")
        return record

    def delete_pharmacy(self, pharmacy_id: str) -> Optional[Dict[str, Any]]:
        """
        Delete a pharmacy record.

        Returns:
            The backend's confirmation body, or None for 204 / an empty body
        """
        response = self.client.delete(f"{self.base_url}/{pharmacy_id}")
        result = self._handle_response(response)
        logger.info(f"Deleted pharmacy {pharmacy_id}")
        return result

    def _handle_response(self, response: httpx.Response) -> Any:
        if not response.is_success:
            raise self._error_from(response)
        # DELETE-style successes without content
        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Pharmacy API returned a non-JSON body with status {response.status_code}")
            return None

    @staticmethod
    def _error_from(response: httpx.Response) -> PharmacyApiError:
        """Backend errors come as {"msg": ...} or {"message": ...}."""
        try:
            data = response.json()
        except ValueError:
            data = {"message": response.reason_phrase}

        message = None
        if isinstance(data, dict):
            message = data.get("msg") or data.get("message")
        message = message or f"HTTP error! status: {response.status_code}"

        logger.error(f"Pharmacy API error: status={response.status_code}, message={message}")
        return PharmacyApiError(response.status_code, message)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
