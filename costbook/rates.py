"""Exchange rate table retrieval.

The rate endpoint returns a flat JSON object of currency code to positive
number, e.g. {"USD": 1, "GBP": 0.6, "EURO": 0.7, "ILS": 3.4}. Rates are never
cached: every call re-fetches.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Protocol

import requests

from costbook.config import DEFAULT_RATES_ENDPOINT
from costbook.domain.errors import RatesFetchFailed, RatesParseFailed
from costbook.domain.models import RateTable
from costbook.store.schema import get_data_dir

logger = logging.getLogger(__name__)

SAMPLE_RATES: dict[str, float] = {"USD": 1, "GBP": 0.6, "EURO": 0.7, "ILS": 3.4}


class SettingsProvider(Protocol):
    """Source of the user-configured rates endpoint."""

    def get_rates_url(self) -> str | None: ...


def is_remote_endpoint(endpoint: str) -> bool:
    return endpoint.lower().startswith(("http://", "https://"))


def parse_rates(payload: Any) -> RateTable:
    """Validate a decoded rate payload.

    Args:
        payload: Decoded JSON body.

    Returns:
        Rate table with float values.

    Raises:
        RatesParseFailed: If the payload is not a flat mapping of code to
            finite positive number.
    """
    if not isinstance(payload, dict):
        raise RatesParseFailed(f"Rates response must be a JSON object, got {type(payload).__name__}")

    rates: dict[str, float] = {}
    for code, value in payload.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RatesParseFailed(f"Rate for {code} is not a number: {value!r}")
        if not math.isfinite(value) or value <= 0:
            raise RatesParseFailed(f"Rate for {code} must be a positive number, got {value!r}")
        rates[str(code)] = float(value)
    return rates


def write_default_rates(path: Path | None = None) -> Path:
    """Write the sample rate table served at the default endpoint.

    Args:
        path: Destination file. If None, uses rates.json in the data directory.

    Returns:
        Path that was written.
    """
    if path is None:
        path = get_data_dir() / DEFAULT_RATES_ENDPOINT.lstrip("/")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(SAMPLE_RATES, indent=2) + "\n")
    return path


class RateSource:
    """Fetches the current rate table from the configured endpoint."""

    def __init__(self, settings: SettingsProvider, data_dir: Path | None = None) -> None:
        self.settings = settings
        self.data_dir = data_dir

    def resolve_endpoint(self) -> str:
        """Get the configured endpoint, or the default when unset or blank."""
        configured = self.settings.get_rates_url()
        if configured and configured.strip():
            return configured.strip()
        return DEFAULT_RATES_ENDPOINT

    def local_path(self, endpoint: str) -> Path:
        """Resolve a non-URL endpoint to a file served alongside the application."""
        base = self.data_dir if self.data_dir is not None else get_data_dir()
        return base / endpoint.lstrip("/")

    def fetch_rates(self) -> RateTable:
        """Fetch and validate a fresh rate table.

        Returns:
            Rate table.

        Raises:
            RatesFetchFailed: If the endpoint cannot be retrieved.
            RatesParseFailed: If the body is not a valid rate mapping.
        """
        endpoint = self.resolve_endpoint()
        logger.debug("Fetching rates from %s", endpoint)

        if is_remote_endpoint(endpoint):
            payload = self._fetch_remote(endpoint)
        else:
            payload = self._fetch_local(self.local_path(endpoint))

        rates = parse_rates(payload)
        logger.debug("Fetched %d rates", len(rates))
        return rates

    def _fetch_remote(self, url: str) -> Any:
        try:
            response = requests.get(url, headers={"Accept": "application/json"})
        except requests.RequestException as e:
            raise RatesFetchFailed(f"Failed to fetch rates from {url}: {e}") from e

        if not response.ok:
            raise RatesFetchFailed(f"Failed to fetch rates (HTTP {response.status_code}).")

        try:
            return response.json()
        except ValueError as e:
            raise RatesParseFailed(f"Rates response from {url} is not valid JSON") from e

    def _fetch_local(self, path: Path) -> Any:
        try:
            body = path.read_text()
        except OSError as e:
            raise RatesFetchFailed(f"Failed to read rates from {path}: {e}") from e

        try:
            return json.loads(body)
        except ValueError as e:
            raise RatesParseFailed(f"Rates file {path} is not valid JSON") from e
