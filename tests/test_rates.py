"""Tests for exchange rate retrieval."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from costbook import rates as rates_module
from costbook.config import StaticSettings
from costbook.domain.errors import RatesFetchFailed, RatesParseFailed
from costbook.rates import SAMPLE_RATES, RateSource, parse_rates, write_default_rates

URL = "https://example.com/rates.json"


def fake_response(status: int = 200, payload: object = None, invalid_json: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if invalid_json:
        response.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def fake_get(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    get = MagicMock(return_value=fake_response(payload=SAMPLE_RATES))
    monkeypatch.setattr(rates_module.requests, "get", get)
    return get


class TestResolveEndpoint:
    """Tests for RateSource.resolve_endpoint."""

    def test_configured_url(self) -> None:
        """Should use the configured URL, trimmed."""
        assert RateSource(StaticSettings(f"  {URL} ")).resolve_endpoint() == URL

    @pytest.mark.parametrize("configured", [None, "", "   "])
    def test_default_when_unset_or_blank(self, configured: str | None) -> None:
        """Should fall back to the default path."""
        assert RateSource(StaticSettings(configured)).resolve_endpoint() == "/rates.json"


class TestParseRates:
    """Tests for parse_rates."""

    def test_accepts_flat_mapping(self) -> None:
        """Should return float rates for a valid payload."""
        assert parse_rates({"USD": 1, "ILS": 3.4}) == {"USD": 1.0, "ILS": 3.4}

    @pytest.mark.parametrize(
        "payload",
        [
            [1, 2],
            "USD",
            None,
            {"USD": "1"},
            {"USD": True},
            {"USD": 0},
            {"USD": -1},
            {"USD": float("nan")},
            {"USD": {"rate": 1}},
        ],
    )
    def test_rejects_invalid_payloads(self, payload: object) -> None:
        """Should reject anything but a flat mapping of positive numbers."""
        with pytest.raises(RatesParseFailed):
            parse_rates(payload)


class TestFetchRemote:
    """Tests for fetching rates over HTTP."""

    def test_fetches_configured_url(self, fake_get: MagicMock) -> None:
        """Should GET the configured URL and return the table."""
        rates = RateSource(StaticSettings(URL)).fetch_rates()

        assert rates == {"USD": 1.0, "GBP": 0.6, "EURO": 0.7, "ILS": 3.4}
        assert fake_get.call_args.args[0] == URL

    def test_fetches_every_time(self, fake_get: MagicMock) -> None:
        """Should not cache between calls."""
        source = RateSource(StaticSettings(URL))
        source.fetch_rates()
        source.fetch_rates()

        assert fake_get.call_count == 2

    def test_reads_settings_at_fetch_time(self, fake_get: MagicMock) -> None:
        """Should pick up a changed URL on the next fetch."""
        settings = StaticSettings(URL)
        source = RateSource(settings)
        source.fetch_rates()
        settings.rates_url = "https://example.org/other.json"
        source.fetch_rates()

        assert fake_get.call_args.args[0] == "https://example.org/other.json"

    def test_http_error_status(self, fake_get: MagicMock) -> None:
        """Should raise RatesFetchFailed with the status code."""
        fake_get.return_value = fake_response(status=404)

        with pytest.raises(RatesFetchFailed, match="HTTP 404"):
            RateSource(StaticSettings(URL)).fetch_rates()

    def test_transport_error(self, fake_get: MagicMock) -> None:
        """Should raise RatesFetchFailed when the request itself fails."""
        fake_get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(RatesFetchFailed) as exc_info:
            RateSource(StaticSettings(URL)).fetch_rates()
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_invalid_json(self, fake_get: MagicMock) -> None:
        """Should raise RatesParseFailed when the body is not JSON."""
        fake_get.return_value = fake_response(invalid_json=True)

        with pytest.raises(RatesParseFailed):
            RateSource(StaticSettings(URL)).fetch_rates()

    def test_not_a_mapping(self, fake_get: MagicMock) -> None:
        """Should raise RatesParseFailed when the body is not an object."""
        fake_get.return_value = fake_response(payload=[1, 2, 3])

        with pytest.raises(RatesParseFailed):
            RateSource(StaticSettings(URL)).fetch_rates()


class TestFetchLocal:
    """Tests for rates served alongside the application."""

    def test_default_endpoint_reads_data_dir(self, tmp_path: Path, fake_get: MagicMock) -> None:
        """Should read rates.json from the data directory."""
        write_default_rates(tmp_path / "rates.json")

        rates = RateSource(StaticSettings(None), data_dir=tmp_path).fetch_rates()

        assert rates == {"USD": 1.0, "GBP": 0.6, "EURO": 0.7, "ILS": 3.4}
        fake_get.assert_not_called()

    def test_relative_path(self, tmp_path: Path) -> None:
        """Should resolve other paths under the data directory."""
        (tmp_path / "fx").mkdir()
        (tmp_path / "fx" / "today.json").write_text(json.dumps({"USD": 1, "JPY": 150}))

        rates = RateSource(StaticSettings("fx/today.json"), data_dir=tmp_path).fetch_rates()

        assert rates == {"USD": 1.0, "JPY": 150.0}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Should raise RatesFetchFailed when the file is not there."""
        with pytest.raises(RatesFetchFailed):
            RateSource(StaticSettings(None), data_dir=tmp_path).fetch_rates()

    def test_invalid_json_file(self, tmp_path: Path) -> None:
        """Should raise RatesParseFailed when the file is not JSON."""
        (tmp_path / "rates.json").write_text("USD=1")

        with pytest.raises(RatesParseFailed):
            RateSource(StaticSettings(None), data_dir=tmp_path).fetch_rates()

    def test_write_default_rates_in_data_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should write the sample table to the XDG data directory by default."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        path = write_default_rates()

        assert path == tmp_path / "costbook" / "rates.json"
        assert json.loads(path.read_text()) == SAMPLE_RATES
