"""
Batch Lookup Proxy Client

Optional network collaborator for the resolvers. Talks to an HTTP proxy
that fronts the market-data provider and exposes two batch endpoints:
- ETF holdings by symbol
- Company overview (sector, industry) by symbol

Every call is one POST for the full symbol set. Timeouts, connection errors
and non-2xx responses come back as a failed ProxyResponse, never as an
exception, so callers can fall back to static data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from lookthrough import config
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


class ProxyEndpoint(Enum):
    """Available proxy endpoints."""
    ETF_HOLDINGS = "/api/etf-holdings"
    COMPANY_OVERVIEW = "/api/company-overview"


@dataclass
class ProxyResponse:
    """Response from proxy API."""
    success: bool
    data: Optional[Dict[str, Any]]
    error: Optional[str] = None
    status_code: int = 200


class ProxyClient:
    """Client for the batch market-data proxy."""

    def __init__(self, proxy_url: str, timeout: float = config.NETWORK_TIMEOUT):
        """
        Initialize the proxy client.

        Args:
            proxy_url: Base URL of the proxy
            timeout: Request timeout in seconds, applied to every call
        """
        self.proxy_url = proxy_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

        self._session.headers.update({
            "Content-Type": "application/json",
            "User-Agent": "lookthrough/0.1",
        })

    def _request(self, endpoint: ProxyEndpoint, payload: Dict[str, Any]) -> ProxyResponse:
        url = f"{self.proxy_url}{endpoint.value}"

        try:
            response = self._session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

            if not isinstance(data, dict):
                return ProxyResponse(
                    success=False,
                    data=None,
                    error="Unexpected response shape (expected object)",
                    status_code=response.status_code,
                )

            return ProxyResponse(success=True, data=data, status_code=response.status_code)

        except requests.exceptions.HTTPError as e:
            error_msg = str(e)
            status = 500
            if e.response is not None:
                status = e.response.status_code
                try:
                    error_data = e.response.json()
                    if isinstance(error_data, dict):
                        error_msg = error_data.get("error", error_msg)
                except ValueError:
                    error_msg = e.response.text or error_msg

            return ProxyResponse(success=False, data=None, error=error_msg, status_code=status)

        except requests.exceptions.JSONDecodeError as e:
            return ProxyResponse(
                success=False, data=None, error=f"Invalid JSON: {e}", status_code=502
            )

        except requests.exceptions.Timeout:
            return ProxyResponse(
                success=False, data=None, error="Request timed out", status_code=408
            )

        except requests.exceptions.RequestException as e:
            return ProxyResponse(
                success=False,
                data=None,
                error=f"Connection error: {str(e)}",
                status_code=0,
            )

    def fetch_etf_holdings(self, symbols: List[str]) -> ProxyResponse:
        """
        Fetch constituent lists for several ETFs in one call.

        Args:
            symbols: ETF symbols

        Returns:
            ProxyResponse whose data maps symbol -> {symbol, name, holdings: [...]}.
            Symbols the provider cannot resolve are simply absent.
        """
        return self._request(ProxyEndpoint.ETF_HOLDINGS, {"symbols": symbols})

    def fetch_company_overviews(self, symbols: List[str]) -> ProxyResponse:
        """
        Fetch sector and industry for several tickers in one call.

        Returns:
            ProxyResponse whose data maps symbol -> {name, sector, industry}
        """
        return self._request(ProxyEndpoint.COMPANY_OVERVIEW, {"symbols": symbols})

    def close(self) -> None:
        self._session.close()


def build_proxy_client() -> Optional[ProxyClient]:
    """Create a client from configuration, or None when lookups are disabled."""
    if not config.NETWORK_ENABLED or not config.PROXY_URL:
        logger.debug("Network lookups disabled; resolvers use static catalogs only")
        return None
    return ProxyClient(config.PROXY_URL, timeout=config.NETWORK_TIMEOUT)
