"""
HTTP transport for the Solana JSON-RPC node.
Handles request sessions, Tor routing and mapping of transport failures.
"""

import json
import logging
from typing import Optional

import requests

from calcwallet import __version__
from calcwallet.errors import InvalidArgument, NetworkError, HttpError
from calcwallet.solana.config import Config

logger = logging.getLogger(__name__)


class HttpTransport:
    """
    POSTs JSON bodies and returns the raw response text.

    Connection failures become NetworkError, non-2xx responses become
    HttpError carrying the status and body.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = f'calcwallet/{__version__}'
        self.session.headers['Content-Type'] = 'application/json'
        proxies = Config.proxies()
        if proxies:
            # socks5h needs PySocks (requests[socks])
            self.session.proxies.update(proxies)
            logger.debug("Routing RPC traffic through %s", Config.TOR_PROXY)

    def post_json(self, url: str, body: dict, timeout: float) -> str:
        if not url:
            raise InvalidArgument("RPC URL cannot be empty")
        try:
            resp = self.session.post(url, data=json.dumps(body), timeout=timeout)
        except requests.Timeout:
            raise NetworkError(f"Request to {url} timed out after {timeout}s")
        except requests.RequestException as e:
            raise NetworkError(f"Request to {url} failed: {type(e).__name__}")

        if not 200 <= resp.status_code < 300:
            logger.debug("HTTP %d from %s: %s", resp.status_code, url, resp.text[:200])
            raise HttpError(resp.status_code, resp.text)
        return resp.text

    def close(self):
        self.session.close()
