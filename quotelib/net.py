import asyncio
import logging

import urllib3
from urllib3.util.retry import Retry
from urllib3 import exceptions as urllib3_exc

from .config import QuoteConfig
from .types import HttpResponse


logger = logging.getLogger(__name__)


class TransportError(Exception):
    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class HttpClient:
    def __init__(self, config: QuoteConfig | None = None):
        self.config = config or QuoteConfig()
        self.timeout = urllib3.Timeout(connect=self.config.connect_timeout, read=self.config.request_timeout)
        self.http = urllib3.PoolManager(
            maxsize=self.config.max_connections,
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "application/json, */*;q=0.8",
                "Accept-Encoding": "gzip, deflate",
            },
            # a single attempt per URL; only redirects are followed
            retries=Retry(
                total=None,
                connect=0,
                read=0,
                other=0,
                status=0,
                redirect=self.config.max_redirects,
                raise_on_status=False,
            ),
        )

    def _request(self, url: str) -> HttpResponse:
        try:
            response = self.http.request("GET", url, timeout=self.timeout, preload_content=True)
        except urllib3_exc.HTTPError as exc:
            raise TransportError(url, str(exc)) from exc
        body = (response.data or b"").decode("utf-8", errors="replace")
        logger.debug("GET %s -> %d (%d bytes)", url, response.status, len(response.data or b""))
        return HttpResponse(status=response.status, body=body)

    async def get(self, url: str) -> HttpResponse:
        return await asyncio.to_thread(self._request, url)

    def close(self) -> None:
        self.http.clear()
