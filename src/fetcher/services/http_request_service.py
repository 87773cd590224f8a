# src/fetcher/services/http_request_service.py
import asyncio
import logging
import time
from typing import Dict, Optional

import aiohttp

from fetcher.model import FetchFailure, UpstreamPage
from fetcher.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)


class HttpRequestService:
    """
    Fetches pages from the upstream origin.
    Manages the aiohttp session and turns every unsuccessful outcome into a FetchFailure.
    """

    def __init__(self, config: Dict, user_agent: str):
        self.config = config
        self.user_agent = user_agent

        session_config = config.get('session', {})
        self.timeout = float(session_config.get('time_out', 30))
        self.read_timeout = float(session_config.get('client_read_timeout', 15.0))

        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
            default_headers = {
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.user_agent
            }
            self.session = aiohttp.ClientSession(
                timeout=timeout_obj, headers=default_headers
            )
            logger.debug("HttpRequestService: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("HttpRequestService: Session closed.")

    async def fetch_page(self, path: str) -> UpstreamPage:
        """
        GETs a page from the upstream origin.

        Args:
            path (str): Origin-relative path, e.g. '/' or '/buzeni/foo'.

        Returns:
            UpstreamPage: The decoded page on a 2xx response.

        Raises:
            FetchFailure: On a non-2xx status, a client error or a timeout.
        """
        url = UrlUtils.build_upstream_url(path)
        start_time = time.perf_counter()

        if not self.session or self.session.closed:
            await self.initialize()

        try:
            async with self.session.get(url) as response:
                status = response.status
                if not 200 <= status < 300:
                    logger.warning("Upstream returned %s for %s", status, url)
                    raise FetchFailure(f"Failed to fetch: {status}", url=url, status_code=status)

                content = await self._read_content(response)
                content_type = response.headers.get("Content-Type")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            logger.warning("Request to %s failed: %s", url, reason)
            raise FetchFailure(f"Failed to fetch: {reason}", url=url) from e

        elapsed = round(time.perf_counter() - start_time, 4)
        logger.debug("Fetched %s (%s, %d chars) in %ss", url, status, len(content), elapsed)

        return UpstreamPage(
            path=path,
            url=url,
            status_code=status,
            content_type=content_type,
            content=content,
            elapsed_time=elapsed,
        )

    async def _read_content(self, response) -> str:
        """Reads the response body; a read timeout propagates to fetch_page()."""
        try:
            return await asyncio.wait_for(response.text(), timeout=self.read_timeout)
        except UnicodeDecodeError:
            # Fallback decoding
            content_bytes = await response.read()
            return content_bytes.decode('utf-8', errors='replace')
