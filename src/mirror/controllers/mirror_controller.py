# src/mirror/controllers/mirror_controller.py
from __future__ import annotations

import logging
from typing import Optional

from fetcher.model import FetchFailure, UpstreamPage
from fetcher.services.http_request_service import HttpRequestService
from fetcher.utils.url_utils import UrlUtils
from mirror.core.loop_runner import run_on_main_loop
from mirror.model import ProxySettings
from rewriter.controllers.transform_controller import TransformController

logger = logging.getLogger(__name__)


class MirrorController:
    """
    Glue between the HTTP server, the upstream fetcher and the rewriter.
    Holds no per-request state; every call fetches and transforms a fresh document.
    """

    def __init__(
            self,
            settings: ProxySettings,
            user_agent: str,
            transformer: Optional[TransformController] = None,
    ):
        self.settings = settings
        self.user_agent = user_agent
        self.transformer = transformer or TransformController()

    async def fetch(self, path: str) -> UpstreamPage:
        """Fetches one upstream page with a short-lived session."""
        async with HttpRequestService(self.settings.session_config(), self.user_agent) as http:
            return await http.fetch_page(path)

    def render(self, path: str) -> str:
        """
        Fetches and transforms the page behind `path`.

        The fetch runs on the background event loop; the transform runs on the
        calling (request) thread so it never blocks other fetches.

        Raises:
            FetchFailure: When the upstream page could not be retrieved.
        """
        try:
            wait_limit = self.settings.time_out + self.settings.client_read_timeout
            try:
                page = run_on_main_loop(self.fetch(path), timeout=wait_limit)
            except TimeoutError as e:
                raise FetchFailure(
                    f"Failed to fetch: no answer within {wait_limit:g}s",
                    url=UrlUtils.build_upstream_url(path),
                ) from e
            return self.transformer.transform(path, page.content)
        except Exception as e:
            logger.error("Error fetching page %s: %s", path, e, exc_info=True)
            raise
