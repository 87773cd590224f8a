from __future__ import annotations

import logging
import time

from rewriter.services.page_transform_service import PageTransformService

logger = logging.getLogger(__name__)


class TransformController:
    """
    Entry point of the rewriter: raw upstream HTML in, proxied HTML out.
    Stateless; every call builds its own document and throws it away afterwards.
    """

    def transform(self, path: str, html: str) -> str:
        start_time = time.perf_counter()

        service = PageTransformService(html, path).run()
        output = service.render()

        elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            "Transformed %s in %s ms (%d -> %d chars)", path, elapsed_ms, len(html), len(output)
        )
        return output


def transform(path: str, html: str) -> str:
    """Pure function form of TransformController.transform()."""
    return TransformController().transform(path, html)
