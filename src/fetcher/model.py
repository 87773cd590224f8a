# src/fetcher/model.py (Fetch Layer)
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class FetchFailure(Exception):
    """
    Raised when the upstream page could not be retrieved:
    a non-2xx status, a network error or a timeout.
    """

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class UpstreamPage(BaseModel):
    path: str
    url: str
    status_code: int
    content_type: Optional[str] = None
    content: str = ""
    elapsed_time: float = 0.0
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
