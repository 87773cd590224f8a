# src/mirror/model.py (Server Layer)
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field

from mirror.core.managers.config_manager import ConfigManager


class ProxySettings(BaseModel):
    host: str = Field(default="127.0.0.1", description="Interface the Flask server binds to.")
    port: int = Field(default=5000, ge=1, le=65535)
    time_out: float = Field(default=30.0, gt=0, description="Total upstream request timeout in seconds.")
    client_read_timeout: float = Field(default=15.0, gt=0)
    log_level: str = Field(default="INFO")

    @classmethod
    def from_config(cls, manager: ConfigManager) -> "ProxySettings":
        """Builds validated settings from settings.json; missing keys fall back to the defaults above."""
        values: Dict[str, Any] = {
            "host": manager.get_nested("server.host"),
            "port": manager.get_nested("server.port"),
            "time_out": manager.get_nested("session.time_out"),
            "client_read_timeout": manager.get_nested("session.client_read_timeout"),
            "log_level": manager.get_nested("debug.level"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})

    def session_config(self) -> Dict[str, Any]:
        """The 'session' block in the shape HttpRequestService expects."""
        return {"session": {"time_out": self.time_out, "client_read_timeout": self.client_read_timeout}}
