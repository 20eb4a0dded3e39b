import threading
from dataclasses import dataclass, field
from typing import Optional

from mv_browser.config.model import BrowserConfig
from mv_browser.core.coordinator import Coordinator
from mv_browser.core.view_registry import ViewRegistry


@dataclass
class AppConfig:
    config: BrowserConfig
    coordinator: Optional[Coordinator] = None
    registry: Optional[ViewRegistry] = None

    # Dash may serve callbacks from several threads; engine mutations are serialised
    lock: threading.RLock = field(default_factory=threading.RLock)

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.coordinator is None:
            raise RuntimeError("AppConfig.coordinator must be initialized.")
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
