from .model import AttributeMapping, BrowserConfig, MatrixConfig, ScatterConfig
from .loader import load_browser_config

__all__ = [
    "AttributeMapping",
    "BrowserConfig",
    "MatrixConfig",
    "ScatterConfig",
    "load_browser_config",
]
