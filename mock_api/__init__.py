from .api_server import create_app
from .config import MockServerConfig

__all__ = ["create_app", "MockServerConfig"]
