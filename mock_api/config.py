# =====================================
# CONFIGURATION SETTINGS
# =====================================
# All tunables for the mock server live here; nothing is read from the environment.

import logging
from typing import Any, Dict


class MockServerConfig:
    """Configuration class for the Simple Mock API server"""

    def __init__(self):
        # Network
        self.HOST = "0.0.0.0"
        self.PORT = 10000

        # Request log file (relative to the working directory)
        self.LOG_FILE = "simple-mock.log"

        # Request bodies above this size are rejected with 413
        self.MAX_BODY_BYTES = 1 * 1024 * 1024  # 1MB

        # Default mock response
        self.DEFAULT_STATUS_CODE = 200
        self.DEFAULT_RESPONSE_BODY: Dict[str, Any] = {
            "success": True,
            "message": "Request processed successfully",
        }
        self.DEFAULT_RESPONSE_DELAY = 0  # milliseconds

        # Console logging
        self.CONSOLE_LOG_LEVEL = logging.INFO
        self.CONSOLE_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
