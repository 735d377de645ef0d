import copy
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import MockServerConfig


class ResponseConfig(BaseModel):
    """What POST /api/data answers with. Values are stored exactly as given."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: Any = Field(default=200, alias="statusCode")
    response_body: Any = Field(default=None, alias="responseBody")
    response_delay: Any = Field(default=0, alias="responseDelay")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ResponseConfigStore:
    """Holds the single mutable ResponseConfig of an application.

    Writers build a new model and swap the reference, so readers always see
    either the old or the new configuration as a whole.
    """

    def __init__(self, config: Optional[MockServerConfig] = None):
        self._settings = config or MockServerConfig()
        self._current = self._defaults()

    def _defaults(self) -> ResponseConfig:
        return ResponseConfig(
            status_code=self._settings.DEFAULT_STATUS_CODE,
            response_body=copy.deepcopy(self._settings.DEFAULT_RESPONSE_BODY),
            response_delay=self._settings.DEFAULT_RESPONSE_DELAY,
        )

    def get(self) -> ResponseConfig:
        return self._current.model_copy(deep=True)

    def set(self, status_code: Any = None, response_body: Any = None, response_delay: Any = None) -> ResponseConfig:
        """Replace every field whose argument is not None; keep the rest."""
        updated = self._current.model_copy(deep=True)
        if status_code is not None:
            updated.status_code = status_code
        if response_body is not None:
            updated.response_body = copy.deepcopy(response_body)
        if response_delay is not None:
            updated.response_delay = response_delay
        self._current = updated
        return self.get()

    def reset(self) -> ResponseConfig:
        self._current = self._defaults()
        return self.get()

    def as_payload(self) -> Dict[str, Any]:
        return self.get().to_payload()
