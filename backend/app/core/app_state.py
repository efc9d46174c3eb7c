"""
Per-session application state: the signed-in profile and the data source.

Populated once per request from the verified token. Reading the profile
before a session is started raises AuthenticationError.
"""

from typing import Any, Dict, Optional

from app.core.exceptions import AuthenticationError
from app.gateway.base import RecordStore


class AppState:
    """Current profile and record store for one session"""

    def __init__(self, store: RecordStore, mock_mode: bool = False):
        self.store = store
        self.mock_mode = mock_mode
        self._profile: Optional[Dict[str, Any]] = None

    def start(self, profile: Dict[str, Any]) -> None:
        self._profile = profile

    def clear(self) -> None:
        self._profile = None

    @property
    def is_authenticated(self) -> bool:
        return self._profile is not None

    @property
    def profile(self) -> Dict[str, Any]:
        if self._profile is None:
            raise AuthenticationError("No active session")
        return self._profile

    @property
    def profile_id(self) -> str:
        return self.profile["id"]

    def refresh(self, profile: Dict[str, Any]) -> None:
        """Replace the cached profile after an edit"""
        if self._profile is None:
            raise AuthenticationError("No active session")
        self._profile = profile
