"""User preference store helpers (file persistence)."""
import logging
from typing import Optional

from dailycook.domain.UserPreference import UserPreference
from dailycook.infra.json_store import JsonStore
from dailycook.infra.paths import PREFERENCES_FILE

logger = logging.getLogger(__name__)


class PreferenceRepository:
    def __init__(self, path=PREFERENCES_FILE):
        self._store = JsonStore(path, default_factory=dict)

    def get_user_preference(self, user_id: str) -> Optional[UserPreference]:
        entry = self._store.read().get(user_id)
        if entry is None:
            return None
        return UserPreference.from_dict({**entry, "user_id": user_id})

    def save_user_preference(self, pref: UserPreference):
        with self._store.transaction() as data:
            data[pref.user_id] = pref.to_dict()
