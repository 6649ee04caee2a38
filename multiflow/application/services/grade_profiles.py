"""Grade profile store.

CRUD over a user's grade profiles with at most one default per owner,
and resolution of the profile that grades a given property.
"""

from __future__ import annotations

import threading
from typing import Callable

from multiflow.core.exceptions import GradeProfileError, NotAuthenticatedError
from multiflow.core.logging import get_logger
from multiflow.domain.models.grade_profile import GradeProfile, resolve_profile

from .repository import GradeProfileRepository

log = get_logger(__name__)

ProfileListener = Callable[[str], None]


class GradeProfileStore:
    """Service over a GradeProfileRepository.

    Listeners receive the owner's user id after every change.
    """

    def __init__(self, repository: GradeProfileRepository):
        self.repository = repository
        self._listeners: list[ProfileListener] = []
        self._lock = threading.Lock()

    def add_listener(self, callback: ProfileListener) -> None:
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: ProfileListener) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def list_profiles(self, user_id: str | None) -> list[GradeProfile]:
        owner = _require_user(user_id)
        return sorted(self.repository.fetch_profiles(owner), key=lambda p: p.name.lower())

    def get_profile(self, user_id: str | None, profile_id: str) -> GradeProfile:
        for profile in self.list_profiles(user_id):
            if profile.id == profile_id:
                return profile
        raise GradeProfileError(f"Grade profile '{profile_id}' does not exist.")

    def default_profile(self, user_id: str | None) -> GradeProfile | None:
        for profile in self.list_profiles(user_id):
            if profile.is_default:
                return profile
        return None

    def active_profile(self, user_id: str | None, override_id: str | None = None) -> GradeProfile:
        """Override, then default, then the built-in profile."""
        if user_id is None:
            return GradeProfile.builtin()
        return resolve_profile(self.repository.fetch_profiles(user_id), override_id)

    def add_profile(self, user_id: str | None, profile: GradeProfile) -> GradeProfile:
        owner = _require_user(user_id)
        stored = self.repository.save_profile(profile.model_copy(update={"id": None, "user_id": owner}))
        log.info("grade_profile_added", user_id=owner, profile_id=stored.id, name=stored.name)
        self._notify(owner)
        return stored

    def update_profile(self, user_id: str | None, profile: GradeProfile) -> GradeProfile:
        owner = _require_user(user_id)
        if profile.id is None:
            raise GradeProfileError("Save the grade profile before editing it.")
        self.get_profile(owner, profile.id)
        stored = self.repository.save_profile(profile.model_copy(update={"user_id": owner}))
        log.info("grade_profile_updated", user_id=owner, profile_id=stored.id)
        self._notify(owner)
        return stored

    def delete_profile(self, user_id: str | None, profile_id: str) -> None:
        owner = _require_user(user_id)
        self.get_profile(owner, profile_id)
        self.repository.delete_profile(owner, profile_id)
        log.info("grade_profile_deleted", user_id=owner, profile_id=profile_id)
        self._notify(owner)

    def set_default(self, user_id: str | None, profile_id: str | None) -> None:
        """Make one profile the default, or clear the default with None."""
        owner = _require_user(user_id)
        if profile_id is not None:
            self.get_profile(owner, profile_id)
        self.repository.set_default(owner, profile_id)
        log.info("grade_profile_default_set", user_id=owner, profile_id=profile_id)
        self._notify(owner)

    def _notify(self, user_id: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback(user_id)


def _require_user(user_id: str | None) -> str:
    if user_id is None:
        raise NotAuthenticatedError()
    return user_id
