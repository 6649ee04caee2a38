"""Unit tests for the grade profile store."""

import pytest

from multiflow.application.services.evaluation import DealEvaluator
from multiflow.application.services.grade_profiles import GradeProfileStore
from multiflow.core.exceptions import GradeProfileError, NotAuthenticatedError
from multiflow.domain.models.grade_profile import GradeProfile


@pytest.fixture
def store(profile_repository):
    return GradeProfileStore(profile_repository)


def _defaults(store, user_id="user-1"):
    return [p.name for p in store.list_profiles(user_id) if p.is_default]


class TestDefaultInvariant:
    """At most one default profile per owner."""

    def test_set_default_moves_flag(self, store):
        first = store.add_profile("user-1", GradeProfile(name="Cash flow"))
        second = store.add_profile("user-1", GradeProfile(name="Appreciation"))

        store.set_default("user-1", first.id)
        assert _defaults(store) == ["Cash flow"]

        store.set_default("user-1", second.id)
        assert _defaults(store) == ["Appreciation"]

    def test_adding_second_default(self, store):
        store.add_profile("user-1", GradeProfile(name="A", is_default=True))
        store.add_profile("user-1", GradeProfile(name="B", is_default=True))
        assert _defaults(store) == ["B"]

    def test_clear_default(self, store):
        profile = store.add_profile("user-1", GradeProfile(name="A", is_default=True))
        store.set_default("user-1", None)
        assert _defaults(store) == []
        assert store.default_profile("user-1") is None
        assert store.get_profile("user-1", profile.id).name == "A"

    def test_deleting_default(self, store):
        profile = store.add_profile("user-1", GradeProfile(name="A", is_default=True))
        store.delete_profile("user-1", profile.id)
        assert store.list_profiles("user-1") == []
        assert store.active_profile("user-1").name == "Balanced"

    def test_owners_are_independent(self, store):
        store.add_profile("user-1", GradeProfile(name="Mine", is_default=True))
        store.add_profile("user-2", GradeProfile(name="Theirs", is_default=True))
        assert _defaults(store, "user-1") == ["Mine"]
        assert _defaults(store, "user-2") == ["Theirs"]


class TestActiveProfile:
    """Override, then default, then built-in."""

    def test_override_wins(self, store):
        store.add_profile("user-1", GradeProfile(name="Default", is_default=True))
        override = store.add_profile("user-1", GradeProfile(name="Strict", target_dcr=1.4))
        assert store.active_profile("user-1", override.id).name == "Strict"

    def test_stale_override_falls_back(self, store):
        store.add_profile("user-1", GradeProfile(name="Default", is_default=True))
        assert store.active_profile("user-1", "gone").name == "Default"

    def test_signed_out_uses_builtin(self, store):
        assert store.active_profile(None).name == "Balanced"

    def test_evaluator_uses_property_override(self, store, example_property):
        strict = store.add_profile("user-1", GradeProfile(name="Strict", cash_flow_floor=0.0))
        evaluator = DealEvaluator(store)
        result = evaluator.evaluate(example_property.model_copy(update={"grade_profile_id": strict.id}))
        assert result.profile_name == "Strict"


class TestProfileCrud:
    """Tests for add, update and delete."""

    def test_add_assigns_id_and_owner(self, store):
        profile = store.add_profile("user-1", GradeProfile(id="client-side", name="A"))
        assert profile.id and profile.id != "client-side"
        assert profile.user_id == "user-1"

    def test_list_sorted_by_name(self, store):
        for name in ("zeta", "Alpha", "mid"):
            store.add_profile("user-1", GradeProfile(name=name))
        assert [p.name for p in store.list_profiles("user-1")] == ["Alpha", "mid", "zeta"]

    def test_update(self, store):
        profile = store.add_profile("user-1", GradeProfile(name="A"))
        store.update_profile("user-1", profile.model_copy(update={"name": "Renamed", "target_dcr": 1.4}))
        assert store.get_profile("user-1", profile.id).target_dcr == 1.4

    def test_update_unsaved(self, store):
        with pytest.raises(GradeProfileError):
            store.update_profile("user-1", GradeProfile(name="New"))

    def test_unknown_profile(self, store):
        with pytest.raises(GradeProfileError):
            store.set_default("user-1", "missing")
        with pytest.raises(GradeProfileError):
            store.delete_profile("user-1", "missing")

    def test_requires_user(self, store):
        with pytest.raises(NotAuthenticatedError):
            store.list_profiles(None)
        with pytest.raises(NotAuthenticatedError):
            store.add_profile(None, GradeProfile(name="A"))


class TestListeners:
    """Change listeners receive the owner id."""

    def test_notified(self, store):
        seen = []
        store.add_listener(seen.append)
        profile = store.add_profile("user-1", GradeProfile(name="A"))
        store.set_default("user-1", profile.id)
        assert seen == ["user-1", "user-1"]

    def test_removed(self, store):
        seen = []
        store.add_listener(seen.append)
        store.remove_listener(seen.append)
        store.add_profile("user-1", GradeProfile(name="A"))
        assert seen == []
