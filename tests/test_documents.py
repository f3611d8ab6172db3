"""Поиск документа: заглушка при чтении, усыновление при первой записи."""

from __future__ import annotations

from bson import ObjectId

from resume_api.services.documents import (
    resolve_for_export,
    resolve_for_read,
    resolve_for_write,
    upgrade_document,
)
from resume_api.services.normalizer import SCHEMA_VERSION, SECTION_FIELDS, normalize_for_read


def test_read_seeds_placeholder_once(resumes):
    first = resolve_for_read(resumes)
    second = resolve_for_read(resumes)

    assert first["_id"] == second["_id"]
    assert resumes.count_documents({}) == 1
    assert first["ownerId"] is None
    assert first["personalInfo"]["name"]
    assert first["schemaVersion"] == SCHEMA_VERSION


def test_read_returns_existing_document_without_seeding(resumes):
    existing_id = resumes.insert_one({"ownerId": ObjectId(), "personalInfo": {"name": "Owner"}}).inserted_id

    doc = resolve_for_read(resumes)

    assert doc["_id"] == existing_id
    assert resumes.count_documents({}) == 1


def test_first_writer_adopts_ownerless_document(resumes):
    seeded = resolve_for_read(resumes)
    user_id = ObjectId()

    doc = resolve_for_write(resumes, user_id)

    assert doc["_id"] == seeded["_id"]
    assert doc["ownerId"] == user_id
    assert resumes.count_documents({"ownerId": None}) == 0


def test_owner_keeps_targeting_adopted_document(resumes):
    resolve_for_read(resumes)
    user_id = ObjectId()

    first = resolve_for_write(resumes, user_id)
    again = resolve_for_write(resumes, user_id)

    assert again["_id"] == first["_id"]


def test_second_user_gets_new_document_instead_of_taking_first(resumes):
    seeded = resolve_for_read(resumes)
    alice, bob = ObjectId(), ObjectId()

    alice_doc = resolve_for_write(resumes, alice)
    bob_doc = resolve_for_write(resumes, bob)

    assert alice_doc["_id"] == seeded["_id"]
    assert bob_doc["_id"] != seeded["_id"]
    assert bob_doc["ownerId"] == bob
    assert bob_doc["work"] == []
    assert resumes.find_one({"_id": seeded["_id"]})["ownerId"] == alice
    assert resolve_for_write(resumes, alice)["_id"] == seeded["_id"]


def test_write_without_any_document_creates_owned_empty_one(resumes):
    user_id = ObjectId()

    doc = resolve_for_write(resumes, user_id)

    assert doc["ownerId"] == user_id
    assert doc["personalInfo"]["name"] == ""
    assert resumes.count_documents({}) == 1


def test_legacy_document_without_owner_field_is_adopted(resumes):
    legacy_id = resumes.insert_one({"workExperience": [{"company": "Acme"}]}).inserted_id
    user_id = ObjectId()

    doc = resolve_for_write(resumes, user_id)

    assert doc["_id"] == legacy_id
    assert doc["ownerId"] == user_id


def test_export_resolver_never_adopts(resumes):
    seeded = resolve_for_read(resumes)

    doc = resolve_for_export(resumes, ObjectId())

    assert doc["_id"] == seeded["_id"]
    assert resumes.find_one({"_id": seeded["_id"]})["ownerId"] is None


class RacingCollection:
    """Коллекция, в которой после первого find_one успевает вклиниться другой запрос."""

    def __init__(self, resumes, interleave):
        self._resumes = resumes
        self._interleave = interleave

    def __getattr__(self, name):
        return getattr(self._resumes, name)

    def find_one(self, *args, **kwargs):
        found = self._resumes.find_one(*args, **kwargs)
        if self._interleave is not None:
            interleave, self._interleave = self._interleave, None
            interleave()
        return found


def test_concurrent_adoption_leaves_loser_with_own_document(resumes):
    seeded = resolve_for_read(resumes)
    alice, bob = ObjectId(), ObjectId()

    def bob_adopts():
        resumes.update_one({"_id": seeded["_id"], "ownerId": None}, {"$set": {"ownerId": bob}})

    doc = resolve_for_write(RacingCollection(resumes, bob_adopts), alice)

    assert doc["_id"] != seeded["_id"]
    assert doc["ownerId"] == alice
    assert doc["work"] == []
    assert resumes.find_one({"_id": seeded["_id"]})["ownerId"] == bob
    assert resumes.count_documents({}) == 2


def test_first_write_upgrades_legacy_document(resumes):
    legacy_id = resumes.insert_one(
        {
            "personalInfo": {"name": "Jane", "phone": "+1 555"},
            "summary": "Top-level summary",
            "workExperience": [{"company": "Acme", "position": "Engineer"}],
            "socialLinks": [{"platform": "GitHub", "url": "https://github.com/jane"}],
        }
    ).inserted_id
    before = normalize_for_read(resumes.find_one({"_id": legacy_id}))

    doc = resolve_for_write(resumes, ObjectId())

    stored = resumes.find_one({"_id": legacy_id})
    assert doc["_id"] == legacy_id
    assert stored["schemaVersion"] == SCHEMA_VERSION
    for key in ("workExperience", "socialLinks", "summary"):
        assert key not in stored
        assert key not in doc
    assert stored["personalInfo"]["tel"] == "+1 555"
    assert stored["personalInfo"]["summary"] == "Top-level summary"
    assert stored["work"][0]["title"] == "Engineer"
    assert stored["work"][0]["id"] == before.work[0].id
    after = normalize_for_read(stored)
    assert after.model_dump(include=SECTION_FIELDS) == before.model_dump(include=SECTION_FIELDS)


def test_upgrade_skips_current_documents(resumes):
    seeded = resolve_for_read(resumes)
    resumes.update_one({"_id": seeded["_id"]}, {"$set": {"workExperience": [{"company": "Stale"}]}})
    current = resumes.find_one({"_id": seeded["_id"]})

    upgrade_document(resumes, current)

    assert "workExperience" in resumes.find_one({"_id": seeded["_id"]})
