"""
Поиск документа резюме для чтения и записи.

Владение — маленький автомат: OWNERLESS -> OWNED(user). Документ без владельца
появляется при первом публичном чтении; первый авторизованный писатель забирает
его себе одним атомарным find_one_and_update по условию ownerId = null, поэтому
из двух одновременных писателей усыновит его ровно один.

Документ старой формы (v1) переписывается в v2 перед первой записью в него.
"""
import logging
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection

from resume_api.services.normalizer import (
    LEGACY_TOP_LEVEL_KEYS,
    SCHEMA_VERSION,
    SECTION_FIELDS,
    normalize_for_read,
    schema_version,
)
from resume_api.services.seed import empty_document, placeholder_document

logger = logging.getLogger(__name__)

# Самый старый документ — основной (публичный) резюме
OLDEST_FIRST = [("createdAt", ASCENDING), ("_id", ASCENDING)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def upgrade_document(resumes: Collection, doc: dict) -> dict:
    """
    Документ v1 -> v2: все разделы в канонической форме (id у элементов — те же,
    что отдавало чтение), старые ключи верхнего уровня удаляются. updatedAt не трогаем.
    """
    version = schema_version(doc)
    if version >= SCHEMA_VERSION:
        return doc
    canonical = normalize_for_read(doc).model_dump(by_alias=True, include=SECTION_FIELDS)
    update: dict = {"$set": {**canonical, "schemaVersion": SCHEMA_VERSION}}
    legacy = [key for key in LEGACY_TOP_LEVEL_KEYS if key in doc]
    if legacy:
        update["$unset"] = {key: "" for key in legacy}
    resumes.update_one({"_id": doc["_id"]}, update)
    for key in legacy:
        del doc[key]
    doc.update(update["$set"])
    logger.info("Upgraded resume data %s from schema v%d to v%d", doc["_id"], version, SCHEMA_VERSION)
    return doc


def resolve_for_read(resumes: Collection) -> dict:
    """Существующий документ; если базы пусто — создать заглушку без владельца."""
    doc = resumes.find_one({}, sort=OLDEST_FIRST)
    if doc is not None:
        return doc

    # upsert по пустому фильтру: вставит, только если документов всё ещё нет
    doc = resumes.find_one_and_update(
        {},
        {"$setOnInsert": placeholder_document(utcnow())},
        upsert=True,
        sort=OLDEST_FIRST,
        return_document=ReturnDocument.AFTER,
    )
    logger.info("No resume data found, seeded placeholder document %s", doc["_id"])
    return doc


def resolve_for_write(resumes: Collection, owner_id: ObjectId) -> dict:
    """
    Документ, в который пишет пользователь:
    свой -> усыновлённый документ без владельца -> новый пустой.
    """
    doc = resumes.find_one({"ownerId": owner_id})
    if doc is not None:
        return upgrade_document(resumes, doc)

    doc = resumes.find_one_and_update(
        {"ownerId": None},
        {"$set": {"ownerId": owner_id}},
        sort=OLDEST_FIRST,
        return_document=ReturnDocument.AFTER,
    )
    if doc is not None:
        logger.info("Assigned ownerless resume data %s to user %s", doc["_id"], owner_id)
        return upgrade_document(resumes, doc)

    doc = empty_document(owner_id, utcnow())
    result = resumes.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Created resume data %s for user %s", doc["_id"], owner_id)
    return doc


def resolve_for_export(resumes: Collection, owner_id: ObjectId) -> dict:
    """Для экспорта: свой документ, иначе публичный. Ничего не усыновляет."""
    doc = resumes.find_one({"ownerId": owner_id})
    if doc is not None:
        return doc
    return resolve_for_read(resumes)
