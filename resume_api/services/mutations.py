"""
Изменения документа резюме.

personalInfo сливается по полям, списки заменяются целиком. Каждая запись —
один $set по _id (атомарно в пределах документа) вместе с updatedAt.
"""
import json
import logging
from collections.abc import Callable

from pymongo.collection import Collection

from resume_api.core.errors import NotFound, ParseError
from resume_api.schemas.resume import PersonalInfo, ResumeData
from resume_api.services.documents import resolve_for_read, utcnow
from resume_api.services.identifiers import (
    EDUCATION_PREFIX,
    PROJECT_PREFIX,
    WORK_PREFIX,
    ensure_ids,
)
from resume_api.services.normalizer import (
    SCHEMA_VERSION,
    SECTION_FIELDS,
    normalize_education,
    normalize_for_read,
    normalize_personal_info,
    normalize_projects,
    normalize_skills,
    normalize_social,
    normalize_work,
)
from resume_api.services.seed import placeholder_document

logger = logging.getLogger(__name__)

# Поля-списки: префикс id (None — у элементов нет id) и нормализатор для ответа
LIST_FIELDS: dict[str, tuple[str | None, Callable]] = {
    "work": (WORK_PREFIX, normalize_work),
    "education": (EDUCATION_PREFIX, normalize_education),
    "projects": (PROJECT_PREFIX, normalize_projects),
    "social": (None, normalize_social),
}

SNAPSHOT_FIELDS = ("personalInfo", "work", "education", "skills", "projects", "social")


def _persist(resumes: Collection, doc: dict, fields: dict) -> dict:
    """Записать поля в документ. Документ пропал между чтением и записью — NotFound."""
    fields = {**fields, "updatedAt": utcnow(), "schemaVersion": SCHEMA_VERSION}
    result = resumes.update_one({"_id": doc["_id"]}, {"$set": fields})
    if result.matched_count == 0:
        raise NotFound()
    doc.update(fields)
    return doc


def update_personal_info(resumes: Collection, doc: dict, partial: dict) -> PersonalInfo:
    """Поля из partial перекрывают текущие, остальные остаются как были."""
    current = doc.get("personalInfo")
    merged = {**(current if isinstance(current, dict) else {}), **partial}
    _persist(resumes, doc, {"personalInfo": merged})
    return normalize_personal_info(merged, doc.get("summary"))


def update_list(resumes: Collection, doc: dict, field: str, items: list[dict]) -> list:
    """Заменить список целиком (work / education / projects / social)."""
    if field not in LIST_FIELDS:
        raise ValueError(f"Unknown list field: {field}")
    prefix, normalize = LIST_FIELDS[field]
    if prefix is not None:
        items = ensure_ids(items, prefix)
    _persist(resumes, doc, {field: items})
    return normalize(items)


def update_skills(resumes: Collection, doc: dict, items: list[str]) -> list[str]:
    _persist(resumes, doc, {"skills": list(items)})
    return normalize_skills(items)


def export_snapshot(doc: dict) -> str:
    """JSON со всеми видимыми разделами и exportedAt. _id и ownerId не попадают."""
    data = normalize_for_read(doc)
    payload = data.model_dump(
        by_alias=True,
        mode="json",
        include=SECTION_FIELDS,
    )
    payload["exportedAt"] = utcnow().isoformat()
    return json.dumps(payload, indent=2, ensure_ascii=False)


def parse_snapshot(data: str) -> dict:
    """Разобрать JSON импорта. Ожидается объект верхнего уровня."""
    try:
        payload = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise ParseError() from exc
    if not isinstance(payload, dict):
        raise ParseError("Import data must be a JSON object")
    return payload


def import_snapshot(resumes: Collection, doc: dict, payload: dict) -> ResumeData:
    """
    Каждый раздел, который есть в payload, перезаписывает раздел документа;
    отсутствующие остаются. Формы внутри не проверяем — их поправит чтение.
    """
    fields = {}
    for key in SNAPSHOT_FIELDS:
        value = payload.get(key)
        if value is None:
            continue
        prefix = LIST_FIELDS.get(key, (None, None))[0]
        if prefix is not None and isinstance(value, list):
            value = ensure_ids(value, prefix)
        fields[key] = value
    _persist(resumes, doc, fields)
    logger.info("Imported sections %s into resume data %s", sorted(fields), doc["_id"])
    return normalize_for_read(doc)


def reset_documents(resumes: Collection) -> dict:
    """Удалить все документы резюме и заново создать заглушку без владельца."""
    deleted = resumes.delete_many({}).deleted_count
    logger.warning("Resume data reset: %d document(s) deleted", deleted)
    resumes.insert_one(placeholder_document(utcnow()))
    return resolve_for_read(resumes)
