"""
Приведение документа резюме к каноническому виду.

В базе встречаются документы разных лет: старые (v1) писали workExperience,
institution, startDate, skills объектами и т.д., текущие (v2) — work, school,
start, skills строками. Все переименования собраны в READ_ALIASES; функции
здесь чистые и никогда не бросают исключений — чего нет, то пустая строка или None.
"""
from datetime import datetime
from typing import Any

from pydantic.alias_generators import to_camel

from resume_api.schemas.resume import (
    Education,
    PersonalInfo,
    Project,
    ProjectLink,
    ResumeData,
    SocialLink,
    WorkExperience,
)
from resume_api.services.identifiers import (
    EDUCATION_PREFIX,
    PROJECT_PREFIX,
    WORK_PREFIX,
    stable_id,
)

# Версия формы, которую пишет этот сервис (schemaVersion в документе)
SCHEMA_VERSION = 2

# секция -> каноническое поле (v2) -> старые имена (v1), по порядку
READ_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "document": {
        "work": ("workExperience",),
        "social": ("socialLinks",),
    },
    "personalInfo": {
        "tel": ("phone",),
        "personalWebsiteUrl": ("website",),
        "locationLink": ("location",),
    },
    "work": {
        "id": ("_id",),
        "title": ("position",),
        "start": ("startDate",),
        "end": ("endDate",),
    },
    "education": {
        "id": ("_id",),
        "school": ("institution",),
        "start": ("startDate",),
        "end": ("endDate",),
    },
    "projects": {
        "id": ("_id",),
        "title": ("name",),
        "techStack": ("technologies",),
    },
    "social": {
        "name": ("platform",),
        "icon": ("platform",),
    },
}

DEFAULT_PROJECT_LINK_LABEL = "View Project"

# Видимые разделы ResumeData (имена полей модели)
SECTION_FIELDS = frozenset({"personal_info", "work", "education", "skills", "projects", "social"})

# Ключи v1 верхнего уровня, которых в документе v2 нет
LEGACY_TOP_LEVEL_KEYS = ("workExperience", "socialLinks", "summary")


def schema_version(raw: dict) -> int:
    """Версия формы документа; без метки — старый документ (1)."""
    version = raw.get("schemaVersion")
    return version if isinstance(version, int) else 1


def _absent(value: Any) -> bool:
    return value is None or value == ""


def _pick(raw: dict, section: str, field: str) -> Any:
    """Каноническое значение, если оно есть, иначе первое непустое из старых имён."""
    value = raw.get(field)
    for alias in READ_ALIASES.get(section, {}).get(field, ()):
        if not _absent(value):
            break
        value = raw.get(alias)
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> str | None:
    return None if _absent(value) else _text(value)


def _text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_text(v) for v in value if v is not None]


def _dicts(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _timestamp(value: Any) -> datetime | None:
    return value if isinstance(value, datetime) else None


def _item_id(raw: dict, section: str, prefix: str, position: int) -> str:
    value = _pick(raw, section, "id")
    if _absent(value):
        return stable_id(raw, prefix, position)
    return _text(value)


def normalize_personal_info(raw: Any, legacy_summary: Any = None) -> PersonalInfo:
    raw = raw if isinstance(raw, dict) else {}
    values = {}
    for name in PersonalInfo.model_fields:
        values[name] = _text(_pick(raw, "personalInfo", to_camel(name)))
    if not values["summary"] and not _absent(legacy_summary):
        # v1 хранил summary на верхнем уровне документа
        values["summary"] = _text(legacy_summary)
    return PersonalInfo(**values)


def normalize_work(items: Any) -> list[WorkExperience]:
    result = []
    for position, raw in enumerate(_dicts(items)):
        result.append(
            WorkExperience(
                id=_item_id(raw, "work", WORK_PREFIX, position),
                company=_text(raw.get("company")),
                link=_text(raw.get("link")),
                badges=_text_list(raw.get("badges")),
                title=_text(_pick(raw, "work", "title")),
                start=_text(_pick(raw, "work", "start")),
                end=_optional_text(_pick(raw, "work", "end")),
                description=_text(raw.get("description")),
            )
        )
    return result


def normalize_education(items: Any) -> list[Education]:
    result = []
    for position, raw in enumerate(_dicts(items)):
        result.append(
            Education(
                id=_item_id(raw, "education", EDUCATION_PREFIX, position),
                school=_text(_pick(raw, "education", "school")),
                degree=_text(raw.get("degree")),
                start=_optional_text(_pick(raw, "education", "start")),
                end=_optional_text(_pick(raw, "education", "end")),
            )
        )
    return result


def derive_project_link(project: dict) -> ProjectLink | None:
    """
    Явный link берём как есть; иначе из url собираем ссылку с подписью
    name / title / "View Project"; иначе None.
    """
    link = project.get("link")
    if isinstance(link, dict) and link:
        return ProjectLink(label=_text(link.get("label")), href=_text(link.get("href")))
    url = project.get("url")
    if _absent(url):
        return None
    label = project.get("name")
    if _absent(label):
        label = project.get("title")
    if _absent(label):
        label = DEFAULT_PROJECT_LINK_LABEL
    return ProjectLink(label=_text(label), href=_text(url))


def normalize_projects(items: Any) -> list[Project]:
    result = []
    for position, raw in enumerate(_dicts(items)):
        result.append(
            Project(
                id=_item_id(raw, "projects", PROJECT_PREFIX, position),
                title=_text(_pick(raw, "projects", "title")),
                tech_stack=_text_list(_pick(raw, "projects", "techStack")),
                description=_text(raw.get("description")),
                link=derive_project_link(raw),
            )
        )
    return result


def normalize_social(items: Any) -> list[SocialLink]:
    return [
        SocialLink(
            name=_text(_pick(raw, "social", "name")),
            url=_text(raw.get("url")),
            icon=_text(_pick(raw, "social", "icon")),
        )
        for raw in _dicts(items)
    ]


def normalize_skills(raw: Any) -> list[str]:
    """
    Навыки строками. Объект {name, level, category} превращается в
    name ?? category ?? level ?? str(объект); None выбрасываем.
    """
    if not isinstance(raw, list):
        return []
    result = []
    for entry in raw:
        if entry is None:
            continue
        if isinstance(entry, dict):
            value = next(
                (entry[key] for key in ("name", "category", "level") if not _absent(entry.get(key))),
                None,
            )
            result.append(_text(value) if value is not None else str(entry))
        else:
            result.append(_text(entry))
    return result


def normalize_for_read(raw: dict) -> ResumeData:
    """Документ из Mongo (любой версии) -> ResumeData."""
    owner_id = raw.get("ownerId")
    return ResumeData(
        id=_text(raw.get("_id")),
        owner_id=None if owner_id is None else str(owner_id),
        personal_info=normalize_personal_info(raw.get("personalInfo"), raw.get("summary")),
        work=normalize_work(_pick(raw, "document", "work")),
        education=normalize_education(raw.get("education")),
        skills=normalize_skills(raw.get("skills")),
        projects=normalize_projects(raw.get("projects")),
        social=normalize_social(_pick(raw, "document", "social")),
        created_at=_timestamp(raw.get("createdAt")),
        updated_at=_timestamp(raw.get("updatedAt")),
    )
