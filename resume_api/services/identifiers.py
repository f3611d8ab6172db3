"""
Идентификаторы элементов списков (work, education, projects).

Существующий id никогда не меняется: фронт по нему сопоставляет элементы при редактировании.
"""
import hashlib
import json
import uuid

WORK_PREFIX = "work"
EDUCATION_PREFIX = "edu"
PROJECT_PREFIX = "proj"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


def _has_id(item: dict) -> bool:
    value = item.get("id")
    return value is not None and str(value).strip() != ""


def ensure_id(item: dict, prefix: str) -> dict:
    """Вернуть item как есть, если id уже есть; иначе копию с новым id."""
    if _has_id(item):
        return item
    return {**item, "id": new_id(prefix)}


def ensure_ids(items: list, prefix: str) -> list:
    """
    Проставить id всем элементам списка. Повторный дубликат id внутри
    списка получает новый id, первый сохраняет свой.
    """
    seen: set[str] = set()
    result = []
    for item in items:
        if not isinstance(item, dict):
            result.append(item)
            continue
        item = ensure_id(item, prefix)
        if str(item["id"]) in seen:
            item = {**item, "id": new_id(prefix)}
        seen.add(str(item["id"]))
        result.append(item)
    return result


def stable_id(item: dict, prefix: str, position: int) -> str:
    """
    id из содержимого — для старых элементов без id при чтении.
    Одинаковый документ даёт одинаковые id при каждом чтении.
    """
    raw = json.dumps(item, sort_keys=True, default=str)
    digest = hashlib.sha1(f"{position}:{raw}".encode()).hexdigest()[:12]
    return f"{prefix}-{digest}"
