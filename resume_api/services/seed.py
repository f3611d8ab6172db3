"""
Содержимое новых документов: заглушка для публичного резюме и пустой документ владельца.
"""
from copy import deepcopy
from datetime import datetime

from resume_api.services.normalizer import SCHEMA_VERSION

PLACEHOLDER_RESUME = {
    "personalInfo": {
        "name": "Your Name",
        "initials": "YN",
        "location": "City, Country",
        "locationLink": "https://www.google.com/maps",
        "about": "A short headline about what you do.",
        "summary": "A few sentences about your experience, focus and what you are looking for. "
        "Log in to the admin panel to replace this text.",
        "avatarUrl": "/profile.jpeg",
        "personalWebsiteUrl": "",
        "email": "you@example.com",
        "tel": "",
    },
    "work": [
        {
            "id": "work-1",
            "company": "Company",
            "link": "https://example.com",
            "badges": ["Remote"],
            "title": "Software Developer",
            "start": "2022/01",
            "end": None,
            "description": "What you built and the impact it had.",
        },
    ],
    "education": [
        {
            "id": "edu-1",
            "school": "University",
            "degree": "Bachelor's Degree",
            "start": None,
            "end": None,
        },
    ],
    "skills": ["Python", "TypeScript", "MongoDB", "GraphQL"],
    "projects": [
        {
            "id": "proj-1",
            "title": "CV/Resume Web Application",
            "techStack": ["Angular", "GraphQL", "FastAPI", "MongoDB"],
            "description": "A print-friendly single-page résumé with an admin panel.",
            "link": {"label": "GitHub Repository", "href": "https://github.com"},
        },
    ],
    "social": [
        {"name": "GitHub", "url": "https://github.com", "icon": "github"},
        {"name": "LinkedIn", "url": "https://www.linkedin.com", "icon": "linkedin"},
    ],
}


def placeholder_document(now: datetime) -> dict:
    """Документ без владельца с заглушкой — создаётся при первом чтении."""
    return {
        "ownerId": None,
        **deepcopy(PLACEHOLDER_RESUME),
        "schemaVersion": SCHEMA_VERSION,
        "createdAt": now,
        "updatedAt": now,
    }


def empty_document(owner_id, now: datetime) -> dict:
    """Пустой документ пользователя — создаётся при первой записи, если усыновлять нечего."""
    return {
        "ownerId": owner_id,
        "personalInfo": {key: "" for key in PLACEHOLDER_RESUME["personalInfo"]},
        "work": [],
        "education": [],
        "skills": [],
        "projects": [],
        "social": [],
        "schemaVersion": SCHEMA_VERSION,
        "createdAt": now,
        "updatedAt": now,
    }
