"""
GraphQL-типы (strawberry). Имена полей snake_case, наружу уходят в camelCase.

Резолверы возвращают pydantic-модели из schemas.resume / schemas.user:
strawberry читает их поля через getattr, отдельная конвертация не нужна.
"""
import dataclasses
from datetime import datetime
from typing import Any

import strawberry
from pydantic.alias_generators import to_camel


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str
    created_at: datetime | None
    updated_at: datetime | None


@strawberry.type(name="AuthPayload")
class AuthPayloadType:
    token: str
    expires_at: datetime
    user: UserType


@strawberry.type(name="PersonalInfo")
class PersonalInfoType:
    name: str
    initials: str
    location: str
    location_link: str
    about: str
    summary: str
    avatar_url: str
    personal_website_url: str
    email: str
    tel: str


@strawberry.type(name="WorkExperience")
class WorkExperienceType:
    id: strawberry.ID
    company: str
    link: str
    badges: list[str]
    title: str
    start: str
    end: str | None
    description: str


@strawberry.type(name="Education")
class EducationType:
    id: strawberry.ID
    school: str
    degree: str
    start: str | None
    end: str | None


@strawberry.type(name="ProjectLink")
class ProjectLinkType:
    label: str
    href: str


@strawberry.type(name="Project")
class ProjectType:
    id: strawberry.ID
    title: str
    tech_stack: list[str]
    description: str
    link: ProjectLinkType | None


@strawberry.type(name="SocialLink")
class SocialLinkType:
    name: str
    url: str
    icon: str


@strawberry.type(name="ResumeData")
class ResumeDataType:
    id: strawberry.ID
    owner_id: str | None
    personal_info: PersonalInfoType
    work: list[WorkExperienceType]
    education: list[EducationType]
    skills: list[str]
    projects: list[ProjectType]
    social: list[SocialLinkType]
    created_at: datetime | None
    updated_at: datetime | None


# ==================== Inputs ====================


@strawberry.input
class PersonalInfoInput:
    """Частичное обновление: непереданные поля не трогаем."""

    name: str | None = strawberry.UNSET
    initials: str | None = strawberry.UNSET
    location: str | None = strawberry.UNSET
    location_link: str | None = strawberry.UNSET
    about: str | None = strawberry.UNSET
    summary: str | None = strawberry.UNSET
    avatar_url: str | None = strawberry.UNSET
    personal_website_url: str | None = strawberry.UNSET
    email: str | None = strawberry.UNSET
    tel: str | None = strawberry.UNSET


@strawberry.input
class WorkExperienceInput:
    company: str
    title: str
    start: str
    id: strawberry.ID | None = None
    link: str = ""
    badges: list[str] = strawberry.field(default_factory=list)
    end: str | None = None
    description: str = ""


@strawberry.input
class EducationInput:
    school: str
    degree: str
    id: strawberry.ID | None = None
    start: str | None = None
    end: str | None = None


@strawberry.input
class ProjectLinkInput:
    label: str
    href: str


@strawberry.input
class ProjectInput:
    title: str
    id: strawberry.ID | None = None
    tech_stack: list[str] = strawberry.field(default_factory=list)
    description: str = ""
    link: ProjectLinkInput | None = None


@strawberry.input
class SocialLinkInput:
    name: str
    url: str
    icon: str


def input_to_dict(value: Any) -> Any:
    """Input (или список input'ов) -> dict с camelCase-ключами, как в MongoDB. UNSET пропускаем."""
    if isinstance(value, list):
        return [input_to_dict(v) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}
        for field in dataclasses.fields(value):
            item = getattr(value, field.name)
            if item is strawberry.UNSET:
                continue
            result[to_camel(field.name)] = input_to_dict(item)
        return result
    return value
