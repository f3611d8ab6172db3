"""
Схемы резюме в каноническом виде (то, что отдаём клиенту).

Поля в snake_case, alias — camelCase: так документ лежит в MongoDB и так
выглядит экспорт (model_dump(by_alias=True)).
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CamelModel):
    name: str = ""
    initials: str = ""
    location: str = ""
    location_link: str = ""
    about: str = ""
    summary: str = ""
    avatar_url: str = ""
    personal_website_url: str = ""
    email: str = ""
    tel: str = ""


class WorkExperience(CamelModel):
    id: str
    company: str = ""
    link: str = ""
    badges: list[str] = Field(default_factory=list)
    title: str = ""
    start: str = ""
    end: str | None = None  # None — "по настоящее время"
    description: str = ""


class Education(CamelModel):
    id: str
    school: str = ""
    degree: str = ""
    start: str | None = None
    end: str | None = None


class ProjectLink(CamelModel):
    label: str = ""
    href: str = ""


class Project(CamelModel):
    id: str
    title: str = ""
    tech_stack: list[str] = Field(default_factory=list)
    description: str = ""
    link: ProjectLink | None = None


class SocialLink(CamelModel):
    name: str = ""
    url: str = ""
    icon: str = ""


class ResumeData(CamelModel):
    """Документ резюме целиком."""

    id: str
    owner_id: str | None = None
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    social: list[SocialLink] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
