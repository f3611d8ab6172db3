"""
GraphQL API резюме: /graphql.

Чтение (getResumeData, me, health) — публичное. Все мутации, кроме login,
сначала проверяют Bearer-токен и только потом ищут документ.
"""
import strawberry
from bson import ObjectId
from fastapi import Request
from graphql import GraphQLError
from pymongo.collection import Collection
from strawberry.extensions import MaskErrors
from strawberry.fastapi import BaseContext, GraphQLRouter
from strawberry.types import Info

from resume_api.core.config import settings
from resume_api.core.database import MongoConnection
from resume_api.core.errors import ResumeAPIError, store_errors
from resume_api.schemas.graphql_types import (
    AuthPayloadType,
    EducationInput,
    EducationType,
    PersonalInfoInput,
    PersonalInfoType,
    ProjectInput,
    ProjectType,
    ResumeDataType,
    SocialLinkInput,
    SocialLinkType,
    UserType,
    WorkExperienceInput,
    WorkExperienceType,
    input_to_dict,
)
from resume_api.services import auth as auth_service
from resume_api.services import mutations
from resume_api.services.documents import resolve_for_export, resolve_for_read, resolve_for_write
from resume_api.services.normalizer import normalize_for_read


class GraphQLContext(BaseContext):
    """Контекст запроса: подключение к Mongo и заголовок Authorization."""

    def __init__(self, connection: MongoConnection, authorization: str | None = None):
        super().__init__()
        self.connection = connection
        self.authorization = authorization
        self._checked = False

    def _ready(self) -> MongoConnection:
        # Проверка соединения — один раз на запрос и только если нужна база
        if not self._checked:
            self.connection.ensure_connected()
            self._checked = True
        return self.connection

    @property
    def users(self) -> Collection:
        return self._ready().users

    @property
    def resumes(self) -> Collection:
        return self._ready().resumes

    def current_user(self) -> dict:
        """Пользователь по токену или Unauthenticated."""
        return auth_service.authenticate(self.users, self.authorization)


async def get_context(request: Request) -> GraphQLContext:
    return GraphQLContext(
        connection=request.app.state.mongo,
        authorization=request.headers.get("authorization"),
    )


def _writer(info: Info) -> tuple[Collection, ObjectId]:
    """Проверить токен до любого обращения к резюме. Возвращает (resumes, id владельца)."""
    with store_errors("Authentication failed"):
        user = info.context.current_user()
    return info.context.resumes, user["_id"]


@strawberry.type
class Query:
    @strawberry.field
    def get_resume_data(self, info: Info) -> ResumeDataType:
        resumes = info.context.resumes
        with store_errors("Failed to fetch resume data"):
            doc = resolve_for_read(resumes)
        return normalize_for_read(doc)

    @strawberry.field
    def me(self, info: Info) -> UserType | None:
        with store_errors("Failed to fetch user"):
            user = auth_service.current_user_or_none(info.context.users, info.context.authorization)
        return auth_service.doc_to_user(user) if user else None

    @strawberry.field
    def health(self) -> str:
        return "OK"


@strawberry.type
class Mutation:
    @strawberry.mutation
    def login(self, info: Info, username: str, password: str) -> AuthPayloadType:
        with store_errors("Authentication failed"):
            return auth_service.login(info.context.users, username, password)

    @strawberry.mutation
    def update_personal_info(self, info: Info, input: PersonalInfoInput) -> PersonalInfoType:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to update personal info"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.update_personal_info(resumes, doc, input_to_dict(input))

    @strawberry.mutation
    def update_work_experience(
        self, info: Info, input: list[WorkExperienceInput]
    ) -> list[WorkExperienceType]:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to update work experience"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.update_list(resumes, doc, "work", input_to_dict(input))

    @strawberry.mutation
    def update_education(self, info: Info, input: list[EducationInput]) -> list[EducationType]:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to update education"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.update_list(resumes, doc, "education", input_to_dict(input))

    @strawberry.mutation
    def update_skills(self, info: Info, input: list[str]) -> list[str]:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to update skills"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.update_skills(resumes, doc, input)

    @strawberry.mutation
    def update_projects(self, info: Info, input: list[ProjectInput]) -> list[ProjectType]:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to update projects"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.update_list(resumes, doc, "projects", input_to_dict(input))

    @strawberry.mutation
    def update_social_links(self, info: Info, input: list[SocialLinkInput]) -> list[SocialLinkType]:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to update social links"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.update_list(resumes, doc, "social", input_to_dict(input))

    @strawberry.mutation
    def export_data(self, info: Info) -> str:
        resumes, owner_id = _writer(info)
        with store_errors("Failed to export data"):
            doc = resolve_for_export(resumes, owner_id)
        return mutations.export_snapshot(doc)

    @strawberry.mutation
    def import_data(self, info: Info, data: str) -> ResumeDataType:
        resumes, owner_id = _writer(info)
        payload = mutations.parse_snapshot(data)
        with store_errors("Failed to import data"):
            doc = resolve_for_write(resumes, owner_id)
            return mutations.import_snapshot(resumes, doc, payload)

    @strawberry.mutation
    def reset_resume_data(self, info: Info) -> ResumeDataType:
        """Удалить все резюме и вернуть заглушку без владельца."""
        resumes, _ = _writer(info)
        with store_errors("Failed to reset resume data"):
            doc = mutations.reset_documents(resumes)
        return normalize_for_read(doc)


def should_mask_error(error: GraphQLError) -> bool:
    """Ошибки домена показываем как есть, всё неожиданное — маскируем."""
    original = error.original_error
    return original is not None and not isinstance(original, ResumeAPIError)


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[MaskErrors(should_mask_error=should_mask_error)],
)


def create_graphql_router() -> GraphQLRouter:
    """Роутер для app.include_router(..., prefix="/graphql")."""
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=None if settings.is_production else "graphiql",
    )
