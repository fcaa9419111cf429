"""
FastAPI 의존성: 호출자 신원(상위 인증 계층이 검증해 헤더로 전달), 역할 확인, 서비스 주입.
"""

from functools import lru_cache
from typing import Literal

from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel

from app.core.errors import AuthorizationError
from app.db.store import SqlEntityStore
from app.services.catalog import CatalogService
from app.services.learning import LearningService

Role = Literal["student", "instructor"]


class Identity(BaseModel):
    user_id: int
    role: Role


def get_identity(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Identity:
    """신원 헤더는 인증 게이트웨이가 채운다. 여기서는 형식만 확인."""
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user identity")
    if x_user_role not in ("student", "instructor"):
        raise HTTPException(status_code=401, detail="Invalid user role")
    return Identity(user_id=user_id, role=x_user_role)


def require_student(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role != "student":
        raise AuthorizationError("Access denied. Student role required.")
    return identity


def require_instructor(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role != "instructor":
        raise AuthorizationError("Access denied. Instructor role required.")
    return identity


@lru_cache
def get_store() -> SqlEntityStore:
    return SqlEntityStore()


def get_learning_service(store: SqlEntityStore = Depends(get_store)) -> LearningService:
    return LearningService(store)


def get_catalog_service(store: SqlEntityStore = Depends(get_store)) -> CatalogService:
    return CatalogService(store)
