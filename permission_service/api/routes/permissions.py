from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from permission_service.core.config import settings
from permission_service.db.mongo import get_store
from permission_service.models.permission import Permission
from permission_service.schemas.permission import PermissionCreate
from permission_service.services.filters import And, ByFileID, ByID, ByRole, ByUserID
from permission_service.services.permission_store import MongoStore

router = APIRouter(prefix="/permissions", tags=["permissions"])


def permission_filter(
    permission_id: Optional[str] = Query(None, alias="id", description="Permission id"),
    file_id: Optional[str] = Query(None, alias="fileID"),
    user_id: Optional[str] = Query(None, alias="userID"),
    role: Optional[str] = Query(None),
) -> And:
    filters = []
    if permission_id is not None:
        filters.append(ByID(permission_id))
    if file_id is not None:
        filters.append(ByFileID(file_id))
    if user_id is not None:
        filters.append(ByUserID(user_id))
    if role is not None:
        filters.append(ByRole(role))
    return And(*filters)


@router.post("", response_model=Permission, status_code=status.HTTP_201_CREATED)
def create_permission(
    payload: PermissionCreate,
    store: MongoStore = Depends(get_store),
):
    permission = Permission(file_id=payload.file_id, user_id=payload.user_id, role=payload.role)
    return store.create(permission, timeout=settings.REQUEST_TIMEOUT_SECONDS)


@router.get("/one", response_model=Permission)
def get_permission(
    filter: And = Depends(permission_filter),
    store: MongoStore = Depends(get_store),
):
    return store.get(filter, timeout=settings.REQUEST_TIMEOUT_SECONDS)


@router.get("", response_model=List[Permission])
def list_permissions(
    filter: And = Depends(permission_filter),
    store: MongoStore = Depends(get_store),
):
    return store.get_all(filter, timeout=settings.REQUEST_TIMEOUT_SECONDS)


@router.delete("", response_model=Permission)
def delete_permission(
    filter: And = Depends(permission_filter),
    store: MongoStore = Depends(get_store),
):
    # an empty filter would delete an arbitrary record
    if not filter.filters:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one of id, fileID, userID or role is required",
        )
    return store.delete(filter, timeout=settings.REQUEST_TIMEOUT_SECONDS)
