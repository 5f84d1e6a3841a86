"""
===============================================================================
CRC CARD — interfaces/api/http/routers/users.py
===============================================================================

Module:
    Users Router

Responsibilities:
    - POST /users/sync: provision the caller from their verified token.
    - Admin CRUD: create, list, get, update (role/active), soft delete.
    - Translate UserError -> RFC7807.
    - Enforce authentication / Admin role at the HTTP edge.

Collaborators:
    - application.users.UserDirectoryService
    - identity.access (require_identity, require_admin)
    - identity.claims.resolve_username
    - container.get_user_directory_service
    - schemas.users (DTOs)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> service)
    - Error Mapping
===============================================================================
"""

from __future__ import annotations

from bigo_api.application.users import (
    UserDirectoryService,
    UserError,
    UserErrorCode,
)
from bigo_api.container import get_user_directory_service
from bigo_api.crosscutting.error_responses import (
    conflict,
    internal_error,
    not_found,
    unauthorized,
)
from bigo_api.crosscutting.logger import logger
from bigo_api.identity.access import Principal, require_admin, require_identity
from bigo_api.identity.claims import IdentityClaims, resolve_username
from fastapi import APIRouter, Depends, Response, status

from ..schemas.users import (
    CreateUserReq,
    UpdateUserReq,
    UserEnvelope,
    UserListEnvelope,
    UserRes,
)

router = APIRouter(prefix="/users", tags=["users"])


def _raise_user_error(error: UserError) -> None:
    """Translate UserError (application layer) to RFC7807."""
    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found(error.message)

    if error.code == UserErrorCode.DUPLICATE_EMAIL:
        raise conflict(error.message)

    raise internal_error()


def _user_not_found(user_id: int):
    return not_found(f"User with ID {user_id} not found.")


# =============================================================================
# Self-service
# =============================================================================


@router.post(
    "/sync",
    response_model=UserEnvelope,
    responses={
        status.HTTP_200_OK: {"description": "Existing user returned"},
        status.HTTP_201_CREATED: {
            "description": "User created",
            "model": UserEnvelope,
        },
    },
)
def sync_user(
    response: Response,
    claims: IdentityClaims = Depends(require_identity),
    service: UserDirectoryService = Depends(get_user_directory_service),
):
    if not claims.identity_key:
        logger.warning("User sync rejected: token has no 'sub' claim")
        raise unauthorized("Invalid token: missing user identifier.")

    result = service.sync_from_identity(
        identity_key=claims.identity_key,
        email=claims.email or "",
        username=resolve_username(claims.email, claims.username),
    )

    if result.created:
        response.status_code = status.HTTP_201_CREATED
        message = "User created successfully."
    else:
        message = "User already exists."

    return UserEnvelope(message=message, data=UserRes.from_view(result.user))


# =============================================================================
# Admin
# =============================================================================


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(
    req: CreateUserReq,
    service: UserDirectoryService = Depends(get_user_directory_service),
    _admin: Principal = Depends(require_admin),
):
    result = service.create_admin(
        email=req.email, username=req.username, role=req.role
    )
    if result.error is not None:
        _raise_user_error(result.error)

    return UserEnvelope(
        message="User created successfully.", data=UserRes.from_view(result.user)
    )


@router.get("", response_model=UserListEnvelope)
def list_users(
    service: UserDirectoryService = Depends(get_user_directory_service),
    _admin: Principal = Depends(require_admin),
):
    return UserListEnvelope(data=[UserRes.from_view(v) for v in service.list()])


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: int,
    service: UserDirectoryService = Depends(get_user_directory_service),
    _admin: Principal = Depends(require_admin),
):
    view = service.get_by_id(user_id)
    if view is None:
        raise _user_not_found(user_id)
    return UserEnvelope(data=UserRes.from_view(view))


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: int,
    req: UpdateUserReq,
    service: UserDirectoryService = Depends(get_user_directory_service),
    _admin: Principal = Depends(require_admin),
):
    result = service.update(user_id, role=req.role, is_active=req.is_active)
    if result.error is not None:
        _raise_user_error(result.error)

    return UserEnvelope(
        message="User updated successfully.", data=UserRes.from_view(result.user)
    )


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_user(
    user_id: int,
    service: UserDirectoryService = Depends(get_user_directory_service),
    _admin: Principal = Depends(require_admin),
):
    if not service.soft_delete(user_id):
        raise _user_not_found(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
