from __future__ import annotations

from fastapi import APIRouter, Request

from taskapi.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


@router.get("")
def list_users(request: Request):
    users = _get_user_service(request).list_users()
    return {"success": True, "data": [u.to_dict() for u in users]}


@router.get("/{user_id}")
def get_user(user_id: str, request: Request):
    user = _get_user_service(request).get_user(user_id)
    return {"success": True, "data": user.to_dict()}


@router.post("", status_code=201)
def create_user(payload: dict, request: Request):
    user = _get_user_service(request).create_user(payload)
    return {"success": True, "data": user.to_dict()}


@router.put("/{user_id}")
def update_user(user_id: str, payload: dict, request: Request):
    user = _get_user_service(request).update_user(user_id, payload)
    return {"success": True, "data": user.to_dict()}


@router.delete("/{user_id}")
def delete_user(user_id: str, request: Request):
    _get_user_service(request).delete_user(user_id)
    return {"success": True, "message": f"User with ID {user_id} deleted"}
