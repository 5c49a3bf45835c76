from __future__ import annotations

from fastapi import APIRouter, Request

from taskapi.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _get_task_service(request: Request) -> TaskService:
    svc = getattr(getattr(request.app, "state", None), "task_service", None)
    if not svc:
        raise RuntimeError("TaskService not configured")
    return svc


@router.get("")
def list_tasks(request: Request):
    tasks = _get_task_service(request).list_tasks()
    return {"success": True, "data": [t.to_dict() for t in tasks]}


@router.get("/{task_id}")
def get_task(task_id: str, request: Request):
    task = _get_task_service(request).get_task(task_id)
    return {"success": True, "data": task.to_dict()}


@router.post("", status_code=201)
def create_task(payload: dict, request: Request):
    task = _get_task_service(request).create_task(payload)
    return {"success": True, "data": task.to_dict()}


@router.put("/{task_id}")
def update_task(task_id: str, payload: dict, request: Request):
    task = _get_task_service(request).update_task(task_id, payload)
    return {"success": True, "data": task.to_dict()}


@router.patch("/{task_id}/status")
def update_task_status(task_id: str, payload: dict, request: Request):
    task = _get_task_service(request).update_task_status(task_id, payload.get("status"))
    return {"success": True, "data": task.to_dict()}


@router.patch("/{task_id}/move")
def move_task(task_id: str, payload: dict, request: Request):
    task = _get_task_service(request).reassign_task(task_id, payload.get("userId"))
    return {"success": True, "data": task.to_dict()}


@router.delete("/{task_id}")
def delete_task(task_id: str, request: Request):
    _get_task_service(request).delete_task(task_id)
    return {"success": True, "message": f"Task with ID {task_id} deleted"}
