"""
Contract tests run against both store variants (in-memory and SQLite-backed).
"""
from __future__ import annotations

import sys
import threading
import time

import pytest

from taskapi.core.errors import DuplicateError, NotFoundError
from taskapi.domain.entities import TaskPatch, UserPatch, UserRef


def _user(store, email="ann@example.com", name="Ann Lee"):
    return store.create_user({"name": name, "email": email})


def _task(store, user_id, title="Write report"):
    return store.create_task({"title": title, "user_id": user_id})


def test_create_user_assigns_id_timestamps_and_defaults(store):
    user = _user(store)
    assert len(user.id) == 24
    assert user.role == "user"
    assert user.active is True
    assert user.age is None
    assert user.created_at == user.updated_at
    assert store.get_user(user.id) == user


def test_duplicate_email_rejected(store):
    _user(store)
    with pytest.raises(DuplicateError) as info:
        _user(store, name="Other")
    assert info.value.details == {"email": "ann@example.com"}
    assert len(store.list_users()) == 1


def test_find_user_by_email_excludes_self(store):
    user = _user(store)
    assert store.find_user_by_email("ANN@example.com").id == user.id
    assert store.find_user_by_email("ann@example.com", exclude_id=user.id) is None


def test_update_user_merges_patch_and_refreshes_updated_at(store):
    user = _user(store)
    time.sleep(0.01)
    updated = store.update_user(user.id, UserPatch(age=33, role="admin"))
    assert updated.age == 33
    assert updated.role == "admin"
    assert updated.name == user.name
    assert updated.updated_at > user.updated_at
    assert updated.created_at == user.created_at


def test_update_user_email_collision(store):
    _user(store)
    other = _user(store, email="bob@example.com", name="Bob")
    with pytest.raises(DuplicateError):
        store.update_user(other.id, UserPatch(email="ann@example.com"))


def test_unknown_ids_raise_not_found(store):
    with pytest.raises(NotFoundError):
        store.get_user("0" * 24)
    with pytest.raises(NotFoundError):
        store.update_user("0" * 24, UserPatch(name="Nobody"))
    with pytest.raises(NotFoundError):
        store.delete_user("0" * 24)
    with pytest.raises(NotFoundError):
        store.get_task("0" * 24)
    with pytest.raises(NotFoundError):
        store.delete_task("0" * 24)


def test_existence_checks(store):
    user = _user(store)
    task = _task(store, user.id)
    assert store.user_exists(user.id)
    assert store.task_exists(task.id)
    assert not store.user_exists(task.id)
    assert not store.task_exists(user.id)


def test_tasks_are_populated_with_name_and_email(store):
    user = _user(store)
    task = _task(store, user.id)
    assert task.status == "pending"
    assert task.description == ""
    assert task.owner == UserRef(user.id, "Ann Lee", "ann@example.com")
    assert store.list_tasks()[0].owner == task.owner
    assert store.get_task(task.id).to_dict()["user"] == {"_id": user.id, "name": "Ann Lee", "email": "ann@example.com"}


def test_status_update_and_reassign(store):
    ann = _user(store)
    bob = _user(store, email="bob@example.com", name="Bob")
    task = _task(store, ann.id)
    time.sleep(0.01)

    moved = store.update_task_status(task.id, "completed")
    assert moved.status == "completed"
    assert moved.updated_at > task.updated_at

    moved = store.reassign_task(task.id, bob.id)
    assert moved.user_id == bob.id
    assert moved.owner.name == "Bob"


def test_update_task_patch(store):
    user = _user(store)
    task = _task(store, user.id)
    updated = store.update_task(task.id, TaskPatch(title="Rewrite report", description="v2"))
    assert updated.title == "Rewrite report"
    assert updated.description == "v2"
    assert updated.status == "pending"


def test_deleting_user_leaves_dangling_task(store):
    user = _user(store)
    task = _task(store, user.id)
    store.delete_user(user.id)

    remaining = store.get_task(task.id)
    assert remaining.owner is None
    assert remaining.user == user.id
    assert remaining.to_dict()["user"] == user.id


def test_delete_task(store):
    user = _user(store)
    task = _task(store, user.id)
    store.delete_task(task.id)
    assert store.list_tasks() == []


def test_memory_stores_are_isolated(memory_store):
    from taskapi.repositories import MemoryStore

    _user(memory_store)
    assert MemoryStore().list_users() == []


def test_memory_store_returns_copies(memory_store):
    user = _user(memory_store)
    user.name = "Mutated"
    assert memory_store.get_user(user.id).name == "Ann Lee"


def test_memory_store_reads_survive_concurrent_writes(memory_store):
    from taskapi.services import TaskService, UserService

    users = UserService(memory_store)
    tasks = TaskService(memory_store)
    owner = users.create_user({"name": "Ann Lee", "email": "ann@example.com"})
    done = threading.Event()
    failures: list[str] = []

    def writer():
        try:
            for i in range(3000):
                user = users.create_user({"name": f"User {i}", "email": f"user{i}@example.com"})
                tasks.create_task({"title": f"Task {i}", "user": owner.id})
                if i % 2:
                    users.delete_user(user.id)
        finally:
            done.set()

    def reader():
        while not done.is_set():
            try:
                memory_store.list_users()
                memory_store.list_tasks()
                memory_store.find_user_by_email("nobody@example.com")
            except RuntimeError as exc:
                failures.append(str(exc))
                return

    old_interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    finally:
        sys.setswitchinterval(old_interval)

    assert failures == []
    assert len(memory_store.list_tasks()) == 3000
