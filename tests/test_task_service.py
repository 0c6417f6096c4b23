"""Tests for the task service, called directly with a session."""

import pytest

import tasks
from errors import NotFoundError, ValidationError
from helpers import validate
from query import build_task_query
from schemas import TaskCreate, TaskUpdate


class TestListTasks:
    def test_owner_filter_always_applies(self, db, user, other_user, task_factory):
        for i in range(3):
            task_factory(user, f"mine {i}")
            task_factory(other_user, f"theirs {i}")

        page = tasks.list_tasks(db, build_task_query(other_user.id, limit=100))
        assert page.total == 3
        assert all(task.owner_id == other_user.id for task in page.items)

    def test_page_metadata(self, db, user, task_factory):
        for i in range(11):
            task_factory(user, f"Task {i}")

        page = tasks.list_tasks(db, build_task_query(user.id, page=2, limit=5))
        assert page.count == 5
        assert page.total == 11
        assert page.total_pages == 3
        assert page.count <= page.limit

    def test_page_beyond_last(self, db, user, task_factory):
        task_factory(user, "only")
        page = tasks.list_tasks(db, build_task_query(user.id, page=9, limit=5))
        assert page.items == []
        assert page.total == 1

    def test_huge_page_keeps_requested_page(self, db, user, task_factory):
        task_factory(user, "only")
        page = tasks.list_tasks(db, build_task_query(user.id, page=10 ** 18, limit=100))
        assert page.items == []
        assert page.total == 1
        assert page.page == 10 ** 18

    def test_status_filter_is_exact(self, db, user, task_factory):
        task_factory(user, "a", status="Completed")
        task_factory(user, "b", status="In Progress")
        page = tasks.list_tasks(db, build_task_query(user.id, status="Completed"))
        assert [t.title for t in page.items] == ["a"]

    def test_search_escapes_underscore(self, db, user, task_factory):
        task_factory(user, "snake_case")
        task_factory(user, "snakeXcase")
        page = tasks.list_tasks(db, build_task_query(user.id, search="e_c"))
        assert [t.title for t in page.items] == ["snake_case"]


class TestTaskCrud:
    def test_create_defaults(self, db, user):
        task = tasks.create_task(db, user.id, TaskCreate(title="Plan"))
        assert task.id
        assert task.description == ""
        assert task.status == "Pending"
        assert task.owner_id == user.id

    def test_get_requires_ownership(self, db, user, other_user, task_factory):
        task = task_factory(user, "mine")
        assert tasks.get_task(db, user.id, task.id).id == task.id
        with pytest.raises(NotFoundError) as exc:
            tasks.get_task(db, other_user.id, task.id)
        assert exc.value.message == "Task not found"

    def test_get_out_of_range_id(self, db, user):
        for task_id in (0, -1, 2 ** 63):
            with pytest.raises(NotFoundError):
                tasks.get_task(db, user.id, task_id)

    def test_update_merges_only_given_fields(self, db, user, task_factory):
        task = task_factory(user, "Title", description="Desc")
        updated = tasks.update_task(db, user.id, task.id, TaskUpdate(status="Completed"))
        assert updated.status == "Completed"
        assert updated.title == "Title"
        assert updated.description == "Desc"

    def test_update_null_description_clears_it(self, db, user, task_factory):
        task = task_factory(user, "Title", description="Desc")
        updated = tasks.update_task(db, user.id, task.id, TaskUpdate(description=None))
        assert updated.description == ""

    def test_update_bumps_updated_at(self, db, user, task_factory):
        task = task_factory(user, "Title")
        before = task.updated_at
        updated = tasks.update_task(db, user.id, task.id, TaskUpdate(title="Title"))
        assert updated.updated_at >= before

    def test_update_rejects_blank_title(self):
        with pytest.raises(ValidationError) as exc:
            validate(TaskUpdate, {"title": "  "})
        assert exc.value.errors == [{"field": "title", "message": "Title is required"}]

    def test_update_not_owned(self, db, user, other_user, task_factory):
        task = task_factory(user, "mine")
        with pytest.raises(NotFoundError):
            tasks.update_task(db, other_user.id, task.id, TaskUpdate(title="stolen"))
        db.refresh(task)
        assert task.title == "mine"

    def test_delete(self, db, user, task_factory):
        task = task_factory(user, "gone")
        tasks.delete_task(db, user.id, task.id)
        with pytest.raises(NotFoundError):
            tasks.get_task(db, user.id, task.id)

    def test_delete_not_owned(self, db, user, other_user, task_factory):
        task = task_factory(user, "mine")
        with pytest.raises(NotFoundError):
            tasks.delete_task(db, other_user.id, task.id)
        assert tasks.get_task(db, user.id, task.id)
