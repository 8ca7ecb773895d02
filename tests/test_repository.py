"""Tests for the task repository implementations."""

import uuid

import pytest

from task_service.exceptions import DuplicateTitleError, TaskNotFoundError


@pytest.fixture(params=["sqlalchemy", "memory"])
def repository(request, clock):
    """Each repository implementation, starting empty."""
    from task_service.repositories import InMemoryTaskRepository, SQLAlchemyTaskRepository

    if request.param == "memory":
        return InMemoryTaskRepository(clock=clock)

    db = request.getfixturevalue("db")
    return SQLAlchemyTaskRepository(db.session, clock=clock)


def _data(title="Write report", **fields):
    return {"title": title, "due_date": "2024-02-01", **fields}


class TestCreate:
    def test_assigns_uuid_and_timestamps(self, repository):
        task = repository.create(_data())
        assert uuid.UUID(task.id).version == 4
        assert task.created_at == task.updated_at

    def test_defaults_optional_fields(self, repository):
        task = repository.create(_data())
        assert task.description == ""
        assert task.status == ""

    def test_duplicate_title(self, repository):
        repository.create(_data("Same"))
        with pytest.raises(DuplicateTitleError):
            repository.create(_data("Same"))
        assert len(repository.list()) == 1


class TestRead:
    def test_list_oldest_first(self, repository):
        for title in ("a", "b", "c"):
            repository.create(_data(title))
        assert [t.title for t in repository.list()] == ["a", "b", "c"]

    def test_get_by_id(self, repository):
        task = repository.create(_data())
        assert repository.get_by_id(task.id).title == "Write report"

    def test_get_by_id_missing(self, repository):
        with pytest.raises(TaskNotFoundError) as exc_info:
            repository.get_by_id("missing")
        assert exc_info.value.task_id == "missing"


class TestUpdate:
    def test_update_replaces_fields(self, repository):
        task = repository.create(_data(description="old", status="pending"))
        task_id, created_at = task.id, task.created_at

        updated = repository.update(task_id, _data("New title", description="new", status="done"))

        assert updated.id == task_id
        assert updated.title == "New title"
        assert updated.description == "new"
        assert updated.status == "done"
        assert updated.created_at == created_at
        assert updated.updated_at > created_at

    def test_update_same_title(self, repository):
        task = repository.create(_data("Keep"))
        updated = repository.update(task.id, _data("Keep", status="done"))
        assert updated.status == "done"

    def test_update_title_collision(self, repository):
        repository.create(_data("Taken"))
        task = repository.create(_data("Mine"))
        with pytest.raises(DuplicateTitleError):
            repository.update(task.id, _data("Taken"))

    def test_update_missing(self, repository):
        with pytest.raises(TaskNotFoundError):
            repository.update("missing", _data())

    def test_update_status_only_touches_status(self, repository):
        task = repository.create(_data(description="details", status="pending"))
        before = {f: getattr(task, f) for f in ("id", "title", "description", "due_date", "created_at", "updated_at")}

        updated = repository.update_status(task.id, "done")

        assert updated.status == "done"
        assert updated.updated_at > before["updated_at"]
        for field in ("id", "title", "description", "due_date", "created_at"):
            assert getattr(updated, field) == before[field]

    def test_update_status_missing(self, repository):
        with pytest.raises(TaskNotFoundError):
            repository.update_status("missing", "done")


class TestDelete:
    def test_delete(self, repository):
        task = repository.create(_data())
        task_id = task.id
        repository.delete(task_id)
        with pytest.raises(TaskNotFoundError):
            repository.get_by_id(task_id)

    def test_delete_missing(self, repository):
        with pytest.raises(TaskNotFoundError):
            repository.delete("missing")


class TestSQLAlchemyCommitFailures:
    def test_integrity_error_maps_to_duplicate_title(self, db, clock):
        """A unique violation that slips past the pre-check still reports a conflict."""
        from task_service.repositories import SQLAlchemyTaskRepository

        repository = SQLAlchemyTaskRepository(db.session, clock=clock)
        repository.create(_data("Race"))
        repository._ensure_title_available = lambda title: None

        with pytest.raises(DuplicateTitleError):
            repository.create(_data("Race"))
        assert len(repository.list()) == 1
