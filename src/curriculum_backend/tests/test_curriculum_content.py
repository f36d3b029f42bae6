"""
Tests for resources and activities attached to curriculum nodes.
"""

import pytest

from curriculum_backend.interface.curriculum_activities import CurriculumActivityCreate, CurriculumActivityUpdate
from curriculum_backend.interface.curriculum_resources import CurriculumResourceCreate, CurriculumResourceUpdate
from curriculum_backend.model.curriculum import ActivityType, CurriculumResourceType, NodeType
from curriculum_backend.repositories.base import InvalidContentError, NotFoundError
from curriculum_backend.repositories.curriculum_content import (
    CurriculumActivityRepository,
    CurriculumResourceRepository,
)
from curriculum_backend.repositories.curriculum_node import CurriculumNodeRepository

QUIZ = {
    "questions": [
        {"question": "2 + 2 = ?", "options": ["3", "4"], "correct_answer": "4", "points": 1},
    ]
}

ASSIGNMENT = {
    "instructions": "Solve exercises 1-10",
    "due_date": "2026-11-01T12:00:00Z",
    "total_points": 20,
    "rubric": [{"criteria": "Correctness", "points": 15}, {"criteria": "Presentation", "points": 5}],
}


@pytest.fixture
def node(node_factory):
    return node_factory(NodeType.CHAPTER, subject_id="math")


def _resource(node_id, **overrides):
    values = {
        "title": "Intro",
        "type": CurriculumResourceType.READING,
        "content": "<p>Numbers</p>",
        "node_id": node_id,
    }
    values.update(overrides)
    return CurriculumResourceCreate(**values)


def _activity(node_id, **overrides):
    values = {
        "title": "Check-in quiz",
        "type": ActivityType.QUIZ_MULTIPLE_CHOICE,
        "content": QUIZ,
        "node_id": node_id,
    }
    values.update(overrides)
    return CurriculumActivityCreate(**values)


class TestResources:

    def test_empty_content_is_rejected(self, test_db, node):
        with pytest.raises(InvalidContentError):
            CurriculumResourceRepository(test_db).create_resource(_resource(node.id, content=""))

    def test_whitespace_title_is_rejected(self, test_db, node):
        with pytest.raises(InvalidContentError):
            CurriculumResourceRepository(test_db).create_resource(_resource(node.id, title="  "))

    def test_url_resource_is_listed_on_node(self, test_db, node):
        resource = CurriculumResourceRepository(test_db).create_resource(
            _resource(node.id, title="t", type=CurriculumResourceType.URL, content="https://x")
        )

        test_db.expire_all()
        listed = CurriculumNodeRepository(test_db).list_nodes("math")[0]

        assert [item.id for item in listed.resources] == [resource.id]
        assert listed.resources[0].content == "https://x"

    def test_content_is_stored_verbatim(self, test_db, node):
        markup = "<script>alert('x')</script><b>bold</b>"

        resource = CurriculumResourceRepository(test_db).create_resource(_resource(node.id, content=markup))

        assert resource.content == markup

    def test_file_info_is_kept(self, test_db, node):
        resource = CurriculumResourceRepository(test_db).create_resource(_resource(
            node.id,
            type=CurriculumResourceType.DOCUMENT,
            content="Worksheet",
            file_info={"name": "worksheet.pdf", "size": 2048, "type": "application/pdf"},
        ))

        assert resource.file_info == {"name": "worksheet.pdf", "size": 2048, "type": "application/pdf", "url": None}

    def test_missing_node(self, test_db):
        with pytest.raises(NotFoundError):
            CurriculumResourceRepository(test_db).create_resource(_resource("missing-node"))

    def test_update_resource(self, test_db, node):
        repository = CurriculumResourceRepository(test_db)
        resource = repository.create_resource(_resource(node.id))

        updated = repository.update_resource(resource.id, CurriculumResourceUpdate(title=" Renamed "))

        assert updated.title == "Renamed"
        assert updated.content == "<p>Numbers</p>"

    def test_update_to_blank_content_is_rejected(self, test_db, node):
        repository = CurriculumResourceRepository(test_db)
        resource = repository.create_resource(_resource(node.id))

        with pytest.raises(InvalidContentError):
            repository.update_resource(resource.id, CurriculumResourceUpdate(content=" "))

    def test_delete_resource(self, test_db, node):
        repository = CurriculumResourceRepository(test_db)
        resource = repository.create_resource(_resource(node.id))

        assert repository.delete_resource(resource.id) is True
        assert repository.get_by_id_optional(resource.id) is None

    def test_delete_missing_resource(self, test_db):
        with pytest.raises(NotFoundError):
            CurriculumResourceRepository(test_db).delete_resource("does-not-exist")


class TestActivities:

    def test_quiz_activity(self, test_db, node):
        activity = CurriculumActivityRepository(test_db).create_activity(_activity(node.id, is_graded=True))

        assert activity.type == ActivityType.QUIZ_MULTIPLE_CHOICE
        assert activity.is_graded is True
        assert activity.content["questions"][0]["correctAnswer"] == "4"

    def test_exam_uses_assignment_shape(self, test_db, node):
        activity = CurriculumActivityRepository(test_db).create_activity(
            _activity(node.id, type=ActivityType.CLASS_EXAM, content=ASSIGNMENT)
        )

        assert activity.content["instructions"] == "Solve exercises 1-10"
        assert isinstance(activity.content["dueDate"], str)
        assert len(activity.content["rubric"]) == 2

    def test_mismatched_shape_is_rejected(self, test_db, node):
        with pytest.raises(InvalidContentError) as exc:
            CurriculumActivityRepository(test_db).create_activity(
                _activity(node.id, type=ActivityType.QUIZ_TRUE_FALSE, content=ASSIGNMENT)
            )

        assert exc.value.errors

    def test_missing_node(self, test_db):
        with pytest.raises(NotFoundError):
            CurriculumActivityRepository(test_db).create_activity(_activity("missing-node"))

    def test_type_change_revalidates_stored_content(self, test_db, node):
        repository = CurriculumActivityRepository(test_db)
        activity = repository.create_activity(_activity(node.id, type=ActivityType.CLASS_ASSIGNMENT, content=ASSIGNMENT))

        with pytest.raises(InvalidContentError):
            repository.update_activity(activity.id, CurriculumActivityUpdate(type=ActivityType.QUIZ_MEMORY))

    def test_type_and_content_change_together(self, test_db, node):
        repository = CurriculumActivityRepository(test_db)
        activity = repository.create_activity(_activity(node.id, type=ActivityType.CLASS_ASSIGNMENT, content=ASSIGNMENT))

        updated = repository.update_activity(
            activity.id, CurriculumActivityUpdate(type=ActivityType.CLASS_PRESENTATION, content={"topic": "Fractions"})
        )

        assert updated.type == ActivityType.CLASS_PRESENTATION
        assert updated.content == {"topic": "Fractions"}

    def test_update_without_content_change_skips_validation(self, test_db, node):
        repository = CurriculumActivityRepository(test_db)
        activity = repository.create_activity(_activity(node.id))

        updated = repository.update_activity(activity.id, CurriculumActivityUpdate(is_graded=True, title="Graded quiz"))

        assert updated.is_graded is True
        assert updated.title == "Graded quiz"
        assert updated.content == activity.content

    def test_list_activities_newest_first(self, test_db, node):
        repository = CurriculumActivityRepository(test_db)
        for title in ("one", "two", "three"):
            repository.create_activity(_activity(node.id, title=title))

        activities = repository.list_activities(node.id)

        assert len(activities) == 3
        created = [activity.created_at for activity in activities]
        assert created == sorted(created, reverse=True)

    def test_delete_activity(self, test_db, node):
        repository = CurriculumActivityRepository(test_db)
        activity = repository.create_activity(_activity(node.id))

        repository.delete_activity(activity.id)

        assert repository.list_activities(node.id) == []

    def test_delete_missing_activity(self, test_db):
        with pytest.raises(NotFoundError):
            CurriculumActivityRepository(test_db).delete_activity("missing")
