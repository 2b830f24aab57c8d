from datetime import datetime, timedelta, timezone

import pytest

from tests.conftest import auth_headers


def _due(days):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.fixture
def assignment(client, enrolled, teacher_headers):
    resp = client.post(
        "/api/assignments/",
        json={
            "class_id": enrolled["id"],
            "title": "My weekend",
            "description": "Write 150 words about your weekend.",
            "type": "essay",
            "points": 20,
            "due_date": _due(3),
        },
        headers=teacher_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateAssignment:

    def test_defaults(self, client, enrolled, teacher_headers, teacher):
        resp = client.post(
            "/api/assignments/",
            json={
                "class_id": enrolled["id"],
                "title": "Phrasal verbs",
                "description": "Exercises 1-10",
                "type": "grammar",
                "due_date": _due(1),
            },
            headers=teacher_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["points"] == 100
        assert body["teacher_id"] == teacher.id
        assert body["submissions"] == []

    def test_unknown_type(self, client, enrolled, teacher_headers):
        resp = client.post(
            "/api/assignments/",
            json={
                "class_id": enrolled["id"],
                "title": "x",
                "description": "y",
                "type": "dance",
                "due_date": _due(1),
            },
            headers=teacher_headers,
        )
        assert resp.status_code == 422

    def test_other_teachers_class(self, client, enrolled, make_user):
        other = make_user("other@school.com", role="teacher")
        resp = client.post(
            "/api/assignments/",
            json={
                "class_id": enrolled["id"],
                "title": "x",
                "description": "y",
                "type": "reading",
                "due_date": _due(1),
            },
            headers=auth_headers(other),
        )
        assert resp.status_code == 403

    def test_student_cannot_create(self, client, enrolled, student_headers):
        resp = client.post(
            "/api/assignments/",
            json={
                "class_id": enrolled["id"],
                "title": "x",
                "description": "y",
                "type": "reading",
                "due_date": _due(1),
            },
            headers=student_headers,
        )
        assert resp.status_code == 403


class TestSubmissions:

    def test_submit_on_time(self, client, assignment, student, student_headers):
        resp = client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "I went hiking."},
            headers=student_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "on-time"
        assert body["student"]["id"] == student.id
        assert body["grade"] is None

    def test_resubmit_replaces_content(self, client, assignment, student_headers, teacher_headers):
        url = f"/api/assignments/{assignment['id']}/submissions"
        first = client.post(url, json={"content": "draft"}, headers=student_headers).json()
        second = client.post(url, json={"content": "final"}, headers=student_headers).json()
        assert first["id"] == second["id"]

        subs = client.get(url, headers=teacher_headers).json()
        assert len(subs) == 1
        assert subs[0]["content"] == "final"

    def test_late_submission(self, client, enrolled, teacher_headers, student_headers):
        past = client.post(
            "/api/assignments/",
            json={
                "class_id": enrolled["id"],
                "title": "Old one",
                "description": "Was due yesterday",
                "type": "vocabulary",
                "due_date": _due(-1),
            },
            headers=teacher_headers,
        ).json()
        resp = client.post(
            f"/api/assignments/{past['id']}/submissions",
            json={"content": "sorry"},
            headers=student_headers,
        )
        assert resp.json()["status"] == "late"

    def test_not_enrolled(self, client, assignment, make_user):
        outsider = make_user("outsider@school.com")
        resp = client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "hi"},
            headers=auth_headers(outsider),
        )
        assert resp.status_code == 403

    def test_student_only_sees_own_submission(self, client, assignment, make_user, student_headers, classroom):
        classmate = make_user("classmate@school.com")
        client.post(
            "/api/classes/join",
            json={"enrollment_code": classroom["enrollment_code"]},
            headers=auth_headers(classmate),
        )
        url = f"/api/assignments/{assignment['id']}/submissions"
        client.post(url, json={"content": "mine"}, headers=student_headers)
        client.post(url, json={"content": "theirs"}, headers=auth_headers(classmate))

        resp = client.get(f"/api/assignments/{assignment['id']}", headers=student_headers)
        assert resp.status_code == 200
        contents = [s["content"] for s in resp.json()["submissions"]]
        assert contents == ["mine"]


class TestGrading:

    def _submit(self, client, assignment, headers):
        return client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "essay text"},
            headers=headers,
        ).json()

    def test_grade_submission(self, client, assignment, student_headers, teacher_headers):
        sub = self._submit(client, assignment, student_headers)
        resp = client.put(
            f"/api/assignments/{assignment['id']}/submissions/{sub['id']}/grade",
            json={"grade": 18, "feedback": "Nice use of past tense."},
            headers=teacher_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["grade"] == 18
        assert body["status"] == "graded"
        assert body["graded_at"] is not None

    def test_grade_above_points(self, client, assignment, student_headers, teacher_headers):
        sub = self._submit(client, assignment, student_headers)
        resp = client.put(
            f"/api/assignments/{assignment['id']}/submissions/{sub['id']}/grade",
            json={"grade": 21},
            headers=teacher_headers,
        )
        assert resp.status_code == 400

    def test_resubmit_after_grading_rejected(self, client, assignment, student_headers, teacher_headers):
        sub = self._submit(client, assignment, student_headers)
        client.put(
            f"/api/assignments/{assignment['id']}/submissions/{sub['id']}/grade",
            json={"grade": 10},
            headers=teacher_headers,
        )
        resp = client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "second try"},
            headers=student_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Submission already graded"

    def test_grade_missing_submission(self, client, assignment, teacher_headers):
        resp = client.put(
            f"/api/assignments/{assignment['id']}/submissions/999/grade",
            json={"grade": 5},
            headers=teacher_headers,
        )
        assert resp.status_code == 404


class TestMyAssignments:

    def test_student_view_has_status(self, client, assignment, student_headers):
        mine = client.get("/api/assignments/mine", headers=student_headers).json()
        assert len(mine) == 1
        assert mine[0]["status"] == "pending"
        assert mine[0]["class_name"] == "Conversation A1"

        client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "done"},
            headers=student_headers,
        )
        mine = client.get("/api/assignments/mine", headers=student_headers).json()
        assert mine[0]["status"] == "on-time"

    def test_teacher_view_has_counts(self, client, assignment, student_headers, teacher_headers):
        client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "done"},
            headers=student_headers,
        )
        mine = client.get("/api/assignments/mine", headers=teacher_headers).json()
        assert mine[0]["total_students"] == 1
        assert mine[0]["submitted_count"] == 1
        assert mine[0]["graded_count"] == 0


class TestAssignmentLifecycle:

    def test_update_and_delete(self, client, assignment, teacher_headers, student_headers):
        resp = client.put(
            f"/api/assignments/{assignment['id']}",
            json={"points": 50},
            headers=teacher_headers,
        )
        assert resp.json()["points"] == 50

        assert client.delete(
            f"/api/assignments/{assignment['id']}", headers=teacher_headers
        ).status_code == 204
        assert client.get(
            f"/api/assignments/{assignment['id']}", headers=teacher_headers
        ).status_code == 404

    def test_null_fields_left_unchanged(self, client, assignment, teacher_headers):
        resp = client.put(
            f"/api/assignments/{assignment['id']}",
            json={"title": None, "points": None, "due_date": None, "type": None},
            headers=teacher_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["title"] == assignment["title"]
        assert resp.json()["points"] == assignment["points"]
        assert resp.json()["type"] == assignment["type"]

    def test_class_listing(self, client, assignment, enrolled, student_headers):
        resp = client.get(f"/api/assignments/class/{enrolled['id']}", headers=student_headers)
        assert resp.status_code == 200
        assert [a["id"] for a in resp.json()] == [assignment["id"]]


class TestAnalytics:

    def test_class_analytics(self, client, assignment, enrolled, student_headers, teacher_headers):
        sub = client.post(
            f"/api/assignments/{assignment['id']}/submissions",
            json={"content": "done"},
            headers=student_headers,
        ).json()
        client.put(
            f"/api/assignments/{assignment['id']}/submissions/{sub['id']}/grade",
            json={"grade": 15},
            headers=teacher_headers,
        )
        resp = client.get(f"/api/classes/{enrolled['id']}/analytics", headers=teacher_headers)
        assert resp.status_code == 200
        stats = resp.json()
        assert stats["student_count"] == 1
        assert stats["assignment_count"] == 1
        assert stats["submission_count"] == 1
        assert stats["graded_count"] == 1
        assert stats["submission_rate"] == 1.0
        assert stats["average_grade"] == 75.0

    def test_analytics_teacher_only(self, client, enrolled, student_headers):
        resp = client.get(f"/api/classes/{enrolled['id']}/analytics", headers=student_headers)
        assert resp.status_code == 403
