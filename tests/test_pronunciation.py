import pytest

from esl_classroom.services import pronunciation_service
from esl_classroom.services.pronunciation_scorer import (
    MODE_OVERLAP,
    MODE_POSITIONAL,
    normalize_words,
    score_transcript,
)
from esl_classroom.workers import tasks


class TestScorer:

    def test_normalize_strips_punctuation_and_case(self):
        assert normalize_words("Hello, World!  How's it going?") == [
            "hello", "world", "hows", "it", "going",
        ]

    def test_perfect_positional(self):
        accuracy, matched, total, feedback = score_transcript(
            "The weather is nice today.", "the weather is nice today"
        )
        assert (accuracy, matched, total) == (100, 5, 5)
        assert feedback == ["Perfect pronunciation!"]

    def test_positional_counts_index_matches_only(self):
        # every word present, but shifted by one
        accuracy, matched, _, _ = score_transcript("red lorry yellow lorry", "a red lorry yellow")
        assert matched == 0
        assert accuracy == 0

    def test_overlap_ignores_order(self):
        accuracy, matched, _, feedback = score_transcript(
            "red lorry yellow lorry", "a red lorry yellow", mode=MODE_OVERLAP
        )
        assert matched == 4
        assert accuracy == 100
        assert feedback == ["Excellent!"]

    def test_short_transcript(self):
        accuracy, matched, total, feedback = score_transcript(
            "I would like a cup of coffee", "I would like"
        )
        assert (matched, total) == (3, 7)
        assert accuracy == 43
        assert feedback == ["Keep practicing! Try speaking more slowly."]

    def test_rounds_half_up(self):
        # 1 of 8 words -> 12.5%
        accuracy, _, _, _ = score_transcript("a b c d e f g h", "a x x x x x x x")
        assert accuracy == 13

    @pytest.mark.parametrize(
        "spoken, expected",
        [
            ("one two three four five", "Perfect pronunciation!"),
            ("one two three four xxx", "Great job! Minor improvements needed."),
            ("one two three xxx xxx", "Good effort! Focus on problem sounds."),
        ],
    )
    def test_positional_bands(self, spoken, expected):
        _, _, _, feedback = score_transcript("one two three four five", spoken)
        assert feedback[0] == expected

    @pytest.mark.parametrize(
        "spoken, expected",
        [
            ("a b c d e f g h i", "Excellent!"),  # 90
            ("a b c d e f g", "Good job!"),  # 70
            ("a b c", "Needs more practice"),  # 30
        ],
    )
    def test_overlap_bands(self, spoken, expected):
        _, _, _, feedback = score_transcript("a b c d e f g h i j", spoken, mode=MODE_OVERLAP)
        assert feedback == [expected]

    def test_tips_appended_below_100(self):
        tips = ["Touch your teeth with your tongue", "Blow air gently", "Third tip"]
        _, _, _, feedback = score_transcript("think thank", "sink thank", tips=tips)
        assert feedback[1:] == tips[:2]

        _, _, _, feedback = score_transcript("think thank", "think thank", tips=tips)
        assert feedback == ["Perfect pronunciation!"]

    def test_overlap_never_appends_tips(self):
        tips = ["Touch your teeth with your tongue", "Blow air gently"]
        _, _, _, feedback = score_transcript("hello world", "hello", mode=MODE_OVERLAP, tips=tips)
        assert feedback == ["Needs more practice"]

    def test_non_ascii_letters_are_stripped(self):
        assert normalize_words("Café déjà vu") == ["caf", "dj", "vu"]
        accuracy, _, _, _ = score_transcript("café", "cafe")
        assert accuracy == 0

    def test_empty_target_scores_zero(self):
        accuracy, matched, total, _ = score_transcript("!!!", "anything")
        assert (accuracy, matched, total) == (0, 0, 0)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            score_transcript("a", "a", mode="fuzzy")


class TestScoreEndpoint:

    def test_stateless_score(self, client, student_headers):
        resp = client.post(
            "/api/pronunciation/score",
            json={"target": "Nice to meet you", "transcript": "nice to meet you", "mode": MODE_POSITIONAL},
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "accuracy": 100,
            "matched_words": 4,
            "total_words": 4,
            "feedback": ["Perfect pronunciation!"],
        }

    def test_requires_login(self, client):
        resp = client.post("/api/pronunciation/score", json={"target": "a", "transcript": "a"})
        assert resp.status_code == 401


@pytest.fixture
def exercise(client, teacher_headers):
    resp = client.post(
        "/api/pronunciation/exercises",
        json={
            "phrase": "Three thin thieves",
            "ipa": "/θriː θɪn θiːvz/",
            "difficulty": "hard",
            "category": "th sounds",
            "tips": ["Put your tongue between your teeth", "Push air out softly"],
        },
        headers=teacher_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def queued(monkeypatch):
    jobs = []
    monkeypatch.setattr(
        pronunciation_service, "enqueue_pronunciation_task", lambda attempt_id: jobs.append(attempt_id)
    )
    return jobs


class TestScoreWithExercise:

    def test_positional_includes_exercise_tips(self, client, exercise, student_headers):
        resp = client.post(
            "/api/pronunciation/score",
            json={
                "target": "Three thin thieves",
                "transcript": "tree thin thieves",
                "mode": MODE_POSITIONAL,
                "exercise_id": exercise["id"],
            },
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["feedback"][1:] == exercise["tips"][:2]

    def test_overlap_ignores_exercise_tips(self, client, exercise, student_headers):
        resp = client.post(
            "/api/pronunciation/score",
            json={
                "target": "Three thin thieves",
                "transcript": "three",
                "mode": MODE_OVERLAP,
                "exercise_id": exercise["id"],
            },
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["feedback"] == ["Needs more practice"]


class TestExercises:

    def test_list_and_filter(self, client, exercise, student_headers):
        hard = client.get("/api/pronunciation/exercises?difficulty=hard", headers=student_headers).json()
        easy = client.get("/api/pronunciation/exercises?difficulty=easy", headers=student_headers).json()
        assert [e["id"] for e in hard] == [exercise["id"]]
        assert easy == []

    def test_student_cannot_create(self, client, student_headers):
        resp = client.post(
            "/api/pronunciation/exercises", json={"phrase": "hello"}, headers=student_headers
        )
        assert resp.status_code == 403


class TestAttempts:

    def test_attempt_is_queued_then_scored(
        self, client, exercise, student_headers, queued, session_factory, monkeypatch
    ):
        resp = client.post(
            "/api/pronunciation/attempts",
            json={"exercise_id": exercise["id"], "transcript": "tree thin thieves"},
            headers=student_headers,
        )
        assert resp.status_code == 201
        attempt = resp.json()
        assert attempt["status"] == "pending"
        assert attempt["target_text"] == "Three thin thieves"
        assert queued == [attempt["id"]]

        # run the worker task against the test database
        monkeypatch.setattr(tasks, "SessionLocal", session_factory)
        result = tasks.pronunciation_scoring_task(attempt["id"])
        assert result["status"] == "success"
        assert result["accuracy"] == 67

        scored = client.get(f"/api/pronunciation/attempts/{attempt['id']}", headers=student_headers).json()
        assert scored["status"] == "scored"
        assert scored["accuracy"] == 67
        assert scored["feedback"] == [
            "Good effort! Focus on problem sounds.",
            "Put your tongue between your teeth",
            "Push air out softly",
        ]

    def test_free_text_attempt(self, client, student_headers, queued):
        resp = client.post(
            "/api/pronunciation/attempts",
            json={"target_text": "Good morning", "transcript": "good morning", "mode": "overlap"},
            headers=student_headers,
        )
        assert resp.status_code == 201
        mine = client.get("/api/pronunciation/attempts/me", headers=student_headers).json()
        assert [a["id"] for a in mine] == [resp.json()["id"]]

    def test_target_required(self, client, student_headers, queued):
        resp = client.post(
            "/api/pronunciation/attempts", json={"transcript": "hello"}, headers=student_headers
        )
        assert resp.status_code == 400
        assert queued == []

    def test_missing_attempt_task(self, session_factory, monkeypatch):
        monkeypatch.setattr(tasks, "SessionLocal", session_factory)
        result = tasks.pronunciation_scoring_task(4242)
        assert result["status"] == "error"
        assert "not found" in result["error"]
