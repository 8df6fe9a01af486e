"""
Tests for the attempt lifecycle: start, answer, complete and review
"""

from quizly.models.attempt import QuizAttempt, UserAnswer
from quizly.repositories import UserAnswerRepository
from tests.conftest import API, correct_ids, wrong_ids


def start(client, headers, quiz_id):
    response = client.post(f"{API}/attempts/start", json={"quiz_id": quiz_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def submit(client, headers, attempt_id, question_id, option_ids):
    return client.post(
        f"{API}/attempts/submit-answer",
        json={"attempt_id": attempt_id, "question_id": question_id, "selected_option_ids": option_ids},
        headers=headers,
    )


def complete(client, headers, attempt_id):
    return client.post(f"{API}/attempts/complete", json={"attempt_id": attempt_id}, headers=headers)


def test_start_snapshots_total_and_hides_answer_key(client, user_headers, quiz):
    attempt = start(client, user_headers, quiz["id"])

    assert attempt["status"] == "IN_PROGRESS"
    assert attempt["total_score"] == 5
    assert attempt["quiz_title"] == "Python Basics"
    assert attempt["time_limit_minutes"] == 10
    assert len(attempt["questions"]) == 2
    for question in attempt["questions"]:
        assert all(option["is_correct"] is None for option in question["options"])


def test_start_unknown_quiz_is_404(client, user_headers):
    response = client.post(f"{API}/attempts/start", json={"quiz_id": 999}, headers=user_headers)

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_full_attempt_scores_and_passes(client, user_headers, quiz):
    q1, q2 = quiz["questions"]
    attempt = start(client, user_headers, quiz["id"])

    response = submit(client, user_headers, attempt["id"], q1["id"], correct_ids(q1))
    assert response.status_code == 200
    assert response.json()["data"]["is_correct"] is True
    assert response.json()["data"]["points_earned"] == 2

    response = submit(client, user_headers, attempt["id"], q2["id"], correct_ids(q2))
    assert response.json()["data"]["points_earned"] == 3

    response = complete(client, user_headers, attempt["id"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "COMPLETED"
    assert data["score_obtained"] == 5
    assert data["percentage_score"] == 100.0
    assert data["is_passed"] is True
    assert data["time_taken_minutes"] == 0
    assert data["end_time"] is not None
    assert len(data["answers"]) == 2
    assert data["answers"][0]["explanation"] == "Two elements"


def test_partial_multiple_choice_answer_earns_nothing(client, user_headers, quiz):
    q2 = quiz["questions"][1]
    attempt = start(client, user_headers, quiz["id"])

    response = submit(client, user_headers, attempt["id"], q2["id"], correct_ids(q2)[:1])

    assert response.json()["data"]["is_correct"] is False
    assert response.json()["data"]["points_earned"] == 0


def test_failing_below_passing_score(client, user_headers, quiz):
    q1, q2 = quiz["questions"]
    attempt = start(client, user_headers, quiz["id"])
    submit(client, user_headers, attempt["id"], q1["id"], correct_ids(q1))
    submit(client, user_headers, attempt["id"], q2["id"], wrong_ids(q2))

    data = complete(client, user_headers, attempt["id"]).json()["data"]

    assert data["score_obtained"] == 2
    assert data["percentage_score"] == 40.0
    assert data["is_passed"] is False


def test_resubmission_overwrites_single_answer_row(client, user_headers, quiz, session_factory):
    q1 = quiz["questions"][0]
    attempt = start(client, user_headers, quiz["id"])

    submit(client, user_headers, attempt["id"], q1["id"], wrong_ids(q1)[:1])
    response = submit(client, user_headers, attempt["id"], q1["id"], correct_ids(q1))

    assert response.json()["data"]["is_correct"] is True
    assert response.json()["data"]["selected_option_ids"] == correct_ids(q1)
    with session_factory() as session:
        rows = session.query(UserAnswer).filter(UserAnswer.quiz_attempt_id == attempt["id"]).all()
        assert len(rows) == 1
        assert rows[0].points_earned == 2


def test_total_score_snapshot_survives_new_questions(client, user_headers, admin_headers, quiz):
    attempt = start(client, user_headers, quiz["id"])
    response = client.post(
        f"{API}/questions",
        json={
            "quiz_id": quiz["id"],
            "question_text": "Late addition",
            "points": 10,
            "options": [{"option_text": "yes", "is_correct": True}],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201

    data = complete(client, user_headers, attempt["id"]).json()["data"]

    assert data["total_score"] == 5


def test_completing_twice_is_rejected(client, user_headers, quiz):
    attempt = start(client, user_headers, quiz["id"])
    assert complete(client, user_headers, attempt["id"]).status_code == 200

    response = complete(client, user_headers, attempt["id"])

    assert response.status_code == 400
    assert response.json()["message"] == "This quiz attempt is already completed or abandoned"


def test_answering_completed_attempt_is_rejected(client, user_headers, quiz):
    q1 = quiz["questions"][0]
    attempt = start(client, user_headers, quiz["id"])
    complete(client, user_headers, attempt["id"])

    response = submit(client, user_headers, attempt["id"], q1["id"], correct_ids(q1))

    assert response.status_code == 400


def test_submit_to_someone_elses_attempt_is_forbidden(client, user_headers, other_headers, quiz):
    q1 = quiz["questions"][0]
    attempt = start(client, user_headers, quiz["id"])

    assert submit(client, other_headers, attempt["id"], q1["id"], correct_ids(q1)).status_code == 403
    assert complete(client, other_headers, attempt["id"]).status_code == 403


def test_question_from_another_quiz_is_rejected(client, user_headers, quiz, create_quiz):
    other_quiz = create_quiz(title="Other")
    foreign = other_quiz["questions"][0]
    attempt = start(client, user_headers, quiz["id"])

    response = submit(client, user_headers, attempt["id"], foreign["id"], correct_ids(foreign))

    assert response.status_code == 400


def test_option_from_another_question_is_rejected(client, user_headers, quiz):
    q1, q2 = quiz["questions"]
    attempt = start(client, user_headers, quiz["id"])

    response = submit(client, user_headers, attempt["id"], q1["id"], correct_ids(q2))

    assert response.status_code == 400
    assert response.json()["message"] == "Option does not belong to this question"


def test_unknown_ids_are_404(client, user_headers, quiz):
    q1 = quiz["questions"][0]
    attempt = start(client, user_headers, quiz["id"])

    assert submit(client, user_headers, 999, q1["id"], correct_ids(q1)).status_code == 404
    assert submit(client, user_headers, attempt["id"], 999, [1]).status_code == 404
    assert submit(client, user_headers, attempt["id"], q1["id"], [999]).status_code == 404
    assert complete(client, user_headers, 999).status_code == 404


def test_zero_point_quiz_completes_at_zero_percent(client, user_headers, create_quiz):
    quiz = create_quiz(
        questions=[
            {
                "question_text": "Free question",
                "points": 0,
                "options": [{"option_text": "ok", "is_correct": True}],
            }
        ]
    )
    attempt = start(client, user_headers, quiz["id"])
    submit(client, user_headers, attempt["id"], quiz["questions"][0]["id"], correct_ids(quiz["questions"][0]))

    data = complete(client, user_headers, attempt["id"]).json()["data"]

    assert data["total_score"] == 0
    assert data["percentage_score"] == 0.0
    assert data["is_passed"] is False


def test_quiz_without_passing_score_leaves_is_passed_unset(client, user_headers, create_quiz):
    quiz = create_quiz(passing_score=None)
    attempt = start(client, user_headers, quiz["id"])

    data = complete(client, user_headers, attempt["id"]).json()["data"]

    assert data["is_passed"] is None


def test_attempt_readable_by_owner_and_admin_only(client, user_headers, other_headers, admin_headers, quiz):
    attempt = start(client, user_headers, quiz["id"])
    url = f"{API}/attempts/{attempt['id']}"

    assert client.get(url, headers=user_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=other_headers).status_code == 403
    assert client.get(f"{API}/attempts/999", headers=user_headers).status_code == 404


def test_my_attempts_lists_completed_newest_first_with_ordinals(client, user_headers, quiz, create_quiz):
    other_quiz = create_quiz(title="Second quiz")
    first = start(client, user_headers, quiz["id"])
    complete(client, user_headers, first["id"])
    second = start(client, user_headers, quiz["id"])
    complete(client, user_headers, second["id"])
    third = start(client, user_headers, other_quiz["id"])
    complete(client, user_headers, third["id"])
    start(client, user_headers, quiz["id"])  # still in progress

    response = client.get(f"{API}/attempts/my-attempts", headers=user_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert [a["id"] for a in data] == [third["id"], second["id"], first["id"]]
    assert [a["attempt_count"] for a in data] == [1, 2, 1]


def test_attempts_for_quiz_include_every_status(client, user_headers, other_headers, quiz):
    first = start(client, user_headers, quiz["id"])
    complete(client, user_headers, first["id"])
    start(client, user_headers, quiz["id"])
    start(client, other_headers, quiz["id"])

    data = client.get(f"{API}/attempts/quiz/{quiz['id']}", headers=user_headers).json()["data"]

    assert [a["status"] for a in data] == ["COMPLETED", "IN_PROGRESS"]


def test_attempt_rows_persist_completion(client, user_headers, quiz, session_factory):
    attempt = start(client, user_headers, quiz["id"])
    complete(client, user_headers, attempt["id"])

    with session_factory() as session:
        stored = session.get(QuizAttempt, attempt["id"])
        assert stored.status.value == "COMPLETED"
        assert stored.score_obtained == 0


def test_concurrent_first_answer_falls_back_to_update(client, user_headers, quiz, session_factory, monkeypatch):
    """
    A submission that misses an answer inserted by a concurrent request hits
    the unique constraint and overwrites that row instead of failing
    """
    q1 = quiz["questions"][0]
    attempt = start(client, user_headers, quiz["id"])
    assert submit(client, user_headers, attempt["id"], q1["id"], wrong_ids(q1)[:1]).status_code == 200

    real_lookup = UserAnswerRepository.get_for_question
    calls = []

    def stale_first_lookup(self, attempt_id, question_id):
        calls.append((attempt_id, question_id))
        if len(calls) == 1:
            return None
        return real_lookup(self, attempt_id, question_id)

    monkeypatch.setattr(UserAnswerRepository, "get_for_question", stale_first_lookup)

    response = submit(client, user_headers, attempt["id"], q1["id"], correct_ids(q1))

    assert response.status_code == 200
    assert response.json()["data"]["is_correct"] is True
    assert response.json()["data"]["points_earned"] == 2
    assert len(calls) == 2
    with session_factory() as session:
        rows = session.query(UserAnswer).filter(UserAnswer.quiz_attempt_id == attempt["id"]).all()
        assert [(row.is_correct, row.points_earned) for row in rows] == [(True, 2)]
        assert rows[0].selected_option_ids == set(correct_ids(q1))
