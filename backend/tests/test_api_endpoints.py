"""Tests for the HTTP API."""

import uuid

from fastapi.testclient import TestClient

from quizbank.schemas.question import QuestionOut
from tests.helpers.seed import make_csv

API = "/v1"


def question_payload(**overrides):
    payload = {
        "question_text": "  Platz means?  ",
        "question_type": "single_choice",
        "all_answers": ["Down", "Sit"],
        "correct_answers": ["Down"],
        "category": " Hundeführerschein ",
    }
    payload.update(overrides)
    return payload


def upload(client: TestClient, content: bytes | str, filename: str = "questions.csv"):
    if isinstance(content, str):
        content = content.encode("utf-8")
    return client.post(f"{API}/admin/import/csv", files={"file": (filename, content, "text/csv")})


# Health


def test_health(client: TestClient) -> None:
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get(f"{API}/health", headers={"X-Request-ID": "upload-42"})

    assert response.headers["X-Request-ID"] == "upload-42"


def test_ready_reports_database_and_sessions(client: TestClient) -> None:
    response = client.get(f"{API}/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok", "active_sessions": 0}


# Admin questions


def test_create_question_trims_text(client: TestClient) -> None:
    response = client.post(f"{API}/admin/questions", json=question_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["id"] > 0
    assert data["question_text"] == "Platz means?"
    assert data["category"] == "Hundeführerschein"
    assert data["correct_answers"] == ["Down"]


def test_create_question_needs_two_options(client: TestClient) -> None:
    response = client.post(
        f"{API}/admin/questions",
        json=question_payload(all_answers=["Down"], correct_answers=["Down"]),
    )

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_create_question_rejects_unknown_correct_answer(client: TestClient) -> None:
    response = client.post(f"{API}/admin/questions", json=question_payload(correct_answers=["Stay"]))

    assert response.status_code == 422


def test_create_single_choice_with_two_correct_answers(client: TestClient) -> None:
    response = client.post(
        f"{API}/admin/questions", json=question_payload(correct_answers=["Down", "Sit"])
    )

    assert response.status_code == 422


def test_create_question_caps_answer_count(client: TestClient) -> None:
    options = [f"A{i}" for i in range(21)]
    response = client.post(
        f"{API}/admin/questions", json=question_payload(all_answers=options, correct_answers=["A0"])
    )

    assert response.status_code == 422


def test_list_questions_filters(client: TestClient, stored_questions: list[QuestionOut]) -> None:
    response = client.get(f"{API}/admin/questions", params={"category": "Hundeführerschein"})

    data = response.json()
    assert response.status_code == 200
    assert data["total"] == 2
    assert sorted(data["categories"]) == ["Hundeführerschein", "Trainerprüfung"]

    response = client.get(f"{API}/admin/questions", params={"q": "MARKER"})
    assert [item["question_text"] for item in response.json()["items"]] == ["What is a marker signal?"]


def test_get_update_delete_question(client: TestClient, stored_questions: list[QuestionOut]) -> None:
    question_id = stored_questions[0].id

    response = client.get(f"{API}/admin/questions/{question_id}")
    assert response.status_code == 200
    assert response.json()["question_text"] == "Sit"

    response = client.put(
        f"{API}/admin/questions/{question_id}",
        json=question_payload(question_text="Sit!", all_answers=["Sitz", "Platz"], correct_answers=["Sitz"]),
    )
    assert response.status_code == 200
    assert response.json()["question_text"] == "Sit!"
    assert response.json()["id"] == question_id

    response = client.delete(f"{API}/admin/questions/{question_id}")
    assert response.status_code == 204

    response = client.get(f"{API}/admin/questions/{question_id}")
    assert response.status_code == 404
    assert response.json()["error_code"] == "QUESTION_NOT_FOUND"


def test_update_missing_question(client: TestClient) -> None:
    response = client.put(f"{API}/admin/questions/9999", json=question_payload())

    assert response.status_code == 404
    assert response.json()["error_code"] == "QUESTION_NOT_FOUND"


# CSV import


def test_import_csv(client: TestClient) -> None:
    content = make_csv(
        "Sit,single choice,Sitz;Platz;Steh,Sitz,Koalatest",
        "Which are calming signals?,Multiple Choice,Yawning;Barking;Sniffing,Yawning;Sniffing,Trainerprüfung",
        "Describe a dog,essay,A;B,A,Koalatest",
        "too,few",
    )

    response = upload(client, "\ufeff" + content)

    assert response.status_code == 201
    data = response.json()
    assert data["imported_count"] == 2
    assert data["skipped_count"] == 1
    assert data["dropped_lines"] == [5]
    assert data["message"] == "Successfully imported 2 questions. (1 rows skipped due to invalid format)"
    assert data["rejections"][0]["code"] == "INVALID_TYPE"
    assert data["rejections"][0]["line_number"] == 4

    listing = client.get(f"{API}/admin/questions").json()
    assert listing["total"] == 2
    assert listing["items"][0]["category"] == "Hundeführerschein"


def test_import_csv_row_with_many_options(client: TestClient) -> None:
    options = ";".join(f"A{i}" for i in range(25))

    response = upload(client, make_csv(f"Q,multiple_choice,{options},A0;A24,Cat"))

    assert response.status_code == 201
    assert response.json()["imported_count"] == 1
    stored = client.get(f"{API}/admin/questions").json()["items"][0]
    assert len(stored["all_answers"]) == 25
    assert stored["correct_answers"] == ["A0", "A24"]


def test_import_csv_all_rows_invalid(client: TestClient) -> None:
    response = upload(client, make_csv("Q,essay,A;B,A,Cat", "Q,single_choice,A;B,C,Cat"))

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "EMPTY_IMPORT_BATCH"
    assert data["message"] == "All rows were skipped due to errors."
    assert data["details"]["skipped_count"] == 2
    assert client.get(f"{API}/admin/questions").json()["total"] == 0


def test_import_csv_header_only(client: TestClient) -> None:
    response = upload(client, make_csv())

    assert response.status_code == 400
    assert response.json()["message"] == "No valid questions found."


def test_import_csv_undecodable(client: TestClient) -> None:
    response = upload(client, b"question\n\xff\xfe\xfa,broken")

    assert response.status_code == 400
    assert response.json()["error_code"] == "IMPORT_DECODE_ERROR"


# Quiz sessions


def test_quiz_session_flow(client: TestClient, stored_questions: list[QuestionOut]) -> None:
    response = client.post(f"{API}/quiz/sessions", json={"time_limit_seconds": 0})
    assert response.status_code == 201
    session = response.json()
    session_id = session["id"]
    assert session["status"] == "in_progress"
    assert session["total_questions"] == 3
    assert session["time_remaining"] is None
    assert "correct_answers" not in session["current_question"]

    def post(path: str, **kwargs):
        response = client.post(f"{API}/quiz/sessions/{session_id}{path}", **kwargs)
        assert response.status_code == 200
        return response.json()

    assert post("/select", json={"option": "Sitz"})["applied"] is True
    assert post("/finish/request")["applied"] is False
    post("/next")
    post("/select", json={"option": "Yawning"})
    second = post("/select", json={"option": "Licking lips"})["session"]
    assert second["selected_options"] == ["Yawning", "Licking lips"]
    post("/next")
    post("/select", json={"option": "A leash correction"})

    confirming = post("/finish/request")
    assert confirming["applied"] is True
    assert confirming["session"]["status"] == "confirming_finish"
    assert post("/select", json={"option": "A clicker sound"})["applied"] is False

    response = client.get(f"{API}/quiz/sessions/{session_id}/result")
    assert response.status_code == 409
    assert response.json()["error_code"] == "SESSION_NOT_FINISHED"

    assert post("/finish/cancel")["session"]["status"] == "in_progress"
    post("/select", json={"option": "A clicker sound"})
    post("/finish/request")
    assert post("/finish/confirm")["session"]["status"] == "finished"
    assert post("/finish/confirm")["applied"] is False

    result = client.get(f"{API}/quiz/sessions/{session_id}/result").json()
    assert result["correct"] == 3
    assert result["total"] == 3
    assert result["percentage"] == 100.0
    ids = [str(q.id) for q in stored_questions]
    assert result["answers"][ids[1]] == ["Yawning", "Licking lips"]
    assert all(result["per_question"][i] for i in ids)

    response = client.get(f"{API}/quiz/sessions/{session_id}/result")
    assert response.status_code == 404
    assert client.get(f"{API}/ready").json()["active_sessions"] == 0


def test_quiz_session_by_category_and_timed_view(client: TestClient, stored_questions: list[QuestionOut]) -> None:
    response = client.post(
        f"{API}/quiz/sessions", json={"category": "Trainerprüfung", "time_limit_seconds": 0}
    )

    session = response.json()
    assert session["total_questions"] == 1
    assert session["is_last_question"] is True
    assert session["current_question"]["category"] == "Trainerprüfung"


def test_quiz_session_unknown_category(client: TestClient, stored_questions: list[QuestionOut]) -> None:
    response = client.post(f"{API}/quiz/sessions", json={"category": "Agility"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "NOT_ENOUGH_QUESTIONS"


def test_quiz_session_exit(client: TestClient, stored_questions: list[QuestionOut]) -> None:
    session_id = client.post(f"{API}/quiz/sessions", json={"time_limit_seconds": 0}).json()["id"]
    client.post(f"{API}/quiz/sessions/{session_id}/select", json={"option": "Sitz"})

    response = client.post(f"{API}/quiz/sessions/{session_id}/exit")
    assert response.status_code == 204

    response = client.get(f"{API}/quiz/sessions/{session_id}")
    assert response.status_code == 404
    assert response.json()["error_code"] == "SESSION_NOT_FOUND"


def test_unknown_session(client: TestClient) -> None:
    response = client.post(f"{API}/quiz/sessions/{uuid.uuid4()}/next")

    assert response.status_code == 404
    assert response.json()["error_code"] == "SESSION_NOT_FOUND"
