# tests/test_evaluate_api.py
import pytest
from fastapi.testclient import TestClient

def _answers(wrong: int, right: int = 0):
    records = [
        {"questionText": f"Wrong {i}?", "userAnswer": "A", "correctAnswer": "B"} for i in range(wrong)
    ]
    records += [
        {"questionText": f"Right {i}?", "userAnswer": "C", "correctAnswer": "C"} for i in range(right)
    ]
    return records

@pytest.mark.evaluation
class TestEvaluateAPI:
    def test_three_wrong_answers_make_topic_weak(self, client: TestClient, fake_model):
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(3)})
        assert response.status_code == 200
        data = response.json()
        assert data["topic"] == "AI"
        assert data["weak"] is True
        assert data["wrongAnswers"] == 3
        assert data["newQuestions"] == [{"question": "Q?", "options": ["A", "B", "C", "D"], "answer": "B"}]
        assert fake_model.call_count == 1
        assert fake_model.prompts[0].startswith('The student is weak in "AI".')

    def test_one_wrong_answer_is_not_weak(self, client: TestClient, fake_model):
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(1)})
        assert response.status_code == 200
        assert response.json() == {"topic": "AI", "weak": False, "wrongAnswers": 1, "newQuestions": None}
        assert fake_model.call_count == 0

    def test_empty_answers_score_zero(self, client: TestClient, fake_model):
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": []})
        assert response.status_code == 200
        data = response.json()
        assert data["wrongAnswers"] == 0
        assert data["weak"] is False
        assert fake_model.call_count == 0

    @pytest.mark.parametrize(
        "wrong, right, weak, calls",
        [(0, 5, False, 0), (2, 0, False, 0), (2, 20, False, 0), (3, 0, True, 1), (3, 50, True, 1), (10, 0, True, 1)],
    )
    def test_fixed_threshold(self, client: TestClient, fake_model, wrong, right, weak, calls):
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(wrong, right)})
        assert response.status_code == 200
        data = response.json()
        assert data["wrongAnswers"] == wrong
        assert data["weak"] is weak
        assert fake_model.call_count == calls

    def test_comparison_is_case_sensitive_and_empty_answer_is_wrong(self, client: TestClient, fake_model):
        answers = [
            {"question": "Q1", "userAnswer": "paris", "correctAnswer": "Paris"},
            {"question": "Q2", "userAnswer": "", "correctAnswer": "Rome"},
            {"question": "Q3", "userAnswer": "Oslo", "correctAnswer": "Oslo"},
        ]
        response = client.post("/api/evaluate", json={"topic": "Capitals", "answers": answers})
        assert response.json()["wrongAnswers"] == 2

    def test_remediation_defaults(self, client: TestClient, fake_model):
        client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(3)})
        prompt = fake_model.prompts[0]
        assert "Generate 5 medium-level MCQs" in prompt
        assert '"explanation"' in prompt

    def test_remediation_uses_requested_options(self, client: TestClient, fake_model):
        fake_model.chunks = ["<p>Q?</p><ul><li>A</li></ul><p>Because.</p>"]
        response = client.post(
            "/api/evaluate",
            json={"topic": "AI", "answers": _answers(4), "format": "html", "difficulty": "hard", "count": 8},
        )
        assert response.status_code == 200
        assert response.json()["newQuestions"] == "<p>Q?</p><ul><li>A</li></ul><p>Because.</p>"
        assert "Generate 8 hard-level MCQs in HTML." in fake_model.prompts[0]

    def test_missing_topic_is_rejected(self, client: TestClient, fake_model):
        response = client.post("/api/evaluate", json={"answers": _answers(3)})
        assert response.status_code == 400
        assert response.json()["error"] == 'Please provide "topic" and "answers" array.'
        assert fake_model.call_count == 0

    @pytest.mark.parametrize("answers", [None, "A,B,C", {"userAnswer": "A"}, 3])
    def test_answers_must_be_an_array(self, client: TestClient, fake_model, answers):
        body = {"topic": "AI"}
        if answers is not None:
            body["answers"] = answers
        response = client.post("/api/evaluate", json=body)
        assert response.status_code == 400
        assert response.json()["type"] == "InvalidInput"

    def test_malformed_answer_record_is_rejected(self, client: TestClient, fake_model):
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": ["not a record"]})
        assert response.status_code == 400
        assert "Answer #1" in response.json()["error"]

    def test_missing_credential(self, missing_api_key, client: TestClient, fake_model):
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(3)})
        assert response.status_code == 500
        assert response.json()["type"] == "ConfigurationError"
        assert fake_model.call_count == 0

    @pytest.mark.parametrize("body", [["AI"], "AI", 7, None])
    def test_missing_credential_wins_over_body_shape(self, missing_api_key, client: TestClient, fake_model, body):
        response = client.post("/api/evaluate", json=body)
        assert response.status_code == 500
        assert response.json()["type"] == "ConfigurationError"
        assert fake_model.call_count == 0

    def test_numeric_answers_are_compared_as_text(self, client: TestClient, fake_model):
        answers = [
            {"questionText": "2+2?", "userAnswer": 4, "correctAnswer": 4},
            {"questionText": "3+3?", "userAnswer": 5, "correctAnswer": 6},
            {"questionText": "1-1?", "userAnswer": 0, "correctAnswer": "0"},
        ]
        response = client.post("/api/evaluate", json={"topic": "Arithmetic", "answers": answers})
        assert response.status_code == 200
        assert response.json() == {"topic": "Arithmetic", "weak": False, "wrongAnswers": 1, "newQuestions": None}

    def test_infinite_count_uses_remedial_default(self, client: TestClient, fake_model):
        response = client.post(
            "/api/evaluate",
            content='{"topic": "AI", "count": Infinity, "answers": ['
            + ",".join('{"userAnswer": "A", "correctAnswer": "B"}' for _ in range(3))
            + "]}",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert "Generate 5 medium-level MCQs" in fake_model.prompts[0]

    def test_remediation_failure_discards_score(self, client: TestClient, fake_model):
        fake_model.error = RuntimeError("quota exceeded")
        fake_model.fail_after = 0
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(3)})
        assert response.status_code == 500
        data = response.json()
        assert data["type"] == "RemediationGenerationError"
        assert data["error"] == "Could not generate follow-up questions."
        assert "wrongAnswers" not in data
        assert "weak" not in data

    def test_unparseable_remedial_questions_fail_the_evaluation(self, client: TestClient, fake_model):
        fake_model.chunks = ["not json at all"]
        response = client.post("/api/evaluate", json={"topic": "AI", "answers": _answers(3)})
        assert response.status_code == 500
        data = response.json()
        assert data["type"] == "RemediationGenerationError"
        assert "rawText" not in data
