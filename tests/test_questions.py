"""Tests for question endpoints."""

from fastapi.testclient import TestClient


def _post(client: TestClient, token: str, content: str, subject: int, tags=None):
    client.cookies.set("user_token", token)
    return client.post("/create-question", json={"content": content, "subject": subject, "tags": tags or []})


class TestCreateQuestion:
    def test_create_question(self, client: TestClient, test_user: dict, categories: dict):
        response = _post(client, test_user["token"], "What is x if 2x = 4?", categories["Mathematics"], ["Algebra"])
        assert response.status_code == 201
        question = response.json()["question"]
        assert question["content"] == "What is x if 2x = 4?"
        assert question["subject"]["name"] == "Mathematics"
        assert question["tags"] == ["Algebra"]
        assert question["user"]["username"] == "testuser"
        assert "createdAt" in question

    def test_create_requires_auth(self, client: TestClient, categories: dict):
        response = client.post("/create-question", json={"content": "Hi", "subject": categories["Physics"]})
        assert response.status_code == 401

    def test_unknown_subject(self, client: TestClient, test_user: dict):
        response = _post(client, test_user["token"], "Anyone?", 999)
        assert response.status_code == 400

    def test_too_many_tags(self, client: TestClient, test_user: dict, categories: dict):
        tags = ["Algebra", "Equations", "Grammar", "Economics"]
        response = _post(client, test_user["token"], "Tags", categories["Mathematics"], tags)
        assert response.status_code == 400

    def test_tag_outside_vocabulary(self, client: TestClient, test_user: dict, categories: dict):
        response = _post(client, test_user["token"], "Tags", categories["Mathematics"], ["Cooking"])
        assert response.status_code == 400

    def test_content_too_long(self, client: TestClient, test_user: dict, categories: dict):
        response = _post(client, test_user["token"], "x" * 301, categories["Mathematics"])
        assert response.status_code == 400


class TestListQuestions:
    def test_newest_first(self, client: TestClient, test_user: dict, categories: dict):
        _post(client, test_user["token"], "first", categories["Mathematics"])
        _post(client, test_user["token"], "second", categories["Physics"])

        response = client.get("/questions")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [q["content"] for q in data["questions"]] == ["second", "first"]

    def test_filters(self, client: TestClient, test_user: dict, categories: dict):
        token = test_user["token"]
        _post(client, token, "Solve the quadratic", categories["Mathematics"], ["Algebra", "Equations"])
        _post(client, token, "Linear algebra basics", categories["Mathematics"], ["Algebra"])
        _post(client, token, "Falling apples", categories["Physics"], ["Newtonian"])

        by_search = client.get("/questions", params={"search": "QUADRATIC"}).json()["questions"]
        assert [q["content"] for q in by_search] == ["Solve the quadratic"]

        by_subject = client.get("/questions", params={"subject": "Physics"}).json()["questions"]
        assert [q["content"] for q in by_subject] == ["Falling apples"]

        by_subject_id = client.get("/questions", params={"subject": str(categories["Mathematics"])}).json()
        assert len(by_subject_id["questions"]) == 2

        by_tags = client.get("/questions", params={"tags": "Algebra,Equations"}).json()["questions"]
        assert [q["content"] for q in by_tags] == ["Solve the quadratic"]

    def test_get_question(self, client: TestClient, test_user: dict, categories: dict):
        created = _post(client, test_user["token"], "Where?", categories["History"]).json()["question"]
        response = client.get(f"/question/{created['id']}")
        assert response.status_code == 200
        assert response.json()["question"]["content"] == "Where?"

    def test_get_question_not_found(self, client: TestClient):
        response = client.get("/question/12345")
        assert response.status_code == 404


class TestOwnership:
    def test_owner_can_update(self, client: TestClient, test_user: dict, categories: dict):
        created = _post(client, test_user["token"], "Original", categories["Mathematics"], ["Algebra"]).json()
        qid = created["question"]["id"]

        response = client.put(
            f"/update-question/{qid}",
            json={"content": "Edited", "subject": categories["Physics"]},
        )
        assert response.status_code == 200
        question = response.json()["question"]
        assert question["content"] == "Edited"
        assert question["subject"]["name"] == "Physics"
        assert question["tags"] == ["Algebra"]

    def test_other_user_cannot_update(self, client: TestClient, test_user: dict, other_user: dict, categories: dict):
        created = _post(client, test_user["token"], "Mine", categories["Mathematics"]).json()
        qid = created["question"]["id"]

        client.cookies.set("user_token", other_user["token"])
        response = client.put(f"/update-question/{qid}", json={"content": "Hijacked", "subject": categories["Physics"]})
        assert response.status_code == 403

        unchanged = client.get(f"/question/{qid}").json()["question"]
        assert unchanged["content"] == "Mine"

    def test_other_user_cannot_delete(self, client: TestClient, test_user: dict, other_user: dict, categories: dict):
        qid = _post(client, test_user["token"], "Mine", categories["Mathematics"]).json()["question"]["id"]

        client.cookies.set("user_token", other_user["token"])
        assert client.delete(f"/delete-question/{qid}").status_code == 403
        assert client.get(f"/question/{qid}").status_code == 200

    def test_owner_can_delete(self, client: TestClient, test_user: dict, categories: dict):
        qid = _post(client, test_user["token"], "Bye", categories["Mathematics"]).json()["question"]["id"]

        response = client.delete(f"/delete-question/{qid}")
        assert response.status_code == 200
        assert client.get(f"/question/{qid}").status_code == 404

    def test_update_missing_question(self, client: TestClient, test_user: dict, categories: dict):
        client.cookies.set("user_token", test_user["token"])
        response = client.put("/update-question/999", json={"content": "x", "subject": categories["Physics"]})
        assert response.status_code == 404
