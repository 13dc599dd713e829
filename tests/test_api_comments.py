from fastapi.testclient import TestClient


def test_comment_on_todo(client: TestClient, user_token_headers, test_todo, test_user):
    response = client.post(f"/api/comments/todo/{test_todo.id}", json={"text": " Called the plumber "},
                           headers=user_token_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["text"] == "Called the plumber"
    assert data["todo_id"] == test_todo.id
    assert data["owner_id"] == test_user.id


def test_list_comments_newest_first(client: TestClient, user_token_headers, test_todo):
    for text in ("one", "two", "three"):
        client.post(f"/api/comments/todo/{test_todo.id}", json={"text": text}, headers=user_token_headers)

    response = client.get(f"/api/comments/todo/{test_todo.id}", headers=user_token_headers)

    assert response.status_code == 200
    assert [comment["text"] for comment in response.json()] == ["three", "two", "one"]


def test_comment_text_required(client: TestClient, user_token_headers, test_todo):
    response = client.post(f"/api/comments/todo/{test_todo.id}", json={"text": ""}, headers=user_token_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Comment text is required."


def test_edit_and_delete_comment(client: TestClient, user_token_headers, test_todo):
    comment = client.post(f"/api/comments/todo/{test_todo.id}", json={"text": "draft"},
                          headers=user_token_headers).json()

    response = client.put(f"/api/comments/{comment['id']}", json={"text": "final"}, headers=user_token_headers)
    assert response.status_code == 200
    assert response.json()["text"] == "final"

    response = client.put(f"/api/comments/{comment['id']}", json={"text": "  "}, headers=user_token_headers)
    assert response.status_code == 400

    response = client.delete(f"/api/comments/{comment['id']}", headers=user_token_headers)
    assert response.status_code == 200
    assert client.get(f"/api/comments/todo/{test_todo.id}", headers=user_token_headers).json() == []


def test_cannot_touch_comments_on_others_todo(client: TestClient, user_token_headers, other_token_headers,
                                              other_todo):
    comment = client.post(f"/api/comments/todo/{other_todo.id}", json={"text": "secret"},
                          headers=other_token_headers).json()

    response = client.get(f"/api/comments/todo/{other_todo.id}", headers=user_token_headers)
    assert response.status_code == 404

    response = client.post(f"/api/comments/todo/{other_todo.id}", json={"text": "hi"},
                           headers=user_token_headers)
    assert response.status_code == 404

    response = client.put(f"/api/comments/{comment['id']}", json={"text": "edited"},
                          headers=user_token_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Comment not found."

    response = client.delete(f"/api/comments/{comment['id']}", headers=user_token_headers)
    assert response.status_code == 404
