from fastapi.testclient import TestClient


def _create(client, headers, name):
    return client.post("/api/categories", json={"name": name}, headers=headers)


def test_create_and_list_categories(client: TestClient, user_token_headers):
    for name in ("Work", "Errands", " Health "):
        assert _create(client, user_token_headers, name).status_code == 201

    response = client.get("/api/categories", headers=user_token_headers)

    assert response.status_code == 200
    assert [category["name"] for category in response.json()] == ["Errands", "Health", "Work"]


def test_duplicate_category_name(client: TestClient, user_token_headers):
    assert _create(client, user_token_headers, "Work").status_code == 201

    response = _create(client, user_token_headers, "Work")
    assert response.status_code == 409
    assert response.json()["message"] == "A category with that name already exists."


def test_same_name_for_different_users(client: TestClient, user_token_headers, other_token_headers):
    assert _create(client, user_token_headers, "Work").status_code == 201
    assert _create(client, other_token_headers, "Work").status_code == 201


def test_category_name_required(client: TestClient, user_token_headers):
    response = _create(client, user_token_headers, "   ")
    assert response.status_code == 400
    assert response.json()["message"] == "Category name is required."


def test_rename_category(client: TestClient, user_token_headers):
    category = _create(client, user_token_headers, "Wrok").json()

    response = client.put(f"/api/categories/{category['id']}", json={"name": "Work"},
                          headers=user_token_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Work"


def test_rename_category_to_existing_name(client: TestClient, user_token_headers):
    _create(client, user_token_headers, "Work")
    home = _create(client, user_token_headers, "Home").json()

    response = client.put(f"/api/categories/{home['id']}", json={"name": "Work"},
                          headers=user_token_headers)
    assert response.status_code == 409

    # Renaming to its own name is not a conflict
    response = client.put(f"/api/categories/{home['id']}", json={"name": "Home"},
                          headers=user_token_headers)
    assert response.status_code == 200


def test_delete_category_keeps_todo_category(client: TestClient, user_token_headers):
    category = _create(client, user_token_headers, "Garden").json()
    todo = client.post("/api/todos", json={"text": "Mow", "category": "Garden"},
                       headers=user_token_headers).json()

    response = client.delete(f"/api/categories/{category['id']}", headers=user_token_headers)
    assert response.status_code == 200

    response = client.get(f"/api/todos/{todo['id']}", headers=user_token_headers)
    assert response.json()["category"] == "Garden"


def test_cannot_touch_others_category(client: TestClient, user_token_headers, other_token_headers):
    category = _create(client, other_token_headers, "Private").json()

    assert client.get("/api/categories", headers=user_token_headers).json() == []

    response = client.put(f"/api/categories/{category['id']}", json={"name": "Mine"},
                          headers=user_token_headers)
    assert response.status_code == 404

    response = client.delete(f"/api/categories/{category['id']}", headers=user_token_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Category not found."
