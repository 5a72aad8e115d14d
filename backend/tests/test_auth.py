def test_login_returns_user_and_opaque_token(client):
    response = client.post("/api/auth/login", json={"email": " ANA@empresa.com", "password": "secreto1"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Autenticación exitosa"
    assert body["data"]["user"] == {"id": 1, "name": "Ana Torres", "email": "ana@empresa.com", "role": "gerente"}
    assert body["data"]["sessionToken"].startswith("session_1_")


def test_login_with_wrong_password(client):
    response = client.post("/api/auth/login", json={"email": "ana@empresa.com", "password": "otra-clave"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Credenciales inválidas"}


def test_login_validates_fields(client):
    response = client.post("/api/auth/login", json={"email": "", "password": ""})

    assert response.status_code == 400
    assert response.json()["errors"] == ["El email es requerido", "La contraseña es requerida"]
