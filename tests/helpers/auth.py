# tests/helpers/auth.py

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-password"


def csrf_headers(client) -> dict:
    """Fetch a CSRF token (issuing the cookie if needed) as request header."""
    token = client.get("/api/csrf-token").json()["csrfToken"]
    return {"X-CSRF-Token": token}


def login(client, username=ADMIN_USERNAME, password=ADMIN_PASSWORD, next_url="/"):
    token = csrf_headers(client)["X-CSRF-Token"]
    return client.post(
        "/auth/login",
        data={
            "username": username,
            "password": password,
            "csrf_token": token,
            "next": next_url,
        },
        follow_redirects=False,
    )
