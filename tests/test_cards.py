# tests/test_cards.py
from tests.helpers.auth import csrf_headers
from tests.helpers.factories import make_card

NEW_CARD = {
    "title": "Reading list",
    "subtitle": "Things worth your time",
    "link": "https://example.org/reading",
    "img": "https://example.org/reading.png",
}


def test_list_published_cards(client, db_session):
    make_card(db_session, title="Shown")
    make_card(db_session, title="Hidden", published=False)

    titles = [card["title"] for card in client.get("/cards/").json()]
    assert titles == ["Shown"]


def test_read_card(client, db_session):
    shown = make_card(db_session, title="Shown")
    hidden = make_card(db_session, title="Hidden", published=False)

    response = client.get(f"/cards/{shown.id}")
    assert response.status_code == 200
    assert response.json()["link"] == "https://example.org/article"

    assert client.get(f"/cards/{hidden.id}").status_code == 404
    assert client.get("/cards/9999").status_code == 404


def test_create_card(admin_client):
    response = admin_client.post(
        "/cards/", json=NEW_CARD, headers=csrf_headers(admin_client)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Reading list"
    assert data["img"] == "https://example.org/reading.png"
    assert data["published"] is True


def test_create_card_rejects_invalid_url(admin_client):
    response = admin_client.post(
        "/cards/",
        json={**NEW_CARD, "link": "javascript:alert(1)"},
        headers=csrf_headers(admin_client),
    )
    assert response.status_code == 422


def test_create_card_requires_admin(client):
    response = client.post("/cards/", json=NEW_CARD, headers=csrf_headers(client))
    assert response.status_code == 401


def test_delete_card(admin_client, db_session):
    card = make_card(db_session)
    response = admin_client.delete(f"/cards/{card.id}", headers=csrf_headers(admin_client))
    assert response.status_code == 200
    assert admin_client.get(f"/cards/{card.id}").status_code == 404
