import pytest

from hopebot.models.resource import DEFAULT_ICON_SYMBOL, Resource, ResourceIcon, icon_symbol
from hopebot.routers import resources as resources_router
from hopebot.services.resources import DEFAULT_RESOURCES, seed_default_resources


def test_resources_are_public_and_seeded(client):
    resp = client.get("/api/resources")
    assert resp.status_code == 200
    body = resp.json()
    assert [r["title"] for r in body] == [r["title"] for r in DEFAULT_RESOURCES]
    assert body[1]["icon"] == "first-aid-kit-line"
    assert body[1]["url"] == "/resources/crisis-hotlines"
    assert all(r["symbol"] for r in body)


def test_seeding_is_idempotent(db):
    assert seed_default_resources(db) == len(DEFAULT_RESOURCES)
    assert seed_default_resources(db) == 0
    assert db.query(Resource).count() == len(DEFAULT_RESOURCES)


def test_seeding_skips_when_rows_exist(db):
    db.add(Resource(title="Custom", description="d", icon="article-line", url="/resources/custom"))
    db.commit()
    assert seed_default_resources(db) == 0
    assert db.query(Resource).count() == 1


def test_startup_twice_keeps_one_copy(client, db):
    from hopebot.main import on_startup

    on_startup()
    assert db.query(Resource).count() == len(DEFAULT_RESOURCES)


@pytest.mark.parametrize("tag", [icon.value for icon in ResourceIcon])
def test_known_icons_have_symbols(tag):
    assert icon_symbol(tag) != DEFAULT_ICON_SYMBOL


@pytest.mark.parametrize("tag", ["rocket-line", "", None])
def test_unknown_icon_gets_default(tag):
    assert icon_symbol(tag) == DEFAULT_ICON_SYMBOL


def test_recommend_defaults_without_model(client, logged_in):
    resp = client.post("/api/resources/recommend", json={"content": "I'm stressed"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["categories"] == ["coping-strategies", "self-care"]
    assert [r["url"] for r in body["resources"]] == ["/resources/coping-strategies", "/resources/self-care"]


def test_recommend_uses_model_categories(client, logged_in, monkeypatch):
    monkeypatch.setattr(resources_router, "recommend_resources", lambda text: ["crisis-hotlines"])
    body = client.post("/api/resources/recommend", json={"content": "I need help now"}).json()
    assert body["categories"] == ["crisis-hotlines"]
    assert body["resources"][0]["title"] == "Crisis Support Hotlines"


def test_recommend_requires_session_and_content(client, logged_in):
    assert client.post("/api/resources/recommend", json={"content": "  "}).status_code == 400
    client.post("/api/auth/logout")
    assert client.post("/api/resources/recommend", json={"content": "x"}).status_code == 401


def test_health(client):
    body = client.get("/api/health").json()
    assert body["ok"] is True
    assert body["features"]["language_model"] is False
    assert body["stats"] == {"resources": len(DEFAULT_RESOURCES)}
