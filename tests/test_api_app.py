from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog_fakes import FakeCatalog, make_document, ts
from server.api.routers.BatchRouter import batch_router
from server.api.routers.DocumentRouter import document_router
from server.api.routers.FeedRouter import feed_router
from server.api.routers.FilterRouter import filter_router
from server.api.routers.JobRouter import job_router
from server.api.routers.SelectionRouter import selection_router
from services.feed.FeedController import FeedController
from services.feed.JobStatusPoller import JobStatusPoller
from services.feed.TagCache import DARK_TEXT, LIGHT_TEXT
from shared.clients.catalog.shreddr.CatalogClientShreddr import CatalogClientShreddr
from shared.storage.SessionStorageMemory import SessionStorageMemory

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}
TAGS = [
    {"id": 5, "name": "Invoices", "color": "#334455"},
    {"id": 6, "name": "Retired", "color": "#000000", "deactivated": True},
    {"id": 7, "name": "Bank", "color": "#eeeeee"},
]


@pytest.fixture
def fake() -> FakeCatalog:
    documents = [make_document(i, ts(2023), tags=[5] if i <= 3 else []) for i in range(1, 13)]
    return FakeCatalog(documents=documents, tags=TAGS)


@pytest.fixture
def client(helper_config, fake, monkeypatch):
    monkeypatch.setenv("APP_API_KEY", API_KEY)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.config = helper_config
        app.state.logging = helper_config.get_logger()
        catalog = CatalogClientShreddr(helper_config=helper_config)
        await catalog.boot(transport=fake.transport())
        app.state.poller = JobStatusPoller(helper_config=helper_config, catalog_client=catalog)
        app.state.controller = FeedController(
            helper_config=helper_config,
            catalog_client=catalog,
            storage=SessionStorageMemory(),
            poller=app.state.poller,
        )
        await app.state.controller.start()
        yield
        await catalog.close()

    app = FastAPI(lifespan=lifespan)
    for router in (feed_router, filter_router, selection_router, batch_router, document_router, job_router):
        app.include_router(router)
    with TestClient(app) as test_client:
        yield test_client


def test_requests_without_api_key_are_rejected(client):
    assert client.get("/feed").status_code == 401
    assert client.get("/feed", headers={"X-API-Key": "wrong"}).status_code == 401


def test_feed_state_and_next_page(client):
    feed = client.get("/feed", headers=HEADERS).json()

    assert feed["items"][0] == {"kind": "year", "label": "2023"}
    assert feed["items"][1]["kind"] == "document"
    assert len(feed["items"]) == 11
    assert feed["page"] == 1
    assert feed["has_next_page"] is True
    assert feed["filters"] == []

    body = client.post("/feed/next", headers=HEADERS).json()
    assert body["outcome"] == "appended"
    assert len(body["feed"]["items"]) == 13
    assert body["feed"]["has_next_page"] is False

    body = client.post("/feed/next", headers=HEADERS).json()
    assert body["outcome"] == "exhausted"


def test_restart_with_new_order(client, fake):
    body = client.post("/feed/restart", headers=HEADERS, json={"order": 1, "query": "bill"}).json()

    assert body["outcome"] == "appended"
    assert body["feed"]["order"] == 1
    assert body["feed"]["query"] == "bill"
    assert fake.listing_requests()[-1].url.params["order"] == "1"


def test_filters(client):
    filters = client.get("/filters", headers=HEADERS).json()
    assert filters["active"] == []
    assert [t["name"] for t in filters["available"]] == ["Bank", "Invoices"]
    assert [t["text_color"] for t in filters["available"]] == [DARK_TEXT, LIGHT_TEXT]

    body = client.put("/filters/5", headers=HEADERS).json()
    assert body["outcome"] == "appended"
    assert body["feed"]["filters"] == [5]
    assert body["feed"]["page"] == 1
    assert body["feed"]["has_next_page"] is False

    assert client.put("/filters/5", headers=HEADERS).json()["outcome"] is None

    filters = client.get("/filters", headers=HEADERS).json()
    assert [t["id"] for t in filters["active"]] == [5]
    assert [t["id"] for t in filters["available"]] == [7]

    assert client.delete("/filters/5", headers=HEADERS).json()["feed"]["filters"] == []


def test_selection_and_batch(client, fake):
    assert client.post("/selection/toggle/1", headers=HEADERS).status_code == 409

    client.post("/selection/enter", headers=HEADERS)
    assert client.post("/selection/toggle/99", headers=HEADERS).status_code == 409
    selection = client.post("/selection/toggle/4", headers=HEADERS).json()
    assert selection == {"active": True, "document_ids": [4]}

    report = client.post("/batch", headers=HEADERS, json={"kind": "add_tag", "tag_id": 7}).json()
    assert report["succeeded"] == [4]
    assert report["failed"] == []
    assert report["kind"] == "add_tag"
    assert fake.document(4)["tags"] == [7]

    assert client.post("/batch", headers=HEADERS, json={"kind": "remove_tag"}).status_code == 422

    selection = client.post("/selection/exit", headers=HEADERS).json()
    assert selection == {"active": False, "document_ids": []}


def test_select_all_and_partial_delete(client, fake):
    selection = client.post("/selection/all", headers=HEADERS, json={"document_ids": [1, 2, 500]}).json()
    assert selection == {"active": True, "document_ids": [1, 2]}

    fake.fail("DELETE", "/documents/2", status=500)
    report = client.post("/batch", headers=HEADERS, json={"kind": "delete"}).json()
    assert report["succeeded"] == [1]
    assert report["failed"] == [2]
    assert report["outcomes"][1]["status_code"] == 500

    feed = client.get("/feed", headers=HEADERS).json()
    ids = [item["document"]["id"] for item in feed["items"] if item["kind"] == "document"]
    assert 1 not in ids and 2 in ids
    assert client.get("/selection", headers=HEADERS).json()["document_ids"] == [2]

    selection = client.post("/selection/all", headers=HEADERS, json={}).json()
    assert len(selection["document_ids"]) == 9
    assert client.delete("/selection", headers=HEADERS).json()["document_ids"] == []


def test_job_status(client, fake):
    assert client.get("/job", headers=HEADERS).json() == {"state": "idle", "text": "", "queue_length": 0}

    fake.job = {"Busy": {"current": "ocr", "progress": 5, "queue": 1}}
    # the last notice is served until the poller runs again
    assert client.get("/job", headers=HEADERS).json()["state"] == "idle"


def test_job_status_falls_back_to_idle(client, fake):
    fake.fail("GET", "/api/job", status=500)
    assert client.get("/job", headers=HEADERS).json()["state"] == "idle"


def test_application_registers_all_routes():
    from server.api.api_app import app

    paths = set(app.openapi()["paths"])
    assert {
        "/feed", "/feed/next", "/filters/{tag_id}", "/selection/all", "/batch", "/documents/{document_id}", "/job"
    } <= paths


def test_update_document_metadata(client, fake):
    body = client.patch(
        "/documents/3", headers=HEADERS, json={"title": "Electricity bill", "extracted": {"doc_date": ts(2019)}}
    ).json()

    assert body["title"] == "Electricity bill"
    assert body["doc_date"] == ts(2019)
    assert fake.document(3)["title"] == "Electricity bill"
    feed = client.get("/feed", headers=HEADERS).json()
    titles = {item["document"]["id"]: item["document"]["title"] for item in feed["items"] if item["kind"] == "document"}
    assert titles[3] == "Electricity bill"

    assert client.patch("/documents/500", headers=HEADERS, json={"title": "x"}).status_code == 404
    fake.fail("PATCH", "/documents/3", status=500)
    assert client.patch("/documents/3", headers=HEADERS, json={"title": "y"}).status_code == 502
