from __future__ import annotations

import pytest

from advisor.db.session import session_scope
from advisor.seed import CATALOG, seed_catalog


@pytest.fixture(autouse=True)
def catalog(database) -> None:
    with session_scope() as session:
        seed_catalog(session)


def test_requires_authentication(client) -> None:
    assert client.get("/api/resources").status_code == 401


def test_lists_catalog(client, auth_headers) -> None:
    data = client.get("/api/resources", headers=auth_headers).json()["data"]
    assert len(data) == len(CATALOG)
    assert {"id", "title", "url", "type", "tags", "locale", "createdAt"} <= set(data[0])


def test_filters_by_type_and_tag(client, auth_headers) -> None:
    books = client.get("/api/resources", headers=auth_headers, params={"type": "book"}).json()["data"]
    assert books and all(entry["type"] == "book" for entry in books)

    tagged = client.get("/api/resources", headers=auth_headers, params={"tag": "leadership"}).json()["data"]
    assert tagged and all("leadership" in entry["tags"] for entry in tagged)


def test_pagination(client, auth_headers) -> None:
    first = client.get("/api/resources", headers=auth_headers, params={"limit": 2}).json()["data"]
    second = client.get("/api/resources", headers=auth_headers, params={"limit": 2, "offset": 2}).json()["data"]
    assert len(first) == 2 and len(second) == 2
    assert not {entry["id"] for entry in first} & {entry["id"] for entry in second}


@pytest.mark.parametrize(
    "params, code",
    [
        ({"type": "podcast"}, "INVALID_TYPE"),
        ({"limit": "0"}, "INVALID_LIMIT"),
        ({"limit": "many"}, "INVALID_LIMIT"),
        ({"offset": "-3"}, "INVALID_OFFSET"),
    ],
)
def test_rejects_bad_query(client, auth_headers, params, code) -> None:
    response = client.get("/api/resources", headers=auth_headers, params=params)
    assert response.status_code == 400
    assert response.json()["code"] == code
