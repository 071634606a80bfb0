from starlette.status import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN


def test_empty_case(client):
    response = client.get("/api/v1/crates")
    assert response.status_code == HTTP_200_OK
    assert response.json() == {"crates": [], "meta": {"total": 0}}


def test_returns_a_paginated_crates_list(client, store):
    store.create("crate", name="rand")
    store.create(
        "version",
        crate_id="rand",
        created_at="2020-11-06T12:34:56Z",
        num="1.0.0",
        updated_at="2020-11-06T12:34:56Z",
    )
    store.create(
        "version",
        crate_id="rand",
        created_at="2020-12-25T12:34:56Z",
        num="2.0.0-beta.1",
        updated_at="2020-12-25T12:34:56Z",
    )

    response = client.get("/api/v1/crates")
    assert response.status_code == HTTP_200_OK
    assert response.json() == {
        "crates": [
            {
                "id": "rand",
                "badges": [],
                "categories": [],
                "created_at": "2010-06-16T21:30:45Z",
                "description": 'This is the description for the crate called "rand"',
                "documentation": None,
                "downloads": 0,
                "homepage": None,
                "keywords": [],
                "links": {
                    "owner_team": "/api/v1/crates/rand/owner_team",
                    "owner_user": "/api/v1/crates/rand/owner_user",
                    "reverse_dependencies": "/api/v1/crates/rand/reverse_dependencies",
                    "version_downloads": "/api/v1/crates/rand/downloads",
                    "versions": "/api/v1/crates/rand/versions",
                },
                "max_version": "2.0.0-beta.1",
                "max_stable_version": "1.0.0",
                "name": "rand",
                "newest_version": "2.0.0-beta.1",
                "repository": None,
                "updated_at": "2017-02-24T12:34:56Z",
                "versions": ["1", "2"],
            }
        ],
        "meta": {"total": 1},
    }


def test_never_returns_more_than_10_results(client, store):
    crates = store.create_list("crate", 25)
    store.create_list("version", len(crates), crate=lambda i: crates[i])

    response = client.get("/api/v1/crates")
    assert response.status_code == HTTP_200_OK

    payload = response.json()
    assert len(payload["crates"]) == 10
    assert payload["meta"]["total"] == 25


def test_supports_page_and_per_page_parameters(client, store):
    crates = store.create_list("crate", 25, name=lambda i: f"crate-{i + 1:02d}")
    store.create_list("version", len(crates), crate=lambda i: crates[i])

    response = client.get("/api/v1/crates", params={"page": 2, "per_page": 5})
    assert response.status_code == HTTP_200_OK

    payload = response.json()
    assert [c["id"] for c in payload["crates"]] == [
        "crate-06",
        "crate-07",
        "crate-08",
        "crate-09",
        "crate-10",
    ]
    assert payload["meta"]["total"] == 25


def test_page_past_the_end_is_empty(client, store):
    store.create_list("crate", 3)

    payload = client.get("/api/v1/crates", params={"page": 5}).json()
    assert payload == {"crates": [], "meta": {"total": 3}}


def test_supports_a_letter_parameter(client, store):
    for name in ["foo", "bar", "BAZ"]:
        store.create("crate", name=name)
        store.create("version", crate_id=name)

    payload = client.get("/api/v1/crates", params={"letter": "b"}).json()
    assert [c["id"] for c in payload["crates"]] == ["bar", "BAZ"]
    assert payload["meta"]["total"] == 2


def test_supports_a_q_parameter(client, store):
    for name in ["123456", "00123", "87654"]:
        store.create("crate", name=name)
        store.create("version", crate_id=name)

    payload = client.get("/api/v1/crates", params={"q": "123"}).json()
    assert [c["id"] for c in payload["crates"]] == ["123456", "00123"]
    assert payload["meta"]["total"] == 2


def test_supports_a_user_id_parameter(client, store):
    user1 = store.create("user")
    user2 = store.create("user")

    store.create("crate", name="foo")
    store.create("version", crate_id="foo")
    bar = store.create("crate", name="bar")
    store.create("crate_ownership", crate=bar, user=user1)
    store.create("version", crate_id="bar")
    baz = store.create("crate", name="baz")
    store.create("crate_ownership", crate=baz, user=user2)
    store.create("version", crate_id="baz")

    payload = client.get("/api/v1/crates", params={"user_id": user1.id}).json()
    assert [c["id"] for c in payload["crates"]] == ["bar"]
    assert payload["meta"]["total"] == 1


def test_supports_a_team_id_parameter(client, store):
    team1 = store.create("team")
    team2 = store.create("team")

    store.create("crate", name="foo")
    store.create("version", crate_id="foo")
    bar = store.create("crate", name="bar")
    store.create("crate_ownership", crate=bar, team=team1)
    store.create("version", crate_id="bar")
    baz = store.create("crate", name="baz")
    store.create("crate_ownership", crate=baz, team=team2)
    store.create("version", crate_id="baz")

    payload = client.get("/api/v1/crates", params={"team_id": team1.id}).json()
    assert [c["id"] for c in payload["crates"]] == ["bar"]
    assert payload["meta"]["total"] == 1


def test_supports_a_following_parameter(client, store, authenticate_as):
    store.create("crate", name="foo")
    store.create("version", crate_id="foo")
    store.create("crate", name="bar")
    store.create("version", crate_id="bar")

    user = store.create("user", followed_crate_ids=["bar"])
    authenticate_as(user)

    payload = client.get("/api/v1/crates", params={"following": 1}).json()
    assert [c["id"] for c in payload["crates"]] == ["bar"]
    assert payload["meta"]["total"] == 1


def test_following_parameter_requires_login(client, store):
    store.create("crate", name="foo")

    response = client.get("/api/v1/crates", params={"following": 1})
    assert response.status_code == HTTP_403_FORBIDDEN
    assert response.json() == {"errors": [{"detail": "must be logged in to perform that action"}]}


def test_filters_combine_before_pagination(client, store):
    store.create_list("crate", 12, name=lambda i: f"bar-{i:02d}")
    store.create("crate", name="foo")

    payload = client.get("/api/v1/crates", params={"letter": "b", "per_page": 5, "page": 3}).json()
    assert [c["id"] for c in payload["crates"]] == ["bar-10", "bar-11"]
    assert payload["meta"]["total"] == 12


def test_sort_alpha(client, store):
    for name in ["foo", "BAZ", "bar"]:
        store.create("crate", name=name)

    payload = client.get("/api/v1/crates", params={"sort": "alpha"}).json()
    assert [c["id"] for c in payload["crates"]] == ["bar", "BAZ", "foo"]


def test_sort_downloads(client, store):
    store.create("crate", name="few", downloads=10)
    store.create("crate", name="many", downloads=1000)
    store.create("crate", name="some", downloads=100)

    payload = client.get("/api/v1/crates", params={"sort": "downloads"}).json()
    assert [c["id"] for c in payload["crates"]] == ["many", "some", "few"]


def test_crate_without_versions(client, store):
    store.create("crate", name="rand")

    crate = client.get("/api/v1/crates").json()["crates"][0]
    assert crate["max_version"] == "0.0.0"
    assert crate["max_stable_version"] is None
    assert crate["newest_version"] == "0.0.0"
    assert crate["versions"] == []


def test_yanked_versions_do_not_count_as_max_version(client, store):
    store.create("crate", name="rand")
    store.create("version", crate_id="rand", num="1.0.0")
    store.create("version", crate_id="rand", num="1.1.0", yanked=True)

    crate = client.get("/api/v1/crates").json()["crates"][0]
    assert crate["max_version"] == "1.0.0"
    assert crate["max_stable_version"] == "1.0.0"
    assert crate["newest_version"] == "1.0.0"
    assert crate["versions"] == ["1", "2"]


def test_invalid_page_is_a_bad_request(client):
    response = client.get("/api/v1/crates", params={"page": 0})
    assert response.status_code == HTTP_400_BAD_REQUEST
    assert "errors" in response.json()


def test_per_page_above_limit_is_a_bad_request(client):
    response = client.get("/api/v1/crates", params={"per_page": 101})
    assert response.status_code == HTTP_400_BAD_REQUEST
    assert response.json() == {"errors": [{"detail": "cannot request more than 100 items"}]}
