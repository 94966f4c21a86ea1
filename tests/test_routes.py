import pytest
from fastapi.testclient import TestClient

from string_analyzer.main import create_app
from string_analyzer.utils import compute_sha256


def create(client, value):
    return client.post("/strings", json={"value": value})


class TestCreate:

    def test_create_returns_full_record(self, client):
        resp = create(client, "A man a plan a canal Panama")
        assert resp.status_code == 201
        body = resp.json()
        assert body["string"] == "A man a plan a canal Panama"
        assert body["length"] == 27
        assert body["isPalindrome"] is True
        assert body["wordCount"] == 7
        assert body["sha256"] == compute_sha256("A man a plan a canal Panama")
        assert set(body) == {
            "string", "length", "isPalindrome", "wordCount",
            "uniqueCharacters", "characterFrequency", "sha256",
        }

    def test_create_twice_conflicts(self, client, store):
        assert create(client, "hello").status_code == 201
        resp = create(client, "hello")
        assert resp.status_code == 409
        assert resp.json() == {"error": "String already exists"}
        assert len(store) == 1

    def test_delete_then_recreate(self, client):
        assert create(client, "hello").status_code == 201
        assert client.delete("/strings/hello").status_code == 204
        assert create(client, "hello").status_code == 201

    def test_empty_string_is_accepted(self, client):
        resp = create(client, "")
        assert resp.status_code == 201
        assert resp.json()["wordCount"] == 0

    @pytest.mark.parametrize("payload", [{}, {"other": "x"}, [], ["value"], "value"])
    def test_missing_value(self, client, store, payload):
        resp = client.post("/strings", json=payload)
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert len(store) == 0

    def test_body_that_is_not_json(self, client):
        resp = client.post(
            "/strings", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400

    def test_empty_body(self, client):
        assert client.post("/strings").status_code == 400

    def test_value_that_is_not_valid_unicode(self, client, store):
        resp = client.post(
            "/strings",
            content=b'{"value": "a\\ud800b"}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422
        assert resp.json() == {"error": "'value' must be valid Unicode text"}
        assert len(store) == 0

    @pytest.mark.parametrize("value", [123, None, True, ["a"], {"a": 1}])
    def test_value_must_be_a_string(self, client, store, value):
        resp = create(client, value)
        assert resp.status_code == 422
        assert resp.json() == {"error": "'value' must be a string"}
        assert len(store) == 0


class TestGetAndDelete:

    def test_round_trip(self, client):
        created = create(client, "Hello, World!")
        fetched = client.get("/strings/Hello, World!")
        assert fetched.status_code == 200
        assert fetched.content == created.content

    def test_lookup_is_exact(self, client):
        create(client, "Hello")
        assert client.get("/strings/hello").status_code == 404

    def test_value_with_slash(self, client):
        create(client, "a/b")
        assert client.get("/strings/a/b").json()["string"] == "a/b"
        assert client.delete("/strings/a/b").status_code == 204

    def test_trailing_slash_looks_up_the_empty_string(self, client):
        assert client.get("/strings/").status_code == 404
        create(client, "")
        assert client.get("/strings/").json()["string"] == ""
        assert client.delete("/strings/").status_code == 204

    def test_get_missing(self, client):
        resp = client.get("/strings/missing")
        assert resp.status_code == 404
        assert resp.json() == {"error": "String not found"}

    def test_delete(self, client, store):
        create(client, "hello")
        resp = client.delete("/strings/hello")
        assert resp.status_code == 204
        assert resp.content == b""
        assert "hello" not in store
        assert client.get("/strings/hello").status_code == 404

    def test_delete_missing(self, client, store):
        create(client, "hello")
        resp = client.delete("/strings/world")
        assert resp.status_code == 404
        assert resp.json() == {"error": "String not found"}
        assert len(store) == 1


class TestList:

    def test_list_all(self, client, seeded_store):
        resp = client.get("/strings")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 3
        assert [r["string"] for r in body["data"]] == ["abc", "level", "racecar"]
        assert "filters_applied" not in body

    def test_empty_store(self, client):
        assert client.get("/strings").json() == {"count": 0, "data": []}

    def test_min_and_max_length(self, client, seeded_store):
        body = client.get("/strings", params={"minLength": 4, "maxLength": 6}).json()
        assert body["count"] == 1
        assert body["data"][0]["string"] == "level"
        assert body["filters_applied"] == {"minLength": 4, "maxLength": 6}

    def test_combined_filters(self, client, seeded_store):
        body = client.get(
            "/strings", params={"isPalindrome": "true", "contains": "car", "wordCount": 1}
        ).json()
        assert [r["string"] for r in body["data"]] == ["racecar"]

    def test_invalid_boolean(self, client, seeded_store):
        resp = client.get("/strings", params={"isPalindrome": "yes"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "isPalindrome must be 'true' or 'false'"}

    def test_empty_number_is_rejected(self, client, seeded_store):
        resp = client.get("/strings?minLength=")
        assert resp.status_code == 400
        assert resp.json() == {"error": "minLength must be a number"}

    @pytest.mark.parametrize("name", ["minLength", "maxLength", "wordCount"])
    def test_invalid_number_names_field(self, client, name):
        resp = client.get("/strings", params={name: "ten"})
        assert resp.status_code == 400
        assert resp.json() == {"error": f"{name} must be a number"}


class TestNaturalLanguageRoute:

    def test_longer_than_is_strict(self, client, seeded_store):
        body = client.get("/strings/query", params={"q": "strings longer than 5"}).json()
        assert [r["string"] for r in body["data"]] == ["racecar"]
        assert body["count"] == 1
        assert body["interpreted_query"] == {
            "original": "strings longer than 5",
            "parsed_filters": {"field": "length", "operator": "gt", "value": 5},
        }

        structured = client.get("/strings", params={"minLength": 6}).json()
        assert structured["data"] == body["data"]

    def test_palindromes(self, client, seeded_store):
        body = client.get("/strings/query", params={"q": "find palindromes"}).json()
        assert [r["string"] for r in body["data"]] == ["level", "racecar"]

    def test_contains_is_case_insensitive(self, client, seeded_store):
        body = client.get("/strings/query", params={"q": 'contains "LEV"'}).json()
        assert [r["string"] for r in body["data"]] == ["level"]

    def test_alternate_path(self, client, seeded_store):
        resp = client.get("/strings/filter-by-natural-language", params={"q": "single word"})
        assert resp.status_code == 200
        assert resp.json()["count"] == 3

    def test_uninterpretable(self, client):
        resp = client.get("/strings/query", params={"q": "gibberish xyz"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Could not interpret query"}

    @pytest.mark.parametrize("params", [{}, {"q": ""}])
    def test_missing_query(self, client, params):
        resp = client.get("/strings/query", params=params)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing query parameter 'q'"}

    def test_invalid_number(self, client):
        resp = client.get("/strings/query", params={"q": "longer than " + "9" * 400})
        assert resp.status_code == 422
        assert resp.json() == {"error": "Invalid number in query"}


class TestService:

    def test_health(self, client, seeded_store):
        assert client.get("/health").json() == {"status": "healthy", "stored": 3}

    def test_root(self, client):
        body = client.get("/").json()
        assert body["message"] == "String Analyzer Service"
        assert "POST /strings" in body["endpoints"]

    def test_unknown_route_uses_error_payload(self, client):
        resp = client.get("/nothing-here")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_wrong_method_uses_error_payload(self, client):
        resp = client.put("/strings")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method Not Allowed"}

    def test_cors_allows_any_origin(self, client):
        resp = client.get("/strings", headers={"Origin": "https://example.com"})
        assert resp.headers["access-control-allow-origin"] in ("*", "https://example.com")

    def test_store_is_cleared_on_shutdown(self, store):
        with TestClient(create_app(store)) as client:
            create(client, "hello")
            assert len(store) == 1
        assert len(store) == 0
