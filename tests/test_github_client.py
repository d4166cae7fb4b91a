"""Unit tests for the GitHub REST client."""

import base64
from unittest.mock import Mock

import pytest
import requests

from notion_publish.errors import RepositoryError
from notion_publish.github import GitHubClient, Lookup, LookupStatus


def response(status=200, body=None):
    resp = Mock()
    resp.status_code = status
    resp.content = b"{}" if body is not None else b""
    resp.json.return_value = body
    resp.text = ""
    return resp


def make_client(*responses):
    session = Mock()
    session.headers = {}
    session.request.side_effect = list(responses)
    return GitHubClient("tok", "acme", "site", "main", session=session), session


class TestRequests:
    """Request construction and error mapping."""

    def test_auth_headers_are_set(self):
        _, session = make_client()
        assert session.headers["Authorization"] == "Bearer tok"
        assert session.headers["Accept"] == "application/vnd.github+json"

    def test_get_ref(self):
        client, session = make_client(response(200, {"object": {"sha": "abc"}}))

        assert client.get_ref() == "abc"
        method, url = session.request.call_args.args
        assert method == "GET"
        assert url == "https://api.github.com/repos/acme/site/git/ref/heads/main"

    def test_create_tree_sends_content_with_base_tree(self):
        client, session = make_client(response(201, {"sha": "tree1"}))

        sha = client.create_tree([("content/a.mdx", "A"), ("content/b.mdx", "B")], "base")

        assert sha == "tree1"
        payload = session.request.call_args.kwargs["json"]
        assert payload["base_tree"] == "base"
        assert payload["tree"][0] == {"path": "content/a.mdx", "mode": "100644", "type": "blob", "content": "A"}
        assert len(payload["tree"]) == 2

    def test_create_commit(self):
        client, session = make_client(response(201, {"sha": "c1"}))

        assert client.create_commit("msg", "tree1", ["c0"]) == "c1"
        assert session.request.call_args.kwargs["json"] == {"message": "msg", "tree": "tree1", "parents": ["c0"]}

    def test_update_ref_is_not_forced(self):
        client, session = make_client(response(200, {"object": {"sha": "c1"}}))

        client.update_ref("c1")

        method, url = session.request.call_args.args
        assert method == "PATCH"
        assert url.endswith("/repos/acme/site/git/refs/heads/main")
        assert session.request.call_args.kwargs["json"] == {"sha": "c1", "force": False}

    def test_http_error_raises_repository_error(self):
        client, _ = make_client(response(422, {"message": "Update is not a fast forward"}))

        with pytest.raises(RepositoryError) as exc_info:
            client.update_ref("c1")

        assert exc_info.value.status == 422
        assert exc_info.value.transient is False
        assert "not a fast forward" in str(exc_info.value)

    def test_server_error_is_transient(self):
        client, _ = make_client(response(502, None))
        with pytest.raises(RepositoryError) as exc_info:
            client.get_ref()
        assert exc_info.value.transient is True

    def test_connection_error_is_transient(self):
        client, _ = make_client(requests.ConnectionError("refused"))
        with pytest.raises(RepositoryError) as exc_info:
            client.get_ref()
        assert exc_info.value.transient is True
        assert exc_info.value.status is None


class TestLookups:
    """Lookups separate a miss from real failures."""

    def test_get_content_found_decodes_text(self):
        encoded = base64.b64encode("héllo\n".encode()).decode()
        client, session = make_client(response(200, {"sha": "blob1", "encoding": "base64", "content": encoded}))

        lookup = client.get_content("content/posts/a b.mdx")

        assert lookup.status is LookupStatus.FOUND
        assert lookup.value["sha"] == "blob1"
        assert lookup.value["text"] == "héllo\n"
        _, url = session.request.call_args.args
        assert url.endswith("/contents/content/posts/a%20b.mdx")
        assert session.request.call_args.kwargs["params"] == {"ref": "main"}

    def test_get_content_binary_file_is_still_found(self):
        encoded = base64.b64encode(b"\x89PNG\r\n\x1a\n\xff\xfe").decode()
        client, _ = make_client(response(200, {"sha": "blob2", "encoding": "base64", "content": encoded}))

        lookup = client.get_content("content/posts/image.mdx")

        assert lookup.status is LookupStatus.FOUND
        assert lookup.value["sha"] == "blob2"
        assert lookup.value["text"] is None
        assert lookup.value["content"] == encoded

    def test_get_content_404_is_not_found(self):
        client, _ = make_client(response(404, {"message": "Not Found"}))
        lookup = client.get_content("missing.mdx")
        assert lookup.status is LookupStatus.NOT_FOUND
        assert lookup.unwrap() is None

    def test_get_content_403_is_permanent_error(self):
        client, _ = make_client(response(403, {"message": "Forbidden"}))
        lookup = client.get_content("secret.mdx")
        assert lookup.status is LookupStatus.PERMANENT_ERROR
        with pytest.raises(RepositoryError):
            lookup.unwrap()

    def test_get_content_rate_limit_is_transient_error(self):
        client, _ = make_client(response(429, {"message": "slow down"}))
        assert client.get_content("a.mdx").status is LookupStatus.TRANSIENT_ERROR

    def test_get_repository_not_found(self):
        client, _ = make_client(response(404, {"message": "Not Found"}))
        assert client.get_repository().status is LookupStatus.NOT_FOUND

    def test_lookup_found_property(self):
        assert Lookup(LookupStatus.FOUND, {}).found
        assert not Lookup(LookupStatus.NOT_FOUND).found


class TestPutContent:

    def test_create_encodes_content_and_omits_sha(self):
        client, session = make_client(response(201, {"content": {}}))

        client.put_content("docs/a.mdx", "ünicode body", "Add a")

        method, url = session.request.call_args.args
        payload = session.request.call_args.kwargs["json"]
        assert method == "PUT"
        assert url.endswith("/repos/acme/site/contents/docs/a.mdx")
        assert base64.b64decode(payload["content"]).decode("utf-8") == "ünicode body"
        assert payload["branch"] == "main"
        assert payload["message"] == "Add a"
        assert "sha" not in payload

    def test_update_includes_sha(self):
        client, session = make_client(response(200, {"content": {}}))
        client.put_content("docs/a.mdx", "x", "Update a", sha="blob1")
        assert session.request.call_args.kwargs["json"]["sha"] == "blob1"
