"""Builders for Notion API payloads and an in-memory GitHub repository."""

import hashlib
from unittest.mock import Mock

import httpx
from notion_client import Client

from notion_publish.errors import RepositoryError
from notion_publish.github.client import Lookup, LookupStatus
from notion_publish.notion import NotionClient


def rich_text(text, href=None, **annotations):
    """One Notion rich-text item."""
    flags = {"bold": False, "italic": False, "strikethrough": False, "underline": False, "code": False}
    flags.update(annotations)
    return {
        "type": "text",
        "text": {"content": text, "link": {"url": href} if href else None},
        "plain_text": text,
        "href": href,
        "annotations": {**flags, "color": "default"},
    }


def block(block_type, *texts, **extra):
    """A Notion block whose payload holds rich_text built from ``texts``."""
    return {
        "object": "block",
        "id": f"{block_type}-block",
        "type": block_type,
        "has_children": False,
        block_type: {"rich_text": [rich_text(t) for t in texts], **extra},
    }


def page_row(page_id, title, edited="2024-03-05T10:00:00.000Z"):
    """A database query result row with a title property named "Name"."""
    return {
        "object": "page",
        "id": page_id,
        "last_edited_time": edited,
        "url": f"https://www.notion.so/{page_id.replace('-', '')}",
        "properties": {
            "Tags": {"id": "t1", "type": "multi_select", "multi_select": []},
            "Name": {"id": "title", "type": "title", "title": [rich_text(title)] if title else []},
        },
    }


def notion_mock(rows=(), blocks=None):
    """Mock NotionClient: ``blocks`` maps page ID to a block list or an exception."""
    blocks = blocks or {}
    client = Mock()
    client.query_database.return_value = list(rows)

    def get_blocks(page_id):
        result = blocks.get(page_id, [])
        if isinstance(result, Exception):
            raise result
        return result

    client.get_blocks.side_effect = get_blocks
    client.get_page.side_effect = lambda page_id: next(r for r in rows if r["id"] == page_id)
    return client


def notion_over_http(rows, blocks=None):
    """NotionClient on the real SDK, answering from an httpx mock transport.

    ``rows`` and the values of ``blocks`` (keyed by page ID) may instead be
    exceptions, which the transport raises for that request.
    """
    blocks = blocks or {}

    def handler(request):
        path = request.url.path
        if path.endswith("/query"):
            if isinstance(rows, Exception):
                raise rows
            return httpx.Response(200, json={"object": "list", "results": rows, "has_more": False, "next_cursor": None})
        if path.startswith("/v1/blocks/"):
            result = blocks.get(path.split("/")[3], [])
            if isinstance(result, Exception):
                raise result
            return httpx.Response(200, json={"object": "list", "results": result, "has_more": False, "next_cursor": None})
        return httpx.Response(404, json={"object": "error", "status": 404, "code": "object_not_found", "message": "nope"})

    sdk = Client(auth="secret_test", client=httpx.Client(transport=httpx.MockTransport(handler)))
    return NotionClient("secret_test", client=sdk)


def _sha(prefix, value):
    return prefix + hashlib.sha1(repr(value).encode()).hexdigest()[:10]


class FakeGitHub:
    """In-memory stand-in for GitHubClient.

    Trees are dicts of path to content. ``fail_on`` names methods that
    raise RepositoryError when called.
    """

    def __init__(self, files=None, fail_on=(), repository_status=LookupStatus.FOUND):
        self.owner = "acme"
        self.repo = "site"
        self.branch = "main"
        self.fail_on = set(fail_on)
        self.calls = []
        self.puts = []
        self.repository_status = repository_status

        base_tree = dict(files or {})
        self.trees = {"tree0": base_tree}
        self.commits = {"commit0": {"sha": "commit0", "tree": {"sha": "tree0"}, "parents": [], "message": "init"}}
        self.ref = "commit0"

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise RepositoryError(f"{name} failed", status=500, transient=True)

    @property
    def head_files(self):
        return self.trees[self.commits[self.ref]["tree"]["sha"]]

    def get_repository(self):
        self.calls.append("get_repository")
        if self.repository_status is LookupStatus.FOUND:
            return Lookup(LookupStatus.FOUND, {"full_name": "acme/site"})
        if self.repository_status is LookupStatus.NOT_FOUND:
            return Lookup(LookupStatus.NOT_FOUND)
        return Lookup(self.repository_status, error=RepositoryError("boom", status=500, transient=True))

    def get_ref(self):
        self._call("get_ref")
        return self.ref

    def get_commit(self, sha):
        self._call("get_commit")
        return self.commits[sha]

    def create_tree(self, entries, base_tree):
        self._call("create_tree")
        tree = dict(self.trees[base_tree])
        tree.update(entries)
        sha = _sha("tree", sorted(tree.items()))
        self.trees[sha] = tree
        return sha

    def create_commit(self, message, tree, parents):
        self._call("create_commit")
        sha = _sha("commit", (message, tree, tuple(parents)))
        self.commits[sha] = {"sha": sha, "tree": {"sha": tree}, "parents": parents, "message": message}
        return sha

    def update_ref(self, sha):
        self._call("update_ref")
        self.ref = sha

    def get_content(self, path):
        self.calls.append("get_content")
        if "get_content" in self.fail_on:
            return Lookup(LookupStatus.PERMANENT_ERROR, error=RepositoryError("forbidden", status=403))
        if path not in self.head_files:
            return Lookup(LookupStatus.NOT_FOUND)
        content = self.head_files[path]
        return Lookup(LookupStatus.FOUND, {"path": path, "sha": _sha("blob", content), "text": content})

    def put_content(self, path, content, message, sha=None):
        self._call("put_content")
        self.puts.append({"path": path, "content": content, "message": message, "sha": sha})
        tree_sha = self.create_tree([(path, content)], self.commits[self.ref]["tree"]["sha"])
        self.calls.pop()
        commit = self.create_commit(message, tree_sha, [self.ref])
        self.calls.pop()
        self.ref = commit
        return {"content": {"path": path}, "commit": {"sha": commit}}
