"""
Document store abstraction for region JSON files kept in a GitHub repository,
plus an in-memory implementation for tests and local runs.

Every write must carry the revision token (the blob sha) returned by the fetch
it is based on. A stale token is rejected with DocumentConflictError; the
clients never retry on their own.
"""

from __future__ import annotations

import base64
import copy
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Protocol

import requests

from shared.types import StoredDocument

logger = logging.getLogger(__name__)

GITHUB_ACCEPT_HEADER = "application/vnd.github.v3+json"


class DocumentStoreError(Exception):
    """Transport or upstream failure while talking to the document store."""


class DocumentNotFoundError(DocumentStoreError):
    pass


class DocumentConflictError(DocumentStoreError):
    """The supplied revision token no longer matches the stored document."""


class DocumentStore(Protocol):
    """Defines the operations the curation workflow needs from the JSON store."""

    def fetch(self, path: str) -> StoredDocument:
        ...

    def write(self, path: str, content: dict, sha: str, message: str) -> None:
        ...

    def list_files(self, directory: str) -> list[str]:
        ...


@dataclass
class InMemoryDocumentStore:
    """Test double with the same revision semantics as the GitHub store."""

    documents: dict = field(default_factory=dict)
    commits: list = field(default_factory=list)

    def put(self, path: str, content: dict) -> str:
        """Seeds a document, returning its new revision token."""
        sha = uuid.uuid4().hex
        self.documents[path] = (copy.deepcopy(content), sha)
        return sha

    def fetch(self, path: str) -> StoredDocument:
        stored = self.documents.get(path)
        if stored is None:
            raise DocumentNotFoundError(path)
        content, sha = stored
        return StoredDocument(content=copy.deepcopy(content), sha=sha)

    def write(self, path: str, content: dict, sha: str, message: str) -> None:
        stored = self.documents.get(path)
        current_sha = stored[1] if stored else None
        if sha != current_sha:
            raise DocumentConflictError(
                f"{path} is at {current_sha} but the write expected {sha}"
            )
        self.put(path, content)
        self.commits.append((path, message))

    def list_files(self, directory: str) -> list[str]:
        prefix = directory.rstrip("/") + "/"
        return sorted(
            path[len(prefix):]
            for path in self.documents
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        )


@dataclass
class GitHubDocumentStore:
    """
    Reads and writes JSON files through the GitHub contents API.
    """

    token: str | None
    owner: str | None
    repo: str | None
    branch: str = "main"
    api_url: str = "https://api.github.com"
    timeout: int = 30

    def _contents_url(self, path: str) -> str:
        if not (self.token and self.owner and self.repo):
            raise DocumentStoreError("GitHub repository settings are not configured.")
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{path}"

    def _headers(self) -> dict:
        return {
            "Authorization": f"token {self.token}",
            "Accept": GITHUB_ACCEPT_HEADER,
        }

    def _get(self, path: str) -> requests.Response:
        url = self._contents_url(path)
        try:
            response = requests.get(
                url,
                headers=self._headers(),
                params={"ref": self.branch},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DocumentStoreError(f"Request for {path} failed: {e}") from e

        if response.status_code == 404:
            raise DocumentNotFoundError(path)
        if not response.ok:
            raise DocumentStoreError(
                f"Fetching {path} failed with status {response.status_code}"
            )
        return response

    def fetch(self, path: str) -> StoredDocument:
        data = self._get(path).json()
        try:
            raw = base64.b64decode(data["content"]).decode("utf-8")
            content = json.loads(raw)
        except (KeyError, ValueError) as e:
            raise DocumentStoreError(f"{path} does not hold a JSON document: {e}") from e
        return StoredDocument(content=content, sha=data["sha"])

    def write(self, path: str, content: dict, sha: str, message: str) -> None:
        url = self._contents_url(path)
        encoded = base64.b64encode(
            json.dumps(content, indent=2, ensure_ascii=False).encode("utf-8")
        ).decode("ascii")
        body = {
            "message": message,
            "content": encoded,
            "sha": sha,
            "branch": self.branch,
        }
        headers = {**self._headers(), "Content-Type": "application/json"}
        try:
            response = requests.put(
                url, headers=headers, json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise DocumentStoreError(f"Updating {path} failed: {e}") from e

        if response.ok:
            return
        if _is_conflict(response):
            raise DocumentConflictError(f"{path} changed since revision {sha}")
        logger.error(
            "GitHub update of %s failed (%s): %s",
            path,
            response.status_code,
            response.text,
        )
        raise DocumentStoreError(
            f"Updating {path} failed with status {response.status_code}"
        )

    def list_files(self, directory: str) -> list[str]:
        entries = self._get(directory).json()
        if not isinstance(entries, list):
            raise DocumentStoreError(f"{directory} is not a directory")
        return [entry["name"] for entry in entries if entry.get("type", "file") == "file"]


def _is_conflict(response: requests.Response) -> bool:
    # GitHub answers a stale sha with 409, and some paths with a 422 "does not match".
    # A 422 for a missing sha is a malformed request, not a conflict.
    if response.status_code == 409:
        return True
    if response.status_code == 422:
        try:
            message = response.json().get("message", "")
        except ValueError:
            return False
        return "does not match" in message.lower()
    return False
