"""
Client wiring for the callable functions.

Each client is built once per instance from Settings and reused across
requests; the clients themselves hold no per-request state.
"""

from __future__ import annotations

from data_store.document_store import (
    DocumentStore,
    GitHubDocumentStore,
    InMemoryDocumentStore,
)
from image_search.search_client import GoogleImageSearchClient
from models.gemini import GeminiClient
from shared.config import get_settings

_document_store: DocumentStore | None = None
_gemini_client: GeminiClient | None = None
_image_search_client: GoogleImageSearchClient | None = None


def get_document_store() -> DocumentStore:
    """
    Return a singleton document store. In-memory backends keep region data for
    the lifetime of the instance, which is what local development wants.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _document_store = InMemoryDocumentStore()
    else:
        _document_store = GitHubDocumentStore(
            token=settings.github_token,
            owner=settings.github_owner,
            repo=settings.github_repo,
            branch=settings.github_branch,
            api_url=settings.github_api_url,
            timeout=settings.request_timeout_sec,
        )
    return _document_store


def get_gemini_client() -> GeminiClient:
    global _gemini_client
    if _gemini_client:
        return _gemini_client

    settings = get_settings()
    _gemini_client = GeminiClient(api_key=settings.gemini_key, model=settings.gemini_model)
    return _gemini_client


def get_image_search_client() -> GoogleImageSearchClient:
    global _image_search_client
    if _image_search_client:
        return _image_search_client

    settings = get_settings()
    _image_search_client = GoogleImageSearchClient(
        api_key=settings.google_search_key,
        engine_id=settings.google_search_engine_id,
        timeout=settings.request_timeout_sec,
    )
    return _image_search_client
