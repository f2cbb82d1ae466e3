"""
Document store adapters for the Courtside rotation tracker.

Documents are JSON objects addressed by slash-separated paths such as
``users/u1/matches/m1``. A collection path lists the documents directly below
it (``users/u1/matches``). Three adapters share the :class:`DocumentStore`
interface: an in-memory store for tests and demos, a JSON-file store that
keeps one file per document, and an HTTP store for a REST document API.
"""
import copy
import json
import logging
import os
from typing import Any, Dict, List, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DocumentStoreError(Exception):
    """Raised when a read or write against the store fails."""
    pass


def document_path(*segments: str) -> str:
    """
    Join path segments into a document path.

    Each segment must be a single non-empty path component: no ``/`` and
    not ``.`` or ``..``.

    Raises:
        ValueError: If any segment is not a plain component.
    """
    cleaned = [str(segment) for segment in segments]
    if not cleaned or any(not _is_component(segment) for segment in cleaned):
        raise ValueError(f"Invalid document path segments: {segments!r}")
    return "/".join(cleaned)


def _is_component(segment: str) -> bool:
    if not segment or segment in (".", ".."):
        return False
    return "/" not in segment and "\\" not in segment


def _split_path(path: str) -> List[str]:
    parts = path.strip("/").split("/")
    if any(not _is_component(part) for part in parts):
        raise ValueError(f"Invalid document path: {path!r}")
    return parts


class DocumentStore(Protocol):
    """Interface every document store adapter implements."""

    def get_document(self, path: str) -> Optional[Document]:
        """Return the document at ``path`` or None when absent."""
        ...

    def list_collection(self, path: str) -> List[Document]:
        """Return the documents directly inside collection ``path``."""
        ...

    def set_document(self, path: str, data: Document, merge: bool = False) -> None:
        """Write ``data`` at ``path``; with ``merge`` keep fields not in ``data``."""
        ...


class InMemoryDocumentStore:
    """Dictionary-backed store. Returned documents are copies."""

    def __init__(self, documents: Optional[Dict[str, Document]] = None):
        self._documents: Dict[str, Document] = {}
        for path, data in (documents or {}).items():
            self.set_document(path, data)

    def get_document(self, path: str) -> Optional[Document]:
        data = self._documents.get(path.strip("/"))
        return copy.deepcopy(data) if data is not None else None

    def list_collection(self, path: str) -> List[Document]:
        prefix = path.strip("/") + "/"
        return [
            copy.deepcopy(data)
            for doc_path, data in sorted(self._documents.items())
            if doc_path.startswith(prefix) and "/" not in doc_path[len(prefix):]
        ]

    def set_document(self, path: str, data: Document, merge: bool = False) -> None:
        key = path.strip("/")
        if merge and key in self._documents:
            merged = dict(self._documents[key])
            merged.update(copy.deepcopy(data))
            self._documents[key] = merged
        else:
            self._documents[key] = copy.deepcopy(data)


class JsonFileDocumentStore:
    """
    Store each document as ``<root>/<path>.json``.

    A document and its sub-collections coexist on disk: ``matches/m1.json``
    holds the match and ``matches/m1/`` holds its plans.
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir

    def _file_for(self, path: str) -> str:
        return os.path.join(self.root_dir, *_split_path(path)) + ".json"

    def get_document(self, path: str) -> Optional[Document]:
        file_path = self._file_for(path)
        if not os.path.exists(file_path):
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise DocumentStoreError(f"Could not read {path}: {exc}") from exc

    def list_collection(self, path: str) -> List[Document]:
        directory = os.path.join(self.root_dir, *_split_path(path))
        if not os.path.isdir(directory):
            return []
        documents = []
        for filename in sorted(os.listdir(directory)):
            if not filename.endswith(".json"):
                continue
            document = self.get_document(f"{path.strip('/')}/{filename[:-len('.json')]}")
            if document is not None:
                documents.append(document)
        return documents

    def set_document(self, path: str, data: Document, merge: bool = False) -> None:
        file_path = self._file_for(path)
        payload = dict(data)
        if merge:
            existing = self.get_document(path)
            if existing is not None:
                existing.update(payload)
                payload = existing

        directory = os.path.dirname(file_path)
        try:
            if directory and not os.path.exists(directory):
                os.makedirs(directory)
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except OSError as exc:
            raise DocumentStoreError(f"Could not write {path}: {exc}") from exc


class HttpDocumentStore:
    """
    Client for a REST document API.

    ``GET {base}/documents/{path}`` returns a document (404 when absent) or,
    for a collection path, ``{"documents": [...]}``. Writes use ``PUT`` to
    replace and ``PATCH`` to merge.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        auth_token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        if auth_token:
            self.session.headers["Authorization"] = f"Bearer {auth_token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/documents/{path.strip('/')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise DocumentStoreError(f"{method} {path} failed: {exc}") from exc
        if response.status_code == 404:
            return response
        if response.status_code >= 400:
            raise DocumentStoreError(
                f"{method} {path} failed with status {response.status_code}: {response.text}"
            )
        return response

    def _json(self, response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise DocumentStoreError(f"GET {path} returned a body that is not JSON") from exc

    def get_document(self, path: str) -> Optional[Document]:
        response = self._request("GET", path)
        if response.status_code == 404:
            return None
        return self._json(response, path)

    def list_collection(self, path: str) -> List[Document]:
        response = self._request("GET", path)
        if response.status_code == 404:
            return []
        return list(self._json(response, path).get("documents", []))

    def set_document(self, path: str, data: Document, merge: bool = False) -> None:
        method = "PATCH" if merge else "PUT"
        response = self._request(method, path, json=data)
        if response.status_code == 404:
            raise DocumentStoreError(f"{method} {path} failed: document not found")
        logger.debug("%s %s -> %s", method, path, response.status_code)
