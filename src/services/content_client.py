"""Typed client for the GitHub repository contents API."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from src.models.errors import HttpError, MalformedResponse, MissingCredential
from src.schemas import (
    DirectoryEntry,
    FileContents,
    RemoteUser,
    RepositorySummary,
    WriteResult,
)

from .transport import RetryingTransport

REPOSITORY_PAGE_SIZE = 100

# Raised while mapping a 2xx body that lacks the documented fields
SHAPE_ERRORS = (KeyError, TypeError, AttributeError, ValidationError)


def _segment(value: str) -> str:
    return quote(value, safe="")


class ContentClient:
    """Reads and writes single files through the contents API.

    Every non-2xx response is raised as ``HttpError``; bodies that do not have
    the documented shape raise ``MalformedResponse``.
    """

    def __init__(
        self,
        transport: RetryingTransport,
        base_url: str = "https://api.github.com",
        token: Optional[str] = None,
        affiliation: str = "owner,collaborator,organization_member",
    ):
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self._token = token or None
        self.affiliation = affiliation

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token or None

    # --- request shaping ---

    def _headers(self) -> Dict[str, str]:
        if not self._token:
            raise MissingCredential()
        return {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github+json",
        }

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        return (
            f"{self.base_url}/repos/{_segment(owner)}/{_segment(repo)}"
            f"/contents/{_segment(path)}"
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        response = await self.transport.send(
            method, url, headers=self._headers(), params=params, json=json
        )
        if not response.is_success:
            raise _error_from_response(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"{method} {url} returned invalid JSON") from e

    # --- operations ---

    async def get_user(self) -> RemoteUser:
        data = await self._request("GET", f"{self.base_url}/user")
        try:
            return RemoteUser(login=data["login"])
        except SHAPE_ERRORS as e:
            raise MalformedResponse("Identity response has no login") from e

    async def read_file(
        self, owner: str, repo: str, path: str, branch: str
    ) -> FileContents:
        data = await self._request(
            "GET", self._contents_url(owner, repo, path), params={"ref": branch}
        )
        if not isinstance(data, dict) or data.get("content") is None:
            raise MalformedResponse("No content returned")
        try:
            return FileContents(
                version_token=data["sha"], content_base64=data["content"]
            )
        except SHAPE_ERRORS as e:
            raise MalformedResponse(f"Unexpected file response for '{path}'") from e

    async def write_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        content_base64: str,
        version_token: str,
    ) -> WriteResult:
        return await self._put(
            owner, repo, path, branch, message, content_base64, version_token
        )

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        content_base64: str,
    ) -> WriteResult:
        return await self._put(owner, repo, path, branch, message, content_base64, None)

    async def _put(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        content_base64: str,
        version_token: Optional[str],
    ) -> WriteResult:
        # The host creates when 'sha' is absent and updates when present.
        body: Dict[str, Any] = {
            "message": message,
            "content": content_base64,
            "branch": branch,
        }
        if version_token is not None:
            body["sha"] = version_token

        data = await self._request(
            "PUT", self._contents_url(owner, repo, path), json=body
        )
        try:
            return WriteResult(new_version_token=data["content"]["sha"])
        except SHAPE_ERRORS as e:
            raise MalformedResponse("Write response has no content sha") from e

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        message: str,
        version_token: str,
    ) -> None:
        await self._request(
            "DELETE",
            self._contents_url(owner, repo, path),
            json={"message": message, "branch": branch, "sha": version_token},
        )

    async def list_directory(
        self, owner: str, repo: str, path: str, branch: str
    ) -> List[DirectoryEntry]:
        data = await self._request(
            "GET", self._contents_url(owner, repo, path), params={"ref": branch}
        )
        # A file path yields a single object instead of an array.
        items = data if isinstance(data, list) else [data]
        try:
            return [
                DirectoryEntry(
                    name=item["name"],
                    path=item["path"],
                    version_token=item["sha"],
                    size=item.get("size") or 0,
                    kind=item["type"],
                )
                for item in items
            ]
        except SHAPE_ERRORS as e:
            raise MalformedResponse(f"Unexpected listing for '{path}'") from e

    async def list_accessible_repositories(
        self, limit: int = 30
    ) -> List[RepositorySummary]:
        data = await self._request(
            "GET",
            f"{self.base_url}/user/repos",
            params={
                "per_page": REPOSITORY_PAGE_SIZE,
                "sort": "updated",
                "direction": "desc",
                "affiliation": self.affiliation,
            },
        )
        if not isinstance(data, list):
            raise MalformedResponse("Repository listing is not an array")

        summaries: List[RepositorySummary] = []
        for item in data:
            if len(summaries) >= limit:
                break
            try:
                writable = (item.get("permissions") or {}).get("push")
                if item.get("archived") or not writable:
                    continue
                owner = item["owner"]["login"]
                summary = RepositorySummary(
                    owner=owner,
                    name=item["name"],
                    full_name=item.get("full_name") or f"{owner}/{item['name']}",
                    default_branch=item.get("default_branch") or "main",
                    description=item.get("description"),
                )
            except SHAPE_ERRORS as e:
                raise MalformedResponse("Unexpected repository entry") from e
            summaries.append(summary)
        return summaries


def _error_from_response(response: httpx.Response) -> HttpError:
    body: Any
    content_type = response.headers.get("content-type", "")
    try:
        if "application/json" in content_type:
            body = response.json()
        else:
            body = response.text
    except ValueError:
        body = None
    return HttpError(response.status_code, response.reason_phrase, body)
