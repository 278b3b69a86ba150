from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from src.dependencies import get_editor_controller
from src.models.errors import ContentError, HttpError, MissingCredential
from src.schemas import (
    EditorState,
    PinnedRepository,
    RecentFile,
    RepositorySummary,
    TreeNode,
)
from src.schemas.requests import (
    ContentRequest,
    ContextRequest,
    LoginRequest,
    PathRequest,
    PinRequest,
    SaveRequest,
)
from src.services.editor_controller import EditorController

router = APIRouter(prefix="/editor", tags=["editor"])


def _remote_failure(e: ContentError) -> HTTPException:
    if isinstance(e, MissingCredential):
        return HTTPException(status_code=401, detail=str(e))
    status = e.status if isinstance(e, HttpError) else 502
    return HTTPException(status_code=status, detail=str(e))


# --- credential and identity ---


@router.post("/login", response_model=EditorState)
async def login(
    request: LoginRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    """Install the bearer credential produced by the OAuth flow and verify it."""
    if not request.token.strip():
        raise HTTPException(status_code=400, detail="Token cannot be empty")
    controller.login(request.token)
    return await controller.refresh_user()


@router.post("/logout", response_model=EditorState)
async def logout(controller: EditorController = Depends(get_editor_controller)):
    return controller.logout()


@router.get("/user", response_model=EditorState)
async def refresh_user(controller: EditorController = Depends(get_editor_controller)):
    return await controller.refresh_user()


@router.get("/repos", response_model=List[RepositorySummary])
async def list_repositories(
    limit: Optional[int] = None,
    controller: EditorController = Depends(get_editor_controller),
):
    if limit is not None and limit < 1:
        raise HTTPException(status_code=400, detail="limit must be positive")
    try:
        return await controller.load_repositories(limit)
    except ContentError as e:
        raise _remote_failure(e)


# --- repository context and tree ---


@router.post("/context", response_model=EditorState)
async def set_context(
    request: ContextRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    if not request.owner.strip() or not request.repo.strip():
        raise HTTPException(status_code=400, detail="owner and repo are required")
    return await controller.set_context(request.owner, request.repo, request.branch)


@router.get("/tree", response_model=TreeNode)
async def get_tree(
    query: str = "",
    controller: EditorController = Depends(get_editor_controller),
):
    return controller.tree.visible(query)


def _unknown_node(path: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"No tree node at '{path}'")


@router.post("/tree/expand", response_model=TreeNode)
async def expand_node(
    request: PathRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    try:
        return await controller.tree.expand(request.path)
    except KeyError:
        raise _unknown_node(request.path)


@router.post("/tree/collapse", response_model=TreeNode)
async def collapse_node(
    request: PathRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    try:
        return controller.tree.collapse(request.path)
    except KeyError:
        raise _unknown_node(request.path)


@router.post("/tree/toggle", response_model=TreeNode)
async def toggle_node(
    request: PathRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    try:
        return await controller.tree.toggle(request.path)
    except KeyError:
        raise _unknown_node(request.path)


@router.get("/tree/files", response_model=Dict[str, Any])
async def list_tree_files(
    controller: EditorController = Depends(get_editor_controller),
):
    """Flattened file listing consumed by the search overlay."""
    settings = controller.settings
    files = await controller.tree.walk_files(
        max_depth=settings.SEARCH_WALK_MAX_DEPTH,
        max_files=settings.SEARCH_WALK_MAX_FILES,
    )
    return {"files": files, "truncated": len(files) >= settings.SEARCH_WALK_MAX_FILES}


# --- file session ---


@router.get("/state", response_model=EditorState)
async def get_state(controller: EditorController = Depends(get_editor_controller)):
    return controller.snapshot()


@router.post("/file/open", response_model=EditorState)
async def open_file(
    request: PathRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    return await controller.open(request.path)


@router.put("/file/content", response_model=EditorState)
async def update_content(
    request: ContentRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    return controller.update_content(request.content)


@router.post("/file/new", response_model=EditorState)
async def new_file(
    request: PathRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    return controller.new_file(request.path)


@router.post("/file/save", response_model=EditorState)
async def save_file(
    request: SaveRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    return await controller.save(request.message)


@router.post("/file/delete/request", response_model=EditorState)
async def request_delete(
    request: PathRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    return controller.request_delete(request.path)


@router.post("/file/delete/confirm", response_model=EditorState)
async def confirm_delete(
    controller: EditorController = Depends(get_editor_controller),
):
    return await controller.confirm_delete()


@router.post("/file/delete/cancel", response_model=EditorState)
async def cancel_delete(
    controller: EditorController = Depends(get_editor_controller),
):
    return controller.cancel_pending()


# --- recents and pins ---


@router.get("/recent", response_model=List[RecentFile])
async def recent_files(controller: EditorController = Depends(get_editor_controller)):
    return controller.recents.get_recent_files()


@router.get("/pinned", response_model=List[PinnedRepository])
async def pinned_repositories(
    controller: EditorController = Depends(get_editor_controller),
):
    return controller.recents.get_pinned_repos()


@router.post("/pinned/toggle", response_model=Dict[str, Any])
async def toggle_pinned(
    request: PinRequest,
    controller: EditorController = Depends(get_editor_controller),
):
    pinned = controller.recents.toggle_pinned_repo(request.owner, request.repo)
    return {"owner": request.owner, "repo": request.repo, "pinned": pinned}
