from pathlib import Path
from typing import Optional

from fastapi import Depends

from src.config.settings import Settings, get_settings
from src.services import (
    DirectoryTreeCache,
    EditorController,
    RecentStore,
    create_content_client_from_settings,
)

# One editor controller per process, created on first use
_editor_controller: Optional[EditorController] = None


def build_editor_controller(settings: Settings) -> EditorController:
    client = create_content_client_from_settings(settings)
    recents = RecentStore(
        Path(settings.RECENT_STORE_PATH),
        recent_limit=settings.RECENT_FILES_LIMIT,
        pinned_limit=settings.PINNED_REPOS_LIMIT,
    )
    return EditorController(
        client=client,
        tree=DirectoryTreeCache(client),
        recents=recents,
        settings=settings,
    )


def get_editor_controller(
    settings: Settings = Depends(get_settings),
) -> EditorController:
    """Get or create the editor controller instance."""
    global _editor_controller
    if _editor_controller is None:
        _editor_controller = build_editor_controller(settings)
    return _editor_controller


async def close_editor_controller() -> None:
    global _editor_controller
    if _editor_controller is None:
        return
    transport = getattr(_editor_controller.client, "transport", None)
    if transport is not None:
        await transport.aclose()
    _editor_controller = None
