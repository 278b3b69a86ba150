import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from src.apps.api import router
from src.config.settings import get_settings
from src.dependencies import close_editor_controller

settings = get_settings()

# --- DEBUG: make dev/mocks importable for the mock contents client ---

if settings.DEBUG:
    dev_path = Path(__file__).parent.parent / "dev"
    if dev_path.exists():
        sys.path.append(str(dev_path))
        print("🔧 'dev' directory added to sys.path for mock imports.")
    else:
        print("⚠️ 'dev' directory not found. Using real ContentClient.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_editor_controller()


# --- アプリケーション初期化 ---

app = FastAPI(
    title="Repository Contents Editor API",
    version="0.1.0",
    description="Edit files of a hosted repository through its contents API",
    lifespan=lifespan,
)

app.include_router(router.router, prefix="/api")


@app.get("/health")
async def health_check():
    """
    Simple health check endpoint to confirm the API is running.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
