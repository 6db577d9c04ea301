"""API routers, combined into a single router mounted at the root."""

from fastapi import APIRouter

from .branches import router as branches_router
from .files import router as files_router
from .publish import router as publish_router
from .repos import router as repos_router

router = APIRouter()
router.include_router(repos_router, tags=["repositories"])
router.include_router(branches_router, tags=["branches"])
router.include_router(files_router, tags=["files"])
router.include_router(publish_router, tags=["publish"])

__all__ = ["router"]
