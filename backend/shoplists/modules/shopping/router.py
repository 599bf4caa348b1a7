import logging

from fastapi import APIRouter

from shoplists.modules.shopping.routes.lists import router as lists_router

router = APIRouter(prefix="/api/shopping", tags=["shopping"])
logger = logging.getLogger("shopping")


@router.get("/status")
async def shopping_status() -> dict:
    logger.debug("shopping status ok")
    return {"status": "ok", "module": "shopping"}


router.include_router(lists_router, prefix="/lists", tags=["shopping-lists"])
