import logging

from fastapi import APIRouter

from shoplists.modules.catalog.routes.categories import router as categories_router
from shoplists.modules.catalog.routes.products import router as products_router

router = APIRouter(prefix="/api/catalog", tags=["catalog"])
logger = logging.getLogger("catalog")


@router.get("/status")
async def catalog_status() -> dict:
    logger.debug("catalog status ok")
    return {"status": "ok", "module": "catalog"}


router.include_router(categories_router, prefix="/categories", tags=["catalog-categories"])
router.include_router(products_router, prefix="/products", tags=["catalog-products"])
