# controller/gallery_controller.py
from typing import List
from fastapi import APIRouter, Depends, Query
from model.api import GalleryResponse, NeighborsResponse
from model.content import Category
from service.gallery_service import GalleryService
from util.constants import InternalURIs
from controller.controller_dependencies import get_gallery_service, rate_limiter

gallery_router = APIRouter()


@gallery_router.get(InternalURIs.CATEGORIES, response_model=List[Category])
async def list_categories(
    service: GalleryService = Depends(get_gallery_service),
) -> List[Category]:
    return await service.categories()


@gallery_router.get(InternalURIs.PORTFOLIO, response_model=GalleryResponse)
async def portfolio(
    category: str = Query("all"),
    q: str = Query(""),
    popular: bool = Query(False),
    service: GalleryService = Depends(get_gallery_service),
) -> GalleryResponse:
    return await service.gallery(category=category, query=q, popular=popular)


@gallery_router.get(InternalURIs.PORTFOLIO_NEIGHBORS, response_model=NeighborsResponse)
async def portfolio_neighbors(
    item_id: str,
    category: str = Query("all"),
    q: str = Query(""),
    popular: bool = Query(False),
    service: GalleryService = Depends(get_gallery_service),
) -> NeighborsResponse:
    return await service.neighbors(item_id, category=category, query=q, popular=popular)


@gallery_router.post(InternalURIs.PORTFOLIO_CLICK, dependencies=[Depends(rate_limiter)])
async def portfolio_click(
    item_id: str,
    service: GalleryService = Depends(get_gallery_service),
):
    return {"clicks": await service.track_click(item_id)}
