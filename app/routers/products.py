from fastapi import APIRouter

from app.routers.crud import register_crud
from app.schemas import (
    CategoryRequest,
    CategoryResponse,
    FeatureRequest,
    FeatureResponse,
    PackingRequest,
    PackingResponse,
    ProductRequest,
    ProductResponse,
)

router = APIRouter(prefix="/products", tags=["products"])

# Fixed sub-paths go first so they are not captured by /products/{entity_id}
register_crud(
    router, "/packings", "packing", "packings", PackingRequest, PackingResponse,
    lambda uow: uow.packings, with_show=False,
)
register_crud(
    router, "/features", "feature", "features", FeatureRequest, FeatureResponse,
    lambda uow: uow.features, with_show=False,
)
register_crud(
    router, "/categories", "category", "categories", CategoryRequest, CategoryResponse,
    lambda uow: uow.categories, with_show=False,
)
register_crud(
    router, "", "product", "products", ProductRequest, ProductResponse,
    lambda uow: uow.products,
)
