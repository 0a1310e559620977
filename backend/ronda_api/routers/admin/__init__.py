"""
Admin API router - combines all admin sub-routers.

- stats: dashboard figures
- users: staff management
- products: menu catalog

All routes are prefixed with /api/admin
"""

from fastapi import APIRouter

from .stats import router as stats_router
from .users import router as users_router
from .products import router as products_router


router = APIRouter(prefix="/api/admin")

router.include_router(stats_router)
router.include_router(users_router)
router.include_router(products_router)
