"""
Ronda API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from ronda_api.core import configure_cors, lifespan, register_middlewares
from ronda_api.routers.admin import router as admin_router
from ronda_api.routers.orders import router as orders_router
from ronda_api.routers.reservations import router as reservations_router
from ronda_api.routers.rondas import router as rondas_router
from ronda_api.routers.table_groups import router as table_groups_router
from ronda_api.routers.tables import router as tables_router
from ronda_api.routers.zones import router as zones_router
from shared.config.settings import settings


# Create FastAPI application
app = FastAPI(
    title="Ronda API",
    description="Restaurant floor management: tables, rondas, orders and reservations",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "ronda-api",
        "environment": settings.environment,
    }


# =============================================================================
# Routers
# =============================================================================

app.include_router(tables_router)
app.include_router(zones_router)
app.include_router(table_groups_router)
app.include_router(reservations_router)
app.include_router(orders_router)
app.include_router(rondas_router)
app.include_router(admin_router)
