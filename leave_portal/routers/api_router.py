from fastapi import APIRouter
from leave_portal.routers import admin, auth, dashboard, hierarchy, leaves, settings, views

# Routers are aggregated here; main.py only imports this hub.
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(leaves.router)
api_router.include_router(dashboard.router)
api_router.include_router(admin.router)
api_router.include_router(hierarchy.router)
api_router.include_router(settings.router)
api_router.include_router(views.router)
