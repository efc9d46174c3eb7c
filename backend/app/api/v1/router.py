from fastapi import APIRouter
from app.api.v1.endpoints import (
    health, profile, certificates, faculty, activities, records, notifications, analytics, storage
)
from app.core.config import settings

api_router = APIRouter()

# Deep health checks (use /health/ready for load balancers)
api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "campus-records", "mock_mode": settings.USE_MOCK_DATA}


api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(certificates.router, prefix="/certificates", tags=["Certificates"])
api_router.include_router(faculty.router, prefix="/faculty", tags=["Faculty Review"])
api_router.include_router(activities.router, prefix="/activities", tags=["Activities"])
api_router.include_router(records.router, prefix="/records", tags=["Academic Records"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
api_router.include_router(storage.router, prefix="/storage", tags=["Storage"])
