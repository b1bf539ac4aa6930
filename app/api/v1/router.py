from fastapi import APIRouter
from app.api.v1.endpoints import auth, branches, services, appointments, leads, dashboard, patients

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(branches.router, prefix="/branches", tags=["branches"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
