from fastapi import APIRouter

from regdesk.modules.registrations import admin_router as admin_registrations_router
from regdesk.modules.registrations import router as registrations_router

api_router = APIRouter()

api_router.include_router(registrations_router, prefix="/registrations", tags=["Registrations"])

api_router.include_router(
    admin_registrations_router,
    prefix="/admin/registrations",
    tags=["Admin - Registrations"],
)
