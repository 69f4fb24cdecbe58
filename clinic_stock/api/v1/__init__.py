"""V1 API router aggregation."""

from fastapi import APIRouter

from clinic_stock.api.v1.auth import router as auth_router
from clinic_stock.api.v1.categories import router as categories_router
from clinic_stock.api.v1.clinics import router as clinics_router
from clinic_stock.api.v1.dashboard import router as dashboard_router
from clinic_stock.api.v1.exports import router as exports_router
from clinic_stock.api.v1.invitations import router as invitations_router
from clinic_stock.api.v1.items import router as items_router
from clinic_stock.api.v1.members import router as members_router
from clinic_stock.api.v1.transactions import router as transactions_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(auth_router)
v1_router.include_router(clinics_router)
v1_router.include_router(categories_router)
v1_router.include_router(items_router)
v1_router.include_router(transactions_router)
v1_router.include_router(dashboard_router)
v1_router.include_router(members_router)
v1_router.include_router(invitations_router)
v1_router.include_router(exports_router)
