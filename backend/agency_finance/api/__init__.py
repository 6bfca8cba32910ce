from fastapi import APIRouter

from .categories import router as categories_router
from .clients import router as clients_router
from .suppliers import router as suppliers_router
from .entries import router as entries_router
from .recurring import router as recurring_router
from .reports import router as reports_router
from .audit import router as audit_router

api_router = APIRouter()

api_router.include_router(categories_router, prefix="/categories", tags=["categories"])
api_router.include_router(clients_router, prefix="/clients", tags=["clients"])
api_router.include_router(suppliers_router, prefix="/suppliers", tags=["suppliers"])
api_router.include_router(entries_router, prefix="/entries", tags=["entries"])
api_router.include_router(recurring_router, prefix="/recurring", tags=["recurring"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
api_router.include_router(audit_router, prefix="/audit", tags=["audit"])
