from fastapi import APIRouter
from coinhub.api.v1.routes import (
    auth,
    coins,
    admin_coins,
    admin_topups,
    admin_notifications,
)

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(coins.router, prefix="/coins", tags=["coins"])

api_router.include_router(admin_coins.router, prefix="/admin/coins", tags=["admin-coins"])
api_router.include_router(admin_topups.router, prefix="/admin/topup-requests", tags=["admin-topups"])
api_router.include_router(admin_notifications.router, prefix="/admin/notifications", tags=["admin-notifications"])
