# Router aggregator
from fastapi import APIRouter
from app.api.v1.endpoints.auth import auth_router
from app.api.v1.endpoints.profile import profile_router
from app.api.v1.endpoints.imported_users import imported_users_router


api_router = APIRouter()

api_router.include_router(auth_router.router)
api_router.include_router(profile_router.router)
api_router.include_router(imported_users_router.router)
