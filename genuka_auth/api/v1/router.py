# genuka_auth/api/v1/router.py
from fastapi import APIRouter
from genuka_auth.api.v1 import auth, web

api_router = APIRouter()

api_router.include_router(web.router, tags=["web"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
