# Router aggregator
from fastapi import APIRouter
from app.api.v1.endpoints.auth import admin_auth_router
from app.api.v1.endpoints.auth import student_auth_router
from app.api.v1.endpoints.admin import students_router
from app.api.v1.endpoints.admin import courses_router
from app.api.v1.endpoints.admin import academics_router
from app.api.v1.endpoints.admin import fees_router
from app.api.v1.endpoints.student_portal import portal_router
from app.api.v1.endpoints.update_password import update_password


api_router = APIRouter()

api_router.include_router(admin_auth_router.router)
api_router.include_router(student_auth_router.router)
api_router.include_router(students_router.router)
api_router.include_router(courses_router.router)
api_router.include_router(academics_router.router)
api_router.include_router(fees_router.router)
api_router.include_router(portal_router.router)
api_router.include_router(update_password.router)
