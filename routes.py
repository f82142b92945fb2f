# routes.py
from fastapi import FastAPI
from controller.admin_controller import admin_router
from controller.auth_controller import auth_router
from controller.gallery_controller import gallery_router
from controller.site_controller import site_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(gallery_router)
    app.include_router(site_router)
    app.include_router(auth_router)
    # Every route below requires an admin session.
    app.include_router(admin_router)
