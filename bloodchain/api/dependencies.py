"""
FastAPI dependencies shared by the API routers
"""

from typing import Annotated

from fastapi import Depends, Request

from bloodchain.config.settings import Settings
from bloodchain.storage.repository import BloodChainRepository


def get_repository(request: Request) -> BloodChainRepository:
    """Repository created by the app factory for this process"""
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


RepositoryDep = Annotated[BloodChainRepository, Depends(get_repository)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
