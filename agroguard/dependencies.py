from fastapi import Request

from agroguard.config import Settings
from agroguard.services.analysis import AnalysisOrchestrator
from agroguard.services.catalog import Catalog


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    return request.app.state.orchestrator
