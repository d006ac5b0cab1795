from fastapi import Request

from minion.config import MinionSettings, get_settings
from minion.orchestrator import BatchOrchestrator, build_orchestrator


def get_minion_settings(request: Request) -> MinionSettings:
    return getattr(request.app.state, "minion_settings", None) or get_settings()


def get_orchestrator(request: Request) -> BatchOrchestrator:
    return build_orchestrator(get_minion_settings(request))
