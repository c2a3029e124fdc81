from fastapi import Request

from app.config import Settings
from app.evaluation.completion import CompletionService
from app.storage.base import ExperimentStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ExperimentStore:
    """Storage strategy chosen when the app was created."""
    return request.app.state.store


def get_completion(request: Request) -> CompletionService:
    return request.app.state.completion
