"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from stockledger.infrastructure.config import Settings
from stockledger.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

_settings: Settings | None = None


def settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def use_settings(value: Settings) -> None:
    global _settings
    _settings = value


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(settings().store_path)
