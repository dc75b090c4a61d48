"""Default collections written when the local fallback store is empty."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Dict, List

from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

PROJECTS_KEY = "architrack_projects"
LOGS_KEY = "architrack_logs"

# Installed devices already carry these exact records; do not change them.
DEFAULT_PROJECTS: List[Dict[str, Any]] = [
    {"id": "1", "name": "Milagro", "code": "1", "is_archived": False},
    {"id": "2", "name": "Abejeras", "code": "25009ABE", "is_archived": False},
    {"id": "3", "name": "Ansoain", "code": "25047CAN", "is_archived": False},
]

DEFAULT_WORK_LOGS: List[Dict[str, Any]] = [
    {"id": "101", "project_id": "3", "date": "2025-11-06", "hours": 4, "description": "Visita a Obra"},
    {"id": "102", "project_id": "3", "date": "2025-10-10", "hours": 8, "description": "Estado Actual"},
    {"id": "103", "project_id": "3", "date": "2025-10-11", "hours": 5, "description": "Planos"},
    {"id": "104", "project_id": "1", "date": "2025-11-01", "hours": 6, "description": "Reunión"},
    {"id": "105", "project_id": "2", "date": "2025-11-02", "hours": 6, "description": "Estructuras"},
]

DEFAULTS_BY_KEY: Dict[str, List[Dict[str, Any]]] = {
    PROJECTS_KEY: DEFAULT_PROJECTS,
    LOGS_KEY: DEFAULT_WORK_LOGS,
}


def seed_collection(storage: KeyValueStorage, key: str) -> List[Dict[str, Any]]:
    """Return the persisted records under ``key``, writing the defaults first if the key is absent.

    Each key is seeded on its own: an existing projects slot does not stop the
    logs slot from being seeded, and the other way round. A persisted value that
    cannot be decoded raises ``json.JSONDecodeError``.
    """
    raw = storage.get_item(key)
    if raw is not None:
        return json.loads(raw)
    defaults = copy.deepcopy(DEFAULTS_BY_KEY[key])
    storage.set_item(key, json.dumps(defaults, ensure_ascii=False))
    logger.info("Seeded %s with %d default records", key, len(defaults))
    return defaults


__all__ = [
    "DEFAULT_PROJECTS",
    "DEFAULT_WORK_LOGS",
    "LOGS_KEY",
    "PROJECTS_KEY",
    "seed_collection",
]
