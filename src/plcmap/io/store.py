"""Storage seam for named configuration snapshots."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Protocol

from plcmap.opcua.export import validate_config


@dataclass(frozen=True)
class StoredConfig:
    id: str
    name: str
    config_data: dict[str, Any]
    description: str | None = None
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    )


class ConfigStore(Protocol):
    """Persistence contract for configuration snapshots."""

    def get(self, config_id: str) -> StoredConfig | None: ...

    def list_configs(self) -> list[StoredConfig]: ...

    def create(
        self, name: str, config_data: dict[str, Any], description: str | None = None
    ) -> StoredConfig: ...

    def update(self, config_id: str, **changes: Any) -> StoredConfig | None: ...

    def delete(self, config_id: str) -> bool: ...


class MemoryConfigStore:
    """In-process `ConfigStore`; snapshots live as long as the object."""

    def __init__(self):
        self._configs: dict[str, StoredConfig] = {}

    def get(self, config_id: str) -> StoredConfig | None:
        return self._configs.get(config_id)

    def list_configs(self) -> list[StoredConfig]:
        return list(self._configs.values())

    def create(
        self, name: str, config_data: dict[str, Any], description: str | None = None
    ) -> StoredConfig:
        if not name:
            raise ValueError("Configuration name is required.")
        validate_config(config_data)
        config = StoredConfig(
            id=str(uuid.uuid4()),
            name=name,
            config_data=config_data,
            description=description,
        )
        self._configs[config.id] = config
        return config

    def update(self, config_id: str, **changes: Any) -> StoredConfig | None:
        existing = self._configs.get(config_id)
        if existing is None:
            return None
        unknown = set(changes) - {"name", "config_data", "description"}
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}.")
        if "config_data" in changes:
            validate_config(changes["config_data"])
        updated = replace(existing, **changes)
        self._configs[config_id] = updated
        return updated

    def delete(self, config_id: str) -> bool:
        return self._configs.pop(config_id, None) is not None

    def __len__(self) -> int:
        return len(self._configs)
