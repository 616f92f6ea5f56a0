"""
Descriptors produced by the model parser
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from entitygen.config import PROJECT_CONFIG_KEY
from entitygen.utils import unique


@dataclass(frozen=True)
class ApplicationDescriptor:
    """One application declared in the input model"""
    base_name: str
    skip_user_management: bool = False
    jhi_prefix: str = "jhi"
    skip_client: bool = False
    skip_server: bool = False
    config: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicationDescriptor":
        """Accepts both {"generator-jhipster": {...}} and the flat record"""
        config = data.get(PROJECT_CONFIG_KEY, data)
        return cls(
            base_name=config["baseName"],
            skip_user_management=bool(config.get("skipUserManagement", False)),
            jhi_prefix=config.get("jhiPrefix", "jhi"),
            skip_client=bool(config.get("skipClient", False)),
            skip_server=bool(config.get("skipServer", False)),
            config=dict(config),
        )


@dataclass(frozen=True)
class EntityDescriptor:
    """One entity declared in the input model"""
    name: str
    skip_client: bool = False
    skip_server: bool = False
    no_fluent_method: bool = False
    skip_user_management: bool = False
    read_only: bool = False
    client_root_folder: str = ""
    # Owning application, only used for grouping
    application: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntityDescriptor":
        return cls(
            name=data["name"],
            skip_client=bool(data.get("skipClient", False)),
            skip_server=bool(data.get("skipServer", False)),
            no_fluent_method=bool(data.get("noFluentMethod", data.get("fluentMethods") is False)),
            skip_user_management=bool(data.get("skipUserManagement", False)),
            read_only=bool(data.get("readOnly", False)),
            client_root_folder=data.get("clientRootFolder", "") or "",
            application=data.get("application"),
        )


@dataclass(frozen=True)
class ImportResult:
    """Applications and entities found in the input model"""
    exported_applications: Tuple[ApplicationDescriptor, ...] = ()
    exported_entities: Tuple[EntityDescriptor, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "exported_applications", tuple(self.exported_applications))
        object.__setattr__(self, "exported_entities", tuple(self.exported_entities))

    @property
    def application_count(self) -> int:
        return len(self.exported_applications)

    @property
    def entity_count(self) -> int:
        return len(self.exported_entities)

    def entity_names(self):
        """Entity names, deduplicated in first-seen order"""
        return unique(entity.name for entity in self.exported_entities)
