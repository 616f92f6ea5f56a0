"""
Generator Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict, fields
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from entitygen.exceptions import ConfigurationError


PROJECT_CONFIG_FILE = ".yo-rc.json"
PROJECT_CONFIG_KEY = "generator-jhipster"

# Database values that belong to the relational family
SQL_DATABASES = ("mysql", "mariadb", "postgresql", "oracle", "mssql", "h2Disk", "h2Memory")

DEFAULT_CLIENT_FRAMEWORK = "angularX"

# Persisted project key -> GeneratorConfig attribute
PROJECT_KEYS = {
    "applicationType": "application_type",
    "baseName": "base_name",
    "databaseType": "database_type",
    "prodDatabaseType": "prod_database_type",
    "devDatabaseType": "dev_database_type",
    "skipClient": "skip_client",
    "clientFramework": "client_framework",
    "clientPackageManager": "client_package_manager",
    "enableTranslation": "enable_translation",
    "jhiPrefix": "jhi_prefix",
}


def database_type_from_value(db: Optional[str]) -> Optional[str]:
    """Map a concrete database (--db value) to its database family"""
    if not db:
        return None
    if db in SQL_DATABASES:
        return "sql"
    return db


@dataclass
class GeneratorConfig:
    """Configuration for a generation run"""

    # Project settings (persisted in the project config file)
    application_type: Optional[str] = None
    base_name: Optional[str] = None
    database_type: Optional[str] = None
    prod_database_type: Optional[str] = None
    dev_database_type: Optional[str] = None
    skip_client: bool = False
    client_framework: Optional[str] = None
    client_package_manager: Optional[str] = None
    enable_translation: bool = False
    jhi_prefix: str = "jhi"

    # Client layout
    client_main_src_dir: str = "src/main/webapp"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    # Usage statistics (opt-in)
    insight_enabled: bool = False
    insight_url: str = "https://start.jhipster.tech/api/s"

    # External generator command used by the command sub-generator
    subgen_command: Optional[str] = None

    # Raw persisted project record
    project: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_project_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Build configuration from a persisted project record"""
        config = cls()
        config.apply_project_dict(data)
        return config

    def apply_project_dict(self, data: Dict[str, Any]) -> None:
        """Copy known project keys onto this configuration"""
        for key, attr in PROJECT_KEYS.items():
            if key in data and data[key] is not None:
                setattr(self, attr, data[key])
        self.project = dict(data)

    @classmethod
    def from_project_file(cls, project_dir: str = ".") -> Optional["GeneratorConfig"]:
        """Load the persisted project configuration, None when absent"""
        data = read_project_file(project_dir)
        if data is None:
            return None
        return cls.from_project_dict(data)

    def load_from_file(self, config_path: str) -> None:
        """Load tool configuration from JSON file"""
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid configuration file: {e}", str(path)) from e
            known = {f.name for f in fields(self)}
            for key, value in data.items():
                if key in known:
                    setattr(self, key, value)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to JSON file"""
        with open(config_path, 'w', encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_default(cls, project_dir: str = ".") -> "GeneratorConfig":
        """Load configuration from .env and environment variables"""
        load_dotenv(Path(project_dir) / ".env")
        config = cls()
        config._load_from_env()
        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        as_bool = lambda x: x.lower() == "true"
        env_mappings = {
            "ENTITYGEN_CLIENT_SRC_DIR": "client_main_src_dir",
            "ENTITYGEN_LOG_LEVEL": "log_level",
            "ENTITYGEN_JSON_LOGS": ("json_logs", as_bool),
            "ENTITYGEN_LOG_FILE": "log_file",
            "ENTITYGEN_INSIGHT": ("insight_enabled", as_bool),
            "ENTITYGEN_INSIGHT_URL": "insight_url",
            "ENTITYGEN_SUBGEN_COMMAND": "subgen_command",
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    setattr(self, attr, converter(value))
                else:
                    setattr(self, mapping, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)


def project_file_path(project_dir: str = ".") -> Path:
    return Path(project_dir) / PROJECT_CONFIG_FILE


def read_project_file(project_dir: str = ".") -> Optional[Dict[str, Any]]:
    """Read the generator section of the project config file"""
    path = project_file_path(project_dir)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid project configuration: {e}", str(path)) from e
    if not isinstance(data, dict):
        raise ConfigurationError("Invalid project configuration: expected a JSON object", str(path))
    section = data.get(PROJECT_CONFIG_KEY, {})
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Invalid project configuration: '{PROJECT_CONFIG_KEY}' must be an object", str(path)
        )
    return section
