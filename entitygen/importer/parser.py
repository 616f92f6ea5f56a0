"""
Model parser collaborator

The pipeline only depends on the ModelParser interface. JsonModelParser is the
built-in implementation: it reads JSON model documents of the form

    {
      "applications": [{"generator-jhipster": {"baseName": "store", ...}}],
      "entities": [{"name": "Product", "readOnly": false, ...}]
    }

and exports entity descriptors to the project's .jhipster folder, only
reporting entities whose descriptor changed unless filtering is disabled.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from entitygen.config import PROJECT_CONFIG_KEY, project_file_path
from entitygen.exceptions import ModelFormatError
from entitygen.importer.models import ApplicationDescriptor, EntityDescriptor, ImportResult
from entitygen.logging_config import logger


ENTITY_DIR = ".jhipster"


@dataclass(frozen=True)
class ParseOptions:
    """Options handed to the parser"""
    database_type: Optional[str] = None
    application_type: Optional[str] = None
    application_name: Optional[str] = None
    force_no_filtering: bool = False


class ModelParser(ABC):
    """Turns input model files into an ImportResult"""

    @abstractmethod
    def parse(self, input_paths: Sequence[str], options: ParseOptions) -> ImportResult:
        ...


class JsonModelParser(ModelParser):
    """Parser for JSON model documents"""

    def __init__(self, project_dir: str = "."):
        self.project_dir = Path(project_dir)

    def parse(self, input_paths: Sequence[str], options: ParseOptions) -> ImportResult:
        applications: List[Tuple[Dict[str, Any], str]] = []
        entities: List[Dict[str, Any]] = []
        for path in input_paths:
            document = self._load(path)
            if "name" in document and "entities" not in document:
                entities.append(document)
                continue
            applications.extend((data, path) for data in document.get("applications", []))
            entities.extend(document.get("entities", []))

        exported_applications = [self._application(data, source) for data, source in applications]
        if len(exported_applications) == 1:
            self._export_application(exported_applications[0])

        exported_entities = []
        for data in entities:
            if "name" not in data:
                raise ModelFormatError("Entity declaration without a name")
            if options.application_name and not data.get("application"):
                data = {**data, "application": options.application_name}
            if self._export_entity(data, options.force_no_filtering):
                exported_entities.append(EntityDescriptor.from_dict(data))

        return ImportResult(
            exported_applications=exported_applications,
            exported_entities=exported_entities,
        )

    def _load(self, path: str) -> Dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ModelFormatError(f"Invalid JSON in {path}: {e}", path) from e
        if not isinstance(document, dict):
            raise ModelFormatError(f"Expected a JSON object in {path}", path)
        return document

    def _application(self, data: Dict[str, Any], path: str) -> ApplicationDescriptor:
        try:
            return ApplicationDescriptor.from_dict(data)
        except KeyError as e:
            raise ModelFormatError(f"Application without {e.args[0]} in {path}", path) from e

    def _export_application(self, application: ApplicationDescriptor) -> None:
        """Write the project config file for a single application when there is none yet"""
        path = project_file_path(str(self.project_dir))
        if path.exists():
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps({PROJECT_CONFIG_KEY: application.config}, indent=2) + "\n",
            encoding="utf-8",
        )
        logger.debug(f"Exported application {application.base_name} to {path}")

    def _export_entity(self, data: Dict[str, Any], force: bool) -> bool:
        """Write .jhipster/<Name>.json, False when the descriptor is unchanged"""
        entity_dir = self.project_dir / ENTITY_DIR
        target = entity_dir / f"{data['name']}.json"
        if target.exists() and not force:
            try:
                if json.loads(target.read_text(encoding="utf-8")) == data:
                    return False
            except json.JSONDecodeError:
                logger.warning(f"Overwriting unreadable entity descriptor {target}")
        entity_dir.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return True
