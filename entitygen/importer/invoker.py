"""
Sub-generator invocation

Applications and entities are emitted by sub-generators. The pipeline talks to
them through the SubGenerator interface and a flat option mapping derived from
the run options and the descriptor being generated.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List

from entitygen.importer.models import ApplicationDescriptor, EntityDescriptor
from entitygen.importer.state import ImportOptions
from entitygen.logging_config import logger


SubGeneratorOptions = Dict[str, Any]


class GenerationKind(str, Enum):
    """Which sub-generator runs"""
    APPLICATION = "application"
    ENTITY = "entity"


class SubGenerator(ABC):
    """Generation units the pipeline can compose"""

    @abstractmethod
    def generate_application(self, options: SubGeneratorOptions) -> None:
        ...

    @abstractmethod
    def generate_entity(self, options: SubGeneratorOptions) -> None:
        ...


def application_options(application: ApplicationDescriptor, run: ImportOptions) -> SubGeneratorOptions:
    return {
        "force": run.force,
        "debug": run.debug,
        "skip-client": run.skip_client,
        "skip-server": run.skip_server,
        "skip-install": run.skip_install,
        "skip-user-management": application.skip_user_management,
        "jhi-prefix": application.jhi_prefix,
        "base-name": application.base_name,
    }


def entity_options(entity: EntityDescriptor, run: ImportOptions) -> SubGeneratorOptions:
    return {
        "force": run.force,
        "debug": run.debug,
        "regenerate": True,
        "skip-install": True,
        "skip-client": entity.skip_client,
        "skip-server": entity.skip_server,
        "no-fluent-methods": entity.no_fluent_method,
        "skip-user-management": entity.skip_user_management,
        "skip-ui-grouping": run.skip_ui_grouping,
        "arguments": [entity.name],
    }


def to_cli_args(options: SubGeneratorOptions) -> List[str]:
    """Flatten options into command-line arguments: positionals first, then flags"""
    args = [str(value) for value in options.get("arguments", [])]
    for key, value in options.items():
        if key == "arguments" or value is None or value is False:
            continue
        if value is True:
            args.append(f"--{key}")
        else:
            args += [f"--{key}", str(value)]
    return args


class SubGeneratorInvoker:
    """Runs one sub-generation synchronously"""

    def __init__(self, sub_generator: SubGenerator):
        self.sub_generator = sub_generator
        self._dispatch = {
            GenerationKind.APPLICATION: sub_generator.generate_application,
            GenerationKind.ENTITY: sub_generator.generate_entity,
        }

    def invoke(self, kind: GenerationKind, options: SubGeneratorOptions) -> None:
        kind = GenerationKind(kind)
        target = options.get("base-name") or ", ".join(options.get("arguments", []))
        logger.log_generation(kind.value, target)
        self._dispatch[kind](options)

    def generate_application(self, application: ApplicationDescriptor, run: ImportOptions) -> None:
        self.invoke(GenerationKind.APPLICATION, application_options(application, run))

    def generate_entity(self, entity: EntityDescriptor, run: ImportOptions) -> None:
        self.invoke(GenerationKind.ENTITY, entity_options(entity, run))
