"""
Model import: parse a domain model, then generate its applications and entities
"""

from .models import ApplicationDescriptor, EntityDescriptor, ImportResult
from .parser import JsonModelParser, ModelParser, ParseOptions
from .state import ImportOptions, LeftoverTracker, PipelineState
from .invoker import (
    GenerationKind,
    SubGenerator,
    SubGeneratorInvoker,
    application_options,
    entity_options,
    to_cli_args,
)
from .pipeline import ImportPipeline

__all__ = [
    "ApplicationDescriptor",
    "EntityDescriptor",
    "GenerationKind",
    "ImportOptions",
    "ImportPipeline",
    "ImportResult",
    "JsonModelParser",
    "LeftoverTracker",
    "ModelParser",
    "ParseOptions",
    "PipelineState",
    "SubGenerator",
    "SubGeneratorInvoker",
    "application_options",
    "entity_options",
    "to_cli_args",
]
