"""
Needle-based file mutation

    from entitygen.needles import FileMutator, MutationRequest, Needle

    mutator = FileMutator(project_dir)
    result = mutator.apply(MutationRequest("src/app.ts", Needle.ENTITY_TO_ROUTER, payload))
"""

from .matcher import Needle, NeedleMatch, locate, count
from .mutator import (
    FileMutator,
    InsertPosition,
    MutationRequest,
    MutationResult,
    MutationStatus,
)
from .client_vue import NeedleInsertion, VueClientNeedles, route_exists

__all__ = [
    "FileMutator",
    "InsertPosition",
    "MutationRequest",
    "MutationResult",
    "MutationStatus",
    "Needle",
    "NeedleInsertion",
    "NeedleMatch",
    "VueClientNeedles",
    "count",
    "locate",
    "route_exists",
]
