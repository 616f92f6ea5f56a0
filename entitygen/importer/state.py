"""
Pipeline state and leftover bookkeeping for one import run
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from entitygen.config import GeneratorConfig
from entitygen.importer.models import ImportResult
from entitygen.utils import unique


class LeftoverTracker:
    """
    Names recognized during parsing but not generated automatically.

    Append-only for the duration of a run; read once when the run finishes.
    """

    def __init__(self):
        self._names: List[str] = []

    def record(self, name: str) -> None:
        self._names.append(name)

    def drain(self) -> List[str]:
        """Recorded names, deduplicated, in first-seen order"""
        return unique(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)


@dataclass(frozen=True)
class ImportOptions:
    """Options of an import run, as given on the command line"""
    input_paths: Sequence[str]
    project_dir: str = "."
    db: Optional[str] = None
    json_only: bool = False
    ignore_application: bool = False
    skip_ui_grouping: bool = False
    force: bool = False
    debug: bool = False
    skip_install: bool = False
    skip_client: bool = False
    skip_server: bool = False
    use_yarn: bool = False


@dataclass(frozen=True)
class PipelineState:
    """
    State threaded through the pipeline phases.

    Each phase returns a new state; only the leftover trackers are shared
    between the states of one run.
    """
    options: ImportOptions
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    configured: bool = False
    parsed: bool = False
    import_result: Optional[ImportResult] = None
    applications_generated: bool = False
    entities_generated: int = 0
    client_rebuilt: bool = False
    applications_left_to_generate: LeftoverTracker = field(default_factory=LeftoverTracker)
    entities_left_to_generate: LeftoverTracker = field(default_factory=LeftoverTracker)

    @property
    def application_count(self) -> int:
        return self.import_result.application_count if self.import_result else 0

    @property
    def entity_count(self) -> int:
        return self.import_result.entity_count if self.import_result else 0

    def should_generate_applications(self) -> bool:
        return not self.options.ignore_application and self.application_count != 0
