"""
Built-in sub-generators

    CommandSubGenerator            delegates to an external generator command
    ClientRegistrationSubGenerator registers generated entities in the Vue client
    DryRunSubGenerator             only records what would be generated
"""

import json
import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from entitygen.config import GeneratorConfig, read_project_file
from entitygen.exceptions import SubGeneratorError
from entitygen.importer.invoker import SubGenerator, SubGeneratorOptions, to_cli_args
from entitygen.importer.parser import ENTITY_DIR
from entitygen.logging_config import logger
from entitygen.needles import FileMutator, MutationResult, VueClientNeedles
from entitygen.process import run_command
from entitygen.utils import camel_case, kebab_case, upper_first


class CommandSubGenerator(SubGenerator):
    """Runs `<command> app|entity ...` for each generation"""

    def __init__(self, command: str = "jhipster", project_dir: str = ".", timeout: Optional[int] = None):
        self.command = shlex.split(command)
        self.project_dir = project_dir
        self.timeout = timeout

    def _run(self, sub_command: str, options: SubGeneratorOptions) -> None:
        flags = {key: value for key, value in options.items() if key != "base-name"}
        command = self.command + [sub_command] + to_cli_args(flags)
        result = run_command(command, cwd=self.project_dir, timeout=self.timeout, capture_output=False)
        if not result.ok:
            raise SubGeneratorError(command, result.exit_code, result.stderr)

    def generate_application(self, options: SubGeneratorOptions) -> None:
        self._run("app", options)

    def generate_entity(self, options: SubGeneratorOptions) -> None:
        self._run("entity", options)


class ClientRegistrationSubGenerator(SubGenerator):
    """
    Wires each generated entity into the Vue client through its needles.

    Entity files themselves come from the optional delegate; this generator
    only touches the navbar, the router and main.ts.
    """

    def __init__(
        self,
        project_dir: str = ".",
        config: Optional[GeneratorConfig] = None,
        delegate: Optional[SubGenerator] = None,
    ):
        self.project_dir = Path(project_dir)
        self.config = config or GeneratorConfig()
        self.delegate = delegate
        self.needles = VueClientNeedles(
            self.config.client_main_src_dir,
            FileMutator(str(self.project_dir)),
        )
        self.results: List[MutationResult] = []

    def generate_application(self, options: SubGeneratorOptions) -> None:
        if self.delegate is not None:
            self.delegate.generate_application(options)

    def generate_entity(self, options: SubGeneratorOptions) -> None:
        if self.delegate is not None:
            self.delegate.generate_entity(options)
        if options.get("skip-client"):
            return
        for name in options.get("arguments", []):
            self.register_entity(name, skip_ui_grouping=bool(options.get("skip-ui-grouping")))

    def _entity_definition(self, name: str) -> Dict[str, Any]:
        path = self.project_dir / ENTITY_DIR / f"{name}.json"
        if not path.is_file():
            return {}
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Could not read {path}, registering {name} with defaults")
            return {}

    def entity_names(self, name: str, skip_ui_grouping: bool = False) -> Tuple[str, str, str, str]:
        """(class name, file name, folder name, menu translation key)"""
        definition = self._entity_definition(name)
        entity_class = upper_first(name)
        file_name = kebab_case(name)
        root_folder = definition.get("clientRootFolder") or ""
        folder_name = file_name
        if root_folder and not skip_ui_grouping:
            folder_name = f"{kebab_case(root_folder)}/{file_name}"
        return entity_class, file_name, folder_name, camel_case(name)

    def enable_translation(self) -> bool:
        """Current project record wins, it may have been written during this run"""
        project = read_project_file(str(self.project_dir)) or {}
        return bool(project.get("enableTranslation", self.config.enable_translation))

    def register_entity(self, name: str, skip_ui_grouping: bool = False) -> List[MutationResult]:
        entity_class, file_name, folder_name, translation_key = self.entity_names(name, skip_ui_grouping)
        read_only = bool(self._entity_definition(name).get("readOnly", False))

        results = [
            self.needles.add_entity_to_menu(file_name, self.enable_translation(), translation_key),
            self.needles.add_entity_to_router_import(entity_class, file_name, folder_name, read_only),
            self.needles.add_entity_to_router(entity_class, file_name, read_only),
            self.needles.add_entity_service_to_main_import(entity_class, file_name, folder_name),
            self.needles.add_entity_service_to_main(entity_class),
        ]
        results = [result for result in results if result is not None]
        self.results.extend(results)
        return results


class DryRunSubGenerator(SubGenerator):
    """Logs and records invocations without generating anything"""

    def __init__(self):
        self.calls: List[Tuple[str, SubGeneratorOptions]] = []

    def generate_application(self, options: SubGeneratorOptions) -> None:
        self.calls.append(("application", dict(options)))
        logger.info(f"[dry-run] would generate application {options.get('base-name', '')}")

    def generate_entity(self, options: SubGeneratorOptions) -> None:
        self.calls.append(("entity", dict(options)))
        logger.info(f"[dry-run] would generate entity {', '.join(options.get('arguments', []))}")
