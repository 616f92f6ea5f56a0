"""
Import pipeline

Runs the phases of an import in strict order:

    validate -> configure -> parse -> generate_applications -> generate_entities -> finalize

Each phase takes the current PipelineState and returns the next one. Fatal
problems raise an EntityGenError subclass and abort the run; files written by
earlier phases stay on disk.
"""

from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from entitygen.config import (
    DEFAULT_CLIENT_FRAMEWORK,
    GeneratorConfig,
    database_type_from_value,
    read_project_file,
)
from entitygen.exceptions import GenerationError, InputNotFoundError, ModelParseError
from entitygen.importer.invoker import SubGenerator, SubGeneratorInvoker
from entitygen.importer.parser import ModelParser, ParseOptions
from entitygen.importer.state import ImportOptions, PipelineState
from entitygen.logging_config import logger, generate_run_id, set_run_id


Phase = Callable[[PipelineState], PipelineState]


class ImportPipeline:
    """
    Imports a domain model and generates its applications and entities.

    Usage:
        pipeline = ImportPipeline(
            ImportOptions(input_paths=["model.json"]),
            parser=JsonModelParser(),
            sub_generator=CommandSubGenerator("jhipster"),
        )
        state = pipeline.run()
    """

    def __init__(
        self,
        options: ImportOptions,
        parser: ModelParser,
        sub_generator: SubGenerator,
        config: Optional[GeneratorConfig] = None,
        client_builder=None,
        statistics=None,
    ):
        self.options = options
        self.parser = parser
        self.invoker = SubGeneratorInvoker(sub_generator)
        self.config = config or GeneratorConfig()
        self.client_builder = client_builder
        self.statistics = statistics
        self._event_pending = True

    @property
    def phases(self) -> List[Tuple[str, Phase]]:
        return [
            ("validate", self.validate),
            ("configure", self.configure),
            ("parse", self.parse),
            ("generate_applications", self.generate_applications),
            ("generate_entities", self.generate_entities),
            ("finalize", self.finalize),
        ]

    def initial_state(self) -> PipelineState:
        return PipelineState(options=self.options, config=self.config)

    def run(self, state: Optional[PipelineState] = None) -> PipelineState:
        """Run every phase, returning the final state"""
        set_run_id(generate_run_id())
        self._event_pending = True
        state = state or self.initial_state()
        for name, phase in self.phases:
            logger.log_phase(name, "start")
            state = phase(state)
            logger.log_phase(name, "done")
        return state

    # ==================== Phases ====================

    def validate(self, state: PipelineState) -> PipelineState:
        """Every input file must exist"""
        for path in state.options.input_paths:
            if not Path(path).is_file():
                raise InputNotFoundError(path)
        return state

    def configure(self, state: PipelineState) -> PipelineState:
        """Resolve the effective configuration"""
        if self._event_pending and self.statistics is not None:
            self.statistics.send_sub_gen_event("generator", "import-jdl")
        self._event_pending = False

        options = state.options
        project = read_project_file(options.project_dir)
        if project is None and not state.parsed:
            # Nothing to read before the model has been parsed
            return state

        config = replace(state.config)
        if not config.base_name:
            config.apply_project_dict(project or {})

        config.database_type = config.database_type or database_type_from_value(options.db)
        config.prod_database_type = config.prod_database_type or options.db
        config.dev_database_type = config.dev_database_type or options.db
        config.client_framework = config.client_framework or DEFAULT_CLIENT_FRAMEWORK
        if not config.client_package_manager:
            config.client_package_manager = "yarn" if options.use_yarn else "npm"

        return replace(state, config=config, configured=True)

    def parse(self, state: PipelineState) -> PipelineState:
        """Parse the input model, once per run"""
        if state.parsed:
            return state

        paths = list(state.options.input_paths)
        config = state.config
        logger.info("The model is being parsed.")
        try:
            result = self.parser.parse(paths, ParseOptions(
                database_type=config.prod_database_type,
                application_type=config.application_type,
                application_name=config.base_name,
                force_no_filtering=state.options.force,
            ))
        except Exception as error:
            logger.error(f"{type(error).__name__}: {error}")
            raise ModelParseError(paths, error) from error

        if result.entity_count > 0:
            logger.info(f"Found entities: {', '.join(result.entity_names())}.")
        else:
            logger.info("No change in entity configurations, no entities were updated.")
        logger.info("The model has been successfully parsed")

        return replace(state, import_result=result, parsed=True)

    def generate_applications(self, state: PipelineState) -> PipelineState:
        """Generate the application when the model declares exactly one"""
        if not state.config.base_name:
            state = self.configure(state)

        if not state.should_generate_applications():
            return state

        applications = state.import_result.exported_applications
        count = len(applications)
        logger.info(f"Generating {count} application{'s' if count > 1 else ''}.")

        if count > 1:
            # Sub-folder generation is not handled, the user runs them one by one
            for application in applications:
                state.applications_left_to_generate.record(application.base_name)
            return state

        application = applications[0]
        try:
            self.invoker.generate_application(application, state.options)
        except Exception as error:
            raise GenerationError("application", application.base_name, error) from error
        return replace(state, applications_generated=True)

    def generate_entities(self, state: PipelineState) -> PipelineState:
        """Generate every entity, or defer them when several applications were found"""
        if state.entity_count == 0:
            return state
        if state.options.json_only:
            logger.info("Entity JSON files created. Entity generation skipped.")
            return state

        entities = state.import_result.exported_entities
        if state.application_count > 1:
            for entity in entities:
                state.entities_left_to_generate.record(entity.name)
            return state

        count = len(entities)
        logger.info(f"Generating {count} entit{'y' if count == 1 else 'ies'}.")
        generated = 0
        for entity in entities:
            try:
                self.invoker.generate_entity(entity, state.options)
            except Exception as error:
                raise GenerationError("entity", entity.name, error) from error
            generated += 1
        return replace(state, entities_generated=generated)

    def finalize(self, state: PipelineState) -> PipelineState:
        """Rebuild the client when needed and report what is left to generate"""
        options = state.options
        rebuilt = False
        skip_client = state.config.skip_client or options.skip_client
        if (not options.skip_install and not skip_client and not options.json_only
                and not state.should_generate_applications()):
            if self.client_builder is not None:
                logger.debug("Building client")
                rebuilt = self.client_builder.rebuild(
                    state.config.client_package_manager or "npm",
                    options.project_dir,
                )
            else:
                logger.debug("No client builder configured, skipping client build")

        applications = state.applications_left_to_generate.drain()
        if applications:
            logger.info(f"Here are the application names to generate manually: {', '.join(applications)}")
        entities = state.entities_left_to_generate.drain()
        if entities:
            logger.info(f"Here are the entity names to generate manually: {', '.join(entities)}")

        return replace(state, client_rebuilt=rebuilt)
