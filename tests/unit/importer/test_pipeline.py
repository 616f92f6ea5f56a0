"""
Unit Tests for the Import Pipeline
Tests for: phase order, application/entity generation, leftovers, client rebuild, errors
"""
from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from entitygen.config import GeneratorConfig
from entitygen.exceptions import GenerationError, InputNotFoundError, ModelParseError
from entitygen.generators import ClientRegistrationSubGenerator
from entitygen.importer.parser import JsonModelParser
from entitygen.importer.pipeline import ImportPipeline
from entitygen.importer.state import ImportOptions
from tests.conftest import CLIENT_SRC
from tests.mocks import FailingParser, FailingSubGenerator, RecordingSubGenerator, StubParser, make_result


@pytest.fixture
def model_file(tmp_path: Path) -> str:
    path = tmp_path / "model.json"
    path.write_text("{}", encoding="utf-8")
    return str(path)


def make_pipeline(tmp_path: Path, model_file: str, result=None, sub_generator=None,
                  client_builder=None, **options) -> ImportPipeline:
    return ImportPipeline(
        ImportOptions(input_paths=[model_file], project_dir=str(tmp_path), **options),
        parser=StubParser(result or make_result()),
        sub_generator=sub_generator or RecordingSubGenerator(),
        client_builder=client_builder,
    )


class TestPhases:
    """Tests for the phase sequence"""

    def test_phase_order(self, tmp_path, model_file):
        """Test the phases run in their fixed order"""
        pipeline = make_pipeline(tmp_path, model_file)

        assert [name for name, _ in pipeline.phases] == [
            "validate", "configure", "parse",
            "generate_applications", "generate_entities", "finalize",
        ]

    def test_parse_runs_once(self, tmp_path, model_file):
        """Test running the parse phase again on a parsed state does nothing"""
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo"]))
        state = pipeline.run()

        again = pipeline.parse(state)

        assert again is state
        assert len(pipeline.parser.calls) == 1


class TestValidate:
    """Tests for the validate phase"""

    def test_missing_input(self, tmp_path):
        """Test a missing input file aborts before parsing"""
        missing = str(tmp_path / "nope.json")
        pipeline = make_pipeline(tmp_path, missing)

        with pytest.raises(InputNotFoundError) as exc_info:
            pipeline.run()

        assert exc_info.value.message == f"Could not find {missing}, make sure the path is correct."
        assert pipeline.parser.calls == []

    def test_directory_is_not_an_input(self, tmp_path):
        """Test a directory path is rejected"""
        pipeline = make_pipeline(tmp_path, str(tmp_path))

        with pytest.raises(InputNotFoundError):
            pipeline.run()


class TestConfigure:
    """Tests for the configure phase"""

    def test_no_project_file_before_parse(self, tmp_path, model_file):
        """Test configure leaves the state alone when nothing can be read yet"""
        pipeline = make_pipeline(tmp_path, model_file)
        state = pipeline.initial_state()

        assert pipeline.configure(state) is state

    def test_reads_project_file(self, tmp_path, model_file, project_config):
        """Test the project record fills the configuration"""
        project_config(prodDatabaseType="postgresql")
        pipeline = make_pipeline(tmp_path, model_file)

        state = pipeline.configure(pipeline.initial_state())

        assert state.configured is True
        assert state.config.base_name == "store"
        assert state.config.prod_database_type == "postgresql"
        assert state.config.client_framework == "angularX"

    def test_package_manager_fallback(self, tmp_path, model_file, project_config):
        """Test npm by default, yarn when asked"""
        project_config()

        npm = make_pipeline(tmp_path, model_file)
        yarn = make_pipeline(tmp_path, model_file, use_yarn=True)

        assert npm.configure(npm.initial_state()).config.client_package_manager == "npm"
        assert yarn.configure(yarn.initial_state()).config.client_package_manager == "yarn"

    def test_db_option_fills_missing_database(self, tmp_path, model_file):
        """Test the db option is used when the project declares no database"""
        pipeline = make_pipeline(tmp_path, model_file, db="mysql")
        state = replace(pipeline.initial_state(), parsed=True)

        state = pipeline.configure(state)

        assert state.config.database_type == "sql"
        assert state.config.prod_database_type == "mysql"
        assert state.config.dev_database_type == "mysql"

    def test_is_idempotent(self, tmp_path, model_file, project_config):
        """Test configuring twice gives the same configuration"""
        project_config()
        pipeline = make_pipeline(tmp_path, model_file)

        once = pipeline.configure(pipeline.initial_state())
        twice = pipeline.configure(once)

        assert twice.config == once.config

    def test_does_not_mutate_input_config(self, tmp_path, model_file, project_config):
        """Test the caller's configuration object is left untouched"""
        project_config()
        config = GeneratorConfig()
        pipeline = ImportPipeline(
            ImportOptions(input_paths=[model_file], project_dir=str(tmp_path)),
            parser=StubParser(), sub_generator=RecordingSubGenerator(), config=config,
        )

        pipeline.configure(pipeline.initial_state())

        assert config.base_name is None


class TestParse:
    """Tests for the parse phase"""

    def test_parse_error_is_wrapped(self, tmp_path, model_file, caplog):
        """Test parser failures become ModelParseError naming the inputs"""
        pipeline = ImportPipeline(
            ImportOptions(input_paths=[model_file], project_dir=str(tmp_path)),
            parser=FailingParser(ValueError("unexpected token")),
            sub_generator=RecordingSubGenerator(),
        )

        with pytest.raises(ModelParseError) as exc_info:
            pipeline.run()

        assert exc_info.value.input_paths == [model_file]
        assert isinstance(exc_info.value.cause, ValueError)
        assert "ValueError: unexpected token" in caplog.text

    def test_force_disables_filtering(self, tmp_path, model_file):
        """Test the force option reaches the parser"""
        pipeline = make_pipeline(tmp_path, model_file, force=True)

        pipeline.run()

        assert pipeline.parser.last_options.force_no_filtering is True

    def test_reports_found_entities(self, tmp_path, model_file, caplog):
        """Test the found entity names are logged"""
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo", "Bar"]))

        pipeline.run()

        assert "Found entities: Foo, Bar." in caplog.text

    def test_reports_no_change(self, tmp_path, model_file, caplog):
        """Test an empty result is reported as unchanged"""
        make_pipeline(tmp_path, model_file).run()

        assert "No change in entity configurations, no entities were updated." in caplog.text

    def test_sends_statistics_event(self, tmp_path, model_file):
        """Test the import is reported to the statistics collector"""
        statistics = MagicMock()
        pipeline = ImportPipeline(
            ImportOptions(input_paths=[model_file], project_dir=str(tmp_path)),
            parser=StubParser(), sub_generator=RecordingSubGenerator(), statistics=statistics,
        )

        pipeline.run()

        statistics.send_sub_gen_event.assert_called_once_with("generator", "import-jdl")

    def test_statistics_event_once_per_run(self, tmp_path, model_file):
        """Test every run reports once, including a run over an already parsed state"""
        statistics = MagicMock()
        pipeline = ImportPipeline(
            ImportOptions(input_paths=[model_file], project_dir=str(tmp_path)),
            parser=StubParser(make_result(entities=["Foo"])), sub_generator=RecordingSubGenerator(),
            statistics=statistics,
        )

        state = pipeline.run()
        assert statistics.send_sub_gen_event.call_count == 1

        pipeline.run(state)

        assert statistics.send_sub_gen_event.call_count == 2
        assert len(pipeline.parser.calls) == 1


class TestGeneration:
    """Tests for the generate_applications and generate_entities phases"""

    def test_one_application_and_entity(self, tmp_path, model_file):
        """Test a single application and its entity are both generated"""
        sub_generator = RecordingSubGenerator()
        pipeline = make_pipeline(tmp_path, model_file, make_result(["store"], ["Product"]),
                                 sub_generator)

        state = pipeline.run()

        assert sub_generator.kinds() == ["application", "entity"]
        assert state.applications_generated is True
        assert state.entities_generated == 1
        assert not state.applications_left_to_generate
        assert not state.entities_left_to_generate

    def test_several_applications_are_deferred(self, tmp_path, model_file, caplog):
        """Test several applications are all left for manual generation"""
        sub_generator = RecordingSubGenerator()
        pipeline = make_pipeline(tmp_path, model_file,
                                 make_result(["store", "gateway"], ["Product"]), sub_generator)

        state = pipeline.run()

        assert sub_generator.calls == []
        assert state.applications_left_to_generate.drain() == ["store", "gateway"]
        assert state.entities_left_to_generate.drain() == ["Product"]
        assert "Generating 2 applications." in caplog.text
        assert "Here are the application names to generate manually: store, gateway" in caplog.text
        assert "Here are the entity names to generate manually: Product" in caplog.text

    def test_entities_without_application(self, tmp_path, model_file, caplog):
        """Test entities alone are generated in order and the client is rebuilt"""
        sub_generator = RecordingSubGenerator()
        builder = MagicMock()
        builder.rebuild.return_value = True
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo", "Bar"]),
                                 sub_generator, client_builder=builder)

        state = pipeline.run()

        assert sub_generator.entity_names() == ["Foo", "Bar"]
        assert "Generating 2 entities." in caplog.text
        builder.rebuild.assert_called_once_with("npm", str(tmp_path))
        assert state.client_rebuilt is True

    def test_json_only_skips_entities(self, tmp_path, model_file, caplog):
        """Test json-only leaves entity generation and the client build out"""
        sub_generator = RecordingSubGenerator()
        builder = MagicMock()
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo"]),
                                 sub_generator, client_builder=builder, json_only=True)

        state = pipeline.run()

        assert sub_generator.calls == []
        assert "Entity JSON files created. Entity generation skipped." in caplog.text
        builder.rebuild.assert_not_called()
        assert state.entities_generated == 0

    def test_ignore_application(self, tmp_path, model_file):
        """Test ignore-application only generates the entities"""
        sub_generator = RecordingSubGenerator()
        pipeline = make_pipeline(tmp_path, model_file, make_result(["store"], ["Product"]),
                                 sub_generator, ignore_application=True)

        state = pipeline.run()

        assert sub_generator.kinds() == ["entity"]
        assert state.applications_generated is False

    def test_application_failure(self, tmp_path, model_file):
        """Test an application failure aborts before entities"""
        sub_generator = FailingSubGenerator(fail_on="store")
        pipeline = make_pipeline(tmp_path, model_file, make_result(["store"], ["Product"]),
                                 sub_generator)

        with pytest.raises(GenerationError) as exc_info:
            pipeline.run()

        assert exc_info.value.kind == "application"
        assert exc_info.value.message.startswith("Error while generating applications from the parsed model")
        assert sub_generator.kinds() == ["application"]

    def test_entity_failure_is_fail_fast(self, tmp_path, model_file):
        """Test the first failing entity stops the remaining ones"""
        sub_generator = FailingSubGenerator(fail_on="Bar")
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo", "Bar", "Baz"]),
                                 sub_generator)

        with pytest.raises(GenerationError) as exc_info:
            pipeline.run()

        assert exc_info.value.target == "Bar"
        assert "template rendering failed" in exc_info.value.message
        assert sub_generator.entity_names() == ["Foo", "Bar"]


class TestFinalize:
    """Tests for the finalize phase"""

    @pytest.mark.parametrize("options", [
        {"skip_install": True},
        {"skip_client": True},
        {"json_only": True},
    ])
    def test_no_rebuild(self, tmp_path, model_file, options):
        """Test the client build is skipped when installs or the client are off"""
        builder = MagicMock()
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo"]),
                                 client_builder=builder, **options)

        pipeline.run()

        builder.rebuild.assert_not_called()

    def test_no_rebuild_after_application(self, tmp_path, model_file):
        """Test the application generator owns the client build"""
        builder = MagicMock()
        pipeline = make_pipeline(tmp_path, model_file, make_result(["store"], ["Foo"]),
                                 client_builder=builder)

        pipeline.run()

        builder.rebuild.assert_not_called()

    def test_project_skip_client(self, tmp_path, model_file, project_config):
        """Test a project without client is never rebuilt"""
        project_config(skipClient=True)
        builder = MagicMock()
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo"]),
                                 client_builder=builder)

        pipeline.run()

        builder.rebuild.assert_not_called()

    def test_yarn_project(self, tmp_path, model_file, project_config):
        """Test the configured package manager is used for the rebuild"""
        project_config(clientPackageManager="yarn")
        builder = MagicMock()
        pipeline = make_pipeline(tmp_path, model_file, make_result(entities=["Foo"]),
                                 client_builder=builder)

        pipeline.run()

        builder.rebuild.assert_called_once_with("yarn", str(tmp_path))


class TestEndToEnd:
    """Runs with the JSON parser and client registration on a Vue project"""

    def test_rerun_does_not_duplicate_routes(self, vue_project, write_model):
        """Test importing the same model twice keeps every insertion unique"""
        model = write_model({"entities": [{"name": "Product"}]})
        options = ImportOptions(input_paths=[model], project_dir=str(vue_project),
                                skip_install=True, force=True)

        def run():
            ImportPipeline(
                options,
                parser=JsonModelParser(str(vue_project)),
                sub_generator=ClientRegistrationSubGenerator(str(vue_project), GeneratorConfig()),
            ).run()

        run()
        run()

        router = (vue_project / CLIENT_SRC / "app/router/entities.ts").read_text(encoding="utf-8")
        navbar = (vue_project / CLIENT_SRC / "app/core/jhi-navbar/jhi-navbar.vue").read_text(encoding="utf-8")
        main = (vue_project / CLIENT_SRC / "app/main.ts").read_text(encoding="utf-8")
        assert router.count("path: '/product',") == 1
        assert router.count("const Product = () => import(") == 1
        assert navbar.count('<b-dropdown-item to="/product">') == 1
        assert main.count("productService:") == 1
