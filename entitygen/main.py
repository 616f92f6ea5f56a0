#!/usr/bin/env python3
"""
entitygen - Main Entry Point

Usage:
    entitygen model.json                     # Import a model and generate it
    entitygen a.json b.json --json-only      # Only export entity descriptors
    entitygen model.json --ignore-application
    entitygen --help                         # Show help
"""

import argparse
import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from entitygen import __version__
from entitygen.config import GeneratorConfig, read_project_file
from entitygen.exceptions import EntityGenError
from entitygen.generators import ClientRegistrationSubGenerator, CommandSubGenerator, DryRunSubGenerator
from entitygen.importer import ImportOptions, ImportPipeline, JsonModelParser, PipelineState
from entitygen.insight import Statistics
from entitygen.logging_config import logger, setup_logging
from entitygen.rebuild import ClientBuilder


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="entitygen",
        description="Import a domain model and generate its applications and entities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  entitygen model.json                         Generate the application and entities
  entitygen model.json --json-only             Export entity descriptors only
  entitygen model.json --skip-install          Do not rebuild the client afterwards
  entitygen model.json --dry-run               Show what would be generated

When the model declares several applications, nothing is generated
automatically; their names are listed for manual generation.
        """
    )

    parser.add_argument(
        "files",
        nargs="+",
        help="Model files to import"
    )

    parser.add_argument(
        "--db",
        type=str,
        help="Database to use when the project has no configuration yet"
    )
    parser.add_argument(
        "--json-only",
        action="store_true",
        help="Generate only the entity descriptor files and skip entity regeneration"
    )
    parser.add_argument(
        "--ignore-application",
        action="store_true",
        help="Ignore application generation"
    )
    parser.add_argument(
        "--skip-ui-grouping",
        action="store_true",
        help="Disable the UI grouping behaviour for entity client side code"
    )

    # Flags passed through to the sub-generators
    parser.add_argument("--force", action="store_true", help="Overwrite files and disable change filtering")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--skip-install", action="store_true", help="Do not rebuild the client")
    parser.add_argument("--skip-client", action="store_true", help="Skip client side generation")
    parser.add_argument("--skip-server", action="store_true", help="Skip server side generation")
    parser.add_argument("--yarn", action="store_true", help="Use yarn when the project names no package manager")

    parser.add_argument(
        "-d", "--directory",
        type=str,
        default=".",
        help="Project directory (default: current directory)"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a JSON tool configuration file"
    )
    parser.add_argument(
        "--command",
        type=str,
        help="External generator command for applications and entities (default: ENTITYGEN_SUBGEN_COMMAND)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not run any sub-generator, only report"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON structured logs"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Environment, then config file, then project record"""
    config = GeneratorConfig.load_default(args.directory)
    if args.config:
        config.load_from_file(args.config)
    if args.command:
        config.subgen_command = args.command
    if args.log_level:
        config.log_level = args.log_level
    elif args.debug:
        config.log_level = "DEBUG"
    if args.json_logs:
        config.json_logs = True

    project = read_project_file(args.directory)
    if project is not None:
        config.apply_project_dict(project)
    return config


def build_pipeline(args: argparse.Namespace, config: GeneratorConfig) -> ImportPipeline:
    options = ImportOptions(
        input_paths=args.files,
        project_dir=args.directory,
        db=args.db,
        json_only=args.json_only,
        ignore_application=args.ignore_application,
        skip_ui_grouping=args.skip_ui_grouping,
        force=args.force,
        debug=args.debug,
        skip_install=args.skip_install or args.dry_run,
        skip_client=args.skip_client,
        skip_server=args.skip_server,
        use_yarn=args.yarn,
    )

    if args.dry_run:
        sub_generator = DryRunSubGenerator()
    else:
        delegate = CommandSubGenerator(config.subgen_command, args.directory) if config.subgen_command else None
        sub_generator = ClientRegistrationSubGenerator(args.directory, config, delegate)

    return ImportPipeline(
        options,
        parser=JsonModelParser(args.directory),
        sub_generator=sub_generator,
        config=config,
        client_builder=ClientBuilder(),
        statistics=Statistics(enabled=config.insight_enabled, url=config.insight_url),
    )


def run(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Run the CLI, returning the process exit code"""
    parser = create_parser()
    args = parser.parse_args(argv)
    args.directory = os.path.abspath(args.directory)
    console = console or Console(stderr=True)

    try:
        config = load_config(args)
        setup_logging(config.log_level, config.json_logs, config.log_file, console=console)
        pipeline = build_pipeline(args, config)
        state: PipelineState = pipeline.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except EntityGenError as e:
        console.print(f"\n[red]✗ {escape(e.message)}[/red]")
        if args.debug:
            logger.log_error_with_context(e, "import", error=e.to_dict())
        return 1
    except Exception as e:
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        if args.debug:
            logger.log_error_with_context(e, "import")
        return 1

    if state.applications_generated or state.entities_generated:
        console.print("[green]✓ Import complete[/green]")
    return 0


def main():
    """Main entry point"""
    sys.exit(run())


if __name__ == "__main__":
    main()
