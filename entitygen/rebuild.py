"""
Client rebuild after an import
"""

from typing import Optional

from entitygen.logging_config import logger
from entitygen.process import CommandResult, run_command


BUILD_SCRIPT = "webapp:build"


class ClientBuilder:
    """Rebuilds the client bundle with the project's package manager"""

    def __init__(self, script: str = BUILD_SCRIPT, timeout: Optional[int] = None):
        self.script = script
        self.timeout = timeout
        self.last_result: Optional[CommandResult] = None

    def command(self, package_manager: str):
        return [package_manager, "run", self.script]

    def rebuild(self, package_manager: str, project_dir: str = ".") -> bool:
        """Run the build; failures are logged, never raised"""
        logger.info(f"Rebuilding client with {package_manager}")
        result = run_command(self.command(package_manager), cwd=project_dir, timeout=self.timeout)
        self.last_result = result
        if not result.ok:
            logger.error(
                f"Client build failed ({result.exit_code}): {result.stderr.strip() or result.stdout.strip()}"
            )
            return False
        return True
