"""
External command execution
"""

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from entitygen.logging_config import logger


@dataclass
class CommandResult:
    """Result of a command execution"""
    command: List[str]
    exit_code: int
    stdout: str
    stderr: str
    duration: float

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_command(
    command: List[str],
    cwd: Optional[str] = None,
    timeout: Optional[int] = None,
    capture_output: bool = True,
) -> CommandResult:
    """Run a command synchronously; a missing executable is reported as exit code 127"""
    start_time = time.time()
    logger.debug(f"Running {' '.join(command)} in {Path(cwd or '.').resolve()}")
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            timeout=timeout,
            capture_output=capture_output,
            text=True,
        )
    except FileNotFoundError as e:
        return CommandResult(
            command=command,
            exit_code=127,
            stdout="",
            stderr=str(e),
            duration=time.time() - start_time,
        )

    return CommandResult(
        command=command,
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        duration=time.time() - start_time,
    )
