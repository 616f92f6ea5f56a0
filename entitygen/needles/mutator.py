"""
File Mutator - splices content next to needles in existing files

Every call is a read-modify-write against the file on disk, so several
insertions into the same file within one run each see the previous one.
"""

import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Pattern, Union

from entitygen.logging_config import logger
from entitygen.needles.matcher import NeedleId, locate, needle_value


class InsertPosition(str, Enum):
    """Where the payload goes relative to the needle line"""
    BEFORE = "before"
    AFTER = "after"


class MutationStatus(str, Enum):
    """Outcome of a needle insertion"""
    APPLIED = "applied"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    SKIPPED_MISSING_NEEDLE = "skipped_missing_needle"
    FAILED_MISSING_FILE = "failed_missing_file"


@dataclass
class MutationRequest:
    """A single needle insertion"""
    target_path: str
    needle: NeedleId
    payload: str
    # Substring, or compiled pattern searched in the file text
    duplicate_check: Optional[Union[str, Pattern[str]]] = None
    position: InsertPosition = InsertPosition.BEFORE


@dataclass
class MutationResult:
    """Result of applying a MutationRequest"""
    status: MutationStatus
    path: str
    needle: str
    message: str = ""

    @property
    def mutated(self) -> bool:
        return self.status == MutationStatus.APPLIED

    @property
    def reason(self) -> str:
        return self.status.value


@dataclass
class FileOperation:
    """Represents a needle insertion attempt"""
    path: str
    needle: str
    status: MutationStatus
    old_content: Optional[str] = None
    content: Optional[str] = None


def payload_present(text: str, payload: str) -> bool:
    """Check whether every payload line already appears in order, indentation ignored"""
    lines = [line.strip() for line in payload.splitlines() if line.strip()]
    if not lines:
        return True
    pattern = r"\r?\n".join(r"[ \t]*" + re.escape(line) for line in lines)
    return re.search(pattern, text) is not None


def splice(text: str, request: MutationRequest) -> Optional[str]:
    """Return the new file text, or None when the needle is missing"""
    match = locate(text, request.needle)
    if match is None:
        return None

    lines = text.splitlines(keepends=True)
    needle_line = lines[match.line_index]
    newline = "\r\n" if needle_line.endswith("\r\n") else "\n"

    block = "".join(
        (match.indent + line if line.strip() else "") + newline
        for line in request.payload.splitlines()
    )

    if request.position == InsertPosition.AFTER:
        if not needle_line.endswith(("\n", "\r")):
            lines[match.line_index] = needle_line + newline
        lines.insert(match.line_index + 1, block)
    else:
        lines.insert(match.line_index, block)
    return "".join(lines)


def write_atomic(path: Path, content: str) -> None:
    """Write through a temp file in the same directory, then rename over the target"""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class FileMutator:
    """Applies MutationRequests to files on disk"""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir).resolve() if base_dir else None
        self.history: List[FileOperation] = []

    def resolve_path(self, path: str) -> Path:
        p = Path(path)
        if p.is_absolute() or self.base_dir is None:
            return p
        return self.base_dir / p

    def apply(self, request: MutationRequest, error_message: str = "") -> MutationResult:
        """Insert the request payload next to its needle, at most once"""
        file_path = self.resolve_path(request.target_path)
        needle = needle_value(request.needle)

        if not file_path.is_file():
            message = f"File {file_path} not found. {error_message}".strip()
            logger.warning(message)
            return self._record(file_path, needle, MutationStatus.FAILED_MISSING_FILE, message)

        with open(file_path, encoding="utf-8", newline="") as f:
            content = f.read()

        if isinstance(request.duplicate_check, str):
            already = request.duplicate_check in content
        elif request.duplicate_check is not None:
            already = request.duplicate_check.search(content) is not None
        else:
            already = payload_present(content, request.payload)
        if already:
            return self._record(file_path, needle, MutationStatus.SKIPPED_DUPLICATE, "already applied")

        new_content = splice(content, request)
        if new_content is None:
            message = f"Missing needle {needle} in {file_path}. {error_message}".strip()
            logger.warning(message)
            return self._record(file_path, needle, MutationStatus.SKIPPED_MISSING_NEEDLE, message)

        write_atomic(file_path, new_content)
        return self._record(
            file_path, needle, MutationStatus.APPLIED, "",
            old_content=content, content=new_content,
        )

    def _record(self, path: Path, needle: str, status: MutationStatus, message: str,
                old_content: Optional[str] = None, content: Optional[str] = None) -> MutationResult:
        self.history.append(FileOperation(
            path=str(path),
            needle=needle,
            status=status,
            old_content=old_content,
            content=content,
        ))
        logger.log_mutation(str(path), needle, status.value)
        return MutationResult(status=status, path=str(path), needle=needle, message=message)

    def applied(self) -> List[FileOperation]:
        """Operations that changed a file"""
        return [op for op in self.history if op.status == MutationStatus.APPLIED]
