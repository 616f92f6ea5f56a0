"""
Custom Exceptions for entitygen
===============================

Fatal errors raised by the import pipeline. Needle insertions never raise:
they report a MutationResult instead and the run carries on.

Usage:
    from entitygen.exceptions import InputNotFoundError, GenerationError

    if not path.is_file():
        raise InputNotFoundError(str(path))

    try:
        invoker.invoke(GenerationKind.ENTITY, options)
    except Exception as e:
        raise GenerationError("entity", name, e) from e
"""

from typing import Optional, Any, Dict, List


class EntityGenError(Exception):
    """Base exception for all entitygen errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Input & Configuration Errors
# ============================================

class InputNotFoundError(EntityGenError):
    """An input model file does not exist"""

    def __init__(self, path: str):
        super().__init__(
            f"Could not find {path}, make sure the path is correct.",
            code="INPUT_NOT_FOUND",
            details={"path": path}
        )
        self.path = path


class ConfigurationError(EntityGenError):
    """Project configuration could not be read"""

    def __init__(self, message: str, path: Optional[str] = None):
        details = {"path": path} if path else {}
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


# ============================================
# Parse Errors
# ============================================

class ModelParseError(EntityGenError):
    """The domain model could not be parsed"""

    def __init__(self, input_paths: List[str], cause: Optional[BaseException] = None):
        cause_text = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
        super().__init__(
            f"Error while parsing applications and entities from {', '.join(input_paths)}: {cause_text}",
            code="MODEL_PARSE_ERROR",
            details={"input_paths": list(input_paths)}
        )
        self.input_paths = list(input_paths)
        self.cause = cause


class ModelFormatError(EntityGenError):
    """Raised by parsers when an input document is malformed"""

    def __init__(self, message: str, path: Optional[str] = None):
        details = {"path": path} if path else {}
        super().__init__(message, code="MODEL_FORMAT_ERROR", details=details)


# ============================================
# Generation Errors
# ============================================

class GenerationError(EntityGenError):
    """A sub-generator invocation failed"""

    def __init__(self, kind: str, target: str, cause: Optional[BaseException] = None):
        plural = "applications" if kind == "application" else "entities"
        message = f"Error while generating {plural} from the parsed model"
        if cause is not None:
            message = f"{message}\n{cause}"
        super().__init__(
            message,
            code="GENERATION_ERROR",
            details={"kind": kind, "target": target}
        )
        self.kind = kind
        self.target = target
        self.cause = cause


class SubGeneratorError(EntityGenError):
    """An external generator command exited with an error"""

    def __init__(self, command: List[str], exit_code: int, stderr: str = ""):
        super().__init__(
            f"Command '{' '.join(command)}' failed with exit code {exit_code}",
            code="SUBGENERATOR_FAILED",
            details={"command": command, "exit_code": exit_code, "stderr": stderr}
        )
        self.exit_code = exit_code
