"""
Error taxonomy for the use-golang pipeline

Every error carries the stable ``[use-golang]`` tag so that messages coming
out of the host build tool can be traced back to this plugin.
"""

from typing import Optional

TAG = "[use-golang]"


class UseGolangError(Exception):
    """Base class for all use-golang errors"""

    def __init__(self, message: str):
        if not message.startswith(TAG):
            message = f"{TAG} {message}"
        super().__init__(message)


class DirectiveNotFoundError(UseGolangError):
    """Raised when extraction is requested on a module without the directive"""

    def __init__(self):
        super().__init__('No "use golang" directive found')


class EmptyGuestCodeError(UseGolangError):
    """Raised when the directive is present but no Go code follows it"""

    def __init__(self):
        super().__init__('"use golang" directive is not followed by any Go code')


class TinyGoNotInstalledError(UseGolangError):
    """Raised when the TinyGo executable cannot be run"""

    def __init__(self, tinygo_path: str, reason: Optional[str] = None):
        self.tinygo_path = tinygo_path
        message = f"TinyGo not found at '{tinygo_path}'"
        if reason:
            message += f": {reason}"
        message += " (install from https://tinygo.org/getting-started/install/)"
        super().__init__(message)


class CompilationError(UseGolangError):
    """Raised when TinyGo exits with a non-zero status"""

    def __init__(self, diagnostics: str):
        self.diagnostics = diagnostics
        super().__init__(f"TinyGo compilation failed: {diagnostics}")


class ArtifactNotFoundError(UseGolangError):
    """Raised when a virtual artifact has no file on disk"""

    def __init__(self, module_id: str, path: Optional[str] = None):
        self.module_id = module_id
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"Artifact not found for {module_id}{where}")


class RuntimeGlueNotFoundError(UseGolangError):
    """Raised when wasm_exec.js cannot be located in the TinyGo installation"""

    def __init__(self, reason: str):
        super().__init__(f"Could not find wasm_exec.js from TinyGo installation: {reason}")


class ConfigError(UseGolangError):
    """Raised when the configuration file cannot be loaded"""


class TransformError(UseGolangError):
    """Module-scoped failure of a transform, wrapping the failing stage's error"""

    def __init__(self, module_id: str, cause: BaseException):
        self.module_id = module_id
        self.cause = cause
        reason = str(cause)
        if reason.startswith(TAG):
            reason = reason[len(TAG):].lstrip()
        super().__init__(f"Failed to process {module_id}: {reason}")
