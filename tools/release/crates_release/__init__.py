"""Release tooling helpers for publishing workspace crates."""

__version__ = "0.1.0"
from .manifest import ManifestCheck, ManifestError, load_cargo_manifest, validate_entry
from .ordering import OrderViolation, check_order
from .publish import ExecutionResult, PublishExecutor, PublishRequest, build_executor
from .schemas.cargo import CargoManifest
from .secrets import (
    SecretAttempt,
    SecretResolutionInfo,
    SecretSpec,
    register_resolver,
    register_secret,
    resolve_secret_info,
    use_dotenv,
)
from .toolchain import ToolchainError, resolve_toolchain_image

__all__ = [
    "__version__",
    "CargoManifest",
    "ExecutionResult",
    "ManifestCheck",
    "ManifestError",
    "OrderViolation",
    "PublishExecutor",
    "PublishRequest",
    "SecretAttempt",
    "SecretResolutionInfo",
    "SecretSpec",
    "ToolchainError",
    "build_executor",
    "check_order",
    "load_cargo_manifest",
    "register_resolver",
    "register_secret",
    "resolve_secret_info",
    "resolve_toolchain_image",
    "use_dotenv",
    "validate_entry",
]
