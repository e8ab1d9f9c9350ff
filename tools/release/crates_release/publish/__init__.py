"""Publish executors for crates-release."""

from .executors import (
    CargoExecutor,
    CommandExecutor,
    DockerExecutor,
    NoOpExecutor,
    PublishExecutor,
    build_executor,
)
from .models import ExecutionResult, PublishRequest

__all__ = [
    "CargoExecutor",
    "CommandExecutor",
    "DockerExecutor",
    "ExecutionResult",
    "NoOpExecutor",
    "PublishExecutor",
    "PublishRequest",
    "build_executor",
]
