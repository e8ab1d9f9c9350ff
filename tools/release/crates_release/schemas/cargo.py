"""Pydantic models describing the parts of ``Cargo.toml`` the release tooling reads."""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DependencySpec(BaseModel):
    version: Optional[str] = None
    path: Optional[str] = Field(default=None, description="Relative path of a workspace-local dependency.")
    package: Optional[str] = Field(default=None, description="Upstream crate name when the key is renamed.")
    optional: bool = False

    model_config = ConfigDict(extra="allow")


class PackageSection(BaseModel):
    name: str
    version: str
    publish: Union[bool, list[str], None] = None

    model_config = ConfigDict(extra="allow")


def _coerce_dependencies(value: Any) -> Any:
    if not isinstance(value, dict):
        return value
    return {name: {"version": spec} if isinstance(spec, str) else spec for name, spec in value.items()}


class CargoManifest(BaseModel):
    package: Optional[PackageSection] = None
    dependencies: Dict[str, DependencySpec] = Field(default_factory=dict)
    build_dependencies: Dict[str, DependencySpec] = Field(default_factory=dict, alias="build-dependencies")
    dev_dependencies: Dict[str, DependencySpec] = Field(default_factory=dict, alias="dev-dependencies")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("dependencies", "build_dependencies", "dev_dependencies", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        return _coerce_dependencies(value)

    @property
    def name(self) -> Optional[str]:
        return self.package.name if self.package else None

    @property
    def version(self) -> Optional[str]:
        return self.package.version if self.package else None

    def publish_dependencies(self) -> Dict[str, DependencySpec]:
        """Dependencies that must already exist on the registry when this crate is published."""

        merged: Dict[str, DependencySpec] = dict(self.build_dependencies)
        merged.update(self.dependencies)
        return merged
