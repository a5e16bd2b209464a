"""
Plugin configuration for use-golang

Options are read from ``use-golang.yaml`` (or ``.yml`` / ``.json``) in the
project root, falling back to defaults when no file is present.
"""

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_CONFIG_FILES = ("use-golang.yaml", "use-golang.yml", "use-golang.json")

OptimizationLevel = Literal["0", "1", "2", "s", "z"]


class PluginOptions(BaseModel):
    """Configuration consumed by the transform pipeline"""

    tinygo_path: str = Field(
        default="tinygo",
        description="TinyGo executable, resolved through PATH when not absolute"
    )
    build_dir: str = Field(
        default=".use-golang",
        description="Root of the build slots, relative to the project root"
    )
    optimization: OptimizationLevel = Field(
        default="z",
        description="TinyGo -opt level (0, 1, 2, s or z)"
    )
    generate_types: bool = Field(
        default=False,
        description="Write types.d.ts next to each compiled module"
    )
    validate_exports: bool = Field(
        default=False,
        description="Make //export names the authoritative binding list, checked at runtime"
    )
    cleanup_days: Optional[int] = Field(
        default=None,
        ge=0,
        description="Default age limit for `usegolang clean`"
    )
    base: str = Field(
        default="/",
        description="Public base path for bundled assets"
    )

    @field_validator("optimization", mode="before")
    @classmethod
    def _coerce_optimization(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("base")
    @classmethod
    def _normalize_base(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"

    def resolve_build_dir(self, project_root: Union[str, Path]) -> Path:
        """Absolute build root for a project"""
        build_dir = Path(self.build_dir)
        if not build_dir.is_absolute():
            build_dir = Path(project_root) / build_dir
        return build_dir.resolve()


def _read_config_file(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    return data or {}


def load_options(path: Optional[Union[str, Path]] = None,
                 project_root: Union[str, Path] = ".") -> PluginOptions:
    """
    Load plugin options from a configuration file

    Args:
        path: Explicit config file. Must exist when given.
        project_root: Directory searched for the default config files

    Returns:
        Validated PluginOptions

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
    else:
        config_path = None
        for name in DEFAULT_CONFIG_FILES:
            candidate = Path(project_root) / name
            if candidate.exists():
                config_path = candidate
                break
        if config_path is None:
            return PluginOptions()

    try:
        data = _read_config_file(config_path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping of options")

    try:
        return PluginOptions(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid options in {config_path}: {e}")
