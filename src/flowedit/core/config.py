"""
Configuration schema and loading for the flow structure engine.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

The settings describe the markup vocabulary the engine recognizes and
the conventions it follows when it generates text. Parsing and patching
stay purely syntactic: nothing here is a schema of valid pipe classes.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class PositionAttributes(BaseModel):
    """A pair of attribute names carrying a node's canvas position."""

    model_config = {"frozen": True}

    x: str = Field(min_length=1, description="Attribute holding the horizontal position")
    y: str = Field(min_length=1, description="Attribute holding the vertical position")


class EngineSettings(BaseModel):
    """Vocabulary and text-generation conventions.

    Example YAML:
        pipe_suffixes: [Pipe, Validator, Wrapper, Sender]
        position_attributes:
          - {x: "flow:x", y: "flow:y"}
          - {x: x, y: y}
        indent_unit: "    "
    """

    model_config = {"frozen": True, "extra": "forbid"}

    pipe_suffixes: tuple[str, ...] = Field(
        default=("Pipe", "Validator", "Wrapper", "Sender"),
        description="Tag suffixes that make a pipeline child a pipe",
    )
    receiver_tag: str = Field(default="Receiver", min_length=1)
    exit_tag: str = Field(default="Exit", min_length=1)
    exits_container_tag: str = Field(default="Exits", min_length=1)
    forward_tag: str = Field(default="Forward", min_length=1)
    param_tag: str = Field(default="Param", min_length=1)
    pipeline_tag: str = Field(default="Pipeline", min_length=1)
    adapter_tag: str = Field(default="Adapter", min_length=1)
    first_pipe_attribute: str = Field(default="firstPipe", min_length=1)
    position_attributes: tuple[PositionAttributes, ...] = Field(
        default=(PositionAttributes(x="x", y="y"), PositionAttributes(x="flow:x", y="flow:y")),
        description="Position attribute pairs recognized on read; the first is used when inserting",
    )
    indent_unit: str = Field(default="\t", description="One level of indentation in generated text")
    default_forward_name: str = Field(default="success", min_length=1)
    default_exit_state: str = Field(default="success", min_length=1)
    receiver_edge_label: str = Field(default="request", min_length=1)

    @field_validator("pipe_suffixes")
    @classmethod
    def validate_pipe_suffixes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("pipe_suffixes must name at least one suffix")
        if any(not suffix for suffix in v):
            raise ValueError("pipe_suffixes must not contain empty strings")
        if len(set(v)) != len(v):
            raise ValueError(f"pipe_suffixes contains duplicates: {list(v)}")
        return v

    @field_validator("indent_unit")
    @classmethod
    def validate_indent_unit(cls, v: str) -> str:
        if v.strip():
            raise ValueError("indent_unit must consist of whitespace only")
        return v

    @model_validator(mode="after")
    def validate_position_attributes(self) -> "EngineSettings":
        if not self.position_attributes:
            raise ValueError("position_attributes must contain at least one pair")
        names = [name for pair in self.position_attributes for name in (pair.x, pair.y)]
        if len(set(names)) != len(names):
            raise ValueError(f"position attribute names must be unique, got {names}")
        return self

    @property
    def insert_position(self) -> PositionAttributes:
        """The attribute pair written when a node has no position yet."""
        return self.position_attributes[0]

    def is_pipe_tag(self, tag: str) -> bool:
        return tag.endswith(self.pipe_suffixes) and tag != self.pipeline_tag


_DEFAULT_SETTINGS = EngineSettings()


def default_settings() -> EngineSettings:
    """Return the built-in settings."""
    return _DEFAULT_SETTINGS


def load_settings(config_path: Path) -> EngineSettings:
    """Load settings from a YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (FLOWEDIT_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated EngineSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FLOWEDIT",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config: dict[str, Any] = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return EngineSettings(**raw_config)
