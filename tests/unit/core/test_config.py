# tests/unit/core/test_config.py
"""Tests for engine settings and their loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestEngineSettings:
    def test_defaults(self) -> None:
        from flowedit.core.config import EngineSettings

        settings = EngineSettings()

        assert settings.pipe_suffixes == ("Pipe", "Validator", "Wrapper", "Sender")
        assert settings.receiver_tag == "Receiver"
        assert settings.indent_unit == "\t"
        assert (settings.insert_position.x, settings.insert_position.y) == ("x", "y")

    def test_settings_are_frozen(self) -> None:
        from flowedit.core.config import EngineSettings

        settings = EngineSettings()

        with pytest.raises(ValidationError):
            settings.exit_tag = "End"  # type: ignore[misc]

    def test_unknown_keys_rejected(self) -> None:
        from flowedit.core.config import EngineSettings

        with pytest.raises(ValidationError, match="extra"):
            EngineSettings(pipe_sufixes=("Pipe",))  # type: ignore[call-arg]

    @pytest.mark.parametrize(
        "suffixes",
        [(), ("Pipe", ""), ("Pipe", "Pipe")],
    )
    def test_pipe_suffixes_validated(self, suffixes: tuple[str, ...]) -> None:
        from flowedit.core.config import EngineSettings

        with pytest.raises(ValidationError, match="pipe_suffixes"):
            EngineSettings(pipe_suffixes=suffixes)

    def test_indent_unit_must_be_whitespace(self) -> None:
        from flowedit.core.config import EngineSettings

        with pytest.raises(ValidationError, match="whitespace"):
            EngineSettings(indent_unit="--")

    def test_position_attribute_names_unique(self) -> None:
        from flowedit.core.config import EngineSettings, PositionAttributes

        with pytest.raises(ValidationError, match="unique"):
            EngineSettings(position_attributes=(PositionAttributes(x="x", y="y"), PositionAttributes(x="x", y="top")))

    def test_position_attributes_required(self) -> None:
        from flowedit.core.config import EngineSettings

        with pytest.raises(ValidationError, match="at least one pair"):
            EngineSettings(position_attributes=())

    def test_pipeline_tag_is_never_a_pipe(self) -> None:
        from flowedit.core.config import EngineSettings

        settings = EngineSettings(pipe_suffixes=("Pipe", "line"))

        assert settings.is_pipe_tag("Baseline")
        assert not settings.is_pipe_tag("Pipeline")


class TestLoadSettings:
    def test_load_from_yaml_file(self, tmp_path: Path) -> None:
        from flowedit.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            """
pipe_suffixes: [Pipe, Validator, Wrapper, Sender, Listener]
indent_unit: "    "
position_attributes:
  - {x: "flow:x", y: "flow:y"}
"""
        )

        settings = load_settings(config_file)

        assert settings.pipe_suffixes[-1] == "Listener"
        assert settings.indent_unit == "    "
        assert settings.insert_position.x == "flow:x"
        assert settings.exit_tag == "Exit"

    def test_load_with_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from flowedit.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("default_exit_state: success\n")

        monkeypatch.setenv("FLOWEDIT_DEFAULT_EXIT_STATE", "error")

        settings = load_settings(config_file)
        assert settings.default_exit_state == "error"

    def test_load_validates_schema(self, tmp_path: Path) -> None:
        from flowedit.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("indent_unit: xx\n")

        with pytest.raises(ValidationError):
            load_settings(config_file)

    def test_load_missing_file_raises_file_not_found(self, tmp_path: Path) -> None:
        from flowedit.core.config import load_settings

        missing_file = tmp_path / "nonexistent.yaml"

        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(missing_file)

    def test_loaded_settings_drive_the_engine(self, tmp_path: Path) -> None:
        from flowedit.core.config import load_settings
        from flowedit.core.document import DocumentContext
        from flowedit.engine import FlowEngine

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("pipe_suffixes: [Step]\n")

        result = FlowEngine(load_settings(config_file)).parse(
            DocumentContext("<Pipeline><FirstStep name='a'/><EchoPipe name='b'/></Pipeline>")
        )

        assert result.structure is not None
        assert [node.name for node in result.structure.pipes] == ["a"]
