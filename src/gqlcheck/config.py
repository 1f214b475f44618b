from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from gqlcheck import log
from gqlcheck.annotation.formatter import FormatOptions
from gqlcheck.annotation.reconciler import ReconcileOptions
from gqlcheck.models import TargetKind
from gqlcheck.render.renderer import EnumStyle

DEFAULT_CONFIG_FILENAME = "gqlcheck.yaml"


class OperationTargetConfig(BaseModel):
    """A function, method or tagged template whose query literals get annotated."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    method_name: str = Field(min_length=1)
    object_name: str | None = None
    tagged_template: bool = False
    gql_literal_argument_index: int = Field(0, ge=0)
    schema_file_path: Path
    omit_empty_arguments: bool = False

    @model_validator(mode="after")
    def validate_tagged_template_has_no_object(self) -> "OperationTargetConfig":
        if self.tagged_template and self.object_name is not None:
            raise ValueError("A tagged template target can't have an 'object_name'")
        return self

    @property
    def kind(self) -> TargetKind:
        if self.tagged_template:
            return TargetKind.TAGGED_TEMPLATE
        if self.object_name is not None:
            return TargetKind.METHOD
        return TargetKind.FUNCTION

    def matches(self, object_name: str | None, method_name: str, tagged_template: bool) -> bool:
        """Targets without an object name match calls on any object."""
        if self.tagged_template != tagged_template or self.method_name != method_name:
            return False
        return self.object_name is None or self.object_name == object_name


class GqlCheckConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    targets: list[OperationTargetConfig] = Field(default_factory=list)
    gql_tag_name: str = Field("gql", min_length=1)
    print_width: int = Field(80, ge=20)
    tab_width: int = Field(2, ge=1)
    enum_style: EnumStyle = EnumStyle.NAME

    def find_target(
        self, object_name: str | None, method_name: str, tagged_template: bool = False
    ) -> OperationTargetConfig | None:
        """Return the first target matching a call, or None."""
        return next(
            (target for target in self.targets if target.matches(object_name, method_name, tagged_template)),
            None,
        )

    @property
    def target_names(self) -> set[str]:
        return {target.method_name for target in self.targets}

    def reconcile_options(self, target: OperationTargetConfig) -> ReconcileOptions:
        return ReconcileOptions(
            omit_empty_arguments=target.omit_empty_arguments,
            enum_style=self.enum_style,
            format=FormatOptions(print_width=self.print_width, tab_width=self.tab_width),
        )

    def resolve_paths(self, base_dir: Path) -> "GqlCheckConfig":
        """Return a copy whose relative schema paths are resolved against base_dir."""
        targets = [
            target.model_copy(update={"schema_file_path": (base_dir / target.schema_file_path).resolve()})
            for target in self.targets
        ]
        return self.model_copy(update={"targets": targets})


def load_config(config_path: Path) -> GqlCheckConfig:
    """
    Load and validate a gqlcheck configuration from a YAML file.

    Relative schema file paths are resolved against the directory of the file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        A validated GqlCheckConfig

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against GqlCheckConfig fails.
    """
    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded gqlcheck config from %s", config_path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None:
        raw = {}

    if not isinstance(raw, dict):
        raise TypeError(f"gqlcheck config root must be a mapping (YAML object), got {type(raw).__name__}")

    config = GqlCheckConfig.model_validate(cast(dict[str, Any], raw))
    return config.resolve_paths(config_path.resolve().parent)
