"""Autoload configuration: the naming authorities discovery reads from."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AutoloadConfig(BaseModel):
    """Namespace mapping rules and pre-resolved class map of one project.

    Loaded once and never mutated; a reload builds a new instance.
    """

    model_config = ConfigDict(frozen=True)

    psr4: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Namespace prefix (with trailing separator) -> base directories, "
        "in declaration order.",
    )
    fallback_dirs: list[str] = Field(
        default_factory=list,
        description="Directories scanned with no prefix applied.",
    )
    class_map: dict[str, str] = Field(
        default_factory=dict,
        description="Absolute file path -> fully-qualified name.",
    )
    source: str = Field(
        default="",
        description="Where this configuration was read from.",
    )

    def namespace_mapping(self) -> dict[str, list[str]]:
        """Prefix -> directories, with the fallback directories last under ``""``.

        A ``""`` entry already present in ``psr4`` is extended, not replaced.
        """
        mapping = {prefix: list(dirs) for prefix, dirs in self.psr4.items()}
        if self.fallback_dirs:
            fallback = mapping.pop("", [])
            mapping[""] = [*fallback, *self.fallback_dirs]
        return mapping
