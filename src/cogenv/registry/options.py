"""Validated option models for package lookups."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

__all__ = ["PackageLookupOptions", "LookupOptions", "GeneratorLookupOptions"]


def _as_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    if isinstance(value, tuple):
        return list(value)
    return value


class PackageLookupOptions(BaseModel):
    """Options understood by :meth:`PackageLookup.sync`.

    String values for list fields are wrapped into one-element lists.
    """

    model_config = ConfigDict(extra="forbid")

    local_only: bool = False
    package_paths: Optional[list[str]] = None
    npm_paths: Optional[list[str]] = None
    file_patterns: Optional[list[str]] = None
    package_patterns: Optional[list[str]] = None
    reverse: Optional[bool] = None
    max_depth: Optional[int] = None
    filter_paths: Optional[bool] = None

    @field_validator("package_paths", "npm_paths", "file_patterns", "package_patterns", mode="before")
    @classmethod
    def _to_list(cls, value: Any) -> Any:
        return _as_list(value)

    @classmethod
    def coerce(cls, options: Any = None, **overrides: Any) -> Any:
        """Build options from None, a bool (``local_only``), a dict or a model."""
        if isinstance(options, cls) and not overrides:
            return options.model_copy(deep=True)
        if options is None:
            data: dict[str, Any] = {}
        elif isinstance(options, bool):
            data = {"local_only": options}
        elif isinstance(options, BaseModel):
            data = options.model_dump(exclude_unset=True)
        else:
            data = dict(options)
        data.update(overrides)
        return cls(**data)


class LookupOptions(PackageLookupOptions):
    """Options for a registering lookup."""

    lookups: Optional[list[str]] = None
    single_result: bool = False

    @field_validator("lookups", mode="before")
    @classmethod
    def _lookups_to_list(cls, value: Any) -> Any:
        return _as_list(value)


class GeneratorLookupOptions(LookupOptions):
    """Options for a single-namespace lookup that does not register anything.

    ``multiple=True`` implies ``single_result=False`` unless the latter is
    given explicitly.
    """

    single_result: bool = True
    multiple: bool = False
    package_path: bool = False
    generator_path: bool = False

    @model_validator(mode="before")
    @classmethod
    def _multiple_implies_all_results(cls, data: Any) -> Any:
        if isinstance(data, dict) and "multiple" in data and "single_result" not in data:
            data = {**data, "single_result": not data["multiple"]}
        return data
