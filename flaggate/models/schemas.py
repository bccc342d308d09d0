"""
Pydantic data models for FlagGate feature definitions.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Condition(BaseModel):
    """
    Eligibility rules gating a flag.

    Two independent rule lists; an empty list means "no restriction".
    Rules inside one list are OR-combined.
    """

    supported_levels: List[str] = Field(
        default_factory=list,
        description="Platform level rules, e.g. '>=29', '21-30', '33'",
    )
    supported_versions: List[str] = Field(
        default_factory=list,
        description="Application version rules, e.g. '>=1.2.0', '1.0.0-2.0.0'",
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "supported_levels": [">=29"],
                    "supported_versions": [">=1.0.0"],
                }
            ]
        },
    )


class FeatureDefinition(BaseModel):
    """A named boolean flag with its eligibility condition."""

    name: str
    enabled: bool
    condition: Condition = Field(default_factory=Condition)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "new_checkout",
                    "enabled": True,
                    "condition": {
                        "supported_levels": [">=29"],
                        "supported_versions": [">=1.0.0"],
                    },
                }
            ]
        },
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name must be a non-empty string")
        return value
