"""Base models for all Gradlebox Pydantic models.

Descriptor documents use the camelCase keys of the Android Gradle DSL
(``minSdk``, ``buildTypes``, ...), while Python code uses snake_case
attributes. The base model wires this up with an alias generator so both
spellings are accepted on input and camelCase is produced on output.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GradleboxBaseModel(BaseModel):
    """Base model class for all Gradlebox Pydantic models.

    This class enforces consistent serialization behavior:
    - by_alias=True: Use camelCase field aliases for serialization
    - exclude_unset=True: Exclude fields that weren't explicitly set
    - mode="json": Use JSON-compatible serialization
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        # Unknown keys in a descriptor are a mistake, not an extension point
        extra="forbid",
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    def to_dict_full(self) -> dict[str, Any]:
        """Convert model to dictionary including all fields (even unset ones).

        Returns:
            Dictionary representation including all fields
        """
        return self.model_dump(by_alias=True, exclude_unset=False, mode="json")


class GradleboxFrozenModel(GradleboxBaseModel):
    """Immutable model used for resolution output."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)
