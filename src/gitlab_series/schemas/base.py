"""Base schema class for parsed GitLab payloads."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base class for all Pydantic schemas.

    Instances are immutable: a merge request or note is fetched once per sync
    pass and never modified afterwards. Text is kept byte-for-byte because it
    ends up in content-addressed blobs.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        from_attributes=True,
    )

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Self:
        """
        Factory method to create a schema instance from a GitLab API payload.

        Args:
            payload: Decoded JSON object (or python-gitlab ``attributes``)

        Returns:
            Pydantic schema instance
        """
        return cls.model_validate(payload)

    @classmethod
    def from_api_list(cls, payloads: list[dict[str, Any]]) -> list[Self]:
        """
        Factory method to create schema instances from a list of payloads.

        Args:
            payloads: List of decoded JSON objects

        Returns:
            List of Pydantic schema instances
        """
        return [cls.from_api(payload) for payload in payloads]
