"""Read-only snapshot of dashboard records used for matching."""

from pydantic import BaseModel, Field, field_validator, model_validator

from dashlink.utils import coerce_id


class DashboardItem(BaseModel):
    """A dashboard record reduced to what the matcher needs."""

    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v):
        """Dashboard ids may be stored as numbers."""
        return coerce_id(v)

    @model_validator(mode="before")
    @classmethod
    def name_from_title(cls, data):
        """Experiences carry ``title`` rather than ``name``."""
        if isinstance(data, dict) and not data.get("name") and data.get("title"):
            data = {**data, "name": data["title"]}
        return data

    class Config:
        """Pydantic config."""

        frozen = True
        extra = "ignore"


class DashboardSnapshot(BaseModel):
    """Travel destinations, local places and experiences at one point in time.

    Assembled once per sync by the caller and passed to the matcher.
    """

    destinations: tuple[DashboardItem, ...] = Field(default_factory=tuple)
    places: tuple[DashboardItem, ...] = Field(default_factory=tuple)
    experiences: tuple[DashboardItem, ...] = Field(default_factory=tuple)

    class Config:
        """Pydantic config."""

        frozen = True
