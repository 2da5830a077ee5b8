"""Base model configuration for loaded and serialized documents."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model that tolerates unknown keys.

    Used for documents produced by external tools, which carry more fields
    than we read.
    """

    model_config = ConfigDict(frozen=True)


class StrictModel(BaseModel):
    """Immutable model that rejects unknown keys.

    Used for documents written by hand, where a typo should not pass silently.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
