"""Silk release model."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SilkVersion(BaseModel):
    """A Silk release and where to download it."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    version: str
    download_url: str
