# src/roundboard/schemas/common.py

"""Common Pydantic configuration shared by all resources."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys.

    The game client speaks camelCase (``coinsTotal``, ``scoreRank``) while the
    Python side keeps snake_case attributes. Both spellings are accepted on
    input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
