"""Named counters for sequential id generation."""

from pydantic import Field

from mongoseq.core.db import MongoModel

DEFAULT_COLLECTION_NAME = "collection.ids"
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Counter(MongoModel):
    """Counter record, one document per name.

    The name is the document `_id`, so at most one record exists per name.
    """

    name: str = Field(alias="_id", min_length=1)
    value: int = Field(ge=INT64_MIN, le=INT64_MAX)  # Last issued value; next id is value + step
