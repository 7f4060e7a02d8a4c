from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Generator configuration loaded from environment variables."""

    database_url: str  # e.g. mongodb://localhost:27017/app, database name is the URL path
    collection_name: str = "collection.ids"  # Collection holding one document per counter
    step: int = 1  # Amount added to a counter on each generated id
    initial_value: int = Field(default=1, ge=0)  # Value a counter starts from when created lazily
    debug: bool = False

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MONGOSEQ_",
        "extra": "ignore",
    }
