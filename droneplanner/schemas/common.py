#!/usr/bin/env python3
import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from droneplanner.core.errors import BadRequestError


class CamelModel(BaseModel):
    """Stored under snake_case field names, exchanged as camelCase JSON.

    ``to_storage()`` gives the dict written to JSON columns; FastAPI
    serialises responses by alias.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json")


def format_document_id(value: uuid.UUID) -> str:
    return value.hex


def parse_document_id(value: str, kind: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise BadRequestError(f"Invalid {kind} ID")
