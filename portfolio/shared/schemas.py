"""
Shared pydantic base for request/response bodies.

Python attributes are snake_case; the wire format is camelCase
(``coverImage``, ``resumeLink``). Both spellings are accepted on input.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
