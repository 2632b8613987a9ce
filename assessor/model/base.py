import datetime

import pydantic as p
from pydantic.alias_generators import to_camel


class BaseModel(p.BaseModel):
    """Base for every assessor model; dumps use field aliases unless told otherwise.

    Aliases carry the wire names: camelCase for question and feedback payloads,
    and the `()`/`class` keys of the logging configuration.
    """

    model_config = p.ConfigDict(serialize_by_alias=True)


class CamelCaseModel(BaseModel):
    """Model whose wire format uses camelCase keys (e.g. `questionType`, `isCorrect`).

    Either spelling is accepted on input, so stored rows and Python callers may
    use snake_case field names.
    """

    model_config = p.ConfigDict(alias_generator=to_camel, validate_by_name=True, validate_by_alias=True)


class WithCtime(BaseModel):
    create_time: datetime.datetime
