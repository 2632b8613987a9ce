import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from assessor.model import BaseModel


# NOTE: pydantic merges model_config along the bases, so the settings config
#       keeps BaseModel's serialize_by_alias
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


class BaseSecrets(BaseSettings):  # pyright: ignore [reportIncompatibleVariableOverride]
    pass
