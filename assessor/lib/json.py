"""JSON encoding for evaluation records.

Feedback items and recommendations are pydantic models written in their
camelCase wire form, both into the `evaluation_test` JSON columns and into
API responses. Scores may arrive as `Decimal`, and performance and question
types as enums.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import json as pyjson
import typing as t

import fastapi
import pydantic as p
import starlette.background

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


def encode_model(obj: p.BaseModel) -> dict[str, JSONValue]:
    return obj.model_dump(mode="json", by_alias=True)


def encode_decimal(obj: decimal.Decimal) -> int | float:
    return int(obj) if obj == obj.to_integral_value() else float(obj)


Encoders: dict[type, t.Callable[[t.Any], JSONValue]] = {
    datetime.datetime: datetime.datetime.isoformat,
    decimal.Decimal: encode_decimal,
    enum.Enum: lambda obj: obj.value,
}


class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        if isinstance(o, p.BaseModel):
            return encode_model(o)
        for tp, encode in Encoders.items():
            if isinstance(o, tp):
                return encode(o)
        return super().default(o)


def dumps(obj: t.Any, *, cls: type[pyjson.JSONEncoder] = JSONEncoder, **kw: t.Any) -> str:
    return pyjson.dumps(obj, cls=cls, **kw)


def loads(s: str | bytes | bytearray, **kw: t.Any) -> t.Any:
    """Counterpart of `dumps`, used as the engine's JSON column deserializer."""
    return pyjson.loads(s, **kw)


class FastAPIJSONResponse(fastapi.responses.JSONResponse):
    """JSON response that renders models by alias and keeps non-ASCII marks (✅, ❌) unescaped."""

    def __init__(
        self,
        content: t.Any,
        status_code: int = 200,
        headers: t.Mapping[str, str] | None = None,
        media_type: str | None = None,
        background: starlette.background.BackgroundTask | None = None,
    ):
        super().__init__(
            jsonable_encoder(content),
            status_code=status_code,
            headers=headers,
            media_type=media_type,
            background=background,
        )

    def render(self, content: t.Any) -> bytes:
        return dumps(content, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")


def jsonable_encoder(obj: t.Any) -> JSONValue:
    import fastapi.encoders

    if isinstance(obj, p.BaseModel):
        return jsonable_encoder(encode_model(obj))
    return fastapi.encoders.jsonable_encoder(obj, custom_encoder=Encoders)
