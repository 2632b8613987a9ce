from __future__ import annotations

import typing as t

import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

KeyLength = 22


class EvaluationID(str):
    """Evaluation key of the form `eval$<shortuuid>`.

    Only the shortuuid part is stored; the API and logs always use the prefixed form.
    """

    prefix: t.ClassVar[str] = "eval$"

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        """
        `s` is a complete, prefixed id and is validated; `key` is the bare
        shortuuid loaded from storage; with neither, a fresh id is generated
        """
        if key is not None:
            return super().__new__(cls, cls.prefix + key)
        if s is None:
            return super().__new__(cls, cls.prefix + shortuuid.uuid())

        body = s.removeprefix(cls.prefix)
        if body == s or len(body) != KeyLength:
            raise ValueError(f"invalid evaluation id {s!r}: expected {cls.prefix} and {KeyLength} characters")
        if not set(body) <= set(shortuuid.get_alphabet()):
            raise ValueError(f"invalid evaluation id {s!r}: not a shortuuid")
        return super().__new__(cls, s)

    @property
    def key(self) -> str:
        return self.removeprefix(self.prefix)

    def __repr__(self) -> str:
        return f"<EvaluationID {self.key}>"

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        from_str = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_str]),
            serialization=core_schema.plain_serializer_function_ser_schema(str.__str__),
        )
