from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeDecorator
from sqlalchemy.types import JSON, String

from assessor.model.id import EvaluationID, KeyLength

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class EvaluationIDType(TypeDecorator[EvaluationID]):
    """Stores only the shortuuid part of an `EvaluationID`."""

    impl = String(KeyLength)
    cache_ok = True

    def process_bind_param(self, value: EvaluationID | str | None, dialect: Dialect) -> str | None:
        return EvaluationID(value).key if value is not None else None

    def process_result_value(self, value: str | None, dialect: Dialect) -> EvaluationID | None:
        return EvaluationID(key=value) if value is not None else None
