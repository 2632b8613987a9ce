"""Tests for EvaluationID."""

from __future__ import annotations

import pydantic as p
import pytest

from assessor.model import EvaluationID


class TestEvaluationID(object):
    def test_generated(self) -> None:
        eid = EvaluationID()

        assert eid.startswith("eval$")
        assert len(eid.key) == 22
        assert EvaluationID(str(eid)) == eid

    def test_from_stored_key(self) -> None:
        eid = EvaluationID()

        assert EvaluationID(key=eid.key) == eid

    @pytest.mark.parametrize("s", ["not-an-id", "eval$short", "user$" + "a" * 22, "eval$" + "0" * 22])
    def test_invalid(self, s: str) -> None:
        with pytest.raises(ValueError):
            EvaluationID(s)

    def test_pydantic_field(self) -> None:
        eid = EvaluationID()
        adapter = p.TypeAdapter(EvaluationID)

        assert adapter.validate_python(str(eid)) == eid
        assert isinstance(adapter.validate_json(f'"{eid}"'), EvaluationID)
        assert adapter.dump_json(eid) == f'"{eid}"'.encode()
