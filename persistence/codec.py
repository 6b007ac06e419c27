from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Annotated, Any, Iterable, TypeVar

from pydantic import AfterValidator, BaseModel, TypeAdapter, ValidationError

from .errors import DecodeError

M = TypeVar("M", bound=BaseModel)


def _require_iso8601(value: str) -> str:
    try:
        datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"not an ISO-8601 timestamp: {value!r}") from e
    return value


# Kept as the caller's text; only checked for shape.
IsoTimestamp = Annotated[str, AfterValidator(_require_iso8601)]


def _require_non_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


RecordId = Annotated[str, AfterValidator(_require_non_blank)]


@lru_cache(maxsize=None)
def _list_adapter(model: type[BaseModel]) -> TypeAdapter[Any]:
    return TypeAdapter(list[model])  # type: ignore[valid-type]


def _summarize(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ())) or "value"
    more = f" (+{e.error_count() - 1} more)" if e.error_count() > 1 else ""
    return f"{loc}: {first.get('msg', 'invalid')}{more}"


def encode_record(record: BaseModel) -> dict[str, Any]:
    return record.model_dump(mode="json")


def encode_records(records: Iterable[BaseModel]) -> list[dict[str, Any]]:
    return [encode_record(r) for r in records]


def decode_record(model: type[M], raw: Any) -> M:
    if not isinstance(raw, dict):
        raise DecodeError(f"expected an object for {model.__name__}, got {type(raw).__name__}")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"invalid {model.__name__}: {_summarize(e)}") from e


def decode_records(model: type[M], raw: Any) -> list[M]:
    """
    Decode a stored array of records. One malformed member fails the whole array.
    """
    if not isinstance(raw, list):
        raise DecodeError(f"expected an array of {model.__name__}, got {type(raw).__name__}")
    try:
        return _list_adapter(model).validate_python(raw)
    except ValidationError as e:
        raise DecodeError(f"invalid {model.__name__} array: {_summarize(e)}") from e
