"""
JSON Patch (RFC 6902) support for flat DTOs.

A patch document is parsed into an ordered list of `PatchOperation`s and
applied to a plain dict copy of the target DTO. Operations that cannot be
applied are collected as field errors instead of aborting, so the caller
can report them together with the re-validation result.
"""
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, TypeAdapter, model_validator


class PatchOperation(BaseModel):
    op: Literal["add", "remove", "replace", "copy", "move", "test"]
    path: str
    value: Any = None
    from_: Optional[str] = Field(default=None, alias="from")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_from(self) -> "PatchOperation":
        if self.op in ("copy", "move") and not self.from_:
            raise ValueError(f"'{self.op}' operation requires 'from'")
        return self


_document_adapter = TypeAdapter(List[PatchOperation])


def parse_patch_document(document: Any) -> List[PatchOperation]:
    """Raises pydantic's ValidationError when the document is not a list of operations."""
    return _document_adapter.validate_python(document)


def _resolve(path: str, target: Dict[str, Any]) -> Optional[str]:
    """Map '/firstName' to the matching key of `target`, ignoring case."""
    segment = path[1:] if path.startswith("/") else path
    if not segment or "/" in segment:
        return None
    for key in target:
        if key.lower() == segment.lower():
            return key
    return None


def apply_patch(
    target: Dict[str, Any], operations: List[PatchOperation]
) -> Tuple[Dict[str, Any], Dict[str, List[str]]]:
    """Apply operations in order to a copy of `target`.

    Returns the patched copy and the errors of operations that failed.
    A failed operation leaves the document as it was before that operation.
    """
    document = dict(target)
    errors: Dict[str, List[str]] = {}

    def fail(path: str, message: str):
        errors.setdefault(path, []).append(message)

    for operation in operations:
        key = _resolve(operation.path, document)
        if key is None:
            fail(operation.path, f"The target location specified by path '{operation.path}' was not found.")
            continue

        if operation.op in ("add", "replace"):
            document[key] = operation.value
        elif operation.op == "remove":
            document[key] = None
        elif operation.op in ("copy", "move"):
            source = _resolve(operation.from_, document)
            if source is None:
                fail(operation.from_, f"The source location specified by path '{operation.from_}' was not found.")
                continue
            value = document[source]
            if operation.op == "move" and source != key:
                document[source] = None
            document[key] = value
        elif operation.op == "test":
            if document[key] != operation.value:
                fail(operation.path, f"The current value at path '{operation.path}' is not equal to the test value.")

    return document, errors


