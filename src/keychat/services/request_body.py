from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from typing import Callable, Awaitable, TypeVar

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def json_or_form(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """
    Build a dependency parsing the request body into ``model``,
    from a JSON document or from url-encoded/multipart form fields.
    Validation failures surface as RequestValidationError, like a regular body parameter.
    """
    async def parse_body(request: Request) -> ModelT:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            payload = dict(await request.form())
        else:
            try:
                payload = await request.json()
            except ValueError:
                payload = None

        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors()) from e

    return parse_body
