"""
JSON envelopes and error mapping shared by every blueprint.
"""

import logging
from functools import wraps
from typing import Any, Callable, Mapping, Optional, Type, TypeVar

from flask import jsonify, request
from pydantic import BaseModel, ValidationError

from analytics_core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    RequestValidationError,
    StoreError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def success(message: str, data: Any = None, status: int = 200, **extra):
    body = {"message": message, "data": data}
    body.update(extra)
    return jsonify(body), status


def failure(message: str, error: Any = None, status: int = 500):
    return jsonify({"message": message, "error": error}), status


def json_body() -> dict:
    """Return the JSON object body of the current request."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise RequestValidationError("Request body must be a JSON object")
    return body


def parse_model(model: Type[ModelT], values: Optional[Mapping[str, Any]], **defaults) -> ModelT:
    """Validate request values into ``model``, raising RequestValidationError.

    ``defaults`` fill in fields the caller did not send.
    """
    payload = dict(defaults)
    payload.update({k: v for k, v in (values or {}).items()})
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError.from_pydantic(exc) from exc


def json_endpoint(failure_message: str) -> Callable:
    """Decorator mapping domain errors onto JSON failure envelopes."""
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RequestValidationError as exc:
                return failure(exc.message, exc.errors, 400)
            except AuthError as exc:
                return failure(str(exc) or "Unauthorized", None, 401)
            except NotFoundError as exc:
                return failure(str(exc) or "Not found", None, 404)
            except ConflictError as exc:
                return failure(str(exc) or "Already exists", None, 409)
            except StoreError as exc:
                return failure(failure_message, exc.detail, 500)
            except Exception as exc:
                logger.exception(f"Unhandled error in {f.__name__}: {exc}")
                return failure(failure_message, str(exc), 500)
        return decorated_function
    return decorator
