"""
Error taxonomy and the uniform `{success, data|error, message}` result.

Services raise `AppError` subclasses; `service_action` catches them at the
operation boundary, rolls the session back and returns a failed ActionResult.
Anything else is logged with its traceback and reported with the operation's
generic message.
"""
import functools
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


class AppError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(AppError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFound(AppError):
    pass


class ValidationFailed(AppError):
    pass


class Conflict(AppError):
    pass


class Blocked(AppError):
    """Delete refused because `count` dependent rows still reference the target."""

    def __init__(self, message: str, count: int):
        super().__init__(message)
        self.count = count


class StorageError(AppError):
    pass


class ActionResult(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ActionResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)


def validation_message(exc: ValidationError) -> str:
    """First pydantic error as a single readable line."""
    err = exc.errors()[0]
    msg = err.get("msg", "Data tidak valid")
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {msg}" if loc else msg


def _find_session(args, kwargs) -> Optional[Session]:
    db = kwargs.get("db")
    if db is None and args and isinstance(args[0], Session):
        db = args[0]
    return db


def service_action(failure_message: str) -> Callable:
    """Wrap a service mutation `fn(db, ctx, ...) -> ActionResult`."""
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> ActionResult:
            db = _find_session(args, kwargs)
            try:
                return fn(*args, **kwargs)
            except AppError as e:
                if db is not None:
                    db.rollback()
                return ActionResult.fail(e.message)
            except ValidationError as e:
                if db is not None:
                    db.rollback()
                return ActionResult.fail(validation_message(e))
            except Exception:
                log.exception("%s failed", fn.__qualname__)
                if db is not None:
                    db.rollback()
                return ActionResult.fail(failure_message)
        return wrapper
    return decorator
