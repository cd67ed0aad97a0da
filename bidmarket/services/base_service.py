"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

import functools
import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from bidmarket.core.config import Config, get_config
from bidmarket.core.enums import UserRole
from bidmarket.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    MarketplaceError,
    NotFoundError,
    ValidationError,
)
from bidmarket.database.db import get_session_factory
from bidmarket.database.models import Project
from bidmarket.services.cache import TTLCache, get_cache
from bidmarket.services.profile_directory import ProfileDirectory
from bidmarket.utils.validators import sanitize_payload

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

VENDOR_ROLES = {UserRole.VENDOR_SUPPLIER.value, UserRole.CONSTRUCTION_FIRM.value}


def field_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{field, message}`` pairs."""
    return [
        {"field": ".".join(str(part) for part in error.get("loc", ())) or "__root__", "message": error.get("msg", "")}
        for error in exc.errors()
    ]


def service_boundary(operation: str) -> Callable[[F], F]:
    """Translate anything escaping ``operation`` into a ``MarketplaceError``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except MarketplaceError:
                raise
            except PydanticValidationError as exc:
                raise ValidationError("Validation failed", details=field_errors(exc)) from exc
            except IntegrityError as exc:
                logger.warning(
                    f"{operation}.integrity_conflict",
                    extra={"event": f"{operation}.integrity_conflict", "operation": operation},
                )
                raise ConflictError("Request conflicts with existing data") from exc
            except Exception as exc:
                logger.exception(f"{operation}.failed", extra={"event": f"{operation}.failed", "operation": operation})
                detail = str(exc) if get_config().DEBUG else "Internal server error"
                raise InternalError(detail) from exc

        return wrapper  # type: ignore[return-value]

    return decorator


def validated_payload(model_cls: type[BaseModel], payload: Any) -> Any:
    """Sanitize every string in ``payload``, then validate it as ``model_cls``."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    return model_cls.model_validate(sanitize_payload(payload))


def parse_role(role: str | UserRole) -> str:
    try:
        return UserRole(role).value
    except ValueError as exc:
        raise ValidationError(f"Unknown role: {role}") from exc


class BaseService:
    """Base class for services; every operation opens its own session."""

    def __init__(
        self,
        session_factory: sessionmaker | None = None,
        cache: TTLCache | None = None,
        config: Config | None = None,
        profiles: ProfileDirectory | None = None,
    ) -> None:
        self.session_factory = session_factory or get_session_factory()
        self.cache = cache if cache is not None else get_cache()
        self.config = config or get_config()
        self.profiles = profiles or ProfileDirectory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Yield a fresh session; roll back on error and always close."""
        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def commit(self, session: Session) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise

    def load_owned_project(self, session: Session, project_id: int, client_user_id: int) -> Project:
        client = self.profiles.require_client(session, client_user_id)
        project = session.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if project.client_id != client.id:
            raise ForbiddenError("Not authorized to manage this project")
        return project
