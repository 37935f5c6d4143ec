"""
Request Dispatcher
Explicit registry from request type to handler, one unit of work per request
"""
import time
from typing import Any, AsyncContextManager, Awaitable, Callable, Dict, Type

from loguru import logger
from pydantic import ValidationError

from core.config import settings
from core.exceptions import DuplicateResourceException, ResourceNotFoundException
from core.result import (
    Result,
    FieldError,
    conflict,
    not_found,
    unexpected,
    validation_failed,
)
from .dtos import RequestModel
from .identity import CallerIdentity
from .repositories.interfaces import IUnitOfWork


Handler = Callable[[Any, CallerIdentity, IUnitOfWork], Awaitable[Result]]
UnitOfWorkFactory = Callable[[], AsyncContextManager[IUnitOfWork]]


def field_errors_from(exc: ValidationError):
    """Every failing field of a pydantic validation error"""
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(FieldError(location or "request", err.get("msg", "Invalid value")))
    return tuple(errors)


class Dispatcher:
    """Routes validated requests to their handlers"""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory
        self._handlers: Dict[Type[RequestModel], Handler] = {}

    def register(self, request_type: Type[RequestModel], handler: Handler) -> None:
        if request_type in self._handlers:
            raise ValueError(f"Handler already registered for {request_type.__name__}")
        self._handlers[request_type] = handler

    async def dispatch(self, request_type: Type[RequestModel], caller: CallerIdentity, **fields) -> Result:
        """Validate raw fields into the request model, then send it"""
        self._handler_for(request_type)
        try:
            request = request_type(**fields)
        except ValidationError as e:
            result = validation_failed(field_errors_from(e))
            logger.info(f"{request_type.__name__} rejected: {result.error.message}")
            return result
        return await self.send(request, caller)

    async def send(self, request: RequestModel, caller: CallerIdentity) -> Result:
        handler = self._handler_for(type(request))
        name = type(request).__name__
        started = time.perf_counter()

        async with self._uow_factory() as uow:
            try:
                result = await handler(request, caller, uow)
            except DuplicateResourceException as e:
                await uow.rollback()
                logger.info(f"{name} hit a uniqueness conflict: {e}")
                result = conflict(f"{e.resource_type.lower()}.duplicate", str(e))
            except ResourceNotFoundException as e:
                await uow.rollback()
                result = not_found(e.resource_type, e.identifier)
            except Exception as e:
                await uow.rollback()
                logger.exception(f"{name} failed unexpectedly: {e}")
                result = unexpected()
            else:
                result = await self._finish(name, uow, result)

        elapsed_ms = (time.perf_counter() - started) * 1000
        outcome = "ok" if result.is_ok else result.error.kind.value
        if elapsed_ms > settings.SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(f"Slow request {name}: {elapsed_ms:.0f}ms ({outcome})")
        else:
            logger.debug(f"{name} handled in {elapsed_ms:.1f}ms ({outcome})")
        return result

    async def _finish(self, name: str, uow: IUnitOfWork, result: Result) -> Result:
        """Commit on success; a failing commit becomes an error result"""
        if not result.is_ok:
            await uow.rollback()
            return result
        try:
            await uow.commit()
        except DuplicateResourceException as e:
            await uow.rollback()
            logger.info(f"{name} commit hit a uniqueness conflict: {e}")
            return conflict(f"{e.resource_type.lower()}.duplicate", str(e))
        except Exception as e:
            await uow.rollback()
            logger.error(f"{name} commit failed: {e}")
            return unexpected("The change could not be saved.")
        return result

    def _handler_for(self, request_type: Type[RequestModel]) -> Handler:
        handler = self._handlers.get(request_type)
        if handler is None:
            raise LookupError(f"No handler registered for {request_type.__name__}")
        return handler
