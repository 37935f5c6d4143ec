"""
Tests for the request dispatcher
Validation, unit of work handling and exception translation
"""
from typing import Optional
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from pydantic import Field

from application.dispatcher import Dispatcher
from application.dtos import RequestModel
from application.identity import CallerIdentity
from core.exceptions import DuplicateResourceException, ResourceNotFoundException
from core.result import ErrorKind, Ok, domain_rule


class CreateWidget(RequestModel):
    name: str = Field(min_length=3)
    size: int = Field(ge=1, le=10)
    colour: Optional[str] = None


class FakeUnitOfWork:
    """Records commits and rollbacks"""

    def __init__(self):
        self.commit = AsyncMock()
        self.rollback = AsyncMock()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class TestDispatcher:
    """Tests for Dispatcher.dispatch and Dispatcher.send"""

    @pytest.fixture
    def uow(self):
        return FakeUnitOfWork()

    @pytest.fixture
    def dispatcher(self, uow):
        return Dispatcher(lambda: uow)

    @pytest.fixture
    def caller(self):
        return CallerIdentity.authenticated(uuid4(), ["Candidate"])

    @pytest.mark.asyncio
    async def test_success_commits(self, dispatcher, uow, caller):
        handler = AsyncMock(return_value=Ok("created"))
        dispatcher.register(CreateWidget, handler)

        result = await dispatcher.dispatch(CreateWidget, caller, name="  Gear ", size=3)

        assert result.is_ok
        assert result.value == "created"
        request = handler.call_args.args[0]
        assert request.name == "Gear"
        uow.commit.assert_awaited_once()
        uow.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_result_rolls_back(self, dispatcher, uow, caller):
        dispatcher.register(CreateWidget, AsyncMock(return_value=domain_rule("widget.rule", "No.")))

        result = await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=3)

        assert result.error.kind == ErrorKind.DOMAIN_RULE
        uow.rollback.assert_awaited_once()
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_validation_collects_every_failing_field(self, dispatcher, uow, caller):
        handler = AsyncMock()
        dispatcher.register(CreateWidget, handler)

        result = await dispatcher.dispatch(CreateWidget, caller, name="ab", size=99)

        assert result.error.kind == ErrorKind.VALIDATION
        fields = {e.field for e in result.error.field_errors}
        assert fields == {"name", "size"}
        handler.assert_not_awaited()
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_fields_are_rejected(self, dispatcher, caller):
        dispatcher.register(CreateWidget, AsyncMock())

        result = await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=2, weight=5)

        assert result.error.kind == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_unregistered_request_type(self, dispatcher, caller):
        with pytest.raises(LookupError):
            await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=1)

    def test_double_registration(self, dispatcher):
        dispatcher.register(CreateWidget, AsyncMock())
        with pytest.raises(ValueError):
            dispatcher.register(CreateWidget, AsyncMock())

    @pytest.mark.asyncio
    async def test_duplicate_resource_becomes_conflict(self, dispatcher, uow, caller):
        handler = AsyncMock(side_effect=DuplicateResourceException("Widget", "name", "Gear"))
        dispatcher.register(CreateWidget, handler)

        result = await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=1)

        assert result.error.kind == ErrorKind.CONFLICT
        assert result.error.code == "widget.duplicate"
        uow.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_missing_resource_becomes_not_found(self, dispatcher, caller):
        handler = AsyncMock(side_effect=ResourceNotFoundException("Widget", "42"))
        dispatcher.register(CreateWidget, handler)

        result = await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=1)

        assert result.error.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, dispatcher, uow, caller):
        dispatcher.register(CreateWidget, AsyncMock(side_effect=RuntimeError("boom")))

        result = await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=1)

        assert result.error.kind == ErrorKind.UNEXPECTED
        assert "boom" not in result.error.message
        uow.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_commit_conflict_is_reported(self, dispatcher, uow, caller):
        uow.commit.side_effect = DuplicateResourceException("Widget", "name", "Gear")
        dispatcher.register(CreateWidget, AsyncMock(return_value=Ok(None)))

        result = await dispatcher.dispatch(CreateWidget, caller, name="Gear", size=1)

        assert result.error.kind == ErrorKind.CONFLICT
