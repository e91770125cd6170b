"""Unit tests for exception hierarchy."""

import pytest

from fastapi_hooks_routing.exceptions import (
    ContextError,
    DuplicateRouteError,
    HooksRoutingError,
    InvalidMethodError,
    MiddlewareValidationError,
    RouteDiscoveryError,
    RouteValidationError,
    UnroutableFileError,
    UnsupportedTriggerTypeError,
)

SUBCLASSES = [
    ContextError,
    DuplicateRouteError,
    InvalidMethodError,
    MiddlewareValidationError,
    RouteDiscoveryError,
    RouteValidationError,
    UnroutableFileError,
    UnsupportedTriggerTypeError,
]


class TestHooksRoutingError:
    """Tests for the base exception class."""

    def test_inherits_from_exception(self) -> None:
        assert issubclass(HooksRoutingError, Exception)

    def test_message_is_preserved(self) -> None:
        error = HooksRoutingError("specific error details")
        assert str(error) == "specific error details"


@pytest.mark.parametrize("exc_class", SUBCLASSES)
def test_subclass_of_base(exc_class: type[Exception]) -> None:
    assert issubclass(exc_class, HooksRoutingError)


@pytest.mark.parametrize("exc_class", SUBCLASSES)
def test_caught_as_base(exc_class: type[Exception]) -> None:
    """Every routing error can be handled with a single except clause."""
    with pytest.raises(HooksRoutingError, match="boom"):
        raise exc_class("boom")


def test_middleware_error_is_not_a_validation_error() -> None:
    assert not issubclass(MiddlewareValidationError, RouteValidationError)
