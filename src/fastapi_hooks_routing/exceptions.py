"""Exception hierarchy for hooks routing errors."""


class HooksRoutingError(Exception):
    """Base exception for all hooks routing errors.

    Catching this exception will catch every error raised while
    resolving, loading or registering api routes.

    Example:
        try:
            router = create_router_from_source("src/apis")
        except HooksRoutingError as e:
            logger.error(f"Failed to create router: {e}")
    """


class RouteDiscoveryError(HooksRoutingError):
    """Raised when the api source directory doesn't exist or can't be scanned.

    Example:
        RouteDiscoveryError("Source path does not exist: /app/src/apis")
    """


class RouteValidationError(HooksRoutingError):
    """Raised for invalid api files, exports or declarations.

    This exception is raised when:
        - An api file fails to import
        - A file path contains traversal segments (..) or leaves the source
        - A declared path is given where the route is derived from the file
          location, or is missing where it must be declared

    Example:
        RouteValidationError(
            "Failed to import module: /app/src/apis/todo.py\\n"
            "Error: NameError: name 'db' is not defined"
        )
    """


class UnroutableFileError(HooksRoutingError):
    """Raised when a path is resolved for a file the active convention rejects.

    Callers filter candidate files with ``is_routable_file`` first, so this
    points at an inconsistency between the loader and the router.

    Example:
        UnroutableFileError("File is not routable: /app/src/utils/db.py")
    """


class UnsupportedTriggerTypeError(HooksRoutingError):
    """Raised when an api route carries a trigger other than HTTP.

    Example:
        UnsupportedTriggerTypeError("Unsupported trigger type: EVENT")
    """


class InvalidMethodError(HooksRoutingError):
    """Raised when an HTTP trigger declares an unknown method.

    Example:
        InvalidMethodError(
            "Invalid trigger.method 'FETCH' for todo-get, "
            "expected one of: ALL, DELETE, GET, HEAD, OPTIONS, PATCH, POST, PUT"
        )
    """


class DuplicateRouteError(HooksRoutingError):
    """Raised when two api files resolve to the same canonical path.

    Duplicates only warn by default. This is raised by the escalating
    ``raise_on_duplicate_route`` sink.

    Example:
        DuplicateRouteError(
            "Duplicate route /todo: todo.py conflicts with todo/index.py"
        )
    """


class MiddlewareValidationError(HooksRoutingError):
    """Raised when global middleware configuration is invalid.

    Example:
        MiddlewareValidationError(
            "global middleware: middleware must be a list or callable, got str"
        )
    """


class ContextError(HooksRoutingError):
    """Raised when the request context is read outside of a request."""
