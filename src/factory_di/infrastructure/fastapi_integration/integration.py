import logging
from typing import Awaitable, Callable, Type, TypeVar

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from factory_di.domain import IContainer

T = TypeVar("T")

logger = logging.getLogger(__name__)


def create_fastapi_dependency(container: IContainer, dependency_type: Type[T]) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the container.

    Lifetimes follow the registration in the container. Scoped registrations are
    resolved from the container itself; use ``create_scoped_dependency`` to get one
    instance per request instead.

    Args:
        container: The DI container to resolve dependencies from.
        dependency_type: The type to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container.register_with_factory(ReportService, ReportServiceFactory, Lifetime.SINGLETON)
        >>> get_reports = create_fastapi_dependency(container, ReportService)
        >>>
        >>> @app.get("/reports")
        >>> async def list_reports(reports: ReportService = Depends(get_reports)):
        ...     return reports.all()
    """

    def dependency() -> T:
        return container.resolve(dependency_type)

    return dependency


def create_scoped_dependency(dependency_type: Type[T]) -> Callable[[Request], T]:
    """Create a FastAPI dependency that resolves from the request's scope.

    Requires ``ScopedContainerMiddleware`` to be installed.

    Args:
        dependency_type: The type to resolve from the scoped container.

    Returns:
        A callable that resolves from the request-scoped container.

    Example:
        >>> app.add_middleware(ScopedContainerMiddleware, container=container)
        >>> container.register_with_factory(UnitOfWork, UnitOfWorkFactory, Lifetime.SCOPED)
        >>>
        >>> @app.post("/orders")
        >>> async def place_order(uow: UnitOfWork = Depends(create_scoped_dependency(UnitOfWork))):
        ...     ...
    """

    def scoped_dependency(request: Request) -> T:
        if not hasattr(request.state, "di_container"):
            raise RuntimeError(
                "Request does not have a scoped DI container. Did you forget to add ScopedContainerMiddleware?"
            )
        scoped_container: IContainer = request.state.di_container
        return scoped_container.resolve(dependency_type)

    return scoped_dependency


class ScopedContainerMiddleware(BaseHTTPMiddleware):
    """Middleware that opens a container scope for each request.

    The scope is available as ``request.state.di_container`` and is closed as soon
    as ``call_next`` returns, releasing the request's scoped instances. For a
    streaming response that is before the body has been sent, so a body iterator
    must not rely on scoped instances staying cached.

    Attributes:
        container: The root container to create scopes from.
    """

    def __init__(self, app: FastAPI, container: IContainer):
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        with self.container.create_scope() as scoped_container:
            request.state.di_container = scoped_container
            logger.debug("Opened request scope for %s %s", request.method, request.url.path)
            return await call_next(request)
