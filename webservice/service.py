import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .common.errors import AppError, ErrorKind, Severity
from .config import ServiceConfig
from .http.client import RequestsSession
from .http.dispatch import dispatch
from .http.observer import ObserverRef
from .http.request import Method, Request, build_request
from .http.urls import StructuredURL, parse_base_url, resolve
from .interfaces import Completion, ISession

logger = logging.getLogger(__name__)


def _ignore_outcome(data, response, error):
    pass


@dataclass
class ClientConfiguration:
    session: ISession
    base_url: Optional[str] = None
    observer: ObserverRef = field(default_factory=ObserverRef)


class ServiceTask:
    """
    Handle for a single dispatch of one request.

    The observer is captured when the task is created; changing the client's
    observer afterwards does not affect this task.
    """

    def __init__(self, request: Request, session: ISession, observer: ObserverRef):
        self.request = request
        self.session = session
        self.observer = observer
        self.handle: Any = None
        self.resumed = False

    def resume(self, completion: Optional[Completion] = None) -> Any:
        """Start the dispatch. Returns the transport's task handle."""
        if self.resumed:
            raise AppError(
                f"Task for {self.request.method.value} {self.request.url} was already resumed",
                Severity.ABORT,
                ErrorKind.UNKNOWN,
            )
        self.resumed = True
        self.handle = dispatch(self.session, self.request, completion or _ignore_outcome, self.observer)
        return self.handle


class WebService(ISession):
    """
    Client facade: resolves paths against a base URL, builds requests and
    dispatches them through a transport with an optional passthrough observer.

    The observer is held weakly. Keep a reference to it for as long as it
    should receive hooks.
    """

    def __init__(
        self,
        base_url: Union[str, StructuredURL, None] = None,
        session: Optional[ISession] = None,
        observer: Any = None,
    ):
        self.configuration = ClientConfiguration(
            session=session or RequestsSession(),
            base_url=parse_base_url(base_url),
            observer=ObserverRef(observer),
        )
        self.owns_session = session is None

    @classmethod
    def from_config(cls, config: ServiceConfig, session: Optional[ISession] = None, observer: Any = None) -> "WebService":
        service = cls(
            base_url=config.base_url,
            session=session or RequestsSession.from_config(config.transport),
            observer=observer,
        )
        service.owns_session = session is None
        return service

    def close(self):
        """Release the transport, but only if this client created it."""
        if self.owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def base_url(self) -> Optional[str]:
        return self.configuration.base_url

    @base_url.setter
    def base_url(self, value: Union[str, StructuredURL, None]):
        self.configuration.base_url = parse_base_url(value)
        if value is not None and self.configuration.base_url is None:
            logger.debug("Ignoring invalid base URL %r", value)

    @property
    def base_url_string(self) -> str:
        return self.configuration.base_url or ""

    @base_url_string.setter
    def base_url_string(self, value: str):
        self.base_url = value

    @property
    def session(self) -> ISession:
        return self.configuration.session

    @property
    def observer(self) -> Any:
        return self.configuration.observer.get()

    @observer.setter
    def observer(self, value: Any):
        self.configuration.observer = ObserverRef(value)

    def absolute_url_string(self, path: str) -> str:
        return resolve(self.base_url, path)

    # Request API

    def request(self, method: Union[Method, str], path: str, **parts) -> ServiceTask:
        """
        Create a task for one request. ``path`` may be relative to the base
        URL or absolute; ``parts`` are headers, params and body.
        """
        return self.service_task(build_request(method, path, self.base_url, **parts))

    def service_task(self, request: Request) -> ServiceTask:
        return ServiceTask(request, self.session, self.configuration.observer)

    def GET(self, path: str, **parts) -> ServiceTask:
        return self.request(Method.GET, path, **parts)

    def POST(self, path: str, **parts) -> ServiceTask:
        return self.request(Method.POST, path, **parts)

    def PUT(self, path: str, **parts) -> ServiceTask:
        return self.request(Method.PUT, path, **parts)

    def PATCH(self, path: str, **parts) -> ServiceTask:
        return self.request(Method.PATCH, path, **parts)

    def DELETE(self, path: str, **parts) -> ServiceTask:
        return self.request(Method.DELETE, path, **parts)

    def HEAD(self, path: str, **parts) -> ServiceTask:
        return self.request(Method.HEAD, path, **parts)

    get = GET
    post = POST
    put = PUT
    patch = PATCH
    delete = DELETE
    head = HEAD

    # Session API

    def perform_request(self, request: Any, completion: Completion) -> Any:
        """Dispatch an already formed request through the observer hooks."""
        return dispatch(self.session, request, completion, self.configuration.observer)
