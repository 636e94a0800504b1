import weakref
from typing import Any, Callable, Optional

import requests

from ..common.errors import AppError, ErrorKind, Severity


def observer_hook(observer: Any, name: str) -> Optional[Callable[..., Any]]:
    """Return the named hook if the observer implements it, else None."""
    if observer is None:
        return None
    hook = getattr(observer, name, None)
    return hook if callable(hook) else None


class ObserverRef:
    """
    Non-owning handle to a passthrough observer.

    Whoever owns both the client and the observer governs the observer's
    lifetime. Once it has been collected every hook quietly does nothing.
    """

    def __init__(self, observer: Any = None):
        if observer is None:
            self._ref = None
            return
        try:
            self._ref = weakref.ref(observer)
        except TypeError as exc:
            raise AppError(
                f"Observer {type(observer).__name__} must support weak references "
                "(add '__weakref__' to its __slots__)",
                Severity.ABORT,
                ErrorKind.OBSERVER,
                original_exception=exc,
            ) from exc

    def get(self) -> Any:
        return self._ref() if self._ref is not None else None

    def modified_request(self, request: requests.PreparedRequest) -> Optional[requests.PreparedRequest]:
        hook = observer_hook(self.get(), "modified_request")
        if hook is None:
            return None
        return hook(request)

    def request_sent(self, request: requests.PreparedRequest) -> None:
        hook = observer_hook(self.get(), "request_sent")
        if hook is not None:
            hook(request)

    def response_received(
        self,
        response: Optional[requests.Response],
        data: Optional[bytes],
        request: requests.PreparedRequest,
        error: Optional[Exception],
    ) -> None:
        hook = observer_hook(self.get(), "response_received")
        if hook is not None:
            hook(response, data, request, error)


NO_OBSERVER = ObserverRef()
