import logging
from typing import Any, List, Optional

import requests

from ..http.observer import observer_hook
from ..http.request import as_prepared_request
from ..interfaces import PassthroughObserver

logger = logging.getLogger(__name__)


class LoggingObserver(PassthroughObserver):
    """Logs every request sent and every response received."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def request_sent(self, request: requests.PreparedRequest) -> None:
        self.log.info("-> %s %s", request.method, request.url)

    def response_received(
        self,
        response: Optional[requests.Response],
        data: Optional[bytes],
        request: requests.PreparedRequest,
        error: Optional[Exception],
    ) -> None:
        if error is not None:
            self.log.warning("<- %s %s failed: %s", request.method, request.url, error)
            return

        status = response.status_code if response is not None else 0
        size = len(data) if data else 0
        if status >= 400:
            self.log.warning("<- %s %s HTTP %d (%d bytes)", request.method, request.url, status, size)
        else:
            self.log.info("<- %s %s HTTP %d (%d bytes)", request.method, request.url, status, size)


class CompositeObserver(PassthroughObserver):
    """
    Fans every hook out to several observers, in order. Rewrites chain: each
    observer sees the request as rewritten by the ones before it.
    Members are held strongly.
    """

    def __init__(self, observers: Optional[List[Any]] = None):
        self.observers = list(observers or [])

    def add(self, observer: Any) -> None:
        self.observers.append(observer)

    def modified_request(self, request: requests.PreparedRequest) -> Optional[requests.PreparedRequest]:
        current = request
        rewritten = False
        for observer in self.observers:
            hook = observer_hook(observer, "modified_request")
            if hook is None:
                continue
            replacement = hook(current)
            if replacement is not None:
                current = as_prepared_request(replacement)
                rewritten = True
        return current if rewritten else None

    def request_sent(self, request: requests.PreparedRequest) -> None:
        for observer in self.observers:
            hook = observer_hook(observer, "request_sent")
            if hook is not None:
                hook(request)

    def response_received(
        self,
        response: Optional[requests.Response],
        data: Optional[bytes],
        request: requests.PreparedRequest,
        error: Optional[Exception],
    ) -> None:
        for observer in self.observers:
            hook = observer_hook(observer, "response_received")
            if hook is not None:
                hook(response, data, request, error)
