from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import requests

Completion = Callable[[Optional[bytes], Optional[requests.Response], Optional[Exception]], None]


class ISession(ABC):
    @abstractmethod
    def perform_request(self, request: requests.PreparedRequest, completion: Completion) -> Any:
        """
        Send the request and call completion(data, response, error) when done,
        possibly on another thread. Returns an opaque task handle.
        """
        pass


class PassthroughObserver:
    """
    Base class for passthrough observers. Every hook is optional: subclasses
    override the ones they care about, and plain objects that define only some
    of these methods are accepted as observers too. Observers are held weakly,
    so they must support weak references.
    """

    def modified_request(self, request: requests.PreparedRequest) -> Optional[requests.PreparedRequest]:
        return None

    def request_sent(self, request: requests.PreparedRequest) -> None:
        pass

    def response_received(
        self,
        response: Optional[requests.Response],
        data: Optional[bytes],
        request: requests.PreparedRequest,
        error: Optional[Exception],
    ) -> None:
        pass
