import logging
from typing import Any, Optional, Tuple

import requests

from ..common.errors import ObserverError
from ..interfaces import Completion, ISession
from .observer import NO_OBSERVER, ObserverRef
from .request import as_prepared_request

logger = logging.getLogger(__name__)


def canonical_request(
    request_like: Any, observer: ObserverRef = NO_OBSERVER
) -> Tuple[requests.PreparedRequest, requests.PreparedRequest]:
    """
    Return (original, final). The observer gets a copy to rewrite, so the
    original stays exactly what the caller asked for.
    """
    original = as_prepared_request(request_like)

    try:
        replacement = observer.modified_request(original.copy())
        if replacement is None:
            return original, original
        final = as_prepared_request(replacement)
    except Exception as exc:
        raise ObserverError("modified_request", exc) from exc

    logger.debug("Observer rewrote %s %s -> %s %s", original.method, original.url, final.method, final.url)
    return original, final


def on_task_completion(
    request: requests.PreparedRequest, completion: Completion, observer: ObserverRef = NO_OBSERVER
) -> Completion:
    def handler(data: Optional[bytes], response: Optional[requests.Response], error: Optional[Exception]) -> None:
        try:
            observer.response_received(response, data, request, error)
        except Exception:
            # The caller still gets its outcome when the observer fails here.
            logger.exception("Observer hook 'response_received' failed for %s %s", request.method, request.url)
        completion(data, response, error)

    return handler


def dispatch(
    session: ISession,
    request_like: Any,
    completion: Completion,
    observer: Optional[ObserverRef] = None,
) -> Any:
    """
    Run one request through the observer hooks and hand it to the transport.

    Order is fixed: modified_request, request_sent, transport, then on
    completion response_received (with the pre-rewrite request) and finally the
    caller's completion. A failing setup hook raises ObserverError and nothing
    is sent.
    """
    observer = observer or NO_OBSERVER
    original, final = canonical_request(request_like, observer)

    try:
        observer.request_sent(final)
    except Exception as exc:
        raise ObserverError("request_sent", exc) from exc

    logger.debug("Dispatching %s %s", final.method, final.url)
    return session.perform_request(final, on_task_completion(original, completion, observer))
