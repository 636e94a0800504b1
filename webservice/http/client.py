import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import requests

from ..common.errors import AppError, ErrorKind, Severity
from ..config import TimeoutConfig, TransportConfig
from ..interfaces import Completion, ISession

logger = logging.getLogger(__name__)


class RequestsSession(ISession):
    """
    Thin adapter over requests.Session that satisfies ISession.

    Requests are sent on a thread pool, so completions run on worker threads.
    The returned Future is the task handle.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        timeout: Optional[TimeoutConfig] = None,
        max_workers: int = 4,
    ):
        self.session = session or requests.Session()
        self.executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="webservice")
        self.timeout = timeout or TimeoutConfig()

    @classmethod
    def from_config(cls, config: TransportConfig) -> "RequestsSession":
        return cls(timeout=config.timeout, max_workers=config.max_workers)

    def perform_request(self, request: requests.PreparedRequest, completion: Completion) -> Future:
        return self.executor.submit(self._send, request, completion)

    def _send(self, request: requests.PreparedRequest, completion: Completion) -> None:
        try:
            response = self.session.send(request, timeout=(self.timeout.connect, self.timeout.read))
        except requests.RequestException as exc:
            logger.debug("Transport failure for %s %s: %s", request.method, request.url, exc)
            error = AppError(f"Network request failed: {exc}", Severity.RETRY, ErrorKind.HTTP, original_exception=exc)
            completion(None, None, error)
            return
        except Exception as exc:  # mounted adapters may raise anything; the completion must still fire
            logger.warning("Unexpected transport failure for %s %s: %r", request.method, request.url, exc)
            error = AppError(f"Transport failed: {exc}", Severity.ABORT, ErrorKind.UNKNOWN, original_exception=exc)
            completion(None, None, error)
            return

        completion(response.content, response, None)

    def close(self):
        self.executor.shutdown(wait=True)
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
