import argparse
import logging
import sys
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

import requests

from webservice.common.errors import AppError
from webservice.config import ServiceConfig, load_config, get_default_config_path
from webservice.http.client import RequestsSession
from webservice.http.request import Method
from webservice.http.urls import parse_base_url
from webservice.ops.evidence import EvidenceObserver
from webservice.ops.logger import setup_logger
from webservice.ops.observers import CompositeObserver, LoggingObserver
from webservice.service import WebService

EXIT_OK = 0
EXIT_BOOTSTRAP = 1
EXIT_HTTP_ERROR = 2
EXIT_TRANSPORT_ERROR = 3


@dataclass
class RuntimeContext:
    config: ServiceConfig
    session_id: str


@dataclass
class DispatchResult:
    data: Optional[bytes] = None
    response: Optional[requests.Response] = None
    error: Optional[Exception] = None


def _parse_header(value: str):
    name, sep, content = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Header must look like 'Name: value', got {value!r}")
    return name.strip(), content.strip()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Send one request through the webservice passthrough pipeline.")

    parser.add_argument(
        "--config",
        type=str,
        default=str(get_default_config_path()),
        help="Path to the YAML configuration file.",
    )

    parser.add_argument(
        "--base-url",
        type=str,
        help="Base URL overriding the configured one.",
    )

    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        type=_parse_header,
        default=[],
        help="Request header as 'Name: value'. May be repeated.",
    )

    parser.add_argument(
        "-d",
        "--data",
        type=str,
        help="Request body.",
    )

    parser.add_argument("method", type=str.upper, choices=[m.value for m in Method])
    parser.add_argument("path", type=str, help="Path relative to the base URL, or an absolute URL.")

    return parser.parse_args(argv)


def bootstrap_runtime(args) -> RuntimeContext:
    logging.basicConfig(level=logging.INFO)
    temp_logger = logging.getLogger("bootstrap")

    try:
        config = load_config(args.config)
        temp_logger.info("Configuration loaded from %s", args.config)
    except Exception as exc:
        temp_logger.error("Failed to load configuration: %s", exc)
        raise

    if args.base_url is not None:
        config.base_url = parse_base_url(args.base_url)
        if config.base_url is None:
            temp_logger.warning("Ignoring invalid --base-url %r; paths must be absolute.", args.base_url)

    session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    logger = setup_logger(session_id, logs_dir=config.log.logs_dir, console_level=config.log.console_level)
    logger.info("Starting session %s (base URL: %s)", session_id, config.base_url or "<none>")

    return RuntimeContext(config=config, session_id=session_id)


def build_observer(config: ServiceConfig, session_id: str) -> CompositeObserver:
    observer = CompositeObserver([LoggingObserver()])
    if config.evidence.enabled:
        observer.add(
            EvidenceObserver(
                session_id,
                logs_dir=config.evidence.logs_dir,
                body_sample_bytes=config.evidence.body_sample_bytes,
            )
        )
    return observer


def run_request(
    service: WebService,
    method: str,
    path: str,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[str] = None,
) -> DispatchResult:
    """
    Dispatch one request and block until the transport has completed it.
    """
    result = DispatchResult()

    def completion(data, response, error):
        result.data = data
        result.response = response
        result.error = error

    task = service.request(method, path, headers=headers, body=body)
    handle = task.resume(completion)
    if isinstance(handle, Future):
        handle.result()
    return result


def exit_code_for(result: DispatchResult) -> int:
    if result.error is not None:
        return EXIT_TRANSPORT_ERROR
    if result.response is not None and result.response.status_code >= 400:
        return EXIT_HTTP_ERROR
    return EXIT_OK


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    try:
        context = bootstrap_runtime(args)
    except Exception:
        sys.exit(EXIT_BOOTSTRAP)

    logger = logging.getLogger("webservice")
    # The client holds the observer weakly; this local keeps it alive for the run.
    observer = build_observer(context.config, context.session_id)

    with RequestsSession.from_config(context.config.transport) as session:
        service = WebService.from_config(context.config, session=session, observer=observer)
        try:
            result = run_request(service, args.method, args.path, headers=dict(args.headers), body=args.data)
        except AppError as exc:
            logger.error("Request aborted: %s", exc)
            sys.exit(EXIT_BOOTSTRAP)

    if result.error is not None:
        logger.error("Transport error: %s", result.error)
    else:
        if result.response is not None:
            logger.info("HTTP %d %s", result.response.status_code, result.response.reason or "")
        if result.data:
            sys.stdout.buffer.write(result.data)
            sys.stdout.flush()

    code = exit_code_for(result)
    if code != EXIT_OK:
        sys.exit(code)


if __name__ == "__main__":
    main()
