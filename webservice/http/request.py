from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import requests

from .urls import resolve


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class Request:
    """
    Immutable description of one intended call. The URL is always absolute;
    conversion to a requests.PreparedRequest happens only at the transport boundary.
    """

    method: Method
    url: str
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    params: Mapping[str, Any] = field(default_factory=dict, hash=False)
    body: Optional[Union[bytes, str]] = None

    def __post_init__(self):
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def prepared_request(self) -> requests.PreparedRequest:
        return requests.Request(
            method=self.method.value,
            url=self.url,
            headers=dict(self.headers),
            params=dict(self.params),
            data=self.body,
        ).prepare()


def build_request(
    method: Union[Method, str],
    path: str,
    base_url: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, Any]] = None,
    body: Optional[Union[bytes, str]] = None,
) -> Request:
    """Resolve ``path`` against ``base_url`` and describe the call."""
    if isinstance(method, str):
        method = Method(method.upper())
    return Request(
        method=method,
        url=resolve(base_url, path),
        headers=headers or {},
        params=params or {},
        body=body,
    )


def as_prepared_request(request_like: Any) -> requests.PreparedRequest:
    """
    Convert anything request-shaped into the transport request type.
    Accepts PreparedRequest values as-is and anything exposing prepared_request().
    """
    if isinstance(request_like, requests.PreparedRequest):
        return request_like
    if isinstance(request_like, requests.Request):
        return request_like.prepare()
    prepare = getattr(request_like, "prepared_request", None)
    if callable(prepare):
        return prepare()
    raise TypeError(f"Cannot convert {type(request_like).__name__} to a prepared request")
