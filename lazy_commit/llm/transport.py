"""HTTP transport shared by both backends."""

import json
import os
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass

from loguru import logger

DEFAULT_TIMEOUT = 300  # 5 minutes for CPU inference
TIMEOUT_ENV = "LAZY_COMMIT_TIMEOUT"


class TransportError(Exception):
    """Network-level failure. ``kind`` is one of refused, not_found, timeout, network."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"{kind}: {reason}")


@dataclass
class HttpResponse:
    status: int
    reason: str
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self):
        return json.loads(self.body.decode('utf-8'))


def _timeout_from_env() -> float:
    raw = os.environ.get(TIMEOUT_ENV)
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid {}={!r}", TIMEOUT_ENV, raw)
        return DEFAULT_TIMEOUT


def _classify(reason) -> str:
    if isinstance(reason, ConnectionRefusedError):
        return "refused"
    if isinstance(reason, socket.gaierror):
        return "not_found"
    if isinstance(reason, (socket.timeout, TimeoutError)):
        return "timeout"
    return "network"


class HttpTransport:
    """JSON over urllib. Non-2xx responses are returned, not raised."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout if timeout is not None else _timeout_from_env()

    def request(self, method: str, url: str, payload: dict | None = None,
                headers: dict | None = None) -> HttpResponse:
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        req = urllib.request.Request(url, data=data, method=method, headers={
            "Content-Type": "application/json",
            **(headers or {}),
        })
        logger.debug("{} {}", method, url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                return HttpResponse(status=response.status, reason=response.reason or "", body=response.read())
        except urllib.error.HTTPError as e:
            return HttpResponse(status=e.code, reason=str(e.reason or ""), body=e.read() or b"")
        except urllib.error.URLError as e:
            raise TransportError(_classify(e.reason), str(e.reason))
        except (socket.timeout, TimeoutError) as e:
            raise TransportError("timeout", str(e) or "timed out")
        except ConnectionError as e:
            raise TransportError(_classify(e), str(e))

    def get(self, url: str, headers: dict | None = None) -> HttpResponse:
        return self.request("GET", url, headers=headers)

    def post(self, url: str, payload: dict, headers: dict | None = None) -> HttpResponse:
        return self.request("POST", url, payload=payload, headers=headers)
