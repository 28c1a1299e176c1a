"""WebSocket link to in-sim panel gauges."""

import json
import logging
import queue
import threading
from dataclasses import asdict, dataclass, fields
from typing import Optional, Union

from websockets.exceptions import ConnectionClosed
from websockets.sync.server import serve

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interaction:
    name: str


@dataclass(frozen=True)
class Handshake:
    name: str


@dataclass(frozen=True)
class Input:
    id: str
    value: str


@dataclass(frozen=True)
class Time:
    hour: int
    minute: int
    day: int
    year: int


@dataclass(frozen=True)
class RequestTime:
    pass


JSPayload = Union[Interaction, Handshake, Input, Time, RequestTime]

_TAGS = {
    Interaction: "interaction",
    Handshake: "handshake",
    Input: "input",
    Time: "time",
    RequestTime: "requestTime",
}
_BY_TAG = {tag: cls for cls, tag in _TAGS.items()}
_U32_MAX = 0xFFFFFFFF


def payload_to_json(payload):
    """Serialise a payload as a compact JSON object tagged by ``type``."""
    data = {"type": _TAGS[type(payload)]}
    data.update(asdict(payload))
    return json.dumps(data, separators=(",", ":"))


def payload_from_json(text):
    """Parse a tagged JSON payload; raises ValueError on malformed input."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("payload must be a JSON object")
    cls = _BY_TAG.get(data.get("type"))
    if cls is None:
        raise ValueError(f"unknown payload type {data.get('type')!r}")
    values = {}
    for field in fields(cls):
        if field.name not in data:
            raise ValueError(f"missing field `{field.name}`")
        value = data[field.name]
        if field.type is int:
            if (
                not isinstance(value, int)
                or isinstance(value, bool)
                or not 0 <= value <= _U32_MAX
            ):
                raise ValueError(f"invalid value for `{field.name}`: {value!r}")
        elif not isinstance(value, str):
            raise ValueError(f"invalid value for `{field.name}`: {value!r}")
        values[field.name] = value
    return cls(**values)


@dataclass(frozen=True)
class JSMessage:
    payload: JSPayload
    instrument_name: str


class _Stream:
    def __init__(self, connection):
        self.connection = connection
        self.name = ""


class JSCommunicator:
    """Accepts gauge connections and queues the payloads they send."""

    def __init__(self, host="0.0.0.0", port=7780):
        self._host = host
        self._port = port
        self._server = None
        self._thread = None
        self._streams = []
        self._lock = threading.Lock()
        self._incoming = queue.SimpleQueue()

    @property
    def address(self):
        """(host, port) the server is listening on."""
        if self._server is None:
            raise RuntimeError("server is not started")
        return self._server.socket.getsockname()[:2]

    def start(self):
        """Start listening; does nothing if already started."""
        if self._server is not None:
            return
        self._server = serve(self._handle, self._host, self._port)
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="gauge-websocket", daemon=True
        )
        self._thread.start()

    def poll(self):
        """Next received message, or None."""
        try:
            return self._incoming.get_nowait()
        except queue.Empty:
            return None

    def write_payload(self, payload, instrument=None):
        """Send to the named instrument, or to every connected gauge."""
        text = payload_to_json(payload)
        with self._lock:
            if instrument is None:
                targets = list(self._streams)
            else:
                targets = [s for s in self._streams if s.name == instrument][:1]
        for stream in targets:
            try:
                stream.connection.send(text)
            except (ConnectionClosed, OSError):
                pass

    def close(self):
        """Close all connections and stop listening."""
        if self._server is None:
            return
        with self._lock:
            streams = list(self._streams)
        for stream in streams:
            stream.connection.close()
        self._server.shutdown()
        self._thread.join()
        self._server = None
        self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _handle(self, connection):
        stream = _Stream(connection)
        with self._lock:
            self._streams.append(stream)
        try:
            for message in connection:
                if not isinstance(message, str):
                    continue
                try:
                    payload = payload_from_json(message)
                except ValueError as e:
                    log.error(
                        "[JS] Error deserializing data! Data: %s Reason: %s", message, e
                    )
                    continue
                if isinstance(payload, Handshake):
                    log.info("[JS] Panel gauge connected: %s", payload.name)
                    stream.name = payload.name
                self._incoming.put(JSMessage(payload, stream.name))
        except ConnectionClosed:
            pass
        finally:
            with self._lock:
                self._streams.remove(stream)