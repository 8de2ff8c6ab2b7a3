# brynet

Small networking building blocks for Python with no third-party
dependencies:

- `brynet.buffer`: `Buffer`, a fixed-capacity byte buffer with separate read
  and write positions, and `BufferFullError`.
- `brynet.timer`: `Timer`, `RepeatTimer` and `TimerManager`, one-shot and
  repeating timers kept ordered by deadline and run by an explicit
  `schedule()` call.
- `brynet.sendable_msg`: `SendableMsg`, `StringSendMsg` and
  `make_string_msg`, immutable blocks of bytes ready to be sent.
- `brynet.http_format`: `HttpRequest`, `HttpResponse`, `HttpQueryParameter`,
  `HttpMethod` and `HttpResponseStatus` for building HTTP/1.1 message text.
- `brynet.sha1`: `SHA1`, an incremental SHA-1 hasher, and `ReportType` for its
  text reports.
- `brynet.socketlib`: helpers over `socket` for connecting, listening,
  accepting, sending and tuning TCP sockets.
- `brynet.connector`: `ConnectorWorkInfo`, which starts non-blocking TCP
  connects and reports each outcome once through callbacks, with
  `AsyncConnectAddr` and `ConnectOption`.

## Installation

```
pip install .
```

## Examples

### Buffer

```python
from brynet.buffer import Buffer, BufferFullError

buf = Buffer(8)
buf.write(b"hello")
print(buf.peek())          # b'hello'
buf.consume(2)
buf.write(b"abcde")        # unread bytes are moved to the front first
print(buf.peek())          # b'lloabcde'
try:
    buf.write(b"x")
except BufferFullError:
    print("full")
```

`readable_count`, `writable_count`, `capacity`, `read_pos` and `write_pos`
are read-only properties; `commit()`, `compact()` and `clear()` move the
positions directly.

### HTTP messages

```python
from brynet.http_format import HttpMethod, HttpQueryParameter, HttpRequest, HttpResponse

query = HttpQueryParameter()
query.add("page", "1")
query.add("size", "20")

request = HttpRequest()
request.set_method(HttpMethod.GET)
request.set_url("/ws")
request.set_host("localhost")
request.set_query(query.result)     # "page=1&size=20"
print(request.build())

response = HttpResponse()
response.set_content_type("text/plain")
response.set_body("hello")          # also sets Content-Length
print(response.build())             # starts with "HTTP/1.1 200 OK"
```

Headers are written sorted by field name. `set_body()` sets
`Content-Length` to the UTF-8 length of the body. An unknown method passed to
`HttpRequest.set_method()` raises `ValueError`.

### Timers

```python
from brynet.timer import TimerManager

manager = TimerManager()
manager.add_timer(0.5, print, "fired")
repeat = manager.add_interval_timer(1.0, print, "tick")

manager.schedule()                  # runs every timer whose time has come
print(manager.near_left_time())     # seconds until the next timer, 0.0 if none
repeat.cancel()                     # stops further repeats
```

Timeouts may be given in seconds or as `datetime.timedelta`. A `Timer`
returned by `add_timer()` can be cancelled and runs its callback at most once.
`TimerManager` takes an optional clock function, which makes it easy to drive
from tests.

### SHA-1

```python
from brynet.sha1 import SHA1, ReportType

h = SHA1()
h.update(b"abc")
h.final()                                     # returns the 20-byte digest
print(h.report_hash(ReportType.HEX_SHORT))    # A9993E364706816ABA3E25717850C26C9CD0D89D
print(h.report_hash(ReportType.HEX))          # A9 99 3E 36 ...
print(h.report_hash(ReportType.DIGIT))        # 169 153 62 54 ...
```

`hash_file(path)` feeds a whole file. After `final()` the working state is
wiped; call `reset()` before hashing another message. `digest()` raises
`RuntimeError` if `final()` has not been called.

### Sockets and connecting

```python
from brynet import socketlib
from brynet.connector import AsyncConnectAddr, ConnectorWorkInfo

server = socketlib.listen(False, "127.0.0.1", 0, 16, False)
port = server.getsockname()[1]

worker = ConnectorWorkInfo()
worker.process_connect(AsyncConnectAddr(
    ip="127.0.0.1",
    port=port,
    timeout=2.0,
    success_cb=lambda sock: print("connected", socketlib.get_ip_of_socket(sock)),
    failed_cb=lambda: print("failed"),
    process_callbacks=[socketlib.socket_nodelay],
))

while worker.pending_count():
    worker.check_connect_status(10)   # milliseconds
    worker.check_timeout()
```

`process_connect()` accepts numeric IPv4 addresses only. Process callbacks run
on the connected socket before the success callback. When no success callback
is given the connected socket is closed. `cause_all_failed()` aborts every
pending attempt and calls each failure callback.

`socketlib.connect()` and `socketlib.listen()` take numeric addresses, raise
`ValueError` for an invalid one and `OSError` when the connect, bind or listen
fails. `socket_send()` returns 0 when the socket would block.
`is_self_connect()` detects a socket connected to its own local address.

## What this package does not do

There is no event loop, no TCP connection or service layer that reads and
writes on connected sockets, no listening thread, no HTTP parser or server and
no WebSocket framing. `ConnectorWorkInfo` must be polled by the caller, and
`TimerManager` runs timers only when `schedule()` is called.

## Tests

```
pip install .[test]
pytest
```