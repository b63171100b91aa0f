"""Request body size limit middleware.

SNS caps the Message field at 256 KiB, and the JSON envelope around it adds
escaping, the signature and the URLs, so the default limit is 1 MiB. Larger
bodies are rejected with 413 before the endpoint reads them. Content-Length
is checked up front; bodies without a usable Content-Length (chunked) are
counted while buffered. Uses raw ASGI (no BaseHTTPMiddleware).
"""

from typing import Callable

from app.middleware._asgi import get_header, send_json_error


async def _send_413(send: Callable, max_bytes: int, actual: int) -> None:
    await send_json_error(
        send,
        413,
        "PAYLOAD_TOO_LARGE",
        f"Request body must be at most {max_bytes} bytes",
        {"max_bytes": max_bytes, "content_length": actual},
    )


def _declared_length(scope: dict) -> int | None:
    raw = get_header(scope, "content-length")
    if raw is None or not raw.strip().isdigit():
        return None
    return int(raw)


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = _declared_length(scope)
        if declared is not None:
            if declared > max_bytes:
                await _send_413(send, max_bytes, declared)
                return
            await app(scope, receive, send)
            return

        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            if message["type"] != "http.request":
                continue
            body = message.get("body", b"")
            total += len(body)
            if total > max_bytes:
                await _send_413(send, max_bytes, total)
                return
            chunks.append(body)
            if not message.get("more_body", False):
                break

        buffered = b"".join(chunks)
        replayed = False

        async def replay_receive() -> dict:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": buffered, "more_body": False}
            return await receive()

        await app(scope, replay_receive, send)

    return asgi_app
