"""
CLI client for the civic chat server.

Supports:
- WebSocket chat room:   /ws
- HTTP presence listing: GET /api/chat/presence/

Both authenticate with a Django session cookie (log in through /admin/ or the web
app and copy the `sessionid` cookie).

WebSocket protocol (`ChatConsumer`):
- Client sends: {"content": "..."}
- Server sends:
  - {"type":"system","content":"Welcome <name>!","timestamp":...}      (to you only)
  - {"type":"message","sender":"<name>","content":"...","timestamp":...} (to everyone, you included)
  - {"type":"system","content":"<name> left the chat","timestamp":...}
- Rejections arrive as a close frame: 1008 "Authentication required" / "User not found".
"""

from __future__ import annotations

import argparse
import asyncio
import inspect
import json
import sys
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from realtime.serializers import SystemMessage, outbound_adapter


def _rstrip_slash(s: str) -> str:
    return s[:-1] if s.endswith("/") else s


def ws_chat_url(ws_base: str) -> str:
    return f"{_rstrip_slash(ws_base)}/ws"


def http_url(http_base: str, path: str) -> str:
    return f"{_rstrip_slash(http_base)}{path}"


def session_cookie(session_id: Optional[str], cookie_name: str = "sessionid") -> Optional[str]:
    if not session_id:
        return None
    return f"{cookie_name}={session_id}"


def format_frame(raw: str) -> str:
    """Render one server frame as a single console line."""
    try:
        frame = outbound_adapter.validate_json(raw)
    except ValidationError:
        return f"[raw] {raw}"
    if isinstance(frame, SystemMessage):
        return f"[system] {frame.content}"
    return f"{frame.sender}: {frame.content}"


def outbound_frame(content: str) -> str:
    return json.dumps({"content": content}, separators=(",", ":"), ensure_ascii=False)


async def _stdin_lines() -> str:
    return await asyncio.to_thread(sys.stdin.readline)


async def ws_chat(
    *,
    ws_base: str,
    session_id: Optional[str],
    origin: Optional[str],
    message: Optional[str],
    interactive: bool,
) -> int:
    try:
        import websockets  # type: ignore
    except ImportError:
        print("Missing dependency: websockets. Install with: pip install websockets", file=sys.stderr)
        return 2

    headers: List[Tuple[str, str]] = []
    if origin:
        headers.append(("Origin", origin))
    cookie = session_cookie(session_id)
    if cookie:
        headers.append(("Cookie", cookie))

    kwargs: Dict[str, Any] = {}
    if headers:
        # websockets renamed extra_headers -> additional_headers in 14.0
        sig = inspect.signature(websockets.connect)
        if "additional_headers" in sig.parameters:
            kwargs["additional_headers"] = headers
        else:
            kwargs["extra_headers"] = headers

    async with websockets.connect(ws_chat_url(ws_base), **kwargs) as ws:

        async def _print_frames() -> None:
            try:
                async for raw in ws:
                    print(format_frame(raw), flush=True)
            except websockets.ConnectionClosed:
                pass
            if ws.close_code is not None:
                sys.stderr.write(f"[closed {ws.close_code} {ws.close_reason or ''}]\n")
                sys.stderr.flush()

        reader = asyncio.create_task(_print_frames())

        if message:
            await ws.send(outbound_frame(message))

        if interactive:
            sys.stderr.write("Interactive mode. Type a line and press Enter to send. Ctrl+C to quit.\n")
            sys.stderr.flush()
            while not reader.done():
                line = (await _stdin_lines()).rstrip("\n")
                if line:
                    await ws.send(outbound_frame(line))
        else:
            # Give the echo of our own message a moment to arrive.
            try:
                await asyncio.wait_for(asyncio.shield(reader), timeout=2)
            except asyncio.TimeoutError:
                pass

        reader.cancel()
    return 0


async def http_presence(*, http_base: str, session_id: Optional[str]) -> int:
    try:
        import aiohttp  # type: ignore
    except ImportError:
        print("Missing dependency: aiohttp. Install with: pip install aiohttp", file=sys.stderr)
        return 2

    headers = {"Cookie": session_cookie(session_id)} if session_id else None
    async with aiohttp.ClientSession() as session:
        async with session.get(http_url(http_base, "/api/chat/presence/"), headers=headers) as resp:
            text = await resp.text()
            try:
                data = json.loads(text) if text else {}
            except json.JSONDecodeError:
                print(f"Non-JSON response: {resp.status} {text}", file=sys.stderr)
                return 1
            print(json.dumps(data, indent=2, ensure_ascii=False))
            return 0 if resp.status < 400 else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CLI client for the civic chat server")
    parser.add_argument("--http", default="http://localhost:8000", help="HTTP base, e.g. http://localhost:8000")
    parser.add_argument("--ws", default="ws://localhost:8000", help="WS base, e.g. ws://localhost:8000")
    parser.add_argument("--session-id", help="Django sessionid cookie value")
    parser.add_argument("--origin", help="Optional Origin header for WebSocket handshake")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_chat = sub.add_parser("chat", help="Join the chat room over WebSocket")
    p_chat.add_argument("--message", help="Send one message after joining")
    p_chat.add_argument("--interactive", action="store_true", help="Stay connected; send each stdin line")

    sub.add_parser("presence", help="List who is connected (HTTP)")
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.cmd == "chat":
        return await ws_chat(
            ws_base=args.ws,
            session_id=args.session_id,
            origin=args.origin,
            message=args.message,
            interactive=bool(args.interactive),
        )
    if args.cmd == "presence":
        return await http_presence(http_base=args.http, session_id=args.session_id)
    return 2


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
