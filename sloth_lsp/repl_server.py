from __future__ import annotations

"""
Simple TCP REPL server for Sloth Lisp.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "(begin ...)"}
- Response: {"ok": true, "result": <repr string>}
  or {"ok": false, "error": <kind>, "message": <value>, "traceback": <text>}

The server keeps a single Interpreter alive so that definitions persist
across evaluations and connections.
"""

import json
import logging
import socket
import threading
from typing import Any, Dict, Tuple

from sloth.debug_utils.pprint import to_display, to_repr
from sloth.debug_utils.traceback import format_traceback
from sloth.interpreter import Interpreter
from sloth.types.errors import LispError

logger = logging.getLogger(__name__)

HOST = "127.0.0.1"
PORT = 8765


class ReplServer:
    def __init__(self, host: str = HOST, port: int = PORT, interp: Interpreter | None = None):
        self.host = host
        self.port = port
        # Keep a single interpreter to maintain session state
        self.interp = interp or Interpreter()
        # Evaluation is single-threaded; connections take turns
        self.lock = threading.Lock()

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("sloth REPL server listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def handle_request(self, req: Dict[str, Any]) -> Dict[str, Any]:
        if req.get("cmd") != "eval":
            return {"ok": False, "error": "bad-request", "message": f"Unknown cmd: {req.get('cmd')}"}
        code = req.get("code", "")
        with self.lock:
            try:
                result = self.interp.eval(code)
            except LispError as err:
                return {
                    "ok": False,
                    "error": str(err.kind),
                    "message": to_display(err.value),
                    "traceback": format_traceback(err),
                }
        return {"ok": True, "result": to_repr(result)}

    def handle_line(self, line: bytes) -> Dict[str, Any]:
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": "bad-request", "message": f"Invalid request: {ex}"}
        if not isinstance(req, dict):
            return {"ok": False, "error": "bad-request", "message": "Request must be a JSON object"}
        return self.handle_request(req)

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.debug("client connected: %s", addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    resp = self.handle_line(line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.debug("client disconnected: %s", addr)


def main():
    logging.basicConfig(level=logging.INFO)
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()
