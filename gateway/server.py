"""Run the gateway under uvicorn."""

from __future__ import annotations

import os

import uvicorn

DEFAULT_PROCESS_HOST = "127.0.0.1"
DEFAULT_PROCESS_PORT = "18170"


def main() -> None:
    host = os.getenv("PROCESS_HOST", DEFAULT_PROCESS_HOST).strip() or DEFAULT_PROCESS_HOST
    port = os.getenv("PROCESS_PORT", DEFAULT_PROCESS_PORT).strip() or DEFAULT_PROCESS_PORT
    uvicorn.run("gateway.main:app", host=host, port=int(port))


if __name__ == "__main__":
    main()
