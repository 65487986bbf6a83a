"""Shared router for the tool-invocation surface."""

from __future__ import annotations

from fastapi import APIRouter

mcp_router = APIRouter(tags=["MCP"])
