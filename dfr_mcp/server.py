# dfr_mcp/server.py
"""
Read-only MCP server for the DFR project tree.

Run standalone:
    python -m dfr_mcp.server

Exposes three tools over stdio: list-prps, read-prp, get-project-status.
"""
import logging
from pathlib import Path
from typing import Annotated

import anyio
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from dfr_mcp import __version__

logger = logging.getLogger(__name__)


# -------------------------------------------------
# CONFIG
# -------------------------------------------------
SERVER_NAME = "DFR-Server"
SERVER_INSTRUCTIONS = "MCP Server for DFR Project"

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PRPS_DIR = "PRPs"
PRP_SUFFIX = ".md"
STATUS_DIRS = ("src", "assets", "docs")


# -------------------------------------------------
# HANDLERS
# -------------------------------------------------
async def _listdir(path: Path) -> list[str]:
    return sorted([entry.name async for entry in anyio.Path(path).iterdir()])


async def list_prps(root: Path) -> dict[str, list[str]]:
    prps = anyio.Path(root / PRPS_DIR)
    files = [
        entry.name
        async for entry in prps.iterdir()
        if entry.name.endswith(PRP_SUFFIX) and await entry.is_file()
    ]
    return {"files": sorted(files)}


async def _resolve_prp(root: Path, filename: str) -> anyio.Path:
    if not filename:
        raise ValueError("filename must not be empty")

    prps = await anyio.Path(root / PRPS_DIR).resolve()
    target = await (prps / filename).resolve()
    try:
        target.relative_to(prps)
    except ValueError as exc:
        raise ValueError(f"Path outside {PRPS_DIR}: {filename}") from exc
    return target


async def read_prp(root: Path, filename: str) -> dict[str, str]:
    target = await _resolve_prp(root, filename)
    # undecodable bytes come back as U+FFFD
    content = await target.read_text(encoding="utf-8", errors="replace")
    return {"content": content}


async def project_status(root: Path) -> dict[str, dict[str, list[str]]]:
    structure = {}
    for name in STATUS_DIRS:
        structure[name] = await _listdir(root / name)
    return {"structure": structure}


# -------------------------------------------------
# REGISTRATION
# -------------------------------------------------
def register_tools(mcp: FastMCP, root: Path = PROJECT_ROOT) -> FastMCP:
    """
    Declare the DFR tools on `mcp`, resolving every path against `root`.
    Errors are left to propagate; FastMCP turns them into error results.
    """

    @mcp.tool(name="list-prps", description="List all PRP files in the project")
    async def list_prps_tool() -> dict[str, list[str]]:
        logger.debug("list-prps in %s", root / PRPS_DIR)
        return await list_prps(root)

    @mcp.tool(name="read-prp", description="Read a specific PRP file")
    async def read_prp_tool(
        filename: Annotated[str, Field(description="Name of the PRP file")],
    ) -> dict[str, str]:
        logger.debug("read-prp %s", filename)
        return await read_prp(root, filename)

    @mcp.tool(
        name="get-project-status",
        description="Get current project status and structure",
    )
    async def project_status_tool() -> dict[str, dict[str, list[str]]]:
        logger.debug("get-project-status in %s", root)
        return await project_status(root)

    return mcp


def build_server(root: Path = PROJECT_ROOT) -> FastMCP:
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, json_response=True)
    # FastMCP takes no version; serverInfo otherwise reports the SDK's own
    mcp._mcp_server.version = __version__
    return register_tools(mcp, root)


def main():
    mcp = build_server()
    # stdout belongs to the protocol; logging goes to stderr
    logger.info("DFR MCP Server started on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
