import asyncio
import json
import sys

from mcp import ClientSession
from mcp.client.stdio import stdio_client, StdioServerParameters

USAGE = "usage: dfr-mcp-call <tool> [json-arguments]"


class ToolCallError(Exception):
    """The server answered a tool call with an error result."""

    def __init__(self, name, messages):
        self.name = name
        self.messages = messages
        super().__init__("\n".join(messages) or f"tool {name} failed")


class MCPClient:
    def __init__(self, command, args, cwd=None):
        self.params = StdioServerParameters(
            command=command,
            args=args,
            cwd=cwd,
        )
        self._session = None

    async def __aenter__(self):
        self._stdio = stdio_client(self.params)
        self._read, self._write = await self._stdio.__aenter__()
        self._session = ClientSession(self._read, self._write)
        await self._session.__aenter__()
        await self._session.initialize()
        return self

    async def __aexit__(self, *args):
        await self._session.__aexit__(*args)
        await self._stdio.__aexit__(*args)

    async def list_tools(self):
        result = await self._session.list_tools()
        return result.tools

    async def call_tool(self, name, arguments):
        result = await self._session.call_tool(name, arguments)
        return result

    async def fetch(self, name: str, arguments: dict) -> dict:
        """
        Call a tool and return its structured payload, e.g. {"files": [...]}.
        Raises ToolCallError when the server reports a failure.
        """
        return payload(name, await self.call_tool(name, arguments))


def payload(name: str, result) -> dict:
    if result.isError:
        messages = [getattr(block, "text", str(block)) for block in result.content]
        raise ToolCallError(name, messages)
    return result.structuredContent or {}


def server_client() -> MCPClient:
    """Client that spawns the DFR server with the current interpreter."""
    return MCPClient(sys.executable, ["-u", "-m", "dfr_mcp.server"])


async def call_once(name: str, arguments: dict) -> dict:
    async with server_client() as mcp:
        result = await mcp.call_tool(name, arguments)
    # raised outside the session so it is not wrapped in an ExceptionGroup
    return payload(name, result)


def parse_args(argv: list[str]) -> tuple[str, dict]:
    if not argv or len(argv) > 2:
        raise ValueError(USAGE)

    arguments = json.loads(argv[1]) if len(argv) == 2 else {}
    if not isinstance(arguments, dict):
        raise ValueError("arguments must be a JSON object")
    return argv[0], arguments


def main(argv=None) -> int:
    try:
        name, arguments = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    try:
        result = asyncio.run(call_once(name, arguments))
    except ToolCallError as e:
        print(e, file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
