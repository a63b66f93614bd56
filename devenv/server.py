"""MCP server exposing devenv to agent hosts over stdio.

Every tool returns a JSON-serialisable dict. Unexpected exceptions become
{"success": False, "error": ...} so a host never sees a raw traceback.
Logging goes to stderr; stdout carries the protocol.
"""

import logging
from dataclasses import dataclass, field

from fastmcp import FastMCP

from devenv import __version__, setup_logging
from devenv.installer import recommendations
from devenv.runtime import DevEnv, create_environment

_logging = logging.getLogger(__name__)

SERVER_NAME = "devenv"


def _error_payload(e: Exception) -> dict:
    _logging.exception("MCP tool failed")
    return {"success": False, "error": str(e)}


@dataclass
class DevEnvServer:
    env: DevEnv
    mcp: FastMCP = field(init=False, repr=False)

    def __post_init__(self):
        self.mcp = FastMCP(name=SERVER_NAME)
        self._register_tools()

    async def check_environment(self) -> dict:
        try:
            status = await self.env.validator.system_status()
            payload = status.to_dict()
            payload["installed"] = [t.canonical_name for t in status.installed]
            payload["missing"] = [t.canonical_name for t in status.missing]
            payload["recommendations"] = recommendations(status)
            return payload
        except Exception as e:
            return _error_payload(e)

    async def check_tool(self, tool: str) -> dict:
        try:
            return (await self.env.validator.check_tool(tool)).to_dict()
        except Exception as e:
            return _error_payload(e)

    async def install_tool(self, tool: str, version: str | None = None) -> dict:
        try:
            outcome = await self.env.installer.install_tool_with_warnings(tool, version)
            payload = outcome.result.to_dict()
            payload["warnings"] = outcome.warnings
            return payload
        except Exception as e:
            return _error_payload(e)

    async def install_multiple_tools(self, tools: list[str]) -> dict:
        try:
            results = await self.env.installer.install_multiple_tools(tools)
            return {
                "success": all(r.succeeded for r in results.values()),
                "results": {name: r.to_dict() for name, r in results.items()},
            }
        except Exception as e:
            return _error_payload(e)

    async def install_package_manager(self) -> dict:
        try:
            return (await self.env.installer.install_package_manager()).to_dict()
        except Exception as e:
            return _error_payload(e)

    async def check_ready(self, tools: list[str]) -> dict:
        try:
            return (await self.env.validator.is_ready(tools)).to_dict()
        except Exception as e:
            return _error_payload(e)

    async def list_tools(self) -> dict:
        return {
            "tools": [
                {
                    "name": t.canonical_name,
                    "display_name": t.display_name,
                    "category": t.category.value,
                    "description": t.description,
                }
                for t in self.env.catalog
            ]
        }

    async def get_system_info(self) -> dict:
        try:
            platform = self.env.platform
            manager = await self.env.registry.detect_package_manager()
            return {
                "os": platform.os_family.value,
                "platform": platform.raw_platform_name,
                "arch": platform.architecture,
                "distribution": await self.env.probe.detect_distribution(),
                "package_manager": (
                    {
                        "name": manager.name,
                        "install_command": manager.install_command_prefix,
                    }
                    if manager
                    else None
                ),
                "shell_profile": str(self.env.configurator.profile_path),
                "version": __version__,
            }
        except Exception as e:
            return _error_payload(e)

    def _register_tools(self):
        @self.mcp.tool(name="check_environment")
        async def check_environment() -> dict:
            """Report the platform, package manager and every catalog tool's status,
            with recommendations for what to install next."""
            return await self.check_environment()

        @self.mcp.tool(name="check_tool")
        async def check_tool(tool: str) -> dict:
            """Check whether one tool is installed and which version it reports."""
            return await self.check_tool(tool)

        @self.mcp.tool(name="install_tool")
        async def install_tool(tool: str, version: str | None = None) -> dict:
            """Install a development tool by catalog name (e.g. python, nodejs, docker).

            version is honoured by version-managed tools such as nodejs.
            """
            return await self.install_tool(tool, version)

        @self.mcp.tool(name="install_multiple_tools")
        async def install_multiple_tools(tools: list[str]) -> dict:
            """Install several tools one after another."""
            return await self.install_multiple_tools(tools)

        @self.mcp.tool(name="install_package_manager")
        async def install_package_manager() -> dict:
            """Install the system package manager (Homebrew on macOS) if missing."""
            return await self.install_package_manager()

        @self.mcp.tool(name="check_ready")
        async def check_ready(tools: list[str]) -> dict:
            """Report whether every listed tool is installed."""
            return await self.check_ready(tools)

        @self.mcp.tool(name="list_tools")
        async def list_tools() -> dict:
            """List every tool devenv knows how to install."""
            return await self.list_tools()

        @self.mcp.tool(name="get_system_info")
        async def get_system_info() -> dict:
            """Describe the operating system, architecture and package manager."""
            return await self.get_system_info()


def create_server(env: DevEnv | None = None, debug: bool = False) -> DevEnvServer:
    if env is None:
        env = create_environment(debug=debug)
    return DevEnvServer(env)


def run_server(debug: bool = False) -> None:
    setup_logging(debug)
    server = create_server(debug=debug)
    _logging.debug(f"Starting {SERVER_NAME} MCP server on stdio")
    server.mcp.run(transport="stdio")


def main():
    run_server()


if __name__ == "__main__":
    main()
