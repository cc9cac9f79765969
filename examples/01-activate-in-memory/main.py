"""
Activate In Memory Example

This example wires reqhost into an engine with in-memory host services:
1. Seed a workspace with a region script and a bootstrap script
2. Activate against the engine
3. Change settings and watch the pipeline follow

Run: python -m examples.01-activate-in-memory.main
"""

import asyncio

from reqhost import EngineApi, HostEnvironment, activate
from reqhost.engine import HttpRegion, ParserContext, ScriptRequest, ShowInputBoxVariableReplacer
from reqhost.host import (
    InMemoryConfigurationSource,
    InMemoryEditorWindow,
    InMemoryFileSystem,
    InMemoryWorkspace,
    ScriptedPopupService,
)
from reqhost.io import ResourceLocator

# =============================================================================
# Script Executor
# =============================================================================


class PrintingScriptExecutor:
    """Prints scripts instead of running them."""

    async def execute_script(self, request: ScriptRequest) -> None:
        print(f"  [executor] {request.file_name}: {request.script!r}")


# =============================================================================
# Main
# =============================================================================


async def main():
    print("=" * 60)
    print("reqhost: in-memory activation")
    print("=" * 60)

    file_system = InMemoryFileSystem()
    file_system.add_file("/ws/api/scripts/setup.js", "exports.token = 'abc';")
    file_system.add_file("/ws/init.js", "console.info('bootstrap');")
    api_file = file_system.add_file("/ws/api/users.http", "# @note\nDELETE /users")

    config = InMemoryConfigurationSource(logLevel="debug")
    host = HostEnvironment(
        file_system=file_system,
        window=InMemoryEditorWindow(),
        workspace=InMemoryWorkspace(["/ws/docs", "/ws/api"]),
        popups=ScriptedPopupService(inputs=["s3cret"]),
        config=config,
    )
    engine = EngineApi(PrintingScriptExecutor())

    api = await activate(engine, host)
    print(f"\nParsers:   {[p.name for p in engine.http_region_parsers]}")
    print(f"Replacers: {[r.type for r in engine.variable_replacers]}")

    print("\n1. Enable the region script")
    await config.update(httpRegionScript="scripts/setup.js")
    print(f"   Parsers: {[p.name for p in engine.http_region_parsers]}")

    context = ParserContext(file=api_file, region=HttpRegion(), is_file_start=True)
    for parser in engine.http_region_parsers:
        await parser.parse(["GET /"], 0, context)
    print(f"   Region actions: {[a.name for a in context.region.actions]}")

    print("\n2. Configure the bootstrap script")
    await config.update(extensionScript="/ws/init.js")
    await config.update(logLevel="info")
    print(f"   Executed once: {api.script_runner.executed}")

    print("\n3. Resolve paths through the file provider")
    provider = api.file_provider
    print(f"   dirname:  {provider.dirname(api_file)}")
    print(f"   readdir:  {await provider.readdir(ResourceLocator.file('/ws/api'))}")

    print("\n4. Prompt for a variable")
    replacer = engine.variable_replacers.find_kind(ShowInputBoxVariableReplacer)
    print(f"   {await replacer.replace('Authorization: Bearer {{$input Api token}}')}")

    api.dispose()
    print(f"\nListeners after dispose: {config.listener_count}")


if __name__ == "__main__":
    asyncio.run(main())
