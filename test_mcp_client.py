#!/usr/bin/env python3
"""
Test script to verify the CSS First server works correctly with MCP protocol.
"""

import asyncio
import sys
from mcp import ClientSession
from mcp.client.stdio import stdio_client


def _preview(result) -> str:
    if not result.content:
        return ""
    first = result.content[0]
    return first.text if hasattr(first, "text") else str(first)


async def test_mcp_server():
    """Test the CSS First server using the MCP protocol client."""
    print("Starting CSS First server test...")

    try:
        # Connect to the server using stdio transport
        from mcp.client.stdio import StdioServerParameters
        server_params = StdioServerParameters(
            command=sys.executable,
            args=["-m", "css_first", "serve", "--stdio"]
        )

        async with stdio_client(server_params) as (read_stream, write_stream):
            async with ClientSession(read_stream, write_stream) as session:
                # Initialize the session
                await session.initialize()
                print("✅ Session initialized successfully")

                # List available tools
                tools_result = await session.list_tools()
                print(f"✅ Found {len(tools_result.tools)} tools:")
                for tool in tools_result.tools:
                    print(f"  - {tool.name}: {tool.description[:80]}...")

                # Test suggestions
                print("\n🔍 Testing suggest_css_solution...")
                suggest_result = await session.call_tool(
                    "suggest_css_solution",
                    arguments={"task_description": "image carousel", "max_suggestions": 2},
                )
                content = _preview(suggest_result)
                if content:
                    print(f"✅ Suggestions completed. Result preview: {content[:200]}...")
                else:
                    print("❌ Suggestions returned no content")

                # Test browser support lookup
                print("\n📋 Testing check_css_browser_support...")
                support_result = await session.call_tool(
                    "check_css_browser_support",
                    arguments={"css_property": "container-type"},
                )
                content = _preview(support_result)
                if content:
                    print(f"✅ Support check completed. Result preview: {content[:200]}...")
                else:
                    print("❌ Support check returned no content")

    except Exception as e:
        print(f"❌ Test failed: {e}")
        import traceback
        traceback.print_exc()


if __name__ == "__main__":
    asyncio.run(test_mcp_server())
