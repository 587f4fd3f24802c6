"""
Command-line interface for CSS First.
"""

import asyncio
import json
import logging
import sys
from typing import Optional

import click

from .errors import InvalidArgumentError
from .guidance import support_recommendation
from .intent import analyze_task_intent, explain_intent
from .logical import analyze_and_suggest_logical
from .models import Approach
from .server import CSSFirstServer
from .settings import get_settings
from .suggestions import SuggestionEngine
from .support import derive_support_level, get_support_resolver

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    # stdout belongs to the stdio transport
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level")
def main(log_level: Optional[str]):
    """CSS First - CSS-first suggestions for UI tasks, served over MCP."""
    _configure_logging(log_level or get_settings().log_level)


@main.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to for HTTP mode")
@click.option("--port", default=8000, help="Port to bind to for HTTP mode")
@click.option("--stdio", is_flag=True, help="Use stdio transport (default)")
@click.option("--http", is_flag=True, help="Use HTTP (SSE) transport")
def serve(host: str, port: int, stdio: bool, http: bool):
    """Start the CSS First MCP server."""
    if http:
        run_http_server(host, port)
    else:
        run_stdio_server()


@main.command()
@click.argument("description")
@click.option(
    "--approach",
    default=Approach.MODERN.value,
    type=click.Choice([a.value for a in Approach]),
    help="modern, compatible (excellent support only) or progressive",
)
@click.option("--context", "project_context", default=None, help="Project context")
@click.option("--baseline", default=None, help='Baseline filter, e.g. "widely available"')
@click.option("--max", "max_suggestions", default=None, type=int, help="Maximum suggestions")
@click.option("--analysis", is_flag=True, help="Show the intent analysis")
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)
def suggest(
    description: str,
    approach: str,
    project_context: Optional[str],
    baseline: Optional[str],
    max_suggestions: Optional[int],
    analysis: bool,
    output_format: str,
):
    """Suggest CSS features for a task DESCRIPTION."""

    async def _suggest():
        engine = SuggestionEngine()
        return await engine.suggest_with_analysis(
            description,
            approach=approach,
            project_context=project_context,
            baseline_preference=baseline,
            max_suggestions=max_suggestions,
        )

    try:
        report = asyncio.run(_suggest())
    except InvalidArgumentError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        data = {"suggestions": [s.model_dump(mode="json") for s in report.suggestions]}
        if analysis:
            data["analysis"] = report.analysis.model_dump(mode="json")
            data["explanation"] = report.explanation
        print(json.dumps(data, indent=2))
        return

    if analysis:
        print(f"\n{report.explanation}")
    if not report.suggestions:
        print("\nNo CSS-only suggestions found.")
        return

    print("\n=== CSS Suggestions ===")
    for index, s in enumerate(report.suggestions, start=1):
        print(
            f"  {index}. {s.property} [{s.support_level.value}, {s.baseline.value}] "
            f"{s.browser_support.overall_support}%"
        )
        print(f"     {s.description}")
        print(f"     {s.mdn_url}")


@main.command()
@click.argument("css_property")
@click.option("--experimental", is_flag=True, help="List experimental sub-features")
def support(css_property: str, experimental: bool):
    """Show browser support for CSS_PROPERTY."""

    async def _support():
        resolver = get_support_resolver()
        record = await resolver.resolve_support(css_property, experimental)
        level = derive_support_level(record.overall_support)
        baseline = await resolver.resolve_baseline(css_property, level)
        return record, level, baseline

    record, level, baseline = asyncio.run(_support())
    print(
        json.dumps(
            {
                "property": css_property,
                "browser_support": record.model_dump(mode="json"),
                "support_level": level.value,
                "baseline": baseline.value,
                "recommendation": support_recommendation(record.overall_support),
            },
            indent=2,
        )
    )


@main.command()
@click.argument("css_property")
def details(css_property: str):
    """Show documentation details for CSS_PROPERTY."""
    documentation = asyncio.run(get_support_resolver().resolve(css_property))
    print(json.dumps(documentation.model_dump(mode="json"), indent=2))


@main.command()
@click.argument("description")
@click.option("--context", "project_context", default=None, help="Project context")
def analyze(description: str, project_context: Optional[str]):
    """Show the intent analysis for a task DESCRIPTION."""
    profile = analyze_task_intent(description, project_context)
    data = profile.model_dump(mode="json")
    data["explanation"] = explain_intent(profile)
    print(json.dumps(data, indent=2))


@main.command()
@click.argument("css_file", type=click.File("r"), default="-")
@click.option("--convert", is_flag=True, help="Print only the converted CSS")
def logical(css_file, convert: bool):
    """Find physical units and properties in CSS_FILE (default: stdin)."""
    result = analyze_and_suggest_logical(css_file.read())
    if convert:
        print(result.logicalized_code)
        return

    if not result.has_physical_units:
        print("No physical units or properties found.")
        return

    print("\n=== Logical Alternatives ===")
    for finding in result.suggestions:
        print(f"  line {finding.line}: {finding.physical} -> {finding.logical}")


def run_stdio_server():
    """Run the server in stdio mode."""
    mcp = CSSFirstServer().create_fastmcp_server()
    logger.info("CSS First server starting in stdio mode")
    try:
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("CSS First server interrupted by user")


def run_http_server(host: str, port: int):
    """Run the server in HTTP mode."""
    mcp = CSSFirstServer().create_fastmcp_server(host=host, port=port)
    logger.info("CSS First server starting on http://%s:%s", host, port)
    mcp.run(transport="sse")


if __name__ == "__main__":
    main()
