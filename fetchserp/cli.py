"""
FetchSERP CLI

Examples:
    # Search results as JSON
    fetchserp serp "best seo tools" --country us

    # Plain-text SERP, piped elsewhere
    fetchserp serp "coffee grinder" --format text -q > serp.txt

    # Any endpoint by method name
    fetchserp call get_backlinks -p domain=example.com
    fetchserp call get_keywords_search_volume -p keywords=seo -p keywords="serp api"
    fetchserp call scrape_page_js -p url=https://example.com --payload '{"js_script": "return document.title"}'

    # Check configuration
    fetchserp check
"""

import asyncio
import inspect
import json
import logging
import sys
from typing import Any, Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .client import ENDPOINTS, FetchSerpClient
from .config import ENV_API_KEY, load_config, mask_key
from .errors import AuthenticationError, ConfigurationError, FetchSerpError, ValidationError

# Progress to stderr, data to stdout
console = Console(stderr=True)
logger = logging.getLogger(__name__)

# Parameters the API always expects as name[]=value lists
LIST_PARAMS = {"keywords"}

SERP_METHODS = {
    "json": "get_serp",
    "html": "get_serp_html",
    "text": "get_serp_text",
}


def setup_logging(verbose: bool, quiet: bool, debug: bool) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_client(config: Optional[str] = None) -> FetchSerpClient:
    """Create a client from config file and environment."""
    return FetchSerpClient.from_settings(load_config(config))


def parse_params(pairs: tuple) -> dict:
    """
    Turn repeated ``name=value`` options into keyword arguments.

    A repeated name, a ``name[]`` suffix, or a known list parameter
    produces a list; everything else stays a string.
    """
    params: dict[str, Any] = {}

    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected name=value, got '{pair}'", param_hint="-p")

        name, value = pair.split("=", 1)
        name = name.strip()
        force_list = name.endswith("[]") or name in LIST_PARAMS
        name = name.removesuffix("[]")

        if name in params:
            existing = params[name]
            if not isinstance(existing, list):
                existing = [existing]
            existing.append(value)
            params[name] = existing
        else:
            params[name] = [value] if force_list else value

    return params


def format_result(result: Any) -> str:
    """JSON payloads are pretty-printed; text passes through."""
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2, default=str)


def run_endpoint(
    client: FetchSerpClient,
    method_name: str,
    params: dict,
    quiet: bool,
) -> Any:
    """Run one endpoint method, with a spinner unless quiet."""
    method = getattr(client, method_name)

    if quiet:
        return asyncio.run(method(**params))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"[cyan]Calling {method_name}...", total=None)
        return asyncio.run(method(**params))


def execute_and_print(
    config: Optional[str],
    method_name: str,
    params: dict,
    quiet: bool,
) -> None:
    """Build a client, call the endpoint and write the result to stdout."""
    try:
        client = build_client(config)
        result = run_endpoint(client, method_name, params, quiet)
    except AuthenticationError as e:
        console.print(f"[red]Authentication Error:[/red] {e}")
        if not quiet:
            console.print("\n[yellow]To set up FetchSERP:[/yellow]")
            console.print("  1. Sign up at [link=https://www.fetchserp.com/]https://www.fetchserp.com/[/link]")
            console.print("  2. Copy your API key from the dashboard")
            console.print(f"  3. Set it: [cyan]export {ENV_API_KEY}=your_key_here[/cyan]")
        sys.exit(1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid parameters:[/red] {e}")
        sys.exit(1)
    except FetchSerpError as e:
        status = getattr(e, "status_code", None)
        label = f"FetchSERP Error ({status})" if status else "FetchSERP Error"
        console.print(f"[red]{label}:[/red] {e}")
        sys.exit(1)

    click.echo(format_result(result))


# ============================================================================
# CLI Group
# ============================================================================

@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """Command line access to the FetchSERP search and SEO data API."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============================================================================
# Call Command
# ============================================================================

@cli.command()
@click.argument("method_name", metavar="METHOD")
@click.option("-p", "--param", "params", multiple=True, help="Parameter as name=value (repeatable)")
@click.option("--payload", help="JSON body for scrape_page_js / scrape_page_js_with_proxy")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def call(
    method_name: str,
    params: tuple,
    payload: Optional[str],
    config: Optional[str],
    quiet: bool,
    verbose: bool,
    debug: bool,
):
    """
    Call any endpoint by its client method name.

    Examples:

        fetchserp call get_domain_infos -p domain=example.com

        fetchserp call get_serp_js_result -p uuid=8b0f... -q | jq '.'
    """
    setup_logging(verbose, quiet, debug)

    if method_name not in ENDPOINTS:
        raise click.UsageError(
            f"Unknown endpoint '{method_name}'. Run 'fetchserp endpoints' to list them."
        )

    kwargs = parse_params(params)

    if payload:
        try:
            kwargs["payload"] = json.loads(payload)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--payload")

    try:
        inspect.signature(getattr(FetchSerpClient, method_name)).bind(None, **kwargs)
    except TypeError as e:
        raise click.UsageError(f"{method_name}: {e}")

    execute_and_print(config, method_name, kwargs, quiet)


# ============================================================================
# Shortcut Commands
# ============================================================================

@cli.command()
@click.argument("query")
@click.option("--search-engine", help="Search engine (e.g. google, bing)")
@click.option("--country", help="Country code (e.g. us, fr)")
@click.option("--pages-number", type=int, help="Number of result pages")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["json", "html", "text"]),
              default="json", help="Result flavour")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def serp(
    query: str,
    search_engine: Optional[str],
    country: Optional[str],
    pages_number: Optional[int],
    output_format: str,
    config: Optional[str],
    quiet: bool,
    verbose: bool,
    debug: bool,
):
    """
    Fetch search engine results for QUERY.

    Examples:

        fetchserp serp "best seo tools" --country us

        fetchserp serp "espresso" -f html -q > results.html
    """
    setup_logging(verbose, quiet, debug)

    execute_and_print(config, SERP_METHODS[output_format], {
        "query": query,
        "search_engine": search_engine,
        "country": country,
        "pages_number": pages_number,
    }, quiet)


@cli.command()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def user(config: Optional[str], quiet: bool, verbose: bool, debug: bool):
    """Show the account behind the configured API key."""
    setup_logging(verbose, quiet, debug)
    execute_and_print(config, "get_user", {}, quiet)


@cli.command()
def endpoints():
    """List endpoint methods and their parameters."""
    table = Table(title="FetchSERP Endpoints", show_header=True, header_style="bold magenta")
    table.add_column("Method", style="cyan")
    table.add_column("Parameters")

    for name in ENDPOINTS:
        signature = inspect.signature(getattr(FetchSerpClient, name))
        names = [p for p in signature.parameters if p != "self"]
        table.add_row(name, ", ".join(names) or "-")

    Console().print(table)


# ============================================================================
# Check Command
# ============================================================================

@cli.command()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def check(config: Optional[str]):
    """Check configuration."""
    try:
        settings = load_config(config)
    except ConfigurationError as e:
        click.echo(f"✗ Configuration: {e}")
        sys.exit(1)

    if settings.api_key:
        click.echo(f"✓ {ENV_API_KEY}: {mask_key(settings.api_key)}")
    else:
        click.echo(f"✗ {ENV_API_KEY}: not set")

    click.echo(f"  Base URL: {settings.base_url}")
    click.echo(f"  Timeout: {settings.timeout}ms")

    try:
        settings.to_client_config()
    except (FetchSerpError, ValueError) as e:
        click.echo(f"✗ Configuration: {e}")
        sys.exit(1)

    click.echo("✓ Configuration OK")


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    cli()
