#!/usr/bin/env python3
"""
lineshell - host command-line application
Runs the bundled demo shells on a terminal, on stdin/stdout, or over TCP
"""

import socketserver
import sys
from typing import Optional

import typer
from rich.console import Console

from ..config import config
from ..demos import DEMOS, LockedMap, build_shared_map_shell
from ..exceptions import LineShellException
from ..logger import logger
from ..shell_io import StreamIO, TerminalIO
from ..version import __version__, __status__

console = Console()
log = logger.get_logger("cli")

app = typer.Typer(
    name="lineshell",
    help="lineshell - interactive line-oriented command shells",
    no_args_is_help=True,
    add_completion=False
)


@app.command("version", help="Show version information")
def version():
    """Show version information"""
    console.print(f"[bold cyan]lineshell[/bold cyan] v{__version__} ({__status__})")


@app.command("demo", help="Run one of the bundled demo shells")
def demo(
    name: str = typer.Argument(..., help=f"Demo to run: {', '.join(sorted(DEMOS))}"),
    plain: bool = typer.Option(False, "--plain", help="Plain stdin/stdout instead of a line-editing terminal"),
):
    """Run one of the bundled demo shells"""
    builder = DEMOS.get(name)
    if builder is None:
        console.print(f"[bold red]Unknown demo: {name}[/bold red]")
        console.print(f"[dim]Available: {', '.join(sorted(DEMOS))}[/dim]")
        raise typer.Exit(code=1)

    shell = builder()
    if plain:
        io = StreamIO()
    else:
        io = TerminalIO(completions=shell.list_commands().names())
    status = shell.run(io)
    log.info(f"Demo '{name}' finished: {status.value}")


class _ShellRequestHandler(socketserver.StreamRequestHandler):
    """Runs one clone of the server's template shell per connection"""

    def handle(self):
        shell = self.server.template.clone(duplicate=lambda shared: shared)
        io = StreamIO(self.rfile, self.wfile)
        peer = "%s:%s" % self.client_address[:2]
        log.info(f"Connection from {peer}")
        try:
            status = shell.run(io)
            log.info(f"Connection {peer} closed: {status.value}")
        except LineShellException as e:
            log.warning(f"Connection {peer} aborted: {e.message}")


class ShellServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, address, template):
        self.template = template
        super().__init__(address, _ShellRequestHandler)


@app.command("serve", help="Serve the shared map demo shell over TCP")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Address to bind"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind"),
):
    """Serve the shared map demo shell over TCP, one shell per connection"""
    host = host or config.get("server.host")
    port = port if port is not None else config.get("server.port")
    template = build_shared_map_shell(LockedMap())
    with ShellServer((host, port), template) as server:
        console.print(f"[bold green]Listening on {host}:{port}[/bold green]")
        log.info(f"Serving on {host}:{port}")
        server.serve_forever()


def main():
    """
    Main entry point for lineshell.
    Parses arguments using Typer and routes to the demos.
    """
    try:
        config.validate()
        app()

    except LineShellException as e:
        console.print(f"\n[bold red]Error: {e.message}[/bold red]")
        if e.details:
            console.print(f"[dim]Details: {e.details}[/dim]")
        logger.error(f"{e.code}: {e.message}", extra={"details": e.details})
        sys.exit(1)

    except KeyboardInterrupt:
        console.print("\n[bold yellow]Interrupted[/bold yellow]")
        logger.info("User interrupted (Ctrl+C)")
        sys.exit(0)

    except Exception as e:
        console.print(f"\n[bold red]Unexpected error: {str(e)}[/bold red]")
        logger.critical(f"Unexpected error: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
