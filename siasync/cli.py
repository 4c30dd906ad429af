"""CLI interface for siasync."""

import logging
import signal
import threading
from typing import Any, Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .api import SiaClient
from .config import config
from .exceptions import SiaSyncError
from .sync import SiaFolder

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def _install_signal_handlers(stop: threading.Event) -> None:
    """Set ``stop`` on SIGINT or SIGTERM."""

    def _handle_signal(signum: int, frame: Any) -> None:
        logger.debug("Received signal %d", signum)
        stop.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)


def wait_for_shutdown(stop: threading.Event) -> None:
    """Block the main thread until ``stop`` is set."""
    # Short waits keep the main thread responsive to signal delivery
    while not stop.wait(0.5):
        pass


@click.command()
@click.argument(
    "folder",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
)
@click.option(
    "--address",
    "-a",
    default=config.api_address,
    show_default=True,
    help="Address of the Sia node API (host:port)",
)
@click.option("--password", "-p", default=None, help="Sia node API password")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="siasync")
@click.pass_context
def main(
    ctx: Any,
    folder: str,
    address: str,
    password: Optional[str],
    quiet: bool,
    verbose: bool,
) -> None:
    """siasync - keep FOLDER synchronized to a Sia node.

    Files in FOLDER that the node does not have yet are uploaded, then every
    change below FOLDER is mirrored until the process is interrupted.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("siasync").setLevel(logging.DEBUG)
    elif quiet:
        logging.basicConfig(level=logging.WARNING)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )

    # Installed before startup so a signal during the baseline sync is not lost
    stop = threading.Event()
    _install_signal_handlers(stop)

    client = SiaClient(address=address, password=password)
    try:
        sia_folder = SiaFolder(folder, client)
        if quiet:
            sia_folder.start()
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task(f"Synchronizing {sia_folder.path}...", total=None)
                sia_folder.start()
    except SiaSyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        client.close()
        ctx.exit(1)

    try:
        wait_for_shutdown(stop)
        if not quiet:
            console.print("Caught quit signal, exiting...")
    finally:
        sia_folder.close()
        client.close()


if __name__ == "__main__":
    main()
