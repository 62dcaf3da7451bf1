import asyncio
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Annotated, Optional
import os
import typer
from budr.models import ScrapeResult
from budr.scraper import scrape, scrape_html

if os.getenv("DEBUG_CLI", "0") == "1":
    import debugpy

    debugpy.listen(("0.0.0.0", 5679))
    if os.getenv("DEBUGPY_WAIT", "0") == "1":
        debugpy.wait_for_client()


# ---------------------------------------------------------------------------
# Global logging configuration - set once at import time
# ---------------------------------------------------------------------------
LOG_LEVEL = logging.DEBUG if os.getenv("BUDR_DEBUG", "0") == "1" else logging.INFO
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s -- %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
file_handler = RotatingFileHandler(
    "./budr.log", maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
)
file_handler.setLevel(LOG_LEVEL)
file_handler.setFormatter(
    logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s -- %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
)

root = logging.getLogger()  # root logger
root.addHandler(file_handler)

log = logging.getLogger("budr")


app = typer.Typer(help="budr CLI")


def _emit(result: ScrapeResult) -> None:
    # Handled failures were already logged; the exit status stays 0 either way.
    if result.page is not None:
        typer.echo(result.page.model_dump_json(by_alias=True, indent=2))


@app.command("scrape")
def scrape_cmd(
    url: Annotated[
        Optional[str], typer.Argument(help="Tradera item url.", show_default=False)
    ] = None,
):
    """Open a listing in headless chromium and print it as JSON."""
    _emit(asyncio.run(scrape(url)))


@app.command()
def parse(
    file: Annotated[Path, typer.Argument(help="Saved item page (HTML).")],
    url: Annotated[
        str, typer.Option("--url", "-u", help="Url the page was saved from.")
    ] = "https://www.tradera.com/item/",
):
    """Read a saved item page without a browser."""
    if not file.exists():
        log.warning("No such file: %s", file)
        return
    html = file.read_text(encoding="utf-8")
    _emit(asyncio.run(scrape_html(html, url)))


if __name__ == "__main__":
    app()
