#!/usr/bin/env python
"""
main.py

Command-line entry point for xyDoc: renders documentation models to PDF.

Key stages:
1. Configuration: global_config.yaml (optional), environment, CLI flags
2. Model loading: the JSON documentation model written by the extractor
3. Theme and fonts: standard PDF fonts, or TTF/OTF faces from a fonts dir
4. Rendering: one PDF per top-level type into <out-dir>/pdf/

A failed document is logged and skipped; the remaining documents are still
rendered and the exit code reports the failure.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from models.type_doc import ModelLoadError, TypeDoc, load_type_docs
from renderers.pdf.errors import PdfRenderError
from renderers.pdf.theme import PdfTheme
from renderers.pdf.type_doc_pdf import TypeDocPdfRenderer
from utils.common.output_paths import type_output_path
from utils.parsers.global_config_parser import ConfigError, GlobalConfig

console = Console()

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_OUT_DIR = "./out"


class DocGenFramework:
    """Batch driver: one PDF per top-level documentation entry."""

    def __init__(self, args):
        self.args = args
        self.config: Optional[GlobalConfig] = None
        self.theme: Optional[PdfTheme] = None
        self.type_docs: List[TypeDoc] = []
        self.out_dir: Optional[Path] = None
        self.debug = bool(args.debug)
        self.written: List[str] = []
        self.failed: List[str] = []

    def setup(self) -> bool:
        """Load config, the model and the theme."""
        try:
            self.config = GlobalConfig(config_file=self.args.config_file)
        except ConfigError as e:
            console.print(f"[red]Error: {e}[/red]")
            return False

        # CLI flags win over config and environment
        if self.args.input:
            self.config.set("paths.input_path", self.args.input)
        if self.args.out_dir:
            self.config.set("paths.out_dir", self.args.out_dir)
        if self.args.fonts_dir:
            self.config.set("pdf.fonts_dir", self.args.fonts_dir)

        self.debug = self.debug or self.config.get_bool("logging.debug", False)
        level = str(self.config.get("logging.level", "")).upper()
        if level and not (self.args.verbose or self.args.debug):
            if isinstance(logging.getLevelName(level), int):
                logging.getLogger().setLevel(level)
            else:
                logger.warning(f"Ignoring unknown log level '{level}'")

        input_path = self.config.get_path("paths.input_path")
        if not input_path:
            console.print("[red]Error: no input model given (--input or paths.input_path)[/red]")
            return False

        self.out_dir = Path(self.config.get_path("paths.out_dir", DEFAULT_OUT_DIR))

        try:
            self.type_docs = load_type_docs(input_path)
        except ModelLoadError as e:
            logger.error(f"Model load failed: {e}", exc_info=self.debug)
            console.print(f"[red]Error: {e}[/red]")
            return False

        if self.args.only:
            self.type_docs = [
                t for t in self.type_docs if self.args.only in (t.name, t.display_name)
            ]
            if not self.type_docs:
                console.print(f"[red]Error: no top-level type named '{self.args.only}'[/red]")
                return False

        try:
            self.theme = PdfTheme.from_config(self.config)
        except PdfRenderError as e:
            logger.error(f"Theme setup failed: {e}", exc_info=self.debug)
            console.print(f"[red]Error: {e}[/red]")
            return False

        return True

    def run(self) -> bool:
        """Render every selected type; True when all of them succeeded."""
        try:
            if not self.setup():
                return False

            console.print("\n" + "=" * 70)
            console.print("[bold cyan]xyDoc — PDF Documentation[/bold cyan]")
            console.print("=" * 70 + "\n")
            console.print(f"[cyan]Input:[/cyan]            {self.config.get_path('paths.input_path')}")
            console.print(f"[cyan]Output Directory:[/cyan] {self.out_dir}")
            console.print(f"[cyan]Types:[/cyan]            {len(self.type_docs)}\n")

            for type_doc in self.type_docs:
                self._render_one(type_doc)

            console.print("\n" + "=" * 70)
            if self.failed:
                console.print(
                    f"[bold yellow]Done with errors[/bold yellow]: "
                    f"{len(self.written)} written, {len(self.failed)} failed"
                )
            else:
                console.print(f"[bold green]Done[/bold green]: {len(self.written)} written")
            console.print("=" * 70)
            return not self.failed

        except KeyboardInterrupt:
            console.print("\n[yellow]Rendering interrupted by user[/yellow]")
            return False

    def _render_one(self, type_doc: TypeDoc) -> None:
        output_path = type_output_path(self.out_dir, type_doc, "pdf")
        try:
            renderer = TypeDocPdfRenderer(
                type_doc,
                theme=self.theme,
                author=self.config.get("pdf.author"),
                header_override=self.args.title,
            )
            renderer.generate(output_path)
            self.written.append(str(output_path))
            console.print(f"[green]✓[/green] {type_doc.display_name}: {output_path}")
        except Exception as e:
            # One bad document must not stop the batch
            logger.error(f"Rendering {type_doc.display_name} failed: {e}", exc_info=self.debug)
            self.failed.append(type_doc.display_name)
            console.print(f"[red]✗[/red] {type_doc.display_name}: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="xydoc",
        description="xyDoc: render documentation models to paginated PDF",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Input & Output
    # ─────────────────────────────────────────────────────────────────────────
    io_group = parser.add_argument_group("Input & Output")
    io_group.add_argument(
        "-i", "--input",
        default=None,
        help="JSON documentation model (overrides paths.input_path)"
    )
    io_group.add_argument(
        "--out-dir",
        default=None,
        help=f"Output root; PDFs go to <out-dir>/pdf (default from config, else {DEFAULT_OUT_DIR})"
    )
    io_group.add_argument(
        "--config-file",
        default=None,
        help="Path to global_config.yaml (overrides auto-discovery)"
    )
    io_group.add_argument(
        "--only",
        default=None,
        metavar="NAME",
        help="Render only the top-level type with this name"
    )

    # ─────────────────────────────────────────────────────────────────────────
    # PDF Layout
    # ─────────────────────────────────────────────────────────────────────────
    pdf_group = parser.add_argument_group("PDF Layout")
    pdf_group.add_argument(
        "--fonts-dir",
        default=None,
        help="Directory of TTF/OTF fonts (default: standard PDF fonts)"
    )
    pdf_group.add_argument(
        "--title",
        default=None,
        help="Fixed page-header text instead of the section title"
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Debugging & Verbosity
    # ─────────────────────────────────────────────────────────────────────────
    debug_group = parser.add_argument_group("Debugging & Verbosity")
    debug_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable detailed logging"
    )
    debug_group.add_argument(
        "-D", "--debug",
        action="store_true",
        help="Enable debug mode with full tracebacks"
    )

    args = parser.parse_args(argv)

    # Setup logging level
    if args.verbose or args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    framework = DocGenFramework(args)
    success = framework.run()

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
