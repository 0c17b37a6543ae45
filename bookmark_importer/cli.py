"""
Command-line interface for the Bookmark Importer.

Reads a browser bookmark export, previews it as launchpad pages and
commits it to a JSON page store, optionally validating links first.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from bookmark_importer.config.pydantic_config import ConfigurationManager
from bookmark_importer.core.bookmark_importer import BookmarkImporter
from bookmark_importer.core.data_models import ImportPreview, ImportResult, ParseResult
from bookmark_importer.core.data_sources import (
    ChromeJSONSource,
    JSONPageStore,
    NetscapeHTMLSource,
)
from bookmark_importer.utils.error_handler import BookmarkImporterError
from bookmark_importer.utils.logging_setup import setup_logging

HTML_SUFFIXES = {".html", ".htm"}

logger = logging.getLogger(__name__)


class CLIInterface:
    """Command line interface for importing bookmarks."""

    def __init__(self, console: Optional[Console] = None):
        self.parser = self._create_parser()
        self.console = console or Console()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="bookmark-importer",
            description="Import browser bookmarks into a paged link store",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  bookmark-importer --input ~/.config/google-chrome/Default/Bookmarks
  bookmark-importer --input bookmarks.html --store links.json --validate
  bookmark-importer --input bookmarks.html --folders Work News --no-loose
  bookmark-importer --input Bookmarks --strict --dry-run
""",
        )
        parser.add_argument(
            "--input",
            "-i",
            required=True,
            type=Path,
            help="Chrome 'Bookmarks' JSON file or Netscape HTML export",
        )
        parser.add_argument(
            "--store",
            "-s",
            type=Path,
            help="JSON page store to import into (overrides config)",
        )
        parser.add_argument(
            "--folders",
            nargs="+",
            metavar="NAME",
            help="Top-level folders to import (default: all)",
        )
        parser.add_argument(
            "--no-loose",
            action="store_true",
            help="Skip bookmarks that are not inside a top-level folder",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Never mix folders on one page",
        )
        parser.add_argument(
            "--validate",
            action="store_true",
            help="Check link reachability and skip invalid links",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            help="Per-link validation timeout in seconds",
        )
        parser.add_argument("--config", "-c", type=Path, help="TOML or JSON config file")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show the import preview without writing",
        )
        parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
        return parser

    def run(self, args: Optional[List[str]] = None) -> int:
        parsed = self.parser.parse_args(args)

        setup_logging(
            log_level="DEBUG" if parsed.verbose else "INFO",
            console_output=parsed.verbose,
        )

        importer = None
        try:
            manager = ConfigurationManager(parsed.config)
            manager.update_from_cli_args(vars(parsed))
            config = manager.config

            source = self._create_source(parsed.input)
            store = JSONPageStore(config.store_path, config.store_quota_bytes)
            importer = BookmarkImporter.from_config(config, source, store)

            parse_result = importer.parse_bookmark_tree()
            self._print_parse_summary(parse_result)

            preview = importer.preview_import(
                selected_folders=parsed.folders,
                include_loose=not parsed.no_loose,
                smart_compact=config.paging.smart_compact,
            )
            self._print_preview(preview)

            if parsed.dry_run:
                return 0

            result = asyncio.run(self._run_import(importer, preview, parsed.validate))
            if result is None:
                self.console.print("[yellow]Validation cancelled; nothing imported[/]")
                return 1

            self._print_result(result)
            return 0 if result.is_success else 1

        except KeyboardInterrupt:
            if importer is not None:
                importer.abort()
            self.console.print("[yellow]Cancelled[/]")
            return 130
        except BookmarkImporterError as e:
            self.console.print(f"[red]Error:[/] {e}")
            return 1
        except Exception as e:
            self.console.print(f"[red]Error:[/] {e}")
            logger.exception("Unexpected error in CLI")
            return 1

    @staticmethod
    def _create_source(path: Path):
        if path.suffix.lower() in HTML_SUFFIXES:
            return NetscapeHTMLSource(path)
        return ChromeJSONSource(path)

    async def _run_import(
        self,
        importer: BookmarkImporter,
        preview: ImportPreview,
        validate: bool,
    ) -> Optional[ImportResult]:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=self.console,
        ) as progress:
            import_task = progress.add_task("Importing", total=preview.total_items, start=False)

            def on_import(done: int, total: int) -> None:
                progress.start_task(import_task)
                progress.update(import_task, completed=done, total=total)

            if not validate:
                return await importer.execute_import(preview.pages, on_import)

            validate_task = progress.add_task("Validating", total=preview.total_items)

            def on_validate(state) -> None:
                progress.update(
                    validate_task,
                    completed=state.current,
                    total=state.total,
                    description=(
                        f"Validating [green]{state.valid}[/] "
                        f"[yellow]{state.suspicious}[/] [red]{state.invalid}[/]"
                    ),
                )

            return await importer.import_with_validation(
                preview.pages, on_validate, on_import
            )

    def _print_parse_summary(self, result: ParseResult) -> None:
        stats = result.stats
        self.console.print(
            f"Found [bold]{stats.total_bookmarks}[/] new bookmarks in "
            f"{stats.folder_count} folders ({stats.loose_bookmarks} loose, "
            f"{stats.duplicate_count} duplicates skipped)"
        )
        if stats.is_extreme:
            self.console.print(
                "[yellow]Warning:[/] this is a very large collection; "
                "consider selecting fewer folders"
            )

    def _print_preview(self, preview: ImportPreview) -> None:
        table = Table(title="Import preview")
        table.add_column("#", justify="right")
        table.add_column("Page")
        table.add_column("Items", justify="right")
        for index, page in enumerate(preview.pages, start=1):
            table.add_row(str(index), page.name, str(len(page.items)))
        self.console.print(table)

        self.console.print(preview.get_summary(), highlight=False)
        if preview.over_limit:
            self.console.print(
                "[yellow]Over the import limit:[/] truncated bookmarks will not be imported"
            )

    def _print_result(self, result: ImportResult) -> None:
        if result.is_success:
            self.console.print(
                f"[green]Imported {result.success} bookmarks on {result.pages} pages[/]"
            )
            if result.failed:
                self.console.print(f"[yellow]{result.failed} bookmarks failed[/]")
        else:
            self.console.print(
                f"[red]Import failed[/] ({result.error_code}): {result.error_message}"
            )
        if result.skipped:
            self.console.print(f"Skipped {result.skipped} invalid links")


def main(args=None):
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
