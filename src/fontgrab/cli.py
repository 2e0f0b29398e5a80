#!/usr/bin/env python3
"""
Main CLI for the Web Font Harvester
===================================

Inspect the web fonts a site uses and download selected families or files.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from fontgrab.api import discover_fonts, download_fonts, select_fonts
from fontgrab.core.config import AppConfig
from fontgrab.core.exceptions import (
    EmptySelectionError,
    FontgrabError,
    NoFontsFoundError,
    NoMatchingFontsError,
)
from fontgrab.core.models import FamilyGroup, FontRecord, SelectionCriteria
from fontgrab.discovery.urls import normalize_target
from fontgrab.download.progress import ConsoleProgress
from fontgrab.families.grouping import infer_family_groups, select_indices_by_family_names

logger = logging.getLogger(__name__)

SELECTION_HINT = "Use --all or one of --family/--font-name/--font-url/--index"

# (header, max width, justify)
FAMILY_COLUMNS = [
    ("Family", None, "left"),
    ("Files", None, "right"),
    ("Variants", None, "right"),
    ("Weights", 20, "left"),
    ("Styles", 18, "left"),
    ("Formats", 14, "left"),
    ("Indexes", 24, "left"),
]
FONT_COLUMNS = [
    ("Index", None, "right"),
    ("Family", 28, "left"),
    ("Name", 32, "left"),
    ("Weight", None, "left"),
    ("Style", None, "left"),
    ("Format", None, "left"),
    ("URL", 76, "left"),
]


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_table(columns: list[tuple[str, int | None, str]]) -> Table:
    table = Table(header_style="bold")
    for header, max_width, justify in columns:
        table.add_column(
            header, justify=justify, max_width=max_width, no_wrap=True, overflow="ellipsis"
        )
    return table


def join_values(values: list[str]) -> str:
    return ", ".join(values) if values else "-"


def family_table(groups: list[FamilyGroup]) -> Table:
    table = create_table(FAMILY_COLUMNS)
    for group in groups:
        table.add_row(
            group.name,
            str(group.files),
            str(group.variants),
            join_values(group.weights),
            join_values(group.styles),
            join_values(group.formats),
            join_values(group.index_ranges),
        )
    return table


def font_table(groups: list[FamilyGroup]) -> Table:
    table = create_table(FONT_COLUMNS)
    for group in groups:
        for font in group.fonts:
            table.add_row(
                str(font.index),
                group.name,
                font.name,
                font.weight,
                font.style,
                font.format.value,
                font.url,
            )
    return table


def build_inspect_output(
    source: str, fonts: list[FontRecord], groups: list[FamilyGroup], view: str
) -> dict:
    families = [group.model_dump(mode="json", exclude={"fonts"}) for group in groups]
    entries = [
        {
            "index": font.index,
            "family": group.name,
            "source_family": font.source_family,
            "name": font.name,
            "weight": font.weight,
            "style": font.style,
            "format": font.format.value,
            "url": font.url,
            "referer": font.referer,
        }
        for group in groups
        for font in group.fonts
    ]

    return {
        "source": source,
        "total_found": len(fonts),
        "selected_count": sum(group.files for group in groups),
        "view": view,
        "family_count": len(groups),
        "families": families if view == "family" else [],
        "fonts": entries if view == "font" else [],
    }


def print_table(table: Table) -> None:
    console = Console(markup=False, highlight=False)
    console.print()
    console.print(table)


def print_inspect_pretty(output: dict, groups: list[FamilyGroup]) -> None:
    click.echo(f"Source: {output['source']}")
    click.echo(f"Selected fonts: {output['selected_count']} of {output['total_found']}")

    if output["view"] == "family":
        click.echo(f"Grouped families: {output['family_count']}")
        print_table(family_table(groups))
    else:
        print_table(font_table(groups))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration YAML file (optional)",
)
@click.pass_context
def cli(ctx, verbose, config):
    """Inspect and download web fonts from a website."""
    app_config = AppConfig.from_env_and_yaml(yaml_path=config)
    setup_logging("DEBUG" if verbose else app_config.log_level)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = app_config


@cli.command(name="inspect")
@click.option("--url", "-u", required=True, help="Website URL to inspect")
@click.option(
    "--family",
    multiple=True,
    help="Limit output to a family (matches inferred and source family names, repeatable)",
)
@click.option(
    "--view",
    type=click.Choice(["family", "font"]),
    default="family",
    show_default=True,
    help="Inspect grouped families or individual font files",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["pretty", "json"]),
    default="pretty",
    show_default=True,
    help="Output format for inspect results",
)
@click.pass_obj
def inspect_command(config, url, family, view, output_format):
    """List the fonts a website uses, grouped by inferred family."""
    source = normalize_target(url)
    try:
        fonts = discover_fonts(source, config)
    except NoFontsFoundError:
        fonts = []
    except FontgrabError as e:
        logger.error(f"Failed to extract fonts from {source}: {e}")
        sys.exit(1)

    if not fonts:
        if output_format == "json":
            click.echo(json.dumps(build_inspect_output(source, [], [], view), indent=2))
        else:
            click.echo(f"No fonts found on {source}")
        return

    indices = (
        select_indices_by_family_names(fonts, list(family)) if family else range(len(fonts))
    )
    if not indices:
        logger.error("No fonts matched requested family filter")
        sys.exit(1)

    groups = infer_family_groups(fonts, indices)
    output = build_inspect_output(source, fonts, groups, view)

    if output_format == "json":
        click.echo(json.dumps(output, indent=2))
    else:
        print_inspect_pretty(output, groups)


@cli.command(name="download")
@click.option("--url", "-u", required=True, help="Website URL to inspect and download from")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory where selected fonts are saved",
)
@click.option("--all", "select_all", is_flag=True, help="Download all discovered fonts")
@click.option("--family", multiple=True, help="Select all fonts in a family (repeatable)")
@click.option("--font-name", multiple=True, help="Select a font by file name (repeatable)")
@click.option("--font-url", multiple=True, help="Select a font by URL (repeatable)")
@click.option(
    "--index", type=int, multiple=True, help="Select a font by index from inspect output"
)
@click.option("--dry-run", is_flag=True, help="Show selected fonts without downloading")
@click.pass_obj
def download_command(
    config, url, output, select_all, family, font_name, font_url, index, dry_run
):
    """Download selected fonts from a website."""
    source = normalize_target(url)
    output_dir = output or config.download.output_dir
    criteria = SelectionCriteria(
        all=select_all,
        families=list(family),
        names=list(font_name),
        urls=list(font_url),
        indices=list(index),
    )

    try:
        fonts = discover_fonts(source, config)
        selected_indices = select_fonts(fonts, criteria)
    except EmptySelectionError as e:
        logger.error(f"{e}. {SELECTION_HINT}")
        sys.exit(1)
    except NoMatchingFontsError as e:
        logger.error(str(e))
        sys.exit(1)
    except FontgrabError as e:
        logger.error(f"Download failed: {e}")
        sys.exit(1)

    groups = infer_family_groups(fonts, selected_indices)
    click.echo(f"Source: {source}")
    click.echo(f"Selected fonts: {len(selected_indices)} of {len(fonts)}")
    print_table(font_table(groups))

    if dry_run:
        click.echo("\nDry run enabled; no files were downloaded.")
        return

    selected = [fonts[selected_index] for selected_index in selected_indices]
    click.echo(f"\nDownloading {len(selected)} fonts into {output_dir} ...", err=True)

    progress = ConsoleProgress()
    try:
        report = download_fonts(selected, output_dir, progress, config)
    except FontgrabError as e:
        logger.error(f"Download failed: {e}")
        sys.exit(1)
    finally:
        progress.close()

    click.echo(f"\nDownloaded {report.success_count}/{report.attempted} fonts into {output_dir}")

    if not report.all_succeeded:
        click.echo(f"{len(report.failures)} download(s) failed:", err=True)
        for message in report.failure_messages:
            click.echo(f"- {message}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
