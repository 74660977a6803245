"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click
from dateutil import parser as dt_parser
from dotenv import load_dotenv

from StudyFinder.cli.runner import CommandRunner
from StudyFinder.config import load_config
from StudyFinder.core.query import DensityMode, PageRequest, SearchCriteria, SortDirection, SortSpec, density_for_width
from StudyFinder.core.state import StudyListState


def _parse_date(ctx: click.Context, param: click.Parameter, value: str | None) -> date | None:
    """Parse a CLI date option with dateutil."""
    del ctx
    if not value:
        return None
    try:
        return dt_parser.parse(value).date()
    except (ValueError, OverflowError) as e:
        raise click.BadParameter(f"invalid date: {value}", param=param) from e


@click.group(help="StudyFinder: search a DICOMweb study catalog.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()
    ctx.obj = load_config(config_path)


@cli.command("search")
@click.option("--patient-id", default="", help="Patient ID filter.")
@click.option("--patient-name", default="", help="Patient name filter.")
@click.option("--accession-number", default="", help="Accession number filter.")
@click.option("--study-description", default="", help="Study description filter.")
@click.option("--modalities", default="", help="Modalities in study filter.")
@click.option("--date-from", callback=_parse_date, help="Earliest study date (inclusive).")
@click.option("--date-to", callback=_parse_date, help="Latest study date (inclusive).")
@click.option("--name-or-id", "patient_name_or_id", default="", help="Match patient name or ID.")
@click.option(
    "--accession-or-modality-or-description",
    "accession_or_modality_or_description",
    default="",
    help="Match accession number, modality or description.",
)
@click.option("--all-fields", default="", help="Match any text field.")
@click.option("--density", type=click.Choice([m.value for m in DensityMode]), help="Presentation density.")
@click.option("--width", type=click.IntRange(min=0), help="Viewport width used to pick the density.")
@click.option("--page", "page_number", type=click.IntRange(min=0), default=0, show_default=True)
@click.option("--rows", "rows_per_page", type=click.IntRange(min=1), help="Rows per page.")
@click.option("--sort-field", help="Field to sort by.")
@click.option("--sort-direction", type=click.Choice(["asc", "desc", "none"]), help="Sort direction.")
@click.option("--format", "output_format", type=click.Choice(["console", "json"]), default="console", show_default=True)
@click.pass_context
def search_cmd(
    ctx: click.Context,
    density: str | None,
    width: int | None,
    page_number: int,
    rows_per_page: int | None,
    sort_field: str | None,
    sort_direction: str | None,
    output_format: str,
    **filters,
) -> None:
    """Search studies and print one page of results.

    Defaults for density, rows per page and sort come from the YAML config.
    """
    cfg = ctx.obj
    if density is not None:
        mode = DensityMode(density)
    elif width is not None:
        mode = density_for_width(width)
    else:
        mode = DensityMode(cfg.search.density)

    sort = cfg.search.default_sort
    if sort_direction == "none":
        sort = SortSpec(field=None, direction=None)
    elif sort_field or sort_direction:
        sort = SortSpec(
            field=sort_field or sort.field or "patient_name",
            direction=SortDirection(sort_direction) if sort_direction else (sort.direction or SortDirection.DESC),
        )

    state = StudyListState(
        criteria=SearchCriteria(
            patient_id=filters["patient_id"],
            patient_name=filters["patient_name"],
            accession_number=filters["accession_number"],
            study_description=filters["study_description"],
            modalities=filters["modalities"],
            study_date_from=filters["date_from"],
            study_date_to=filters["date_to"],
            patient_name_or_id=filters["patient_name_or_id"],
            accession_or_modality_or_description=filters["accession_or_modality_or_description"],
            all_fields=filters["all_fields"],
        ),
        sort=sort,
        page=PageRequest(page_number=page_number, rows_per_page=rows_per_page or cfg.search.rows_per_page),
    )
    runner = CommandRunner(cfg)
    runner.run_search(action=ctx.command.name, state=state, density=mode, output_format=output_format)
