# cli.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
import click

from .config import MAX_OLDER_THAN_DAYS, build_config, load_config
from .errors import ArchiverError, setup_logging
from .migrate import migrate_older_than
from .utils import dest_key_for

app = typer.Typer(add_completion=False, help="Move S3 objects older than N days to another bucket")


@app.command()
def archive(
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Profile to use [default: default]"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Source bucket"),
    dest: Optional[str] = typer.Option(None, "--dest", "-d", help="Destination bucket"),
    new_prefix: Optional[str] = typer.Option(None, "--new-prefix", "-n", help="Prefix prepended to destination keys"),
    older_than: Optional[int] = typer.Option(
        None,
        "--older-than",
        "-o",
        help="Move objects older than this many days [default: 30]",
        click_type=click.IntRange(min=0, max=MAX_OLDER_THAN_DAYS),
    ),
    skip_profile_check: bool = typer.Option(
        False,
        "--skip-profile-check",
        "-k",
        help="Skip profile check and use default credentials (no credentials file needed)",
    ),
    cred_file: Optional[Path] = typer.Option(
        None, "--cred-file", "-c", help="Full path to credentials file [default: ~/.aws/credentials]"
    ),
    region: Optional[str] = typer.Option(None, "--region", help="AWS region [default: us-east-1 with a profile]"),
    max_pages: Optional[int] = typer.Option(
        None,
        "--max-pages",
        help="Stop listing after this many pages (default: list everything)",
        click_type=click.IntRange(min=1),
    ),
    progress: bool = typer.Option(False, "--progress", help="Show progress bars"),
    show_errors: bool = typer.Option(False, "--show-errors/--no-show-errors", help="Print failed keys"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to YAML config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """
    Copy objects older than N days from the source bucket to the destination
    bucket, then delete the sources that were copied.
    """
    setup_logging(level=logging.DEBUG if verbose else logging.INFO)

    try:
        cfg = build_config(
            load_config(config),
            profile=profile,
            source_bucket=source,
            dest_bucket=dest,
            new_prefix=new_prefix,
            older_than_days=older_than,
            skip_profile_check=True if skip_profile_check else None,
            credentials_file=cred_file,
            region=region,
            max_pages=max_pages,
            progress=True if progress else None,
        )
        res = migrate_older_than(cfg)
    except ArchiverError as e:
        # Reported, not re-raised: the tool exits 0 on every path
        typer.echo(str(e))
        return

    typer.echo(f"Checked for objects older than {res['stats']['cutoff']}")
    for key in res["deleted"]:
        typer.echo(f"Deleted: {key} -> {cfg.dest_bucket}/{dest_key_for(key, cfg.new_prefix)}")

    typer.echo(
        f"Listed: {len(res['listed'])}, Copied: {len(res['copied'])}, Deleted: {len(res['deleted'])}, "
        f"Errors(copy/delete): {len(res['errors_copy'])}/{len(res['errors_delete'])}"
    )

    if show_errors:
        for e in res.get("errors_copy", []):
            typer.echo(f"[COPY ERROR] {e}")
        for e in res.get("errors_delete", []):
            typer.echo(f"[DELETE ERROR] {e}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
