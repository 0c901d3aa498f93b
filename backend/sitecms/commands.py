# sitecms/commands.py
import json
from pathlib import Path

import click
from flask import current_app

from sitecms.application.cms.list_versions import get_version_index
from sitecms.domain.sections import CONTENT_SECTIONS
from sitecms.extensions import storage
from sitecms.storage.keys import content_key
from sitecms.storage.objects import exists, write_json


def seed_content(seed_dir=None, overwrite=False):
    """
    Ensure a version index exists per section and upload
    {seed_dir}/{section}.json as the current document.

    Existing documents are left alone unless overwrite is set.
    Returns the sections whose document was written.
    """
    store = storage.bucket
    written = []

    for section in CONTENT_SECTIONS:
        get_version_index(section=section)

        if seed_dir is None:
            continue

        path = Path(seed_dir) / f"{section}.json"
        if not path.is_file():
            current_app.logger.warning("No seed document for %s at %s", section, path)
            continue

        if exists(store, content_key(section)) and not overwrite:
            continue

        document = json.loads(path.read_text(encoding="utf-8"))
        write_json(store, content_key(section), document)
        written.append(section)

    return written


def register_commands(app):
    @app.cli.command("seed-content")
    @click.option("--seed-dir", type=click.Path(exists=True, file_okay=False), default=None)
    @click.option("--overwrite", is_flag=True, help="Replace existing current documents.")
    def seed_content_command(seed_dir, overwrite):
        """Seed version indexes and initial section documents."""
        written = seed_content(seed_dir, overwrite=overwrite)
        click.echo(f"Seeded {len(CONTENT_SECTIONS)} version indexes, {len(written)} documents.")
