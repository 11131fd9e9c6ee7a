"""
Command line interface for PyGridFS.

Usage:
    pygridfs put report.pdf --name docs/report.pdf --content-type application/pdf
    pygridfs get docs/report.pdf --output report.pdf
    pygridfs ls 'docs/**/*.pdf'
    pygridfs rm 'tmp/*'
"""

from __future__ import annotations

import os
import shutil
from typing import NoReturn

import click
from pymongo.errors import PyMongoError

from pygridfs.config.initialize import initialize_template
from pygridfs.core.gridfs import AntPath, GridFsTemplate, Query, where_filename


def parse_metadata(items: tuple[str, ...]) -> dict[str, str]:
    """Parse KEY=VALUE pairs into a metadata document."""
    metadata: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid metadata entry '{item}', expected KEY=VALUE")
        metadata[key.strip()] = value
    return metadata


def _fail(ctx: click.Context, error: Exception) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Path to config.yaml")
@click.option("--bucket", default=None, help="GridFS bucket (default: from config)")
@click.pass_context
def cli(ctx, config_path, bucket):
    """Store, list, fetch and delete files in MongoDB GridFS."""
    ctx.ensure_object(dict)
    if "TEMPLATE" not in ctx.obj:
        ctx.obj["TEMPLATE"] = initialize_template(config_path, bucket=bucket)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", default=None, help="Stored filename (default: the file's name)")
@click.option("--content-type", default=None, help="Content type recorded in metadata")
@click.option("--meta", multiple=True, help="Metadata entry KEY=VALUE (repeatable)")
@click.pass_context
def put(ctx, file, name, content_type, meta):
    """Upload FILE."""
    template: GridFsTemplate = ctx.obj["TEMPLATE"]
    try:
        metadata = parse_metadata(meta)
        with open(file, "rb") as f:
            file_id = template.store(
                f,
                filename=name or os.path.basename(file),
                content_type=content_type,
                metadata=metadata or None,
            )
    except (ValueError, OSError, PyMongoError) as e:
        _fail(ctx, e)
    click.echo(f"Stored: {file_id}")


@cli.command()
@click.argument("name")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True),
              default=None, help="Destination file (default: stdout)")
@click.pass_context
def get(ctx, name, output):
    """Download the file stored as NAME."""
    template: GridFsTemplate = ctx.obj["TEMPLATE"]
    try:
        resource = template.get_resource(name)
        if resource is None:
            _fail(ctx, FileNotFoundError(f"No file named '{name}'"))
        with resource:
            if output:
                with open(output, "wb") as f:
                    shutil.copyfileobj(resource.get_input_stream(), f)
                click.echo(f"Wrote {resource.content_length} bytes to {output}")
            else:
                click.get_binary_stream("stdout").write(resource.read())
    except (OSError, PyMongoError) as e:
        _fail(ctx, e)


@cli.command(name="ls")
@click.argument("pattern", required=False)
@click.pass_context
def list_files(ctx, pattern):
    """List stored files, optionally only those matching PATTERN."""
    template: GridFsTemplate = ctx.obj["TEMPLATE"]
    try:
        if pattern:
            files = []
            for resource in template.get_resources(pattern):
                files.append(resource.file)
                resource.close()
        else:
            files = list(template.find(Query().sort_by("filename")))
        for file in files:
            click.echo(f"{file._id}\t{file.length}\t{file.filename}")
    except PyMongoError as e:
        _fail(ctx, e)


@cli.command()
@click.argument("pattern")
@click.pass_context
def rm(ctx, pattern):
    """Delete the file named PATTERN, or every file matching it."""
    template: GridFsTemplate = ctx.obj["TEMPLATE"]
    path = AntPath(pattern)
    if path.is_pattern():
        criteria = where_filename().regex(path.to_regex())
    else:
        criteria = where_filename().is_(pattern)
    try:
        deleted = template.delete(Query(criteria))
    except PyMongoError as e:
        _fail(ctx, e)
    click.echo(f"Deleted {deleted} file(s)")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
