# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command Line Interface for hrimg.
"""
import logging
import os

import click
from pydantic import ValidationError

from ..exceptions import HrimgError
from ..MODELS.image_reference import ImageReference
from ..PARSERS.manifest_parser import ManifestParser
from ..UTILS.settings import Settings, load_settings


@click.group()
@click.option('--env-file', type=click.Path(dir_okay=False), default=None, help='.env file with HRIMG_* settings')
@click.option('--log-level', default=None, help='Logging level (overrides HRIMG_LOG_LEVEL)')
@click.pass_context
def cli(ctx, env_file, log_level):
    """
    hrimg - find and update container images in Helm release manifests.
    """
    if env_file and not os.path.exists(env_file):
        raise click.ClickException(f"{env_file} not found.")
    try:
        settings = load_settings(env_file)
        if log_level:
            settings = Settings(**{**settings.model_dump(), 'log_level': log_level})
    except (ValidationError, ValueError) as e:
        raise click.ClickException(str(e))

    logging.basicConfig(level=settings.log_level, format='%(levelname)s %(name)s: %(message)s')
    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings
    ctx.obj['parser'] = ManifestParser(settings.conventions)


def _parse(ctx, file):
    try:
        return ctx.obj['parser'].parse(file)
    except HrimgError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def containers(ctx, file):
    """List the containers of every Helm release in FILE."""
    manifest = _parse(ctx, file)
    click.echo(f"{'RESOURCE':40} {'CONTAINER':20} IMAGE")
    for resource_id in sorted(manifest.workloads):
        for container in manifest.workloads[resource_id].containers():
            click.echo(f"{resource_id:40} {container.name:20} {container.image}")


@cli.command(name='set-image')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--resource', '-r', 'resource_id', required=True, help='Resource id, e.g. ns:helmrelease/name')
@click.option('--container', '-c', required=True, help='Container name')
@click.option('--image', '-i', default=None, help='New image reference')
@click.option('--tag', '-t', default=None, help='New tag for the current image')
@click.option('--dry-run', is_flag=True, help='Print the result instead of writing FILE')
@click.pass_context
def set_image(ctx, file, resource_id, container, image, tag, dry_run):
    """Set the image of one container and rewrite FILE in place."""
    if (image is None) == (tag is None):
        raise click.UsageError("Exactly one of --image or --tag is required.")

    manifest = _parse(ctx, file)
    try:
        workload = manifest.workload(resource_id)
        if image is not None:
            new_image = ImageReference.parse(image)
        else:
            current = {c.name: c.image for c in workload.containers()}
            if container not in current:
                raise click.ClickException(f"container {container!r} not found")
            new_image = current[container].with_new_tag(tag)
        workload.set_container_image(container, new_image)
    except HrimgError as e:
        raise click.ClickException(str(e))

    output = manifest.to_string()
    if dry_run:
        click.echo(output, nl=False)
        return
    with open(file, 'w') as f:
        f.write(output)
    click.echo(f"{resource_id} {container} -> {new_image}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
