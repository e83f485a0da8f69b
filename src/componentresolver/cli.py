import click
import json
import logging
import asyncio
import traceback
from functools import wraps
from pydantic import BaseModel

from .config import build_options, load_options
from .constants import CacheEvent
from .resolver import ComponentResolver
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    ComponentResolverError,
    ConfigurationError,
    FeatureDisabledError,
    ResolutionError,
    ResolverIOError,
)
from . import __version__


def make_options(root: str, config_file: str = None, **overrides):
    """Options for one CLI run; ROOT wins over root_directory of the options file"""
    overrides["root_directory"] = root
    if config_file:
        return load_options(config_file, **overrides)
    return build_options(**overrides)


def to_jsonable(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def echo_json(value):
    click.echo(json.dumps(to_jsonable(value), indent=2, ensure_ascii=False))


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _abort(f"Configuration error: {e}")
        except ResolutionError as e:
            _abort(f"Resolution error: {e}")
        except FeatureDisabledError as e:
            _abort(f"Feature disabled: {e}")
        except ResolverIOError as e:
            _abort(f"I/O error: {e}")
        except ComponentResolverError as e:
            _abort(f"An unexpected application error occurred: {e}")
    return wrapper


def _abort(message: str):
    logging.error(message)
    ctx = click.get_current_context(silent=True)
    if ctx is not None and ctx.obj and ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


async def _query(options, query):
    async with ComponentResolver(options) as resolver:
        return await query(resolver)


@handle_errors
def do_types(root: str, config_file: str):
    """Execute types command"""
    options = make_options(root, config_file, watch=False)
    echo_json(asyncio.run(_query(options, lambda r: r.get_component_types())))


@handle_errors
def do_components(root: str, config_file: str, component_type: str):
    """Execute components command"""
    options = make_options(root, config_file, watch=False)
    echo_json(asyncio.run(_query(options, lambda r: r.get_components(component_type))))


@handle_errors
def do_show(root: str, config_file: str, component_path: str):
    """Execute show command - metadata plus templates of one component"""
    options = make_options(root, config_file, watch=False)

    async def show(resolver: ComponentResolver):
        component = await resolver.get_component(component_path)
        templates, sub_templates = await asyncio.gather(
            resolver.get_component_templates(component.directory),
            resolver.get_component_sub_templates(component.directory),
        )
        return {
            "component": component,
            "templates": [template.name for template in templates],
            "sub_templates": [template.name for template in sub_templates],
        }

    echo_json(asyncio.run(_query(options, show)))


@handle_errors
def do_examples(root: str, config_file: str, component_path: str):
    """Execute examples command"""
    options = make_options(root, config_file, watch=False, examples=True)

    async def examples(resolver: ComponentResolver):
        component = await resolver.get_component(component_path)
        return await resolver.get_component_examples(component.directory)

    echo_json(asyncio.run(_query(options, examples)))


@handle_errors
def do_readme(root: str, config_file: str, component_path: str):
    """Execute readme command"""
    options = make_options(root, config_file, watch=False, readme=True)
    readme = asyncio.run(_query(options, lambda r: r.get_component_readme(component_path)))
    if readme is None:
        logging.warning(f"Component '{component_path}' has no readme")
        return
    echo_json(readme)


@handle_errors
def do_watch(root: str, config_file: str, duration: float):
    """Execute watch command - print one JSON line per cache event"""
    options = make_options(root, config_file, watch=True)

    async def watch():
        async with ComponentResolver(options) as resolver:
            if not resolver.watching:
                logging.error(f"Cannot watch '{resolver.root}'")
                raise click.Abort()
            for index in resolver.indexes.values():
                if index is None:
                    continue
                for kind in (CacheEvent.ADDED, CacheEvent.CHANGED, CacheEvent.REMOVED, CacheEvent.CACHE_REVOKED):
                    index.cache.on(kind, lambda event: click.echo(json.dumps({
                        "index": event.source,
                        "event": event.kind.value,
                        "path": event.path,
                        "generation": event.generation,
                    })))
            components = await resolver.get_components()
            logging.info(f"Watching {len(components)} component(s) in '{resolver.root}'. Press Ctrl+C to stop.")
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)

    try:
        asyncio.run(watch())
    except KeyboardInterrupt:
        logging.info("Stopped watching.")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'fc=DEBUG,watch=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='component-resolver')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """Component Resolver - Inspect a pattern library component tree

    \b
    Examples:
      component-resolver types components/
      component-resolver show components/ atoms/button
      component-resolver watch components/
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logger(debug=debug, module_levels=parse_module_levels(log_levels), log_file=log_file)


config_option = click.option(
    '-c', '--config', 'config_file',
    type=click.Path(dir_okay=False),
    help='YAML file with resolver options',
)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False))
@config_option
def types(root, config_file):
    """List the component types below ROOT"""
    do_types(root, config_file)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False))
@click.option('-t', '--type', 'component_type', help='Only components of this type (e.g. atoms)')
@config_option
def components(root, component_type, config_file):
    """List the components below ROOT with their metadata"""
    do_components(root, config_file, component_type)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False))
@click.argument('component_path')
@config_option
def show(root, component_path, config_file):
    """Show one component (e.g. atoms/button) and its templates"""
    do_show(root, config_file, component_path)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False))
@click.argument('component_path')
@config_option
def examples(root, component_path, config_file):
    """Show the examples of a component"""
    do_examples(root, config_file, component_path)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False))
@click.argument('component_path')
@config_option
def readme(root, component_path, config_file):
    """Show the readme of a component"""
    do_readme(root, config_file, component_path)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False))
@click.option('-d', '--duration', type=float, help='Stop after this many seconds (default: until Ctrl+C)')
@config_option
def watch(root, duration, config_file):
    """Watch ROOT and print cache events as JSON lines"""
    do_watch(root, config_file, duration)
