#!/usr/bin/env python3
"""
use-golang CLI - Main entry point
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from usegolang import __version__
from usegolang.build_manager import BuildManager
from usegolang.compiler.tinygo import TinyGoCompiler
from usegolang.config import load_options
from usegolang.errors import TransformError, UseGolangError
from usegolang.plugin import GolangPlugin

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="usegolang")
@click.option('--debug', is_flag=True, help='Enable debug output')
@click.option('--config', '-c', type=click.Path(dir_okay=False), help='Config file (default: use-golang.yaml)')
@click.option('--root', default='.', type=click.Path(file_okay=False), help='Project root')
@click.pass_context
def cli(ctx, debug, config, root):
    """use-golang - Go in your JavaScript, compiled to WebAssembly

    Modules starting with "use golang" are compiled with TinyGo and replaced
    by glue that exports the Go functions.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['root'] = Path(root).resolve()
    ctx.obj['config'] = config


def _options(ctx):
    try:
        return load_options(ctx.obj['config'], project_root=ctx.obj['root'])
    except UseGolangError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        sys.exit(1)


@cli.command()
@click.pass_context
def doctor(ctx):
    """Check the TinyGo installation and build directory"""
    options = _options(ctx)
    compiler = TinyGoCompiler(options.tinygo_path, options.optimization)
    build_dir = options.resolve_build_dir(ctx.obj['root'])

    console.print("[bold blue]Running diagnostics...[/bold blue]\n")

    installed = asyncio.run(compiler.is_installed())
    if installed:
        version = asyncio.run(compiler.get_version())
        console.print(f"[green]✓ TinyGo found: {version}[/green]")
    else:
        console.print(f"[red]✗ TinyGo not found ({options.tinygo_path})[/red]")
        console.print("\nInstall from: https://tinygo.org/getting-started/install/")

    table = Table(title="Configuration")
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    table.add_row("tinygo_path", options.tinygo_path)
    table.add_row("optimization", options.optimization)
    table.add_row("build_dir", str(build_dir))
    table.add_row("generate_types", str(options.generate_types))
    table.add_row("validate_exports", str(options.validate_exports))
    console.print(table)

    slots = BuildManager(build_dir).list_slots()
    console.print(f"\nBuild directory: {build_dir} ({len(slots)} slot(s))")

    if not installed:
        sys.exit(1)


@cli.command()
@click.option('--older-than', type=float, help='Only remove slots unused for this many days')
@click.pass_context
def clean(ctx, older_than):
    """Remove build slots"""
    options = _options(ctx)
    manager = BuildManager(options.resolve_build_dir(ctx.obj['root']))
    max_age = older_than if older_than is not None else options.cleanup_days

    if max_age is not None:
        console.print(f"[bold blue]Removing slots older than {max_age:g} day(s) in {manager.get_build_dir()}[/bold blue]")
        removed = manager.prune(max_age)
        console.print(f"[green]✓ Removed {len(removed)} slot(s)[/green]")
        return

    console.print(f"[bold blue]Cleaning {manager.get_build_dir()}...[/bold blue]")
    if manager.clean():
        console.print("[green]✓ Clean complete[/green]")
    else:
        console.print("Nothing to clean")


async def _build(plugin, files, out_dir, root, progress, task):
    failures = []
    for file in files:
        source = Path(file).resolve()
        try:
            relative = source.relative_to(root)
        except ValueError:
            relative = Path(source.name)

        progress.update(task, description=f"Compiling {relative}...")
        code = source.read_text(encoding="utf-8")

        try:
            result = await plugin.transform(code, str(source))
            output = await plugin.render_chunk(result.code if result else code)
        except TransformError as e:
            failures.append(e)
            console.print(f"[red]✗ {escape(str(e))}[/red]")
            continue
        except UseGolangError as e:
            failures.append(e)
            console.print(f"[red]✗ {relative}: {escape(str(e))}[/red]")
            continue

        target = out_dir / relative.with_suffix(".js")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(output, encoding="utf-8")
        marker = "compiled" if result else "copied"
        console.print(f"[green]✓ {relative} → {target.relative_to(out_dir)} ({marker})[/green]")

    return failures


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--out', '-o', default='dist', type=click.Path(file_okay=False), help='Output directory')
@click.pass_context
def build(ctx, files, out):
    """Compile modules into a static bundle with hashed wasm assets"""
    options = _options(ctx)
    root = ctx.obj['root']
    out_dir = Path(out).resolve()
    plugin = GolangPlugin(options, project_root=root, mode="build")

    console.print(f"[bold blue]Building {len(files)} module(s) into {out_dir}[/bold blue]")

    try:
        asyncio.run(plugin.build_start())
    except UseGolangError as e:
        console.print(f"[bold red]✗ {escape(str(e))}[/bold red]")
        sys.exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Building...", total=None)
        failures = asyncio.run(_build(plugin, files, out_dir, root, progress, task))

    for file_name in plugin.emitter.write(out_dir):
        console.print(f"  asset {file_name}")

    if failures:
        console.print(f"[bold red]✗ Build failed for {len(failures)} module(s)[/bold red]")
        sys.exit(1)
    console.print("[bold green]✓ Build successful![/bold green]")


@cli.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', '-p', default=5173, type=int, help='Port')
@click.pass_context
def serve(ctx, host, port):
    """Run the dev server"""
    import uvicorn
    from usegolang.api.server import create_app

    options = _options(ctx)
    app = create_app(ctx.obj['root'], options=options, debug=ctx.obj['debug'])

    console.print(f"[bold blue]Serving {ctx.obj['root']} on http://{host}:{port}[/bold blue]")
    uvicorn.run(app, host=host, port=port, log_level="debug" if ctx.obj['debug'] else "info")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
