"""nestcss command line: compile a stylesheet, flattening nested rules."""

from __future__ import annotations
import logging
import sys
from pathlib import Path

import click

from nestcss import ParseError, SourceRegistry, __version__, compile_stylesheet
from nestcss.diagnostics import format_error
from nestcss.settings import OptionalSettings

logger = logging.getLogger(__name__)

@click.command()
@click.version_option(version=__version__, prog_name="nestcss")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--minify", is_flag=True, help="Strip all optional whitespace and comments.")
@click.option("--source-map", "source_map", is_flag=True, help="Write OUTPUT.map and reference it from OUTPUT.")
@click.option("--indent", default="    ", show_default=True, help="Indentation used when not minifying.")
@click.option("--no-flatten", "no_flatten", is_flag=True, help="Keep nested rules nested.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug information to stderr.")
def main(source: Path, output: str, minify: bool, source_map: bool, indent: str, no_flatten: bool, verbose: bool) -> None:
    """Compile SOURCE into OUTPUT (`-` for stdout)."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings: OptionalSettings = {
        "minify": minify,
        "indent_with": indent,
        "generate_source_map": source_map and output != "-",
    }
    if source_map and output == "-":
        click.echo("Source maps are not written when compiling to stdout", err=True)

    registry = SourceRegistry()
    text = source.read_text(encoding="utf-8")
    map_name = f"{Path(output).name}.map"
    try:
        result = compile_stylesheet(
            text,
            str(source),
            settings,
            map_name=map_name,
            registry=registry,
            flatten=not no_flatten,
        )
    except ParseError as error:
        click.echo(format_error(error, registry, color=sys.stderr.isatty()), err=True)
        sys.exit(1)

    if output == "-":
        click.echo(result.css)
        return

    output_path = Path(output)
    output_path.write_text(result.css, encoding="utf-8")
    if result.source_map is not None:
        output_path.with_name(map_name).write_text(result.source_map, encoding="utf-8")
        logger.debug("Wrote source map %s", output_path.with_name(map_name))
    click.echo(f"Compiled {source} to {output}")

if __name__ == "__main__":
    main()
