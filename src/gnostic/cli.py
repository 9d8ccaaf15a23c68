"""
Gnostic CLI - compile an OpenAPI description and run plugins.

    gnostic SOURCE [--pb-out=PATH] [--json-out=PATH] [--text-out=PATH]
                   [--errors-out=PATH] [--PLUGIN-out=INVOCATION]...
                   [--x-EXTENSION]... [--resolve-refs]
"""

import typer

from gnostic.logging_config import setup_logging

app = typer.Typer(
    name="gnostic",
    help="Gnostic - compile OpenAPI descriptions for plugins and tools",
    add_completion=False,
)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    },
)
def compile_source(ctx: typer.Context) -> None:
    """
    Compile an OpenAPI description.

    Options are read from the raw argument list because plugin flags
    (--PLUGIN-out=...) are open-ended. Help flags are not handled here; run
    without arguments for usage.
    """
    from gnostic.pipeline.orchestrator import run

    # Initialize logging (fallback to basic config if the handler cannot start)
    try:
        setup_logging()
    except (OSError, ValueError):
        import logging

        logging.basicConfig(level=logging.WARNING)

    exit_code = run(ctx.args)
    if exit_code != 0:
        raise typer.Exit(exit_code)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
