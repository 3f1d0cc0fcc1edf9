import sys
from dataclasses import replace

import click
import yaml
from pyperclip import copy


def _load_settings_or_fail(config_path):
    from .config import load_settings

    try:
        return load_settings(config_path)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML in settings: {exc}") from exc
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Could not load settings: {exc}") from exc


def _build_index(document, notebook, workspace):
    from .anchor import CompositeDocument, Workspace
    from .locators import as_locator

    composites = ()
    if notebook:
        composites = (
            CompositeDocument(uri=as_locator(notebook), children=(document,)),
        )
    roots = tuple(as_locator(root) for root in workspace)
    return Workspace(composites=composites, roots=roots)


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("-v", "--verbose", is_flag=True, help="Log decisions to stderr.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (defaults to ./droplink.yaml when present).",
)
@click.option("--copy", "copy_flag", is_flag=True, help="Copy output to clipboard.")
@click.pass_context
def cli(ctx, verbose, config_path, copy_flag):
    """
    droplink - turn dropped URIs into Markdown links and images
    """
    from .runtime import reset_verbose_logging, set_verbose_logging

    ctx.ensure_object(dict)
    token = set_verbose_logging(verbose)
    ctx.call_on_close(lambda: reset_verbose_logging(token))
    ctx.obj["settings"] = _load_settings_or_fail(config_path)
    ctx.obj["copy"] = copy_flag

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.result_callback()
@click.pass_context
def process_output(ctx, subcommand_output, *args, **kwargs):
    """Print the command output, or copy it to the clipboard with --copy."""
    if subcommand_output is None:
        return
    if ctx.obj.get("copy"):
        try:
            copy(subcommand_output)
            click.echo(f"Copied {len(subcommand_output)} characters to clipboard.")
        except Exception as e:
            click.echo(f"Error copying to clipboard: {e}", err=True)
    else:
        click.echo(subcommand_output)


def _read_uri_list(uris):
    if uris:
        return "\n".join(uris)
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return ""


@cli.command("snippet")
@click.argument("uris", nargs=-1, required=False)
@click.option(
    "-d",
    "--document",
    required=True,
    help="Path or URI of the document receiving the drop.",
)
@click.option(
    "--notebook",
    default=None,
    help="Path or URI of the notebook that owns --document (a cell URI).",
)
@click.option(
    "-W",
    "--workspace",
    multiple=True,
    help="Open workspace root(s); the first anchors untitled documents.",
)
@click.option(
    "--image/--link",
    "insert_as_image",
    default=None,
    help="Force image or link syntax (default: guess from the extension).",
)
@click.option("--placeholder", default=None, help="Placeholder text for every item.")
@click.option(
    "--start-index",
    type=click.IntRange(min=0),
    default=None,
    help="Tab stop of the first placeholder; later items count up from it.",
)
@click.option("--separator", default=None, help="Text between items (default: space).")
@click.option(
    "--syntax",
    is_flag=True,
    help="Emit snippet syntax (${1:label}) instead of plain text.",
)
@click.pass_context
def snippet_cmd(
    ctx,
    uris,
    document,
    notebook,
    workspace,
    insert_as_image,
    placeholder,
    start_index,
    separator,
    syntax,
):
    """
    Build the Markdown for URIS dropped into a document.

    URIS may also be piped in as a text/uri-list, one per line.
    """
    from .anchor import TextDocument
    from .drop import uri_list_snippet_from_text
    from .locators import as_locator

    settings = ctx.obj["settings"]
    if not settings.enabled:
        raise click.ClickException("Dropping into documents is disabled by settings.")

    options = settings.to_options()
    overrides = {
        "insert_as_image": insert_as_image,
        "placeholder_text": placeholder,
        "placeholder_start_index": start_index,
        "separator": separator,
    }
    options = replace(options, **{k: v for k, v in overrides.items() if v is not None})

    doc = TextDocument(uri=as_locator(document))
    result = uri_list_snippet_from_text(
        doc,
        _read_uri_list(uris),
        index=_build_index(doc, notebook, workspace),
        options=options,
    )
    if result is None:
        click.echo("Nothing to insert.", err=True)
        ctx.exit(1)
    return result.value if syntax else result.text


@cli.command("anchor")
@click.option(
    "-d",
    "--document",
    required=True,
    help="Path or URI of the document receiving the drop.",
)
@click.option("--notebook", default=None, help="Notebook that owns --document.")
@click.option("-W", "--workspace", multiple=True, help="Open workspace root(s).")
def anchor_cmd(document, notebook, workspace):
    """
    Show the directory that relative links are computed against.
    """
    from .anchor import TextDocument, get_document_dir
    from .locators import as_locator

    doc = TextDocument(uri=as_locator(document))
    anchor = get_document_dir(doc, _build_index(doc, notebook, workspace))
    return anchor.to_string() if anchor is not None else "(none)"


def main():
    cli()


if __name__ == "__main__":
    main()
