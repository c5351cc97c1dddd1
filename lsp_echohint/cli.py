import asyncio
from pathlib import Path

import click
from lsprotocol import types
from tree_sitter import Language

from lsp_echohint import config, config_models, logs, run_utils, user_messages
from lsp_echohint.echohint import EchoHint, setup
from lsp_echohint.impls.inmemory_editor import InMemoryEditor
from lsp_echohint.impls.pygls_language_clients import PyglsLanguageClients
from lsp_echohint.impls.terminal_display import TerminalEchoArea
from lsp_echohint.impls.tree_sitter_syntax import TreeSitterSyntaxTree


LANGUAGE_ID_BY_SUFFIX = {
    ".py": "python",
    ".pyi": "python",
    ".rs": "rust",
    ".go": "go",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".lua": "lua",
    ".c": "c",
    ".cpp": "cpp",
}

CLIENT_ID = 1


@click.group()
def cli(): ...


def _prepare(
    config_path: Path | None, log_file: Path | None, trace: bool
) -> config_models.EchoHintConfig:
    echo_config = config.read_config(config_path)
    # --trace overrides level from config and shows logs in stderr if no log file is given
    log_level = "TRACE" if trace is True else echo_config.log_level
    logs.setup_logs(log_file=log_file, log_level=log_level, stderr=trace)
    return echo_config


def _load_syntax_tree(tree_sitter_language: str | None) -> TreeSitterSyntaxTree | None:
    if tree_sitter_language is None:
        return None
    # source of function returning language, e.g. 'tree_sitter_python.language'
    language_func = run_utils.import_module_member_by_source_str(tree_sitter_language)
    return TreeSitterSyntaxTree(Language(language_func()))


def create_echo_hint(
    echo_config: config_models.EchoHintConfig,
    editor: InMemoryEditor,
    language_clients: PyglsLanguageClients,
    display: TerminalEchoArea,
    syntax_tree: TreeSitterSyntaxTree | None,
) -> EchoHint:
    echo_hint = setup(
        editor=editor,
        language_clients=language_clients,
        display=display,
        syntax_tree=syntax_tree,
        config=echo_config,
    )
    language_clients.register_handler(
        types.TEXT_DOCUMENT_INLAY_HINT, echo_hint.handlers[types.TEXT_DOCUMENT_INLAY_HINT]
    )
    editor.register_buffer_closed_callback(echo_hint.on_buffer_closed)
    if syntax_tree is not None:
        editor.register_buffer_closed_callback(syntax_tree.forget_buffer)
    user_messages.register_sender(display.show_user_message)
    return echo_hint


async def _run_session(
    echo_config: config_models.EchoHintConfig,
    file_path: Path,
    server_cmd: str,
    language_id: str | None,
    tree_sitter_language: str | None,
    on_ready,
) -> None:
    editor = InMemoryEditor()
    display = TerminalEchoArea()
    language_clients = PyglsLanguageClients(editor=editor)
    syntax_tree = _load_syntax_tree(tree_sitter_language)
    echo_hint = create_echo_hint(echo_config, editor, language_clients, display, syntax_tree)

    text = file_path.read_text(encoding="utf-8")
    buffer = editor.open_buffer(
        file_path=file_path,
        text=text,
        language_id=language_id or LANGUAGE_ID_BY_SUFFIX.get(file_path.suffix, "plaintext"),
    )
    if syntax_tree is not None:
        syntax_tree.update(buffer.buffer_id, text)

    root_path = file_path.absolute().parent
    await language_clients.start_client(CLIENT_ID, server_cmd, root_path)
    try:
        language_clients.attach_buffer(buffer.buffer_id, CLIENT_ID)
        echo_hint.on_lsp_attach(buffer.buffer_id, CLIENT_ID)
        if not echo_config.auto_enable:
            # nothing enables hints automatically, request them explicitly
            language_clients.enable_inlay_hints(buffer.buffer_id)
        await language_clients.wait_pending_requests()

        on_ready(echo_hint, editor, buffer.buffer_id)
    finally:
        editor.close_buffer(buffer.buffer_id)
        await language_clients.stop_clients()
        user_messages.register_sender(None)


_common_options = [
    click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)),
    click.option("--server-cmd", "server_cmd", required=True, help="Language server command"),
    click.option("--language-id", "language_id", default=None),
    click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="pyproject.toml with [tool.echohint] section",
    ),
    click.option(
        "--tree-sitter-language",
        "tree_sitter_language",
        default=None,
        help="Function returning tree-sitter language, e.g. tree_sitter_python.language",
    ),
    click.option("--log-file", "log_file", type=click.Path(path_type=Path), default=None),
    click.option("--trace", "trace", is_flag=True, default=False),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@cli.command("show")
@common_options
@click.option("--line", "line", type=int, required=True, help="1-based line number")
@click.option("--column", "column", type=int, default=0, help="0-based cursor column")
def show(
    file_path: Path,
    server_cmd: str,
    language_id: str | None,
    config_path: Path | None,
    tree_sitter_language: str | None,
    log_file: Path | None,
    trace: bool,
    line: int,
    column: int,
) -> None:
    def show_line(echo_hint: EchoHint, editor: InMemoryEditor, buffer_id: int) -> None:
        editor.set_cursor(line, column)
        echo_hint.on_cursor_hold()

    try:
        echo_config = _prepare(config_path, log_file, trace)
    except config.ConfigurationError as error:
        raise click.ClickException(error.message)

    asyncio.run(
        _run_session(
            echo_config, file_path, server_cmd, language_id, tree_sitter_language, show_line
        )
    )


@cli.command("hints")
@common_options
def hints(
    file_path: Path,
    server_cmd: str,
    language_id: str | None,
    config_path: Path | None,
    tree_sitter_language: str | None,
    log_file: Path | None,
    trace: bool,
) -> None:
    def show_all_lines(echo_hint: EchoHint, editor: InMemoryEditor, buffer_id: int) -> None:
        bucket = echo_hint.collector.get_hints(buffer_id) or {}
        for line in sorted(bucket):
            click.echo(f"{line}: ", nl=False)
            editor.set_cursor(line, 0)
            echo_hint.on_cursor_hold()

    try:
        echo_config = _prepare(config_path, log_file, trace)
    except config.ConfigurationError as error:
        raise click.ClickException(error.message)

    asyncio.run(
        _run_session(
            echo_config,
            file_path,
            server_cmd,
            language_id,
            tree_sitter_language,
            show_all_lines,
        )
    )


def main() -> None:
    cli()
