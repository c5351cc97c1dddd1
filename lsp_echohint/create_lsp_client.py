import os
import shlex
from pathlib import Path

from pygls.lsp.client import LanguageClient


async def create_lsp_client_io(server_cmd: str, working_dir_path: Path) -> LanguageClient:
    ls = LanguageClient("lsp-echohint", "v1")
    executable, *args = shlex.split(server_cmd)

    old_working_dir = os.getcwd()
    os.chdir(working_dir_path)
    try:
        await ls.start_io(executable, *args)
    finally:
        os.chdir(old_working_dir)  # restore original working directory
    return ls


__all__ = ["LanguageClient", "create_lsp_client_io"]
