from __future__ import annotations

from dataclasses import dataclass

from pstore.output.console import ConsoleProtocol, RichConsole
from pstore.platform.files import FileSystem, LocalFileSystem


@dataclass(frozen=True, slots=True)
class CLIContext:
    console: ConsoleProtocol
    fs: FileSystem


def build_context(*, verbose: bool = False) -> CLIContext:
    return CLIContext(console=RichConsole(verbose=verbose), fs=LocalFileSystem())
