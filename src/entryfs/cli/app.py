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

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional, Type, TypeVar

import typer

from ..config import Settings
from ..domain.enums import CollisionPolicy, EntryKind, LookupMode, NamingStrategy
from ..domain.errors import ConfigurationError, EntryExistsError, InvalidPathError
from ..domain.results import Result
from ..logging_config import setup_logging
from ..services import FileSystem

setup_logging()

app = typer.Typer(help="entryfs CLI - collision-aware file and directory operations")

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

POLICY_HELP = (
    "Collision policy: generate-unique-name, replace-existing, fail-if-exists, "
    "throw-if-exists, open-if-exists, generate-unique-name-for-existing"
)


# ------------------------------
# Helpers
# ------------------------------


def _parse_enum(enum_cls: Type[E], raw: Optional[str], option: str) -> Optional[E]:
    """
    Parse an enum option value case-insensitively, accepting '-' for '_'.
    Raises Typer BadParameter on unknown values.
    """
    if raw is None:
        return None
    key = raw.strip().lower().replace("-", "_")
    try:
        return enum_cls(key)
    except ValueError:
        valid = ", ".join(m.value.replace("_", "-") for m in enum_cls)
        raise typer.BadParameter(f"Unknown {option}: {raw}. Valid options: {valid}")


def _wire(
    strategy: Optional[str] = None,
    max_attempts: Optional[int] = None,
    verbose: bool = False,
) -> FileSystem:
    """
    Minimal composition root:
      Settings.from_env() + per-invocation overrides -> storage from ENTRYFS_STORAGE

    --verbose also records every storage call, logged at DEBUG.
    """
    if verbose:
        setup_logging("DEBUG")
        logger.debug("Verbose logging enabled")
    try:
        settings = Settings.from_env().with_overrides(
            naming_strategy=_parse_enum(NamingStrategy, strategy, "naming strategy"),
            max_attempts=max_attempts,
            record_calls=verbose or None,
        )
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))
    return FileSystem(settings=settings)


@contextmanager
def _exit_codes() -> Iterator[None]:
    """THROW_IF_EXISTS hits exit 2; bad paths, undecodable text and storage errors exit 1."""
    try:
        yield
    except EntryExistsError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    except InvalidPathError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except UnicodeDecodeError as e:
        typer.echo(f"Error: cannot decode as text ({e.encoding}): {e.reason}", err=True)
        raise typer.Exit(code=1)
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _finish(result: Result, message: str) -> None:
    if not result:
        typer.echo(f"Error: {result.failure}", err=True)
        raise typer.Exit(code=1)
    typer.echo(message)


def _is_directory(fs: FileSystem, path: str) -> bool:
    existence = fs.exists(path)
    return existence.has_folder and not existence.has_file


# ------------------------------
# CLI Commands
# ------------------------------


@app.command()
def exists(
    path: str = typer.Argument(..., help="Path to check"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Print what lives at PATH: none, file_exists, folder_exists or
    file_and_folder_exists. Exits 1 when nothing does.
    """
    fs = _wire(verbose=verbose)
    with _exit_codes():
        existence = fs.exists(path)
    typer.echo(existence.value)
    if not existence.has_file and not existence.has_folder:
        raise typer.Exit(code=1)


@app.command()
def touch(
    path: str = typer.Argument(..., help="File to create"),
    policy: str = typer.Option("fail-if-exists", "--policy", help=POLICY_HELP),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Naming strategy for unique names"),
    max_attempts: Optional[int] = typer.Option(None, "--max-attempts", min=1),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Create an empty file."""
    fs = _wire(strategy, max_attempts, verbose)
    with _exit_codes():
        result = fs.create_file(path, _parse_enum(CollisionPolicy, policy, "policy"))
    _finish(result, f"Created {result.value}" if result else "")


@app.command()
def mkdir(
    path: str = typer.Argument(..., help="Directory to create"),
    policy: str = typer.Option("fail-if-exists", "--policy", help=POLICY_HELP),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Naming strategy for unique names"),
    max_attempts: Optional[int] = typer.Option(None, "--max-attempts", min=1),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Create a directory, including missing parents."""
    fs = _wire(strategy, max_attempts, verbose)
    with _exit_codes():
        result = fs.create_directory(path, _parse_enum(CollisionPolicy, policy, "policy"))
    _finish(result, f"Created {result.value}" if result else "")


@app.command()
def copy(
    source: str = typer.Argument(..., help="File or directory to copy"),
    destination: str = typer.Argument(..., help="Full destination path"),
    policy: str = typer.Option("fail-if-exists", "--policy", help=POLICY_HELP),
    file_policy: Optional[str] = typer.Option(
        None,
        "--file-policy",
        help="Policy for files inside a copied directory. Defaults to --policy.",
    ),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Naming strategy for unique names"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Copy a file, or a whole directory tree, to DESTINATION."""
    fs = _wire(strategy, verbose=verbose)
    chosen = _parse_enum(CollisionPolicy, policy, "policy")
    with _exit_codes():
        if _is_directory(fs, source):
            per_file = _parse_enum(CollisionPolicy, file_policy, "file policy") or chosen
            report = fs.copy_directory(source, destination, chosen, per_file)
            for failure in report.failures:
                typer.echo(f"Error: {failure}", err=True)
            if not report:
                raise typer.Exit(code=1)
            typer.echo(f"Copied {source} to {report.destination} ({len(report.copied)} entries)")
            return
        result = fs.copy_file(source, destination, chosen)
    _finish(result, f"Copied {source} to {result.value}" if result else "")


@app.command()
def move(
    source: str = typer.Argument(..., help="File or directory to move"),
    destination: str = typer.Argument(..., help="Full destination path"),
    policy: str = typer.Option("fail-if-exists", "--policy", help=POLICY_HELP),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Naming strategy for unique names"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Move a file or a directory to DESTINATION."""
    fs = _wire(strategy, verbose=verbose)
    chosen = _parse_enum(CollisionPolicy, policy, "policy")
    with _exit_codes():
        if _is_directory(fs, source):
            result = fs.move_directory(source, destination, chosen)
        else:
            result = fs.move_file(source, destination, chosen)
    _finish(result, f"Moved {source} to {result.value}" if result else "")


@app.command()
def rename(
    path: str = typer.Argument(..., help="File or directory to rename"),
    name: str = typer.Argument(..., help="New base name; a file keeps its extension"),
    policy: str = typer.Option("fail-if-exists", "--policy", help=POLICY_HELP),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Naming strategy for unique names"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Rename an entry in place."""
    fs = _wire(strategy, verbose=verbose)
    with _exit_codes():
        result = fs.rename(path, name, _parse_enum(CollisionPolicy, policy, "policy"))
    _finish(result, f"Renamed {path} to {result.value}" if result else "")


@app.command()
def rm(
    path: str = typer.Argument(..., help="File or directory to delete"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Delete a non-empty directory"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Delete a file or a directory."""
    fs = _wire(verbose=verbose)
    with _exit_codes():
        if _is_directory(fs, path):
            result = fs.delete_directory(path, recursive)
        else:
            result = fs.delete_file(path)
    _finish(result, f"Deleted {path}")


@app.command("unique-name")
def unique_name(
    path: str = typer.Argument(..., help="Desired path"),
    directory: bool = typer.Option(False, "--directory", help="Treat PATH as a directory (no extension)"),
    strategy: Optional[str] = typer.Option(None, "--strategy", help="Naming strategy"),
    max_attempts: Optional[int] = typer.Option(None, "--max-attempts", min=1),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Print a path that does not exist yet: PATH itself when it is free,
    otherwise a generated variant of it.
    """
    fs = _wire(strategy, max_attempts, verbose)
    kind = EntryKind.DIRECTORY if directory else EntryKind.FILE
    result = fs.unique_path(path, kind)
    _finish(result, result.value if result else "")


@app.command()
def cat(
    path: str = typer.Argument(..., help="File to print"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """Print the contents of a text file (decoded with ENTRYFS_ENCODING)."""
    fs = _wire(verbose=verbose)
    with _exit_codes():
        entry = fs.get_file(path, LookupMode.THROW_IF_MISSING)
        typer.echo(entry.read_all(), nl=False)
