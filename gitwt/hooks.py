"""
Hook runner - executes the commands configured for a worktree event.

Commands run one after another in the target worktree. Their captured
output is written through to this process's stdout/stderr. A command that
cannot be started is reported on stderr and the remaining commands still
run.
"""

import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from gitwt.core import GitWtError
from gitwt.store import get_entries


class HookCommandError(GitWtError):
    """A configured hook command could not be parsed."""
    pass


@dataclass
class CommandSpec:
    """Executable and arguments parsed from a configured command."""
    executable: str
    args: List[str] = field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.executable] + self.args

    def __str__(self) -> str:
        return ' '.join(self.argv)


@dataclass
class ExecutionResult:
    """Outcome of one hook command."""
    command: str
    spec: Optional[CommandSpec] = None
    returncode: Optional[int] = None
    stdout: str = ''
    stderr: str = ''
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the command was started, whatever its exit status."""
        return self.error is None


def parse_command(command: str) -> CommandSpec:
    """Split a configured command into executable and arguments.

    Tokens are separated by runs of whitespace. Quotes and backslashes are
    not interpreted: `echo "a b"` gives the arguments `"a` and `b"`.
    """
    tokens = command.split()
    if not tokens:
        raise HookCommandError(f"Empty hook command: {command!r}")
    return CommandSpec(tokens[0], tokens[1:])


def run_command(
    spec: CommandSpec,
    target_dir: Union[str, Path],
    command: Optional[str] = None
) -> ExecutionResult:
    """Run a single command in `target_dir` and forward its output."""
    result = ExecutionResult(command=command if command is not None else str(spec), spec=spec)
    try:
        completed = subprocess.run(
            spec.argv,
            cwd=target_dir,
            capture_output=True,
            text=True,
            errors='replace'
        )
    except (OSError, subprocess.SubprocessError) as e:
        result.error = str(e)
        sys.stderr.write(f"{result.error}\n")
        return result

    result.returncode = completed.returncode
    result.stdout = completed.stdout
    result.stderr = completed.stderr
    sys.stdout.write(completed.stdout)
    sys.stderr.write(completed.stderr)
    return result


def run_hooks(
    repo_name: str,
    target_dir: Union[str, Path],
    key: str,
    config_path: Optional[Union[str, Path]] = None
) -> List[ExecutionResult]:
    """Run every command configured for `key`, in order, inside `target_dir`.

    Configuration errors propagate. A failing command never stops the
    run; each command attempted yields one result.
    """
    commands = get_entries(repo_name, key, config_path)

    results = []
    for command in commands:
        print(f"Executing: {command}")
        sys.stdout.flush()
        try:
            spec = parse_command(command)
        except HookCommandError as e:
            sys.stderr.write(f"{e}\n")
            results.append(ExecutionResult(command=command, error=str(e)))
            continue
        results.append(run_command(spec, target_dir, command))

    return results


def successful(results: List[ExecutionResult]) -> List[ExecutionResult]:
    """Results of the commands that were started."""
    return [result for result in results if result.ok]


def report_results(results: List[ExecutionResult], verbose: bool = False) -> None:
    """Print a short summary of a hook run."""
    if not results:
        if verbose:
            print("No hook commands configured")
        return

    for result in results:
        if result.ok and result.returncode:
            print(f"Warning: '{result.command}' exited with status {result.returncode}",
                  file=sys.stderr)

    failed = len(results) - len(successful(results))
    if failed:
        print(f"{failed} of {len(results)} hook commands could not be run", file=sys.stderr)
    elif verbose:
        print(f"Ran {len(results)} hook commands")
