"""Tasks that run shell commands, loaded from a YAML task file."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..config import ConfigError
from ..state import CancellationToken
from .models import TaskSpec

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 5


class CommandError(RuntimeError):
    """A shell command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {command}"
        tail = "\n".join(stderr.strip().splitlines()[-STDERR_TAIL_LINES:])
        if tail:
            message = f"{message}\n{tail}"
        super().__init__(message)


class CommandTask(BaseModel):
    """One entry of a task file."""

    title: str
    command: str
    retry: int = Field(default=0, ge=0)
    skip: Union[bool, str] = Field(default=False, description="Flag, or a command whose zero exit means skip")
    cwd: Optional[str] = None


async def run_command(command: str, cwd: Optional[str] = None) -> str:
    """Run ``command`` through the shell and return its stdout.

    Raises:
        CommandError: If the command exits with a non-zero status
    """
    logger.debug(f"Running command: {command}")
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
        await process.wait()
        raise
    if process.returncode != 0:
        raise CommandError(command, process.returncode, stderr.decode(errors="replace"))
    return stdout.decode(errors="replace")


def command_task(entry: CommandTask) -> TaskSpec:
    """Turn a task file entry into a runner task."""

    async def work(token: CancellationToken) -> str:
        if token.cancelled:
            return ""
        return await run_command(entry.command, cwd=entry.cwd)

    skip: Union[bool, Callable[[], Any]] = entry.skip if isinstance(entry.skip, bool) else _skip_check(entry)
    return TaskSpec(title=entry.title, task=work, skip=skip, retry=entry.retry)


def _skip_check(entry: CommandTask) -> Callable[[], Any]:
    async def should_skip() -> bool:
        process = await asyncio.create_subprocess_shell(
            entry.skip,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            cwd=entry.cwd,
        )
        return await process.wait() == 0

    return should_skip


def load_task_file(path: Union[str, os.PathLike]) -> list[TaskSpec]:
    """Read a YAML task file: a list of entries, or a mapping with a ``tasks`` list.

    Raises:
        ConfigError: If the file is missing, not YAML, or malformed
    """
    file_path = Path(path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read task file {file_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("tasks")
    if not isinstance(data, list):
        raise ConfigError(f"Task file {file_path} must contain a list of tasks")

    tasks = []
    for position, raw in enumerate(data, start=1):
        try:
            entry = CommandTask.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid task #{position} in {file_path}: {e}") from e
        tasks.append(command_task(entry))
    logger.info(f"Loaded {len(tasks)} task(s) from {file_path}")
    return tasks
