import asyncio
import os
import shutil
import uuid
from typing import List, Optional, Sequence

import aiofiles
from loguru import logger


class CommandError(Exception):
    """A media subprocess exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str):
        super().__init__(f"{command[0]} exited with status {returncode}: {stderr[-500:]}")
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


async def run_command(command: List[str], description: str) -> bytes:
    """
    Run a media tool without blocking the event loop.

    Returns:
        bytes: stdout of the process

    Raises:
        CommandError: If the process exits with a non-zero status
        FileNotFoundError: If the executable is not installed
    """
    logger.debug(f"Starting: {description}")
    process = await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    try:
        out, err = await process.communicate()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise
    if process.returncode != 0:
        stderr = err.decode(errors="replace").strip()
        logger.debug(f"--- {description} stderr ---\n{stderr}")
        raise CommandError(command, process.returncode, stderr)
    logger.debug(f"Finished: {description}")
    return out


async def read_bytes(path: str) -> bytes:
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


def create_work_dir(root: str, prefix: str = "hookscope") -> str:
    """Create a fresh, uniquely named working directory under root."""
    os.makedirs(root, exist_ok=True)
    path = os.path.join(root, f"{prefix}_{uuid.uuid4().hex}")
    os.makedirs(path)
    return path


def ensure_subdir(parent: str, name: str) -> str:
    path = os.path.join(parent, name)
    os.makedirs(path, exist_ok=True)
    return path


async def remove_tree(path: Optional[str]) -> bool:
    """
    Recursively delete a working directory. A missing path is not an error.

    Returns:
        bool: True if something was removed
    """
    if not path or not os.path.exists(path):
        return False
    await asyncio.to_thread(shutil.rmtree, path, ignore_errors=True)
    if os.path.exists(path):
        logger.warning(f"Working directory survived cleanup: {path}")
        return False
    logger.info(f"Removed working directory: {path}")
    return True
