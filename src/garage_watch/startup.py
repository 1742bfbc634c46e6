"""
Startup preconditions - the capture directory must exist before the loop.

On macOS a missing directory under /Volumes is provisioned as a RAM disk,
which keeps the frame written every poll off the SSD.
"""

import logging
import os
import subprocess
import sys

from .exceptions import StartupError
from .utils.constants import DEFAULT_RAM_DISK_SIZE_MB, RAM_DISK_SECTORS_PER_MB

logger = logging.getLogger(__name__)


def ram_disk_command(volume_name: str, size_mb: int) -> str:
    """Shell command that creates and mounts an HFS+ RAM disk."""
    sectors = RAM_DISK_SECTORS_PER_MB * int(size_mb)
    return (
        f'diskutil erasevolume HFS+ "{volume_name}" '
        f"`hdiutil attach -nomount ram://{sectors}`"
    )


def ensure_capture_dir(
    image_path: str,
    ram_disk_size_mb: int = DEFAULT_RAM_DISK_SIZE_MB,
    platform: str | None = None,
) -> str:
    """
    Make sure the directory holding the captured frame exists.

    Args:
        image_path: Path the frame will be written to
        ram_disk_size_mb: RAM disk size if one has to be created
        platform: Override for sys.platform (tests)

    Returns:
        The capture directory

    Raises:
        StartupError: If the directory is missing and cannot be provisioned
    """
    capture_dir = os.path.dirname(os.path.abspath(image_path))
    if os.path.isdir(capture_dir):
        return capture_dir

    platform = platform or sys.platform
    if platform != "darwin":
        raise StartupError(f'Image path "{image_path}" does not exist')

    volume_name = os.path.basename(capture_dir)
    logger.info(
        f'Image path "{image_path}" does not exist, creating RAM disk {volume_name} '
        f"({ram_disk_size_mb} MB)"
    )
    try:
        subprocess.run(
            ram_disk_command(volume_name, ram_disk_size_mb),
            shell=True,
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        raise StartupError(
            f"Failed to create RAM disk {volume_name}: {(e.stderr or '').strip() or e}"
        ) from e

    if not os.path.isdir(capture_dir):
        raise StartupError(f"RAM disk created but {capture_dir} is still missing")
    return capture_dir
