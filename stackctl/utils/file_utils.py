# stackctl/utils/file_utils.py
"""File operation utilities"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def create_from_template(template: Path, target: Path) -> bool:
    """
    Create a file as a copy of a template, never overwriting

    The target is opened with exclusive-create semantics, so when two
    invocations race only one of them writes the file.

    Args:
        template: Template file to copy
        target: File to create

    Returns:
        True if the file was created, False if it already existed

    Raises:
        FileNotFoundError: If the template does not exist
    """
    with open(template, 'rb') as src:
        try:
            dst = open(target, 'xb')
        except FileExistsError:
            logger.debug("%s appeared concurrently, leaving it untouched", target)
            return False

        try:
            with dst:
                shutil.copyfileobj(src, dst)
        except BaseException:
            target.unlink()
            raise

    shutil.copymode(template, target)
    return True


def copy_into(source: Path, directory: Path) -> Path:
    """
    Copy a file into a directory, keeping its name and metadata

    Args:
        source: File to copy
        directory: Destination directory (must exist)

    Returns:
        Path of the copy
    """
    destination = directory / source.name
    shutil.copy2(source, destination)
    return destination

