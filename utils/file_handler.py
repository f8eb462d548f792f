"""File handling utility module"""

import logging
import os
import re
import sys

logger = logging.getLogger(__name__)


def resource_path(relative_path: str) -> str:
    """Resolve a resource path, also when packaged with PyInstaller."""
    if os.path.isabs(relative_path):
        return relative_path
    try:
        base_path = sys._MEIPASS
    except AttributeError:
        # Relative to the program directory
        base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_path, relative_path)


def ensure_directory_exists(directory_path: str) -> bool:
    """Create the directory when it does not exist."""
    if not directory_path:
        return True
    try:
        os.makedirs(directory_path, exist_ok=True)
        return True
    except OSError as e:
        logger.error("Directory creation failed: %s", e)
        return False


def get_safe_filename(filename: str) -> str:
    """Replace characters that are not allowed in file names."""
    safe_name = re.sub(r'[<>:"/\\|?*]', '_', filename)
    return safe_name.strip()
