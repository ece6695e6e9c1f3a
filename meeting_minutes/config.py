"""Export settings from the environment (and an optional .env file)."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .types import ExportConfig


def load_config(env_file: Optional[Path] = None) -> ExportConfig:
    """
    Build an ExportConfig from environment variables.

    MEETING_MINUTES_FONT_DIRS   extra font directories, os.pathsep separated,
                                searched before the built-in list
    MEETING_MINUTES_PAGE_SIZE   "A4" (default) or "letter"
    """
    if env_file is not None:
        load_dotenv(env_file, override=True)
    else:
        load_dotenv()

    font_dirs = [d.strip() for d in os.getenv("MEETING_MINUTES_FONT_DIRS", "").split(os.pathsep) if d.strip()]
    page_size = os.getenv("MEETING_MINUTES_PAGE_SIZE", "A4").strip() or "A4"
    if page_size.lower() == "letter":
        page_size = "letter"
    elif page_size.upper() == "A4":
        page_size = "A4"

    return ExportConfig(page_size=page_size, font_dirs=font_dirs)
