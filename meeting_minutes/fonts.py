"""Find a system font family (regular + bold) for PDF export."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from .errors import FontUnavailable


# Searched in this order; directories that do not exist are skipped
DEFAULT_FONT_DIRS = [
    # Arch, Fedora, openSUSE
    "/usr/share/fonts/liberation",
    "/usr/share/fonts/liberation-sans",
    "/usr/share/fonts/noto",
    "/usr/share/fonts/TTF",
    # Debian, Ubuntu, Mint
    "/usr/share/fonts/truetype/liberation",
    "/usr/share/fonts/truetype/noto",
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/dejavu",
    # Windows
    "C:\\Windows\\Fonts",
    # macOS
    "/Library/Fonts",
    "/System/Library/Fonts/Supplemental",
]

# (family, regular file, bold file)
FONT_FAMILIES: List[Tuple[str, str, str]] = [
    ("LiberationSans", "LiberationSans-Regular.ttf", "LiberationSans-Bold.ttf"),
    ("NotoSans", "NotoSans-Regular.ttf", "NotoSans-Bold.ttf"),
    ("DejaVuSans", "DejaVuSans.ttf", "DejaVuSans-Bold.ttf"),
    ("Arial", "arial.ttf", "arialbd.ttf"),
    ("Arial", "Arial.ttf", "Arial Bold.ttf"),
    ("Verdana", "verdana.ttf", "verdanab.ttf"),
    ("Calibri", "calibri.ttf", "calibrib.ttf"),
    ("SegoeUI", "segoeui.ttf", "segoeuib.ttf"),
    ("Vera", "Vera.ttf", "VeraBd.ttf"),
]


@dataclass(frozen=True)
class FontFamily:
    """Registered reportlab font names for one family."""
    name: str
    regular: str
    bold: str


def register_family(name: str, regular_path: Path, bold_path: Path) -> FontFamily:
    """Register both weights with reportlab. Raises TTFError/OSError on bad files."""
    regular = name
    bold = f"{name}-Bold"
    pdfmetrics.registerFont(TTFont(regular, str(regular_path)))
    pdfmetrics.registerFont(TTFont(bold, str(bold_path)))
    pdfmetrics.registerFontFamily(name, normal=regular, bold=bold, italic=regular, boldItalic=bold)
    return FontFamily(name=name, regular=regular, bold=bold)


class FontResolver:
    """
    Look through font directories for the first family with both weights.

    An instance can be passed anywhere a font resolver is expected; calling
    it returns the FontFamily or raises FontUnavailable. A family missing its
    bold file is skipped rather than printed without emphasis.
    """

    def __init__(self, font_dirs: Optional[Iterable[str]] = None,
                 families: Optional[List[Tuple[str, str, str]]] = None,
                 include_defaults: bool = True):
        dirs = list(font_dirs or [])
        if include_defaults:
            dirs += DEFAULT_FONT_DIRS
        self.font_dirs = dirs
        self.families = families or FONT_FAMILIES
        self._resolved: Optional[FontFamily] = None

    def candidates(self) -> Iterable[Tuple[str, Path, Path]]:
        for directory in self.font_dirs:
            base = Path(directory)
            if not base.is_dir():
                continue
            for name, regular_file, bold_file in self.families:
                regular_path = base / regular_file
                bold_path = base / bold_file
                if regular_path.is_file() and bold_path.is_file():
                    yield name, regular_path, bold_path

    def resolve(self) -> FontFamily:
        if self._resolved is not None:
            return self._resolved
        for name, regular_path, bold_path in self.candidates():
            try:
                self._resolved = register_family(name, regular_path, bold_path)
                return self._resolved
            except (TTFError, OSError):
                # unreadable or unsupported file, try the next one
                continue
        searched = os.pathsep.join(self.font_dirs) or "(none)"
        raise FontUnavailable(f"No font family with regular and bold weights found in: {searched}")

    __call__ = resolve
