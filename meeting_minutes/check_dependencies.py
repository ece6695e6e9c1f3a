"""Check if everything needed for saving and PDF export is available."""
import sys
from typing import List, Optional, Tuple


def check_dependencies(font_dirs: Optional[List[str]] = None) -> Tuple[bool, List[str]]:
    """
    Check required libraries, optional libraries and PDF fonts.

    Returns:
        Tuple of (all_required_available, list of missing/warnings)
    """
    missing = []
    warnings = []

    try:
        import reportlab  # noqa: F401
    except ImportError:
        missing.append("reportlab (required for PDF generation)")

    try:
        from dotenv import load_dotenv  # noqa: F401
    except ImportError:
        missing.append("python-dotenv (required for config)")

    try:
        from pypdf import PdfReader  # noqa: F401
    except ImportError:
        warnings.append("pypdf (optional, used by the tests to read exported PDFs)")

    if not missing:
        from .errors import FontUnavailable
        from .fonts import FontResolver

        try:
            family = FontResolver(font_dirs).resolve()
            warnings.append(f"PDF font: {family.name}")
        except FontUnavailable as e:
            missing.append(f"PDF font (required for export): {e}")

    all_required = len(missing) == 0
    return all_required, missing + warnings


if __name__ == "__main__":
    print("Checking meeting minutes dependencies...\n")
    all_ok, issues = check_dependencies()

    if all_ok:
        print("✅ All required dependencies are available.")
        for issue in issues:
            print(f"   - {issue}")
    else:
        print("❌ Missing required dependencies:")
        for issue in issues:
            print(f"   - {issue}")
        print("\n💡 Install missing dependencies with:")
        print("   pip install reportlab python-dotenv")
        print("   Set MEETING_MINUTES_FONT_DIRS to a folder with e.g. LiberationSans-Regular.ttf and LiberationSans-Bold.ttf")
        sys.exit(1)
