"""
HTML report generation through `go tool cover`.
"""

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Union

from gocoverdir.errors import ReportGenerationError

logger = logging.getLogger(__name__)


def default_html_path() -> Path:
    return Path(tempfile.gettempdir()) / "cover.html"


def generate_html_report(profile_path: Union[str, Path], html_path: Optional[Path] = None) -> Path:
    """
    Render a cover profile as HTML.

    Args:
        profile_path: Combined cover profile
        html_path: Output file; defaults to cover.html in the OS temp directory

    Returns:
        Path of the generated HTML file

    Raises:
        ReportGenerationError: If the report generator cannot be run or fails
    """
    html_path = html_path or default_html_path()
    logger.info("Generating coverage HTML at %s or %s", html_path, html_path.resolve().as_uri())

    cmd = ["go", "tool", "cover", "-html", str(profile_path), "-o", str(html_path)]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ReportGenerationError(f"Could not run {' '.join(cmd)}: {e}") from e

    if result.returncode != 0:
        output = (result.stdout + "\n" + result.stderr).strip()
        raise ReportGenerationError(
            f"'{' '.join(cmd)}' exited with status {result.returncode}: {output}"
        )
    return html_path
