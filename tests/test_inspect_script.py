import runpy
import sys
from pathlib import Path
from unittest.mock import patch

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "inspect_ratings_bar.py"


def test_prints_raw_and_parsed(listing_html: str, tmp_path: Path, capsys) -> None:
    page = tmp_path / "listing.html"
    page.write_text(listing_html, encoding="utf-8")

    with patch.object(sys, "argv", [str(SCRIPT), "--html-file", str(page)]):
        runpy.run_path(str(SCRIPT), run_name="__main__")

    out = capsys.readouterr().out
    assert "  1. Suicide Squad" in out
    assert "parsed: 6.2 40" in out
    assert "parsed: 8.1 None" in out
    assert "parsed: None None" in out
