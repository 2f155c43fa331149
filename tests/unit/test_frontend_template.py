"""Tests for the real frontend shipped with the repository.

The FastAPI integration suite uses a minimal temporary public directory for
speed and isolation.  The assertions here read the repository's actual
``public/index.html`` so that wiring regressions between the page, its
script, and the API route are still caught by automated tests.
"""

from __future__ import annotations

from pathlib import Path

PUBLIC_DIR = Path(__file__).resolve().parents[2] / "public"


def test_index_template_includes_generation_form() -> None:
    """The shipped entry page should expose the description form."""
    html = (PUBLIC_DIR / "index.html").read_text(encoding="utf-8")

    assert 'id="generate-form"' in html
    assert 'id="description"' in html
    assert 'id="result"' in html
    assert 'type="module" src="/js/app.js"' in html
    assert 'href="/css/app.css"' in html


def test_app_script_posts_to_generation_endpoint() -> None:
    """The frontend script should call the relay route and read imageUrl."""
    script = (PUBLIC_DIR / "js" / "app.js").read_text(encoding="utf-8")

    assert '"/api/generate-image"' in script
    assert "description:" in script
    assert "data.imageUrl" in script
    assert "data.error" in script
