from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader


@lru_cache(maxsize=None)
def _get_template_env() -> Environment:
    template_dir = Path(__file__).parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_block(template_name: str, **context) -> str:
    """Render one SDL block without its trailing newline."""
    template = _get_template_env().get_template(template_name)
    return template.render(**context).rstrip("\n")
