"""Template rendering utilities for consistent Jinja2 rendering across the generator."""

from __future__ import annotations

import os

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..utils import snake_case


def _get_template_directories() -> list[str]:
    """Resolve the bundled template directory.

    Works for both source checkouts and installed site-packages layouts since
    templates ship as package data.
    """

    # Base dir is .../protoc_gen_events/file_io
    base_dir = os.path.dirname(os.path.abspath(__file__))
    template_dir = os.path.abspath(os.path.join(base_dir, "../templates"))

    if os.path.exists(template_dir):
        return [template_dir]
    return []


def pyrepr_filter(value):
    """Jinja2 filter to emit a Python literal."""

    return repr(value)


class TemplateRenderer:
    """Unified template rendering utility."""

    def __init__(self, template_dir: str | list[str] | None = None):
        if template_dir is None:
            template_dirs = _get_template_directories()
        elif isinstance(template_dir, str):
            template_dirs = [template_dir]
        else:
            template_dirs = list(template_dir)

        self.template_dirs = template_dirs
        self.env = Environment(
            loader=FileSystemLoader(self.template_dirs),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            newline_sequence="\n",
            autoescape=False,
            undefined=StrictUndefined,
        )
        self.env.filters["pyrepr"] = pyrepr_filter
        self.env.filters["snake_case"] = snake_case

    def render_template(self, template_name: str, **kwargs) -> str:
        template = self.env.get_template(template_name)
        return template.render(**kwargs)

    def render_template_to_file(self, template_name: str, output_path: str, **kwargs) -> None:
        content = self.render_template(template_name, **kwargs)
        os.makedirs(os.path.dirname(output_path), exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
