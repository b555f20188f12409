from __future__ import annotations
import os
from typing import List
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .utils import write_text_atomic

TEMPLATE = "classnames.properties.j2"


def render_manifest(classes: List[str], header: str) -> str:
    tmpl_dir = os.path.join(os.path.dirname(__file__), "templates")
    # Only html/xml templates are escaped; the header's quotes must survive.
    env = Environment(
        loader=FileSystemLoader(tmpl_dir), autoescape=select_autoescape(), trim_blocks=True,
    )
    tmpl = env.get_template(TEMPLATE)
    return tmpl.render(header=header, classes=sorted(set(classes)))


def write_manifest(classes: List[str], base_path: str, file_path: str, header: str, verbose: bool = True) -> str:
    path = os.path.join(base_path, file_path)
    write_text_atomic(path, render_manifest(classes, header))
    if verbose:
        print(f"Wrote {path}")
    return path
