"""
Source emission for generated unit modules.

Serializes the abstract container descriptions produced by the emitter and
linker into Python modules using Jinja2 templates.

Architecture:
    ::

        LinkedChain ──► SourceRenderer.render_all()
                              │
                              ├──► base.py.j2       → {base}_base.py
                              ├──► partition.py.j2  → {base}_{index}.py  (×N)
                              ├──► facade.py.j2     → {base}.py
                              └──► package_init.py.j2 → __init__.py

Guardrails:
    - String values are emitted through :func:`python_string_literal` only;
      parsing the literal yields the original text.
    - Output is deterministic: no timestamps, no set ordering.

Tags:
    renderer, template, jinja2, codegen
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from .errors import RenderError
from .linker import LinkedChain
from .model import ContainerKind, ContainerSpec, GeneratedModule

TEMPLATE_DIR = Path(__file__).parent / "templates"

_TEMPLATES = {
    ContainerKind.BASE: "base.py.j2",
    ContainerKind.PARTITION: "partition.py.j2",
    ContainerKind.FACADE: "facade.py.j2",
}


def python_string_literal(text: str) -> str:
    """Double-quoted Python literal for ``text``.

    JSON string escapes (``\\"``, ``\\\\``, ``\\n``, ``\\uXXXX``) are a subset of
    Python's, so the JSON encoding of a string is also a valid Python
    literal denoting the same value.
    """
    return json.dumps(text, ensure_ascii=False)


class SourceRenderer:
    """Render container descriptions to Python source.

    Examples:
        >>> renderer = SourceRenderer(runtime_module="cefact_codegen.runtime")
        >>> modules = renderer.render_all(chain)
        >>> [m.file_name for m in modules][-1]
        '__init__.py'
    """

    def __init__(
        self,
        *,
        runtime_module: str = "cefact_codegen.runtime",
        namespace_uri: str = "",
        source_name: str = "",
        template_dir: Path | None = None,
    ):
        self.runtime_module = runtime_module
        self.namespace_uri = namespace_uri
        self.source_name = source_name
        self.template_dir = Path(template_dir) if template_dir else TEMPLATE_DIR

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pystr"] = python_string_literal

    @property
    def header(self) -> str:
        if self.source_name:
            return f"# Generated by cefact-codegen from {self.source_name}. Do not edit."
        return "# Generated by cefact-codegen. Do not edit."

    def render_all(self, chain: LinkedChain) -> list[GeneratedModule]:
        """Render every container of the chain plus the package ``__init__``."""
        modules = [self.render(spec, chain) for spec in chain.containers]
        modules.append(
            GeneratedModule(
                spec=None,
                file_name="__init__.py",
                source=self._render_template("package_init.py.j2", facade=chain.facade),
            )
        )
        return modules

    def render(self, spec: ContainerSpec, chain: LinkedChain) -> GeneratedModule:
        """Render one container."""
        source = self._render_template(
            _TEMPLATES[spec.kind],
            spec=spec,
            base=chain.base,
            partitions=chain.partitions,
            population_order=chain.population_order,
            facade_name=chain.facade.class_name,
        )
        return GeneratedModule(spec=spec, file_name=spec.file_name, source=source)

    def _render_template(self, template_name: str, **context: Any) -> str:
        try:
            template = self.env.get_template(template_name)
            return template.render(
                header=self.header,
                runtime_module=self.runtime_module,
                namespace_uri=self.namespace_uri,
                **context,
            )
        except TemplateError as e:
            raise RenderError(
                f"Failed to render {template_name}: {e}",
                cause=e,
            ).with_context(template=template_name) from e
