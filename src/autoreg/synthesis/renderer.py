from __future__ import annotations

import logging
from textwrap import indent

from jinja2 import Environment, StrictUndefined, Template

from autoreg.config import GeneratorSettings
from autoreg.synthesis.planner import EntryPointPlan
from autoreg.synthesis.templates import (
    COMPILATION_UNIT_TEMPLATE,
    METHOD_TEMPLATE,
    NAMESPACE_TEMPLATE,
    TYPE_TEMPLATE,
)

_INDENT = " " * 4
logger = logging.getLogger(__name__)


class RegistrationTemplateRenderer:
    """Renders entry-point plans into whitespace-normalized source text."""

    def __init__(self, *, settings: GeneratorSettings) -> None:
        self._settings = settings
        self._env = Environment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )
        self._compilation_unit_template = self._template(COMPILATION_UNIT_TEMPLATE)
        self._namespace_template = self._template(NAMESPACE_TEMPLATE)
        self._type_template = self._template(TYPE_TEMPLATE)
        self._method_template = self._template(METHOD_TEMPLATE)

    def render(self, plan: EntryPointPlan) -> str:
        """Render the compilation unit for ``plan``.

        Output uses LF line endings and four-space indentation, carries no
        trailing whitespace and ends with exactly one newline.

        Args:
            plan: Entry-point plan produced by ``EntryPointPlanner``.

        """
        method_block = self._method_template.render(
            method_signature=plan.method_signature,
            body_block=self._indent_block(self._join_lines(list(plan.statements))),
        )
        type_block = self._type_template.render(
            type_declaration=plan.type_declaration,
            method_block=self._indent_block(method_block),
        )
        if plan.namespace:
            type_block = self._indent_block(type_block)
        namespace_block = self._namespace_template.render(
            namespace=plan.namespace,
            nullable_context=plan.nullable_context,
            type_block=type_block,
        )
        text = self._compilation_unit_template.render(
            auto_generated_header=self._settings.emit_auto_generated_header,
            usings=self._settings.usings,
            namespace_block=namespace_block,
        )
        logger.debug(
            "Rendered %s with %d statement(s)",
            plan.artifact_name,
            len(plan.statements),
        )
        return self._normalize_whitespace(text)

    def _template(self, text: str) -> Template:
        return self._env.from_string(text)

    def _indent_block(self, block: str) -> str:
        return indent(block, _INDENT)

    def _join_lines(self, lines: list[str]) -> str:
        return "\n".join(lines)

    def _normalize_whitespace(self, text: str) -> str:
        lines = [line.rstrip() for line in text.splitlines()]
        return self._join_lines(lines).strip("\n") + "\n"
