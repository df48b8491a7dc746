"""Validation link templates.

A link template is a ``str.format`` string with exactly one replacement
field, which receives the token id verbatim. Both positional (``{0}`` /
``{}``) and named (``{token_id}``) fields are accepted; attribute or index
lookups, conversions and format specs are not, since any of them would put
something other than the token id into the link.
"""

import uuid
from string import Formatter
from typing import Optional

from ..domain.errors import InvalidArgumentError


def _replacement_field(template: str) -> str:
    try:
        fields = [
            (name, spec, conversion)
            for _, name, spec, conversion in Formatter().parse(template)
            if name is not None
        ]
    except ValueError as exc:
        raise InvalidArgumentError(f"malformed link template: {exc}") from exc
    if len(fields) != 1:
        raise InvalidArgumentError(
            f"link template must contain exactly one placeholder, found {len(fields)}"
        )
    name, spec, conversion = fields[0]
    if spec or conversion:
        raise InvalidArgumentError(
            "link template placeholder must not carry a format spec or conversion"
        )
    if name not in ("", "0") and not name.isidentifier():
        raise InvalidArgumentError(f"unsupported link template placeholder: {{{name}}}")
    return name


def _substitute(template: str, field: str, token_id: str) -> str:
    if field in ("", "0"):
        return template.format(token_id)
    return template.format(**{field: token_id})


def validate_link_template(template: Optional[str]) -> str:
    """Check ``template`` and return the name of its single replacement field.

    The template is trial-rendered so every failure surfaces here, before
    callers touch any state.
    """
    if not isinstance(template, str) or not template.strip():
        raise InvalidArgumentError("link template must be a non-empty string")
    field = _replacement_field(template)
    sample = str(uuid.uuid4())
    try:
        rendered = _substitute(template, field, sample)
    except (AttributeError, IndexError, KeyError, ValueError) as exc:
        raise InvalidArgumentError(f"cannot render link template: {exc}") from exc
    if sample not in rendered:
        raise InvalidArgumentError("link template does not embed the token id")
    return field


def render_link(template: str, token_id: str) -> str:
    return _substitute(template, validate_link_template(template), token_id)
