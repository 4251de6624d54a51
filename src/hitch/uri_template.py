"""Thin adapter over the 'uritemplate' package which implements
RFC 6570 URI Templates up to and including Level 4.

The engine treats unbalanced braces as literal text, so those are
rejected here. Scalars are turned into the text that ends up in the URI
and engine failures are reported as a 'UriResolutionError'.
"""

import logging
import typing

import uritemplate

from .exceptions import UriResolutionError

logger = logging.getLogger(__name__)

TemplateValueType = typing.Union[
    str,
    int,
    float,
    bool,
    None,
    typing.Sequence[typing.Any],
    typing.Mapping[str, typing.Any],
]


def _check_braces(template: str) -> None:
    depth = 0
    start = 0
    for index, char in enumerate(template):
        if char == "{":
            if depth:
                raise UriResolutionError(
                    f"Nested '{{' at position {index} in URI template {template!r}"
                )
            depth = 1
            start = index
        elif char == "}":
            if not depth:
                raise UriResolutionError(
                    f"Unmatched '}}' at position {index} in URI template {template!r}"
                )
            if index == start + 1:
                raise UriResolutionError(
                    f"Empty expression at position {start} in URI template {template!r}"
                )
            depth = 0
    if depth:
        raise UriResolutionError(
            f"Unclosed expression at position {start} in URI template {template!r}"
        )


def _to_scalar(value: typing.Any) -> typing.Optional[str]:
    if value is None or isinstance(value, str):
        return value
    # str(True) would render as 'True'.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_template_value(value: typing.Any) -> TemplateValueType:
    """Converts a parameter value into something the template engine
    renders predictably. Lists and mappings are kept as containers so
    that list and associative expansion still work.
    """
    if isinstance(value, typing.Mapping):
        return {str(k): _to_scalar(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        if value and all(isinstance(x, tuple) and len(x) == 2 for x in value):
            return [(str(k), _to_scalar(v)) for k, v in value]
        return [_to_scalar(x) for x in value]
    return _to_scalar(value)


class UriTemplateExpander:
    """Expands a single URI template against parameter mappings"""

    def __init__(self, template: str):
        self.template = template
        _check_braces(template)
        try:
            self._template = uritemplate.URITemplate(template)
        except Exception as e:
            raise UriResolutionError(
                f"Could not parse URI template {template!r}: {e}", error=e
            ) from e

    @property
    def variable_names(self) -> typing.Set[str]:
        return set(self._template.variable_names)

    def expand(self, params: typing.Mapping[str, typing.Any]) -> str:
        values = {name: to_template_value(value) for name, value in params.items()}
        try:
            uri = self._template.expand(values)
        except Exception as e:
            raise UriResolutionError(
                f"Could not expand URI template {self.template!r}: {e}", error=e
            ) from e
        logger.debug("Expanded URI template %r to %r", self.template, uri)
        return uri

    def __repr__(self) -> str:
        return f"<UriTemplateExpander {self.template!r}>"
