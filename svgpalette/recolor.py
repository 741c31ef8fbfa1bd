"""Textual recoloring of SVG markup.

SVG is not parsed here. Color declarations are found with an ordered list of
regular expressions, from the general attribute/property forms to the
hex-specific property forms.
"""
from __future__ import annotations

import re

# A style property value stops at quotes, tag delimiters and CSS rule braces, so an
# unterminated `fill:#abc` inside style="..." or a <style> rule is left for the hex patterns below.
_STYLE_VALUE = r"[^;\"'<>{}]*"
# Hex runs must end where the digits end: `fill:#999` never matches inside `fill:#999999`.
_HEX6 = r"#[0-9a-fA-F]{6}(?![0-9a-fA-F])"
_HEX3 = r"#[0-9a-fA-F]{3}(?![0-9a-fA-F])"

_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r'fill="[^"]*"'), 'fill="{}"'),
    (re.compile(r'stroke="[^"]*"'), 'stroke="{}"'),
    (re.compile(r"fill:" + _STYLE_VALUE + ";"), "fill:{};"),
    (re.compile(r"stroke:" + _STYLE_VALUE + ";"), "stroke:{};"),
    (re.compile(r"fill:" + _HEX6), "fill:{}"),
    (re.compile(r"stroke:" + _HEX6), "stroke:{}"),
    (re.compile(r"fill:" + _HEX3), "fill:{}"),
    (re.compile(r"stroke:" + _HEX3), "stroke:{}"),
)

_ROOT_TAG = re.compile(r"<svg\b([^>]*?)(/?)>")


def change_svg_color(svg_text: str, color: str) -> str:
    """Return ``svg_text`` with every recognized fill/stroke color set to ``color``.

    If no ``fill=`` or ``stroke=`` attribute remains afterwards, a ``fill``
    attribute is added to the first ``<svg>`` tag so the output is never colorless.
    The color is used verbatim.
    """
    result = svg_text
    for pattern, template in _PATTERNS:
        replacement = template.format(color)
        # A callable keeps backslashes in the color from being read as group references.
        result = pattern.sub(lambda _m, r=replacement: r, result)

    if "fill=" not in result and "stroke=" not in result:
        result = _ROOT_TAG.sub(
            lambda m: f'<svg{m.group(1).rstrip()} fill="{color}"{m.group(2)}>', result, count=1
        )
    return result
