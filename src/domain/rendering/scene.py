"""Scene graph for SVG cards.

Renderers build a tree of typed drawing primitives and serialize it once.
Layout code deals only in numbers and strings; escaping and number formatting
happen here, in one place.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Union

from core.exceptions import RenderInternalError

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>'

_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(value: Any) -> str:
    """Escape the five XML-reserved characters."""
    text = str(value)
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def fmt_number(value: float | int) -> str:
    """Format a coordinate compactly; non-finite values are a layout bug."""
    if isinstance(value, bool):
        raise RenderInternalError(f"Unexpected boolean coordinate: {value}")
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise RenderInternalError(f"Non-finite coordinate: {value}")
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass
class Element:
    """Untyped SVG element, the serialization target of every primitive."""

    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list["Element"] = field(default_factory=list)
    text: str | None = None

    def serialize(self) -> str:
        parts = [f"<{self.tag}"]
        for name, value in self.attrs.items():
            if value is None:
                continue
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                rendered = fmt_number(value)
            else:
                rendered = escape_xml(value)
            parts.append(f' {name}="{rendered}"')
        if not self.children and self.text is None:
            parts.append("/>")
            return "".join(parts)
        parts.append(">")
        if self.text is not None:
            parts.append(escape_xml(self.text))
        parts.extend(child.serialize() for child in self.children)
        parts.append(f"</{self.tag}>")
        return "".join(parts)


def _title(text: str | None) -> list[Element]:
    return [Element("title", text=text)] if text is not None else []


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: str | None = None
    rx: float | None = None
    opacity: float | None = None
    stroke: str | None = None
    css_class: str | None = None
    filter: str | None = None
    title: str | None = None

    def to_element(self) -> Element:
        return Element(
            "rect",
            {
                "x": self.x,
                "y": self.y,
                "width": self.width,
                "height": self.height,
                "rx": self.rx,
                "fill": self.fill,
                "opacity": self.opacity,
                "stroke": self.stroke,
                "class": self.css_class,
                "filter": self.filter,
            },
            _title(self.title),
        )


@dataclass
class Circle:
    cx: float
    cy: float
    r: float
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None
    filter: str | None = None
    title: str | None = None

    def to_element(self) -> Element:
        return Element(
            "circle",
            {
                "cx": self.cx,
                "cy": self.cy,
                "r": self.r,
                "fill": self.fill,
                "stroke": self.stroke,
                "stroke-width": self.stroke_width,
                "filter": self.filter,
            },
            _title(self.title),
        )


@dataclass
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    css_class: str | None = None
    stroke: str | None = None

    def to_element(self) -> Element:
        return Element(
            "line",
            {
                "x1": self.x1,
                "y1": self.y1,
                "x2": self.x2,
                "y2": self.y2,
                "class": self.css_class,
                "stroke": self.stroke,
            },
        )


@dataclass
class Path:
    """Polyline path: the first command moves, the rest draw lines."""

    points: list[tuple[float, float]] = field(default_factory=list)
    css_class: str | None = None
    stroke: str | None = None
    fill: str | None = None
    raw_d: str | None = None

    @property
    def d(self) -> str:
        if self.raw_d is not None:
            return self.raw_d
        commands = []
        for index, (x, y) in enumerate(self.points):
            command = "M" if index == 0 else "L"
            commands.append(f"{command} {fmt_number(x)},{fmt_number(y)}")
        return " ".join(commands)

    def to_element(self) -> Element:
        return Element(
            "path",
            {"d": self.d, "class": self.css_class, "stroke": self.stroke, "fill": self.fill},
        )


@dataclass
class Span:
    content: str
    font_weight: str | None = None

    def to_element(self) -> Element:
        return Element("tspan", {"font-weight": self.font_weight}, text=self.content)


@dataclass
class Text:
    x: float
    y: float
    content: str | list[Union[str, Span]]
    css_class: str | None = None
    fill: str | None = None
    anchor: str | None = None
    baseline: str | None = None
    font_size: float | None = None

    @property
    def plain_text(self) -> str:
        if isinstance(self.content, str):
            return self.content
        return "".join(
            part if isinstance(part, str) else part.content for part in self.content
        )

    def to_element(self) -> Element:
        attrs = {
            "x": self.x,
            "y": self.y,
            "class": self.css_class,
            "fill": self.fill,
            "text-anchor": self.anchor,
            "dominant-baseline": self.baseline,
            "font-size": self.font_size,
        }
        if isinstance(self.content, str):
            return Element("text", attrs, text=self.content)
        # Mixed content: leading plain text goes in .text, spans follow.
        # Plain text after a span is wrapped in its own tspan.
        element = Element("text", attrs)
        for part in self.content:
            if isinstance(part, Span):
                element.children.append(part.to_element())
            elif not element.children:
                element.text = (element.text or "") + part
            else:
                element.children.append(Element("tspan", text=part))
        return element


@dataclass
class Image:
    x: float
    y: float
    width: float
    height: float
    href: str
    clip_path: str | None = None
    preserve_aspect_ratio: str | None = "xMidYMid slice"

    def to_element(self) -> Element:
        return Element(
            "image",
            {
                "x": self.x,
                "y": self.y,
                "width": self.width,
                "height": self.height,
                "href": self.href,
                "clip-path": self.clip_path,
                "preserveAspectRatio": self.preserve_aspect_ratio,
            },
        )


@dataclass
class Group:
    children: list["Primitive"] = field(default_factory=list)
    translate: tuple[float, float] | None = None
    css_class: str | None = None
    title: str | None = None

    def add(self, *primitives: "Primitive") -> "Group":
        self.children.extend(primitives)
        return self

    def to_element(self) -> Element:
        transform = None
        if self.translate is not None:
            dx, dy = self.translate
            transform = f"translate({fmt_number(dx)}, {fmt_number(dy)})"
        children = _title(self.title) + [child.to_element() for child in self.children]
        return Element("g", {"transform": transform, "class": self.css_class}, children)


@dataclass
class ClipPath:
    id: str
    children: list["Primitive"] = field(default_factory=list)

    def to_element(self) -> Element:
        return Element(
            "clipPath", {"id": self.id}, [child.to_element() for child in self.children]
        )


@dataclass
class LinearGradient:
    id: str
    stops: list[tuple[str, str]]
    diagonal: bool = True

    def to_element(self) -> Element:
        attrs: dict[str, Any] = {"id": self.id}
        if self.diagonal:
            attrs.update({"x1": "0%", "y1": "0%", "x2": "100%", "y2": "100%"})
        stops = [
            Element("stop", {"offset": offset, "stop-color": color})
            for offset, color in self.stops
        ]
        return Element("linearGradient", attrs, stops)


@dataclass
class DropShadow:
    id: str
    std_deviation: float = 2
    opacity: float = 0.1

    def to_element(self) -> Element:
        shadow = Element(
            "feDropShadow",
            {
                "dx": 0,
                "dy": 2,
                "stdDeviation": self.std_deviation,
                "flood-color": "#000",
                "flood-opacity": self.opacity,
            },
        )
        return Element(
            "filter",
            {"id": self.id, "x": "-20%", "y": "-20%", "width": "140%", "height": "140%"},
            [shadow],
        )


Primitive = Union[
    Rect, Circle, Line, Path, Text, Image, Group, ClipPath, LinearGradient, DropShadow
]


@dataclass
class SvgDocument:
    """A complete card: fixed canvas, shared defs, stylesheet and body."""

    width: int
    height: int
    body: list[Primitive] = field(default_factory=list)
    defs: list[Primitive] = field(default_factory=list)
    style: str | None = None
    rounded: bool = True

    def add(self, *primitives: Primitive) -> "SvgDocument":
        self.body.extend(primitives)
        return self

    def iter_primitives(self) -> list[Primitive]:
        """Flatten body groups, handy for inspecting layout in tests."""
        found: list[Primitive] = []
        stack: list[Primitive] = list(reversed(self.body))
        while stack:
            item = stack.pop()
            found.append(item)
            if isinstance(item, Group):
                stack.extend(reversed(item.children))
        return found

    def to_element(self) -> Element:
        attrs: dict[str, Any] = {
            "width": self.width,
            "height": self.height,
            "viewBox": f"0 0 {self.width} {self.height}",
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
        }
        if self.rounded:
            attrs["style"] = "border-radius:15px"
        children: list[Element] = []
        if self.style:
            children.append(Element("style", text=self.style))
        if self.defs:
            children.append(Element("defs", children=[d.to_element() for d in self.defs]))
        children.extend(primitive.to_element() for primitive in self.body)
        return Element("svg", attrs, children)

    def render(self) -> str:
        return f"{XML_DECLARATION}\n{self.to_element().serialize()}\n"
