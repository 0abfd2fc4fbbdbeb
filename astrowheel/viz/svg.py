"""Deterministic SVG scene graph.

Elements keep their attributes as strings and their children in
insertion order so the serialised chart is stable across runs.  Layers
are plain ``<g>`` groups addressed by ``id``; renderers clear and refill
a layer instead of rebuilding the whole document.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

SVG_NS = "http://www.w3.org/2000/svg"


@dataclass
class SvgElement:
    """A minimal SVG node."""

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["SvgElement"] = field(default_factory=list)
    text: Optional[str] = None

    def set(self, **attrs: object) -> "SvgElement":
        """Assign attributes and return ``self``.

        Underscores in keyword names become dashes (``stroke_width`` is
        written as ``stroke-width``).  ``None`` values are skipped.
        """

        for key, value in attrs.items():
            if value is None:
                continue
            name = key.rstrip("_").replace("_", "-")
            if isinstance(value, float):
                self.attributes[name] = repr(value)
            else:
                self.attributes[name] = str(value)
        return self

    def get(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def add(self, *children: "SvgElement") -> "SvgElement":
        self.children.extend(children)
        return self

    def clear(self) -> None:
        self.children.clear()

    def remove(self, child: "SvgElement") -> None:
        self.children = [item for item in self.children if item is not child]

    def iter(self, tag: Optional[str] = None) -> Iterator["SvgElement"]:
        """Depth-first walk over this element and its descendants."""

        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            yield from child.iter(tag)

    def find(self, element_id: str) -> Optional["SvgElement"]:
        for element in self.iter():
            if element.attributes.get("id") == element_id:
                return element
        return None

    def to_string(self, indent: int = 0, pretty: bool = True) -> str:
        pad = "  " * indent if pretty else ""
        child_pad = "  " * (indent + 1) if pretty else ""
        attrs = "".join(
            f" {name}={_quote(value)}" for name, value in sorted(self.attributes.items())
        )
        if not self.children and self.text is None:
            return f"{pad}<{self.tag}{attrs}/>"

        parts: List[str] = [f"{pad}<{self.tag}{attrs}>"]
        if self.text is not None:
            text = self.text if not pretty else self.text.strip()
            parts.append(f"{child_pad}{_escape(text)}")
        for child in self.children:
            parts.append(child.to_string(indent + 1, pretty=pretty))
        parts.append(f"{pad}</{self.tag}>")
        joiner = "\n" if pretty else ""
        return joiner.join(parts)


def _quote(value: str) -> str:
    return f'"{_escape(value)}"'


def _escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


@dataclass
class SvgDocument:
    """Scene container that serialises to standalone SVG."""

    width: float
    height: float
    background: Optional[str] = None
    root: SvgElement = field(init=False)

    def __post_init__(self) -> None:
        self.root = SvgElement(
            "svg",
            {
                "xmlns": SVG_NS,
                "width": str(self.width),
                "height": str(self.height),
                "viewBox": f"0 0 {self.width} {self.height}",
            },
        )
        if self.background and self.background != "none":
            self.root.add(
                SvgElement(
                    "rect",
                    {
                        "fill": self.background,
                        "x": "0",
                        "y": "0",
                        "width": str(self.width),
                        "height": str(self.height),
                    },
                )
            )

    # Element factories -------------------------------------------------
    def _attach(self, element: SvgElement, parent: Optional[SvgElement]) -> SvgElement:
        (parent or self.root).add(element)
        return element

    def group(self, element_id: Optional[str] = None, parent: Optional[SvgElement] = None, **attrs: object) -> SvgElement:
        """Return the group ``element_id``, creating it under ``parent`` if needed."""

        if element_id is not None:
            existing = self.root.find(element_id)
            if existing is not None:
                return existing
        el = SvgElement("g").set(id=element_id, **attrs)
        return self._attach(el, parent)

    def circle(self, cx: float, cy: float, r: float, parent: Optional[SvgElement] = None, **attrs: object) -> SvgElement:
        el = SvgElement("circle").set(cx=cx, cy=cy, r=r, **attrs)
        return self._attach(el, parent)

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        parent: Optional[SvgElement] = None,
        **attrs: object,
    ) -> SvgElement:
        el = SvgElement("line").set(x1=x1, y1=y1, x2=x2, y2=y2, **attrs)
        return self._attach(el, parent)

    def path(self, d: str, parent: Optional[SvgElement] = None, **attrs: object) -> SvgElement:
        el = SvgElement("path").set(d=d, **attrs)
        return self._attach(el, parent)

    def text(
        self,
        x: float,
        y: float,
        value: str,
        parent: Optional[SvgElement] = None,
        **attrs: object,
    ) -> SvgElement:
        el = SvgElement("text", text=value).set(x=x, y=y, **attrs)
        return self._attach(el, parent)

    def find(self, element_id: str) -> Optional[SvgElement]:
        return self.root.find(element_id)

    def to_string(self, pretty: bool = True) -> str:
        return self.root.to_string(indent=0, pretty=pretty)

    def to_bytes(self, pretty: bool = True) -> bytes:
        return self.to_string(pretty=pretty).encode("utf-8")
