# src/forcegraph/renderers/scene.py
"""
保留式的視覺元素樹，以及依索引進行的資料綁定 (enter / update / exit)。

只描述「畫了什麼、如何被更新」；輸出時序列化為 SVG 字串。
"""

# 1. 標準庫導入
import html
from dataclasses import dataclass, field
from typing import Any

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.renderers.symbols import format_number

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"


@dataclass(eq=False)
class SceneElement:
    tag: str
    css_class: str
    datum: Any = None
    attrs: dict[str, Any] = field(default_factory=dict)
    style: dict[str, Any] = field(default_factory=dict)
    title: str | None = None

    def set_attrs(self, **attrs: Any) -> "SceneElement":
        self.attrs.update(attrs)
        return self

    def set_style(self, **style: Any) -> "SceneElement":
        self.style.update({key.replace("_", "-"): value for key, value in style.items()})
        return self


@dataclass
class DataJoin:
    """update: 沿用並重新綁定資料的既有元素；enter: 尚無元素的資料；exit: 多餘的元素。"""

    update: list[SceneElement]
    enter: list[Any]
    exit: list[SceneElement]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


class Scene:
    """一個 SVG 畫布與其主群組內依文件順序排列的元素。"""

    def __init__(self, css_class: str = "graph"):
        self.css_class = css_class
        self.width: float = 0
        self.height: float = 0
        self.elements: list[SceneElement] = []

    def resize(self, width: float, height: float):
        self.width, self.height = width, height

    def select_all(self, css_class: str) -> list[SceneElement]:
        return [element for element in self.elements if element.css_class == css_class]

    def remove_all(self, css_class: str) -> int:
        before = len(self.elements)
        self.elements = [element for element in self.elements if element.css_class != css_class]
        return before - len(self.elements)

    def remove(self, element: SceneElement):
        self.elements = [existing for existing in self.elements if existing is not element]

    def append(self, tag: str, css_class: str, datum: Any = None) -> SceneElement:
        element = SceneElement(tag=tag, css_class=css_class, datum=datum)
        self.elements.append(element)
        return element

    def join(self, css_class: str, data: list[Any]) -> DataJoin:
        """
        以索引把資料綁定到同類別的既有元素。

        前 min(元素數, 資料數) 個元素重新綁定新資料，其餘分入 enter 或 exit。
        """
        existing = self.select_all(css_class)
        shared = min(len(existing), len(data))
        for element, datum in zip(existing[:shared], data[:shared], strict=True):
            element.datum = datum
        return DataJoin(update=existing[:shared], enter=list(data[shared:]), exit=existing[shared:])

    def _element_to_svg(self, element: SceneElement) -> str:
        parts = [f'<{element.tag} class="{html.escape(element.css_class)}"']
        for name, value in element.attrs.items():
            if value is None:
                continue
            parts.append(f' {name}="{html.escape(_format_value(value))}"')
        if element.style:
            style_text = ";".join(f"{key}:{_format_value(value)}" for key, value in element.style.items())
            parts.append(f' style="{html.escape(style_text)}"')
        if element.title is None:
            return "".join(parts) + "/>"
        return "".join(parts) + f"><title>{html.escape(str(element.title))}</title></{element.tag}>"

    def to_svg(self) -> str:
        body = "".join(self._element_to_svg(element) for element in self.elements)
        return (
            f'<svg xmlns="{SVG_NAMESPACE}" xmlns:xlink="{XLINK_NAMESPACE}" class="{html.escape(self.css_class)}" '
            f'width="{_format_value(float(self.width))}" height="{_format_value(float(self.height))}">'
            f"<g>{body}</g></svg>"
        )
