# src/forcegraph/renderers/symbols.py
"""
產生五種節點符號的 SVG 路徑，符號大小以面積 (像素平方) 表示。
"""

import math

SQRT3 = math.sqrt(3)
TAN30 = math.tan(math.pi / 6)


def format_number(value: float) -> str:
    """輸出最多三位小數、去除尾端零的數字字串。"""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _circle(size: float) -> str:
    r = format_number(math.sqrt(size / math.pi))
    return f"M0,{r}A{r},{r} 0 1,1 0,-{r}A{r},{r} 0 1,1 0,{r}Z"


def _cross(size: float) -> str:
    r = math.sqrt(size / 5) / 2
    a, b = format_number(r), format_number(3 * r)
    return f"M-{b},-{a}H-{a}V-{b}H{a}V-{a}H{b}V{a}H{a}V{b}H-{a}V{a}H-{b}Z"


def _diamond(size: float) -> str:
    ry = math.sqrt(size / (2 * TAN30))
    rx = ry * TAN30
    return f"M0,-{format_number(ry)}L{format_number(rx)},0 0,{format_number(ry)} -{format_number(rx)},0Z"


def _square(size: float) -> str:
    r = format_number(math.sqrt(size) / 2)
    return f"M-{r},-{r}L{r},-{r} {r},{r} -{r},{r}Z"


def _triangle_up(size: float) -> str:
    rx = math.sqrt(size / SQRT3)
    ry = rx * SQRT3 / 2
    return f"M0,-{format_number(ry)}L{format_number(rx)},{format_number(ry)} -{format_number(rx)},{format_number(ry)}Z"


SYMBOL_PATHS = {
    "circle": _circle,
    "cross": _cross,
    "diamond": _diamond,
    "square": _square,
    "triangle-up": _triangle_up,
}


def symbol_path(shape: str, size: float) -> str:
    """未知的符號類型以圓形繪製；非正的面積視為 0。"""
    generator = SYMBOL_PATHS.get(shape, _circle)
    return generator(max(0.0, size))
