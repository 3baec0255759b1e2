# src/forcegraph/utils/color_utils.py
"""
提供調色盤服務與顏色處理相關的公用函式。
"""

import colorsys

DEFAULT_DATA_COLORS: tuple[str, ...] = (
    "#01B8AA",
    "#374649",
    "#FD625E",
    "#F2C80F",
    "#5F6B6D",
    "#8AD4EB",
    "#FE9666",
    "#A66999",
    "#3599B8",
    "#DFBFBF",
)

GOLDEN_RATIO_CONJUGATE = 0.61803398875


def _hls_to_hex(hue: float, lightness: float, saturation: float) -> str:
    rgb_float = colorsys.hls_to_rgb(hue, lightness, saturation)
    rgb_int = tuple(int(c * 255) for c in rgb_float)
    return f"#{rgb_int[0]:02x}{rgb_int[1]:02x}{rgb_int[2]:02x}"


class ColorPalette:
    """
    以整數索引取得顏色的調色盤。

    前段使用固定的資料色；索引超出時以黃金比例色相步進延伸。
    延伸色直接由索引計算，同一索引永遠回傳相同顏色。
    """

    def __init__(self, base_colors: tuple[str, ...] | list[str] = DEFAULT_DATA_COLORS):
        self._colors: list[str] = list(base_colors) or list(DEFAULT_DATA_COLORS)
        self._base_count = len(self._colors)

    def color_at(self, index: int) -> str:
        """回傳索引對應的顏色；負索引回繞到基本色。"""
        if index < 0:
            return self._colors[index % self._base_count]
        if index < self._base_count:
            return self._colors[index]
        step = index - self._base_count + 1
        hue = (step * GOLDEN_RATIO_CONJUGATE) % 1
        return _hls_to_hex(hue, 0.55, 0.65)


def get_analogous_dark_color(hex_color: str) -> str:
    """
    根據給定的十六進位背景色，計算一個相似的、更深的、醒目的邊框顏色。

    Args:
        hex_color: 十六進位顏色字串 (例如 "#RRGGBB" 或簡寫 "#RGB")。

    Returns:
        一個相似深色的十六進位顏色字串。

    Raises:
        ValueError: 輸入不是 "#RRGGBB" 或 "#RGB" 形式的十六進位顏色。
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:
        hex_color = "".join(c * 2 for c in hex_color)
    if len(hex_color) != 6:
        raise ValueError(f"不是十六進位顏色: {hex_color!r}")
    r, g, b = tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))

    hue, lightness, saturation = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)

    dark_h = hue
    dark_l = max(0.1, lightness * 0.3)
    dark_s = min(1.0, saturation * 1.2)

    return _hls_to_hex(dark_h, dark_l, dark_s)
