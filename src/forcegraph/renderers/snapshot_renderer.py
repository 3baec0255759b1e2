# src/forcegraph/renderers/snapshot_renderer.py
"""
將已收斂的佈局匯出為 Graphviz 靜態圖檔。
節點以 pos="x,y!" 固定在模擬位置，交由 neato -n2 直接輸出。
"""

# 1. 標準庫導入
import logging
import subprocess
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
import graphviz

# 3. 本專案導入
from forcegraph.builders.range_normalizer import get_image_size, get_link_opacity, get_link_size, get_node_size
from forcegraph.layout.position_buffer import PositionBuffer
from forcegraph.models import DEFAULT_NODE_SHAPE, GraphData
from forcegraph.renderers.symbols import format_number
from forcegraph.utils.color_utils import get_analogous_dark_color

GRAPHVIZ_SHAPES = {
    "circle": "circle",
    "cross": "star",
    "diamond": "diamond",
    "square": "square",
    "triangle-up": "triangle",
}
POINTS_PER_INCH = 72.0
FALLBACK_BORDER_COLOR = "gray20"


def _border_color(fill: str) -> str:
    """非十六進位的填色 (例如具名顏色) 使用固定的深色邊框。"""
    try:
        return get_analogous_dark_color(fill)
    except (AttributeError, ValueError):
        logging.debug(f"顏色 {fill!r} 不是十六進位格式，邊框改用 {FALLBACK_BORDER_COLOR}。")
        return FALLBACK_BORDER_COLOR


def _node_attrs(graph_data: GraphData, node_index: int, x: float, y: float) -> dict[str, str]:
    node = graph_data.node_list[node_index]
    if graph_data.use_image:
        edge = get_image_size(graph_data, node.size) / POINTS_PER_INCH
        attrs = {
            "shape": "box",
            "width": format_number(edge),
            "height": format_number(edge),
            "style": "rounded",
        }
        if node.image:
            attrs["URL"] = node.image
    else:
        diameter = 2 * get_node_size(graph_data, node.size) / POINTS_PER_INCH
        shape = node.shape if graph_data.use_shape else DEFAULT_NODE_SHAPE
        attrs = {
            "shape": GRAPHVIZ_SHAPES.get(shape, "circle"),
            "width": format_number(diameter),
            "height": format_number(diameter),
            "style": "filled",
            "fillcolor": str(node.color),
            "color": _border_color(node.color),
        }
    attrs.update(
        {
            "pos": f"{format_number(x)},{format_number(y)}!",
            "fixedsize": "true",
            "tooltip": str(node.label),
        }
    )
    return attrs


def generate_snapshot_dot_source(
    graph_data: GraphData,
    buffer: PositionBuffer,
    height: float,
    label_fill: str = "#333",
) -> str:
    """
    產生固定座標的 DOT 原始碼。SVG 的 y 軸向下，Graphviz 向上，因此以 height - y 翻轉。
    """
    dot = graphviz.Graph("ForceGraphSnapshot")
    dot.attr(splines="line", outputorder="edgesfirst", charset="UTF-8")
    dot.attr("node", fontname="Microsoft YaHei", fontsize="10", fontcolor=label_fill, label="")
    dot.attr("edge", color="gray50")

    for node in graph_data.node_list:
        if not 0 <= node.index < len(buffer):
            continue
        x, y = buffer.position(node.index)
        dot.node(f"n{node.index}", xlabel=str(node.label), **_node_attrs(graph_data, node.index, x, height - y))

    for link in graph_data.resolved_links():
        opacity = get_link_opacity(graph_data, link.value)
        dot.edge(
            f"n{link.source}",
            f"n{link.target}",
            penwidth=format_number(get_link_size(graph_data, link.value)),
            color=f"#808080{int(round(opacity * 255)):02x}",
        )
    return dot.source


def render_snapshot(
    graph_data: GraphData,
    buffer: PositionBuffer,
    output_path: Path,
    height: float,
    snapshot_config: dict[str, Any] | None = None,
    label_fill: str = "#333",
) -> bool:
    """
    使用 Graphviz 將固定座標的圖形渲染成圖檔。失敗時記錄錯誤並回傳 False。
    """
    snapshot_config = snapshot_config or {}
    layout_engine = snapshot_config.get("layout_engine", "neato")
    render_timeout = snapshot_config.get("render_timeout", 120)
    save_source_file = snapshot_config.get("save_source_file", False)

    dot_source = generate_snapshot_dot_source(graph_data, buffer, height, label_fill)
    if save_source_file:
        source_filepath = output_path.with_suffix(".txt")
        try:
            source_filepath.write_text(dot_source, encoding="utf-8")
            logging.info(f"DOT 原始檔已儲存: {source_filepath}")
        except OSError as e:
            logging.error(f"寫入 DOT 原始檔時發生錯誤: {e}")

    logging.info(f"準備將佈局快照渲染至: {output_path} (引擎: {layout_engine}, Timeout: {render_timeout}s)")
    command = [layout_engine, "-n2", f"-T{output_path.suffix[1:]}"]
    try:
        process = subprocess.run(
            command, input=dot_source.encode("utf-8"), capture_output=True, check=True, timeout=render_timeout
        )
        with open(output_path, "wb") as f:
            f.write(process.stdout)
        logging.info(f"佈局快照已成功儲存至: {output_path}")
        return True
    except subprocess.TimeoutExpired:
        logging.error(f"Graphviz 渲染超時 (超過 {render_timeout} 秒)。")
    except subprocess.CalledProcessError as e:
        logging.error(f"Graphviz ({layout_engine}) 執行時返回錯誤。")
        error_message = e.stderr.decode("utf-8", errors="ignore")
        logging.error(f"Graphviz 錯誤訊息:\n{error_message}")
    except FileNotFoundError:
        logging.error(f"Graphviz 執行檔 '{layout_engine}' 未找到。請確保 Graphviz 已安裝並已加入系統 PATH。")
    except OSError as e:
        logging.error(f"渲染佈局快照時發生錯誤: {e}")
    return False
