# src/forcegraph/reporters/markdown_reporter.py
"""
提供將一個渲染週期的圖形資料匯總為 Markdown 報告的功能。
"""

# 1. 標準庫導入
import datetime
import logging
from collections import defaultdict
from pathlib import Path

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
from forcegraph.models import GraphData


def _format_scalar(value: float | None) -> str:
    return "-" if value is None else f"{value:g}"


def _escape_cell(value: object) -> str:
    return str(value).replace("|", "\\|")


def _generate_node_table(graph_data: GraphData) -> list[str]:
    """節點屬性表，依節點索引排列。"""
    lines = [
        "| index | label | group | shape | size | color | image |",
        "|---|---|---|---|---|---|---|",
    ]
    for node in graph_data.node_list:
        lines.append(
            f"| {node.index} | {_escape_cell(node.label)} | {node.group} | {node.shape} | "
            f"{node.size:g} | {node.color} | {_escape_cell(node.image or '')} |"
        )
    return lines


def _generate_adjacency_list_text(graph_data: GraphData) -> list[str]:
    """
    將連結轉換為帶權重的鄰接串列；端點無法解析的連結另列於最後。
    """
    labels = {node.index: node.label for node in graph_data.node_list}
    adjacency_list: dict[int, list[str]] = defaultdict(list)
    unresolved: list[str] = []

    for link in graph_data.link_list:
        if link.source in labels and link.target in labels:
            adjacency_list[link.source].append(f"  - LINKS: {labels[link.target]} (weight: {link.value:g})")
        else:
            unresolved.append(f"- {link.source} -> {link.target} (weight: {link.value:g})")

    if not adjacency_list and not unresolved:
        return ["(無連結)"]

    text_parts = ["<details>\n<summary>點擊展開/摺疊鄰接串列</summary>\n", "```markdown"]
    for index in sorted(adjacency_list):
        text_parts.append(f"- **{labels[index]}**:")
        text_parts.extend(adjacency_list[index])
    if unresolved:
        text_parts.append("- **(無法解析的端點)**:")
        text_parts.extend(f"  {entry}" for entry in unresolved)
    text_parts.append("```\n</details>\n")
    return text_parts


def generate_markdown_report(project_name: str, graph_data: GraphData, output_path: Path) -> bool:
    """
    生成一份力導向圖摘要報告：參數、模式、範圍、節點表與鄰接串列。
    """
    analysis_time = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    mode = "圖片" if graph_data.use_image else ("符號" if graph_data.use_shape else "圓形")

    report_parts = [
        f"# ForceGraph 報告: {project_name}",
        f"**生成時間**: {analysis_time}",
        "\n## 1. 參數",
        f"- 連結距離 (distance): {graph_data.link_distance:g}",
        f"- 電荷 (charge): {graph_data.charge:g}",
        f"- 標記模式: {mode}",
        "\n## 2. 範圍",
        f"- 節點大小: {_format_scalar(graph_data.min_node_size)} ~ {_format_scalar(graph_data.max_node_size)}",
        f"- 連結權重: {_format_scalar(graph_data.min_link_size)} ~ {_format_scalar(graph_data.max_link_size)}",
        f"\n## 3. 節點 ({len(graph_data.node_list)})",
        *_generate_node_table(graph_data),
        f"\n## 4. 連結 ({len(graph_data.link_list)})",
        *_generate_adjacency_list_text(graph_data),
    ]

    try:
        output_path.write_text("\n".join(report_parts), encoding="utf-8")
        logging.info(f"Markdown 報告已成功儲存至: {output_path}")
        return True
    except OSError as e:
        logging.error(f"寫入 Markdown 報告時發生錯誤: {e}")
        return False
