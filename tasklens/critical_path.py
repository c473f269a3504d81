"""
依存関係グラフのクリティカルパス計算と Mermaid 定義の生成

このモジュールは「DB/HTTP」に依存しない純粋ロジックとして扱う。
入力のタスク/依存関係は ORM 行・pydantic モデル・dict のどれでも受け付ける。

用語:
- 依存関係 (task_id, depends_on_task_id) は「depends_on → task」の順に辿る（前提 → 後続）。
- クリティカルパスはノード数で最長の依存チェーン。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence


logger = logging.getLogger(__name__)

EMPTY_PLACEHOLDER_NODE = 'Empty["タスクがまだ登録されていません"]'
CRITICAL_CLASS_DEF = "classDef critical fill:#fee2e2,stroke:#dc2626,stroke-width:2px,color:#b91c1c;"
CRITICAL_LINK_STYLE = "stroke:#dc2626,stroke-width:3px;"


@dataclass
class CriticalPathResult:
    """クリティカルパスの計算結果。"""

    path: list[int] = field(default_factory=list)
    cycle_detected: bool = False

    @property
    def length(self) -> int:
        return len(self.path)

    @property
    def critical_edges(self) -> set[tuple[int, int]]:
        """パス上で連続する (前提, 後続) の組。"""
        return set(zip(self.path, self.path[1:]))


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _edge_pairs(edges: Iterable[Any]) -> Iterator[tuple[int, int]]:
    """依存関係を (前提, 後続) の組で返す。自己参照は捨てる。"""
    for edge in edges:
        src = int(_field(edge, "depends_on_task_id"))
        dst = int(_field(edge, "task_id"))
        if src == dst:
            continue
        yield src, dst


def _build_adjacency(pairs: Iterable[tuple[int, int]]) -> dict[int, list[int]]:
    adjacency: dict[int, list[int]] = {}
    for src, dst in pairs:
        adjacency.setdefault(src, []).append(dst)
    return adjacency


def _longest_from(
    start: int,
    adjacency: dict[int, list[int]],
    lengths: dict[int, int],
    successor: dict[int, int],
) -> bool:
    """
    start から辿れる最長チェーンの長さを lengths/successor に書き込む。

    再帰の代わりに明示スタックで深さ優先に辿る（長いチェーンでも再帰上限に当たらない）。
    探索中のノードへ戻る辺（循環）はその枝を打ち切る。戻り値は循環を検出したかどうか。
    """

    if start in lengths:
        return False

    cycle_detected = False
    visiting: set[int] = {start}
    best: dict[int, int] = {start: 1}
    stack: list[tuple[int, Iterator[int]]] = [(start, iter(adjacency.get(start, ())))]

    def consider(parent: int, child: int) -> None:
        # 同じ長さなら先に見つかった隣接ノードを優先する
        if lengths[child] + 1 > best[parent]:
            best[parent] = lengths[child] + 1
            successor[parent] = child

    while stack:
        node, neighbors = stack[-1]
        descended = False
        for neighbor in neighbors:
            if neighbor in lengths:
                consider(node, neighbor)
                continue
            if neighbor in visiting:
                cycle_detected = True
                continue
            visiting.add(neighbor)
            best[neighbor] = 1
            stack.append((neighbor, iter(adjacency.get(neighbor, ()))))
            descended = True
            break
        if descended:
            continue

        stack.pop()
        visiting.discard(node)
        lengths[node] = best.pop(node)
        if stack:
            consider(stack[-1][0], node)

    return cycle_detected


def find_critical_path(tasks: Sequence[Any], edges: Iterable[Any]) -> CriticalPathResult:
    """
    タスク集合の中で最長の依存チェーンを求める。

    - メモは呼び出しごとに作り直す（呼び出し間で状態を共有しない）
    - 最長が複数あれば tasks の並びで最初のタスクから始まるものを採用
    - 循環は打ち切ったうえで cycle_detected を立てる
    """

    adjacency = _build_adjacency(_edge_pairs(edges))
    lengths: dict[int, int] = {}
    successor: dict[int, int] = {}
    cycle_detected = False

    best_start: int | None = None
    for task in tasks:
        task_id = int(_field(task, "id"))
        if _longest_from(task_id, adjacency, lengths, successor):
            cycle_detected = True
        if best_start is None or lengths[task_id] > lengths[best_start]:
            best_start = task_id

    if best_start is None:
        return CriticalPathResult(path=[], cycle_detected=False)

    # successor は探索を終えたノードだけを指すので、辿っても循環しない
    path = [best_start]
    while path[-1] in successor:
        path.append(successor[path[-1]])

    if cycle_detected:
        logger.warning("dependency cycle detected; critical path computed on truncated graph")
    return CriticalPathResult(path=path, cycle_detected=cycle_detected)


def is_critical_edge(path: Sequence[int], from_id: int, to_id: int) -> bool:
    """(from_id, to_id) がパス上で連続して現れるかどうか。"""
    for i in range(len(path) - 1):
        if path[i] == from_id and path[i + 1] == to_id:
            return True
    return False


def _node_label(task: Any) -> str:
    label = f"{_field(task, 'id')}: {_field(task, 'task_name') or ''}"
    return label.replace('"', "#quot;")


def render_mermaid(tasks: Sequence[Any], edges: Iterable[Any], result: CriticalPathResult) -> str:
    """計算済みのクリティカルパスを使って Mermaid (graph TD) 定義を組み立てる。"""

    if not tasks:
        return f"graph TD\n  {EMPTY_PLACEHOLDER_NODE}"

    lines = ["graph TD"]
    for task in tasks:
        lines.append(f'  T{int(_field(task, "id"))}["{_node_label(task)}"]')

    link_styles: list[str] = []
    for index, (src, dst) in enumerate(_edge_pairs(edges)):
        lines.append(f"  T{src} --> T{dst}")
        if is_critical_edge(result.path, src, dst):
            link_styles.append(f"linkStyle {index} {CRITICAL_LINK_STYLE}")

    if result.length > 1:
        lines.append(f"  {CRITICAL_CLASS_DEF}")
        lines.append(f"  class {', '.join(f'T{node}' for node in result.path)} critical;")

    lines.extend(f"  {style}" for style in link_styles)
    return "\n".join(lines)


def build_dependency_diagram(tasks: Sequence[Any], edges: Iterable[Any]) -> str:
    """タスクと依存関係から、クリティカルパスを強調した Mermaid 定義を返す。"""

    edge_list = list(edges)
    result = find_critical_path(tasks, edge_list)
    return render_mermaid(tasks, edge_list, result)
