"""クリティカルパス計算と Mermaid 定義生成のテスト。"""

from __future__ import annotations

import pytest

from tasklens.critical_path import (
    EMPTY_PLACEHOLDER_NODE,
    build_dependency_diagram,
    find_critical_path,
    is_critical_edge,
)


def _tasks(*ids: int) -> list[dict]:
    return [{"id": i, "task_name": f"task{i}"} for i in ids]


def _edge(src: int, dst: int) -> dict:
    """src の完了後に dst を開始できる（src → dst）。"""
    return {"task_id": dst, "depends_on_task_id": src}


def _brute_force_longest(ids: list[int], pairs: list[tuple[int, int]]) -> int:
    """DAG 上の最長パス（ノード数）を素朴な再帰で求める。"""
    adjacency: dict[int, list[int]] = {}
    for src, dst in pairs:
        adjacency.setdefault(src, []).append(dst)

    def longest(node: int) -> int:
        return 1 + max((longest(n) for n in adjacency.get(node, [])), default=0)

    return max((longest(i) for i in ids), default=0)


DAG_CASES = [
    # depth 1: 辺なし
    ([1, 2, 3], []),
    # depth 2
    ([1, 2, 3], [(1, 2)]),
    # depth 3: 一本道 + 独立ノード
    ([1, 2, 3, 4], [(1, 2), (2, 3)]),
    # depth 4: ひし形 + 末尾
    ([1, 2, 3, 4, 5], [(1, 2), (1, 3), (2, 4), (3, 4), (4, 5)]),
    # depth 5: 短い枝と長い枝が合流
    ([1, 2, 3, 4, 5, 6, 7], [(1, 7), (1, 2), (2, 3), (3, 4), (4, 5), (6, 5)]),
    # depth 5: 入力順と依存順が逆
    ([5, 4, 3, 2, 1], [(1, 2), (2, 3), (3, 4), (4, 5)]),
]


@pytest.mark.parametrize("ids,pairs", DAG_CASES)
def test_dag_critical_path_matches_brute_force(ids, pairs):
    result = find_critical_path(_tasks(*ids), [_edge(s, d) for s, d in pairs])

    assert result.length == _brute_force_longest(ids, pairs)
    assert result.cycle_detected is False
    # パス上の連続ペアは実在する辺
    for src, dst in zip(result.path, result.path[1:]):
        assert (src, dst) in pairs


def test_example_chain_three_two_one():
    # task 1 depends on 2, task 2 depends on 3
    edges = [
        {"task_id": 1, "depends_on_task_id": 2},
        {"task_id": 2, "depends_on_task_id": 3},
    ]
    result = find_critical_path(_tasks(1, 2, 3), edges)

    assert result.path == [3, 2, 1]
    assert result.length == 3
    assert result.critical_edges == {(3, 2), (2, 1)}

    diagram = build_dependency_diagram(_tasks(1, 2, 3), edges)
    lines = diagram.splitlines()
    assert lines[0] == "graph TD"
    assert "  T2 --> T1" in lines
    assert "  T3 --> T2" in lines
    assert "  class T3, T2, T1 critical;" in lines
    assert any(line.startswith("  linkStyle 0 ") for line in lines)
    assert any(line.startswith("  linkStyle 1 ") for line in lines)


def test_empty_tasks_render_single_placeholder():
    diagram = build_dependency_diagram([], [])

    assert diagram == f"graph TD\n  {EMPTY_PLACEHOLDER_NODE}"
    assert "-->" not in diagram
    assert find_critical_path([], []).path == []


def test_two_node_cycle_terminates():
    edges = [_edge(1, 2), _edge(2, 1)]
    result = find_critical_path(_tasks(1, 2), edges)

    assert result.cycle_detected is True
    assert result.path == [1, 2]

    diagram = build_dependency_diagram(_tasks(1, 2), edges)
    assert "T1 --> T2" in diagram
    assert "T2 --> T1" in diagram
    # 循環の戻り辺は強調しない
    assert "linkStyle 1 " not in diagram


def test_cycle_reachable_from_chain_keeps_path_simple():
    edges = [_edge(1, 2), _edge(2, 3), _edge(3, 4), _edge(4, 2)]
    result = find_critical_path(_tasks(1, 2, 3, 4), edges)

    assert result.cycle_detected is True
    assert result.path == [1, 2, 3, 4]
    assert len(set(result.path)) == len(result.path)


def test_neighbor_tie_break_prefers_insertion_order():
    edges = [_edge(1, 3), _edge(1, 2)]
    result = find_critical_path(_tasks(1, 2, 3), edges)

    assert result.path == [1, 3]


def test_start_tie_break_prefers_first_task_in_input():
    edges = [_edge(3, 4), _edge(1, 2)]
    result = find_critical_path(_tasks(1, 2, 3, 4), edges)

    assert result.path == [1, 2]


def test_self_loop_is_ignored():
    edges = [_edge(1, 1), _edge(1, 2)]
    result = find_critical_path(_tasks(1, 2), edges)

    assert result.cycle_detected is False
    assert result.path == [1, 2]
    assert "T1 --> T1" not in build_dependency_diagram(_tasks(1, 2), edges)


def test_dangling_edge_is_rendered_without_error():
    diagram = build_dependency_diagram(_tasks(1), [_edge(1, 99)])

    assert "T1 --> T99" in diagram
    assert 'T99["' not in diagram


def test_single_node_path_is_not_highlighted():
    diagram = build_dependency_diagram(_tasks(1, 2), [])

    assert "classDef critical" not in diagram
    assert "linkStyle" not in diagram


def test_label_quotes_are_escaped():
    diagram = build_dependency_diagram([{"id": 7, "task_name": 'say "hi"'}], [])

    assert 'T7["7: say #quot;hi#quot;"]' in diagram


def test_long_chain_does_not_hit_recursion_limit():
    n = 3000
    edges = [_edge(i, i + 1) for i in range(1, n)]
    result = find_critical_path(_tasks(*range(1, n + 1)), edges)

    assert result.length == n
    assert result.path[0] == 1
    assert result.path[-1] == n


def test_calls_do_not_share_state():
    first = find_critical_path(_tasks(1, 2, 3), [_edge(1, 2), _edge(2, 3)])
    second = find_critical_path(_tasks(1, 2, 3), [])

    assert first.length == 3
    assert second.length == 1


def test_orm_like_objects_are_accepted():
    class Row:
        def __init__(self, **kwargs):
            self.__dict__.update(kwargs)

    tasks = [Row(id=1, task_name="a"), Row(id=2, task_name="b")]
    edges = [Row(task_id=2, depends_on_task_id=1)]

    assert find_critical_path(tasks, edges).path == [1, 2]


def test_is_critical_edge():
    assert is_critical_edge([3, 2, 1], 3, 2) is True
    assert is_critical_edge([3, 2, 1], 2, 3) is False
    assert is_critical_edge([3, 2, 1], 3, 1) is False
    assert is_critical_edge([], 1, 2) is False
