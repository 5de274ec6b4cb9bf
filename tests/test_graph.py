import pytest

from utilkit.graph import Graph

CITIES = [
    "New York",
    "Washington D.C.",
    "Cleveland",
    "Detroit",
    "Atlanta",
    "St. Louis",
    "Dallas",
    "Salt Lake",
    "Pheonix",
    "Las Vegas",
    "Los Angeles",
    "San Fransisco",
]

HIGHWAYS = [
    (0, 1, 227),
    (1, 0, 227),
    (1, 2, 371),
    (1, 4, 639),
    (4, 1, 639),
    (2, 3, 168),
    (2, 4, 557),
    (4, 5, 630),
    (5, 7, 1064),
    (7, 8, 300),
    (7, 9, 372),
    (9, 7, 372),
    (9, 10, 381),
    (8, 6, 420),
    (6, 10, 735),
]


@pytest.fixture
def cities():
    g = Graph()
    for name in CITIES:
        g.add_vertex(name)
    for src, dest, miles in HIGHWAYS:
        g.add_edge(src, dest, miles)
    return g


def test_counts(cities):
    assert cities.num_vertices() == len(CITIES)
    assert cities.num_edges() == len(HIGHWAYS)
    assert cities.vertices_inserted() == len(CITIES)


def test_vertex_ids_sequential_and_metadata(cities):
    assert [v.id for v in cities.vertices()] == list(range(len(CITIES)))
    assert [v.metadata for v in cities.vertices()] == CITIES


def test_edge_degrees(cities):
    for vertex in cities.vertices():
        outs = sum(1 for s, _, _ in HIGHWAYS if s == vertex.id)
        ins = sum(1 for _, d, _ in HIGHWAYS if d == vertex.id)
        assert vertex.num_edges_out() == outs
        assert vertex.num_edges_in == ins


def test_edge_lookup(cities):
    for edge_id, (src, dest, miles) in enumerate(HIGHWAYS):
        edge = cities.get_edge(edge_id)
        assert (edge.id, edge.src, edge.dest, edge.metadata) == (
            edge_id,
            src,
            dest,
            miles,
        )
    assert cities.get_edge(len(HIGHWAYS) + 5000) is None


def test_bfs_invariants(cities):
    order = cities.breadth_first_traverse(cities.get_vertex(0))
    assert order[0] == 0
    assert len(order) == len(set(order))
    # San Fransisco has no outgoing edges; New York reaches all but Detroit? check reachable
    reachable = {0}
    frontier = [0]
    while frontier:
        node = frontier.pop()
        for s, d, _ in HIGHWAYS:
            if s == node and d not in reachable:
                reachable.add(d)
                frontier.append(d)
    assert set(order) == reachable


def test_dfs_same_set_as_bfs(cities):
    start = cities.get_vertex(0)
    bfs = cities.breadth_first_traverse(start)
    dfs = cities.depth_first_traverse(start)
    assert dfs[0] == 0
    assert sorted(dfs) == sorted(bfs)


def test_small_graph_orders():
    g = Graph(4)
    for _ in range(4):
        g.add_vertex()
    g.add_edge(0, 1)
    g.add_edge(0, 2)
    g.add_edge(1, 3)
    assert g.breadth_first_traverse(0) == [0, 1, 2, 3]
    assert g.depth_first_traverse(0) == [0, 1, 3, 2]


def test_traverse_from_sink(cities):
    sink = cities.get_vertex(10)
    assert cities.breadth_first_traverse(sink) == [10]
    assert cities.depth_first_traverse(sink) == [10]


def test_remove_edge_swaps_last(cities):
    vertex = cities.get_vertex(1)
    edges_before = list(vertex.edges())
    removed = cities.remove_edge(edges_before[0].id)
    assert removed is edges_before[0]
    assert vertex.edge(0) is edges_before[-1]
    assert vertex.num_edges_out() == len(edges_before) - 1
    assert cities.get_edge(removed.id) is None
    assert cities.num_edges() == len(HIGHWAYS) - 1
    with pytest.raises(KeyError):
        cities.remove_edge(removed.id)


def test_remove_edge_updates_in_degree(cities):
    dest = cities.get_vertex(HIGHWAYS[0][1])
    before = dest.num_edges_in
    cities.remove_edge(0)
    assert dest.num_edges_in == before - 1


def test_remove_vertex_removes_edges(cities):
    touching = sum(1 for s, d, _ in HIGHWAYS if 7 in (s, d))
    vertex = cities.remove_vertex(7)
    assert vertex.metadata == "Salt Lake"
    assert cities.get_vertex(7) is None
    assert cities.num_vertices() == len(CITIES) - 1
    assert cities.num_edges() == len(HIGHWAYS) - touching
    assert 7 not in [v.id for v in cities.vertices()]
    for v in cities.vertices():
        assert all(e.dest != 7 for e in v.edges())
    with pytest.raises(KeyError):
        cities.remove_vertex(7)


def test_add_edge_to_missing_vertex(cities):
    with pytest.raises(KeyError):
        cities.add_edge(0, 500)
    cities.remove_vertex(3)
    with pytest.raises(KeyError):
        cities.add_edge(3, 0)
    assert cities.num_edges() == len(HIGHWAYS) - 1


def test_add_vertex_with_id_grows_and_rejects_duplicates():
    g = Graph(2)
    v = g.add_vertex_with_id(10, "x")
    assert g.get_vertex(10) is v
    assert g.vertices_inserted() == 11
    with pytest.raises(ValueError):
        g.add_vertex_with_id(10, "y")
    nxt = g.add_vertex("z")
    assert nxt.id == 11


def test_add_vertex_with_id_zero_then_add():
    g = Graph()
    g.add_vertex_with_id(0, "a")
    b = g.add_vertex("b")
    assert b.id == 1
    assert [v.metadata for v in g.vertices()] == ["a", "b"]


def test_edges_grow_past_initial_size():
    g = Graph(1)
    g.add_vertex()
    g.add_vertex()
    edges = [g.add_edge(0, 1, n) for n in range(20)]
    assert [e.id for e in edges] == list(range(20))
    assert g.get_vertex(0).num_edges_out() == 20
    assert g.get_vertex(1).num_edges_in == 20


def test_vertex_edge_out_of_range(cities):
    vertex = cities.get_vertex(0)
    assert vertex.edge(vertex.num_edges_out()) is None
    assert vertex.edge(-1) is None


def test_invalid_size_and_lookups():
    with pytest.raises(ValueError):
        Graph(0)
    g = Graph()
    assert g.get_vertex(-1) is None
    assert g.get_vertex(5000) is None
    with pytest.raises(KeyError):
        g.breadth_first_traverse(0)
    with pytest.raises(ValueError):
        g.add_vertex_with_id(-3)