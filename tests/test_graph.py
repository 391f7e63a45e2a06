"""
Network view tests: report handling, link updates and stale node removal
"""

from queue import Queue
import pytest
from sdwsn.ctrl.graph import Graph
from sdwsn.data.addr import Addr
from sdwsn.openflow.packet import ReportPacket
from sdwsn.util.constants import Constants as ct


def report(src, neighbors, battery=200, net=1):
    return ReportPacket(net=net, src=Addr(src), dst=Addr(1), distance=1, battery=battery,
                neighbors={Addr(a): q for a, q in neighbors.items()})


@pytest.fixture
def graph():
    g = Graph(timeout=10, rssiResolution=30)
    g.lastCheck = 0
    return g


def test_first_report_adds_node_and_links(graph):
    assert graph.updateMap(report(2, {1: 200, 3: 150}), now=1)
    node = graph.getNode("1.0.2")
    assert node["battery"] == 200
    assert node["net"] == 1
    assert node["nodeAddress"] == Addr(2)
    assert graph.getNode("1.0.3")["battery"] == 0
    assert graph.getEdge("1.0.1", "1.0.2")["length"] == ct.RSSI_MAX - 200
    assert graph.getEdge("1.0.3", "1.0.2")["length"] == ct.RSSI_MAX - 150
    assert graph.getEdge("1.0.2", "1.0.1") is None
    assert graph.getLastModification() == 1
    assert graph.changes.get_nowait() == 1


def test_same_report_is_not_a_change(graph):
    graph.updateMap(report(2, {1: 200}), now=1)
    assert not graph.updateMap(report(2, {1: 200}, battery=100), now=2)
    assert graph.getLastModification() == 1
    assert graph.getNode("1.0.2")["battery"] == 100
    assert graph.getNode("1.0.2")["lastSeen"] == 2


def test_small_quality_drift_is_ignored(graph):
    graph.updateMap(report(2, {1: 200}), now=1)
    assert not graph.updateMap(report(2, {1: 180}), now=2)
    assert graph.getEdge("1.0.1", "1.0.2")["length"] == ct.RSSI_MAX - 200
    assert graph.updateMap(report(2, {1: 100}), now=3)
    assert graph.getEdge("1.0.1", "1.0.2")["length"] == ct.RSSI_MAX - 100
    assert graph.getLastModification() == 2


def test_new_and_lost_neighbors(graph):
    graph.updateMap(report(2, {1: 200, 3: 200}), now=1)
    assert graph.updateMap(report(2, {1: 200, 4: 90}), now=2)
    assert graph.getEdge("1.0.3", "1.0.2") is None
    assert graph.getEdge("1.0.4", "1.0.2")["length"] == ct.RSSI_MAX - 90
    assert graph.hasNode("1.0.3")


def test_edge_keys(graph):
    assert graph.addEdge("1.0.1", "1.0.2", 5) == "1.0.1-1.0.2"
    graph.removeEdge("1.0.1", "1.0.2")
    assert graph.getEdge("1.0.1", "1.0.2") is None


def test_consistency_check_waits_for_timeout(graph):
    graph.updateMap(report(2, {3: 200}), now=1)
    assert not graph.checkConsistency(now=5)
    assert graph.hasNode("1.0.2")


def test_silent_nodes_are_removed(graph):
    graph.updateMap(report(2, {3: 200}), now=1)
    assert graph.updateMap(report(4, {5: 200}), now=20)
    assert not graph.hasNode("1.0.2")
    assert not graph.hasNode("1.0.3")
    assert graph.hasNode("1.0.4")
    assert graph.getNode("1.0.4")["lastSeen"] == 20


def test_pass_through_nodes_are_kept(graph):
    graph.addNode("70.0.9")
    graph.setupNode("70.0.9", 0, 1, 70, Addr(9))
    graph.updateMap(report(2, {}), now=1)
    assert graph.checkConsistency(now=30)
    assert graph.hasNode("70.0.9")
    assert not graph.hasNode("1.0.2")


def test_full_change_queue_does_not_block(graph):
    graph.changes = Queue(1)
    graph.updateMap(report(2, {1: 200}), now=1)
    assert graph.updateMap(report(3, {1: 200}), now=2)
    assert graph.getLastModification() == 2
    assert graph.changes.qsize() == 1


def test_defaults_follow_constants(monkeypatch):
    monkeypatch.setattr(ct, "GRAPH_TIMEOUT", 99)
    monkeypatch.setattr(ct, "RSSI_RESOLUTION", 7)
    g = Graph()
    assert g.timeout == 99
    assert g.rssiResolution == 7
