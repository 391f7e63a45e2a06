"""
Controller tests: packet-in handling, node queries and routing requests
"""

import threading
import pytest
from sdwsn.ctrl.controller import Controller, DijkstraController
from sdwsn.ctrl.graph import Graph
from sdwsn.data.addr import Addr
from sdwsn.data.node import Mote
from sdwsn.openflow.entry import Entry
from sdwsn.openflow.packet import (Packet, DataPacket, ReportPacket, RequestPacket, ResponsePacket,
    OpenPathPacket, ConfigPacket, ConfigProperty, RegProxyPacket)
from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import NoRouteError, QueryTimeoutError

SINK = Addr(ct.SINK_ADDR)


def report(src, neighbors):
    return ReportPacket(net=1, src=Addr(src), dst=SINK, neighbors={Addr(a): q for a, q in neighbors.items()})


def sent(controller):
    packets = []
    while not controller.txQueue.empty():
        packets.append(Packet.build(bytearray(controller.txQueue.get_nowait())))
    return packets


def answer(controller, mote, count=1):
    """Let a mote answer the next count queries of the controller"""
    def run():
        for _ in range(count):
            query = ConfigPacket(bytearray(controller.txQueue.get(timeout=2)))
            if mote.marshalPacket(query):
                query.setSrc(mote.myAddress)
                query.setDst(controller.sinkAddress)
                controller.managePacket(query)
    t = threading.Thread(target=run, daemon=True)
    t.start()
    return t


@pytest.fixture
def controller():
    return DijkstraController()


@pytest.fixture
def fast_timeout(monkeypatch):
    monkeypatch.setattr(ct, "RESPONSE_TIMEOUT", 100)


@pytest.fixture
def routed(controller):
    """0.1 (sink) - 0.2 - 0.3 line"""
    controller.managePacket(report(1, {2: 250}))
    controller.managePacket(report(2, {1: 250, 3: 250}))
    controller.managePacket(report(3, {2: 250}))
    return controller


def test_config_key():
    assert Controller.configKey(1, Addr(2), ConfigProperty.MY_NET) == "1 0.2 1"
    assert Controller.configKey(1, Addr(2), ConfigProperty.GET_RULE, 3) == "1 0.2 13 3"


def test_receive(controller):
    assert controller.receive(DataPacket(net=1, src=Addr(2), dst=SINK, payload=bytearray(b'x')).toByteArray())
    assert not controller.receive(b'\x01\x02')
    assert controller.rxQueue.qsize() == 1


def test_reports_update_the_view(controller):
    controller.managePacket(report(2, {1: 200}))
    assert controller.networkGraph.hasNode("1.0.2")
    assert controller.networkGraph.getEdge("1.0.1", "1.0.2")["length"] == ct.RSSI_MAX - 200


def test_sink_registration(controller):
    controller.managePacket(RegProxyPacket(net=1, src=Addr(7), dPid="s7"))
    assert controller.sinkAddress == Addr(7)
    controller.setNodeNet(1, Addr(2), 3)
    assert sent(controller)[0].getNxh() == Addr(7)


def test_config_reply_is_cached(controller):
    reply = ConfigPacket(net=1, src=Addr(2), dst=SINK, read=ConfigProperty.GET_RULE, val=bytearray([4, 9]))
    controller.managePacket(reply)
    assert "1 0.2 13 4" in controller.configCache


def test_query_timeout(controller, fast_timeout):
    with pytest.raises(QueryTimeoutError):
        controller.getNodeNet(1, Addr(2))
    query, = sent(controller)
    assert isinstance(query, ConfigPacket)
    assert not query.isWrite()
    assert query.getConfigId() == ConfigProperty.MY_NET
    assert query.getDst() == Addr(2)
    assert query.getNxh() == SINK


def test_stale_reply_is_discarded(controller, fast_timeout):
    controller.configCache[Controller.configKey(1, Addr(2), ConfigProperty.MY_NET)] = \
        ConfigPacket(net=1, src=Addr(2), dst=SINK, read=ConfigProperty.MY_NET, val=bytearray([9]))
    with pytest.raises(QueryTimeoutError):
        controller.getNodeNet(1, Addr(2))


def test_node_values(controller):
    mote = Mote(1, Addr(2))
    answer(controller, mote, count=3)
    assert controller.getNodeNet(1, Addr(2)) == 1
    assert controller.getNodeBeaconPeriod(1, Addr(2)) == ct.CNT_BEACON_MAX
    assert controller.getNodeAddress(1, Addr(2)) == Addr(2)
    assert controller.configCache.get("1 0.2 1") is None


def test_node_rules(controller, fast_timeout):
    mote = Mote(1, Addr(2))
    mote.insertRule(Entry.fromString("if (P.DST == 9) { FORWARD_U 0.3 }"))
    answer(controller, mote, count=3)
    rules = controller.getNodeRules(1, Addr(2))
    assert rules == [mote.defaultRule(), Entry.fromString("if (P.DST == 9) { FORWARD_U 0.3 }")]
    assert str(rules[1].getActions()[0]) == "FORWARD_U 0.3"


def test_node_aliases(controller, fast_timeout):
    mote = Mote(1, Addr(2))
    mote.acceptedId.append(Addr(40))
    answer(controller, mote, count=2)
    assert controller.getNodeAliases(1, Addr(2)) == [Addr(40)]


def test_setters_send_write_packets(controller):
    controller.setNodeBeaconPeriod(1, Addr(2), 300)
    controller.setNodePacketTtl(1, Addr(2), 40)
    controller.addNodeAlias(1, Addr(2), Addr(40))
    controller.removeNodeRule(1, Addr(2), 2)
    controller.resetNode(1, Addr(2))
    packets = sent(controller)
    assert all(p.isWrite() and p.getDst() == Addr(2) for p in packets)
    assert [p.getConfigId() for p in packets] == [ConfigProperty.BEACON_PERIOD, ConfigProperty.PACKET_TTL,
        ConfigProperty.ADD_ALIAS, ConfigProperty.REM_RULE, ConfigProperty.RESET]
    assert packets[0].getParams() == bytearray([1, 44])
    assert packets[2].getParams() == Addr(40).getArray()


def test_add_rule_and_function(controller):
    rule = Entry.fromString("if (P.DST == 9) { DROP }")
    controller.addNodeRule(1, Addr(2), rule)
    controller.addNodeFunction(1, Addr(2), 3, "count")
    response, function = sent(controller)
    assert isinstance(response, ResponsePacket)
    assert response.getRule() == rule
    assert function.getConfigId() == ConfigProperty.ADD_FUNCTION
    assert function.getParams() == bytearray([3, 0, 1]) + bytearray(b'count')


def test_routing_request_installs_path(routed):
    data = DataPacket(net=1, src=Addr(2), dst=Addr(3), payload=bytearray(b'x'))
    rp, = RequestPacket.createPackets(1, Addr(2), SINK, 0, data.toByteArray())
    routed.managePacket(rp)
    op, back, out = sent(routed)
    assert isinstance(op, OpenPathPacket)
    assert op.getPath() == [Addr(2), Addr(3)]
    assert op.getDst() == Addr(2)
    assert op.getNxh() == SINK
    assert back.getPath() == [Addr(3), Addr(2)]
    assert back.getDst() == Addr(3)
    assert isinstance(out, DataPacket)
    assert out.getSrc() == Addr(2)
    assert out.getDst() == Addr(3)
    assert out.getNxh() == SINK
    assert routed.flowPaths == {("1.0.2", "1.0.3"): [Addr(2), Addr(3)]}


@pytest.fixture
def meshed(controller):
    """0.2 - 0.3 - 0.5 with a weaker 0.2 - 0.4 - 0.5 alternative"""
    controller.managePacket(report(1, {2: 250}))
    controller.managePacket(report(2, {1: 250, 3: 250, 4: 200}))
    controller.managePacket(report(3, {2: 250, 5: 250}))
    controller.managePacket(report(4, {2: 200, 5: 200}))
    controller.managePacket(report(5, {3: 250, 4: 200}))
    req = RequestPacket(net=1, src=Addr(2), dst=SINK)
    data = DataPacket(net=1, src=Addr(2), dst=Addr(5), payload=bytearray(b'x'))
    assert controller.manageRoutingRequest(req, data) == [Addr(2), Addr(3), Addr(5)]
    sent(controller)
    return controller


def test_topology_change_reopens_installed_paths(meshed):
    # 0.5 does not hear 0.3 anymore
    meshed.managePacket(report(5, {4: 200}))
    assert meshed.graphUpdate(meshed.networkGraph.getLastModification()) == 1
    op, back = sent(meshed)
    assert op.getPath() == [Addr(2), Addr(4), Addr(5)]
    assert op.getDst() == Addr(2)
    assert back.getPath() == [Addr(5), Addr(4), Addr(2)]
    assert back.getDst() == Addr(5)
    assert meshed.flowPaths[("1.0.2", "1.0.5")] == [Addr(2), Addr(4), Addr(5)]


def test_unchanged_paths_are_left_alone(meshed):
    meshed.managePacket(report(4, {2: 100, 5: 200}))
    assert meshed.graphUpdate(meshed.networkGraph.getLastModification()) == 0
    assert sent(meshed) == []


def test_controller_shares_the_graph_lock():
    graph = Graph()
    controller = DijkstraController(networkGraph=graph)
    assert controller.lock is graph.lock
    default = DijkstraController()
    assert default.lock is default.networkGraph.lock


def test_unreachable_destination(routed):
    routed.managePacket(report(4, {}))
    req = RequestPacket(net=1, src=Addr(2), dst=SINK)
    data = DataPacket(net=1, src=Addr(2), dst=Addr(4), payload=bytearray(b'x'))
    with pytest.raises(NoRouteError):
        routed.manageRoutingRequest(req, data)
    rp, = RequestPacket.createPackets(1, Addr(2), SINK, 0, data.toByteArray())
    routed.handlePacket(rp)
    assert sent(routed) == []


def test_nothing_to_route(routed):
    req = RequestPacket(net=1, src=Addr(2), dst=SINK)
    unknown = DataPacket(net=1, src=Addr(2), dst=Addr(9), payload=bytearray(b'x'))
    itself = DataPacket(net=1, src=Addr(2), dst=Addr(2), payload=bytearray(b'x'))
    raw = Packet(bytearray([ct.THRES, 1, 2, 3]))
    assert routed.manageRoutingRequest(req, unknown) is None
    assert routed.manageRoutingRequest(req, itself) is None
    assert routed.manageRoutingRequest(req, raw) is None
    assert sent(routed) == []


def test_workers_start_and_stop(controller):
    updates = []
    done = threading.Event()

    def graphUpdate(modification):
        updates.append(modification)
        done.set()

    controller.graphUpdate = graphUpdate
    controller.start()
    try:
        assert controller.receive(report(2, {1: 200}).toByteArray())
        assert done.wait(2)
    finally:
        controller.stop()
    assert updates == [1]
    assert controller.networkGraph.hasNode("1.0.2")
    assert controller.toSend(timeout=0.1) is None


def test_sweep_drops_expired_entries(controller, monkeypatch):
    controller.requestCache["1.0.2.1"] = (2, {})
    controller.configCache["1 0.2 1"] = None
    assert controller.sweepCaches() == 0
    monkeypatch.setattr(controller.requestCache, "max_age", -1)
    monkeypatch.setattr(controller.configCache, "max_age", -1)
    assert controller.sweepCaches() == 2
    assert len(controller.requestCache) == 0
