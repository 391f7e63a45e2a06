"""
Flow table engine tests (motes and sinks), mostly driven without the node workers
"""

import threading
import time
import pytest
from sdwsn.data.addr import Addr
from sdwsn.data.function import FunctionRegistry
from sdwsn.data.node import Mote
from sdwsn.openflow.entry import Entry
from sdwsn.openflow.packet import (Packet, DataPacket, BeaconPacket, ReportPacket, RequestPacket,
    OpenPathPacket, ConfigPacket, ConfigProperty, ResponsePacket)
from sdwsn.openflow.window import Window
from sdwsn.util.constants import Constants as ct

SINK = Addr(ct.SINK_ADDR)


def attach(mote, via=SINK, distance=0, rssi=200):
    """Make the mote hear a beacon of a node attached to the sink"""
    mote.rxBeacon(BeaconPacket(net=mote.myNet, src=via, sink=SINK, distance=distance), rssi)


def sent(node):
    packets = []
    while not node.txQueue.empty():
        packets.append(node.txQueue.get_nowait())
    return packets


def test_fresh_mote(mote):
    assert not mote.isActive
    assert mote.sinkDistance == ct.TTL_MAX + 1
    assert len(mote.flowTable) == 1
    default = mote.flowTable[0]
    assert default.getStats().isPermanent()
    assert default.getActions()[0].getNextHop() == mote.myAddress
    assert mote.getActualSinkAddress() == mote.myAddress


def test_beacon_attaches_mote(mote):
    attach(mote)
    assert mote.isActive
    assert mote.sinkDistance == 1
    assert mote.sinkRssi == 200
    assert mote.getNextHopVsSink() == SINK
    assert mote.getActualSinkAddress() == SINK
    assert SINK in mote.neighborTable


def test_weak_beacon_ignored(mote):
    mote.rssiMin = 100
    attach(mote, rssi=50)
    assert not mote.isActive
    assert mote.neighborTable == {}


def test_farther_beacon_keeps_route(mote):
    attach(mote)
    attach(mote, via=Addr(5), distance=3, rssi=250)
    assert mote.getNextHopVsSink() == SINK
    assert mote.sinkDistance == 1
    assert Addr(5) in mote.neighborTable


def test_beacon_from_parent_refreshes_route(mote):
    attach(mote)
    mote.flowTable[0].getStats().setTtl(10)
    attach(mote, rssi=150)
    assert mote.flowTable[0].getStats().getTtl() == ct.RL_TTL_MAX


def test_insert_replaces_same_windows(mote):
    mote.insertRule(Entry.fromString("if (P.DST == 9) { FORWARD_U 0.3 }"))
    index = mote.insertRule(Entry.fromString("if (P.DST == 9) { FORWARD_U 0.4 }"))
    assert index == 1
    assert len(mote.flowTable) == 2
    assert mote.flowTable[1].getActions()[0].getNextHop() == Addr("0.4")


def test_rule_zero_is_not_removable(mote):
    mote.insertRule(Entry.fromString("if (P.DST == 9) { DROP }"))
    assert mote.removeRule(0) is None
    assert mote.removeRule(5) is None
    assert mote.removeRule(1) == Entry.fromString("if (P.DST == 9) { DROP }")
    assert len(mote.flowTable) == 1


def test_aging_removes_expired_rules(mote):
    rule = Entry.fromString("if (P.DST == 9) { DROP }")
    mote.insertRule(rule)
    mote.updateTable()
    assert rule.getStats().getTtl() == ct.RL_TTL_MAX - ct.ENTRY_TTL_DECR
    rule.getStats().setTtl(ct.ENTRY_TTL_DECR)
    mote.updateTable()
    assert len(mote.flowTable) == 1
    assert mote.flowTable[0].getStats().isPermanent()


def test_expired_sink_route_resets_mote(mote):
    attach(mote)
    mote.flowTable[0].getStats().setTtl(1)
    mote.updateTable()
    assert not mote.isActive
    assert mote.sinkDistance == mote.packetTtl + 1
    assert mote.flowTable[0] == mote.defaultRule()
    assert mote.getNextHopVsSink() == mote.myAddress


def test_forward_on_match(mote):
    attach(mote)
    mote.insertRule(Entry.fromString("if (P.DST == 9) { FORWARD_U 0.3 }"))
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x'))
    assert mote.runFlowMatch(packet)
    out, = sent(mote)
    assert out.getNxh() == Addr(3)
    assert out.getTtl() == ct.TTL_MAX - 1
    assert mote.flowTable[1].getStats().getCounter() == 1


def test_miss_asks_the_controller(mote):
    attach(mote)
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(7), payload=bytearray(b'hello'))
    assert not mote.runFlowMatch(packet)
    req, = sent(mote)
    assert isinstance(req, RequestPacket)
    assert req.getSrc() == mote.myAddress
    assert req.getDst() == SINK
    assert req.getNxh() == SINK
    assert req.getTotal() == 1
    assert req.getReqPayload() == packet.toByteArray()
    assert mote.requestId == 1


def test_broken_table_recovers(mote):
    attach(mote)
    mote.flowTable.entries.clear()
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(7), payload=bytearray(b'x'))
    packet.setNxh(mote.myAddress)
    mote.rxHandler(packet, 200)
    assert len(mote.flowTable) == 1
    assert mote.flowTable[0] == mote.defaultRule()
    assert not mote.isActive


def test_failed_set_stops_the_actions(mote):
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { SET P.200 = 1 + 1; FORWARD_U 0.3 }"))
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x'))
    assert mote.runFlowMatch(packet)
    assert sent(mote) == []


def test_division_by_zero_aborts(mote):
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { SET R.1 = 4 / 0; FORWARD_U 0.3 }"))
    assert mote.runFlowMatch(DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x')))
    assert sent(mote) == []


def test_set_and_match_on_status(mote):
    mote.insertRule(Entry.fromString("if (R.3 == 5) { FORWARD_U 0.4 }"))
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { SET R.3 = R.3 + 5; MATCH }"))
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x'))
    assert mote.runFlowMatch(packet)
    assert mote.statusRegister[3] == 5
    again = mote.ftQueue.get_nowait()
    assert mote.runFlowMatch(again)
    out, = sent(mote)
    assert out.getNxh() == Addr(4)


def test_set_rewrites_packet(mote):
    mote.insertRule(Entry.fromString("if (P.TTL == 100) { SET P.TTL = P.TTL - 10; FORWARD_U 0.3 }"))
    assert mote.runFlowMatch(DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x')))
    out, = sent(mote)
    assert out.getTtl() == 89


def test_function_action_runs_bound_callable(mote):
    calls = []
    mote.functions.bind(2, lambda context, args, packet: calls.append((context.getAddress(), bytes(args))))
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { FUNCTION 2 7 8 }"))
    mote.runFlowMatch(DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x')))
    assert calls == [(mote.myAddress, bytes([7, 8]))]


def test_function_context_exposes_node_tables(mote):
    attach(mote)
    seen = {}

    def callback(context, args, packet):
        seen['neighbors'] = set(context.getNeighborTable())
        seen['table'] = context.getFlowTable()
        seen['rx'] = context.getRxQueue()
        context.getAcceptedIds().append(Addr(40))
        context.insertRule(Entry.fromString("if (P.DST == 9) { DROP }"))
        context.getTxQueue().put(packet)

    mote.functions.bind(3, callback)
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { FUNCTION 3 }"))
    mote.runFlowMatch(DataPacket(net=1, src=Addr(5), dst=Addr(7), payload=bytearray(b'x')))
    assert seen['neighbors'] == {SINK}
    assert seen['table'] is mote.flowTable
    assert seen['rx'] is mote.rxQueue
    assert mote.isAcceptedIdAddress(Addr(40))
    assert mote.flowTable[-1] == Entry.fromString("if (P.DST == 9) { DROP }")
    assert len(sent(mote)) == 1


def test_match_on_a_full_queue_drops_the_packet(mote):
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { MATCH }"))
    while not mote.ftQueue.full():
        mote.ftQueue.put_nowait(None)
    mote.runFlowMatch(DataPacket(net=1, src=Addr(5), dst=Addr(7), payload=bytearray(b'x')))
    assert mote.ftQueue.qsize() == ct.BUFFER_SIZE


def until(condition, timeout=2):
    deadline = time.time() + timeout
    while not condition():
        if time.time() > deadline:
            return False
        time.sleep(0.01)
    return True


def test_stop_with_a_full_rx_queue(mote):
    foreign = DataPacket(net=2, src=Addr(5), dst=Addr(2), payload=bytearray(b'x'))
    mote.start()
    stopper = threading.Thread(target=mote.stop, daemon=True)
    with mote.lock:
        # the rx worker takes this one and waits for the lock
        mote.rxQueue.put((foreign, 200))
        assert until(mote.rxQueue.empty)
        while not mote.rxQueue.full():
            mote.rxQueue.put_nowait((foreign, 200))
        # the match worker takes this one and waits for room in the rx queue
        mote.ftQueue.put(foreign)
        assert until(mote.ftQueue.empty)
        stopper.start()
        assert mote.isStopped.wait(2)
    stopper.join(3)
    assert not stopper.is_alive()
    assert mote.pool is None


def test_radio_filter(mote):
    other = DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x'))
    assert not mote.rxRadioPacket(other, 200)
    other.setNxh(mote.myAddress)
    assert mote.rxRadioPacket(other, 200)
    assert mote.rxRadioPacket(BeaconPacket(net=1, src=Addr(5), sink=SINK), 200)
    assert mote.rxRadioPacket(Packet(bytearray([ct.THRES + 1, 0, 0])), 200)
    assert mote.rxQueue.qsize() == 3


def test_rx_drops_foreign_net_and_dead_packets(mote):
    attach(mote)
    foreign = DataPacket(net=2, src=Addr(5), dst=Addr(7), payload=bytearray(b'x'))
    dead = DataPacket(net=1, src=Addr(5), dst=Addr(7), payload=bytearray(b'x')).setTtl(0)
    for p in (foreign, dead):
        p.setNxh(mote.myAddress)
        mote.rxHandler(p, 200)
    assert sent(mote) == []


def test_relay_forwards_reports_to_parent(mote):
    attach(mote)
    report = ReportPacket(net=1, src=Addr(3), dst=SINK, neighbors={mote.myAddress: 180})
    report.setNxh(mote.myAddress)
    mote.rxHandler(report, 200)
    out, = sent(mote)
    assert out.getType() == ct.REPORT
    assert out.getSrc() == Addr(3)
    assert out.getNxh() == SINK


def test_open_path_on_intermediate_node(mote):
    path = [SINK, mote.myAddress, Addr(3)]
    op = OpenPathPacket(net=1, src=SINK, dst=mote.myAddress, path=path, windows=[Window.fromString("P.TYP == 0")])
    mote.rxHandler(op, 200)
    back = mote.flowTable[1]
    ahead = mote.flowTable[2]
    assert back.getWindows()[0].getRhs() == SINK.intValue()
    assert back.getActions()[0].getNextHop() == SINK
    assert ahead.getWindows()[0].getRhs() == 3
    assert ahead.getWindows()[1] == Window.fromString("P.TYP == 0")
    assert ahead.getActions()[0].getNextHop() == Addr(3)
    out, = sent(mote)
    assert out.getType() == ct.OPEN_PATH
    assert out.getDst() == Addr(3)
    assert out.getNxh() == Addr(3)


def test_open_path_at_the_end(mote):
    op = OpenPathPacket(net=1, src=SINK, dst=mote.myAddress, path=[SINK, Addr(3), mote.myAddress])
    mote.rxHandler(op, 200)
    assert len(mote.flowTable) == 2
    assert mote.flowTable[1].getActions()[0].getNextHop() == Addr(3)
    assert sent(mote) == []


def test_response_installs_rule(mote):
    rule = Entry.fromString("if (P.DST == 9) { FORWARD_U 0.3 } [TTL: 3, COUNT: 9]")
    rp = ResponsePacket(net=1, src=SINK, dst=mote.myAddress, entry=rule)
    mote.rxHandler(rp, 200)
    installed = mote.flowTable[1]
    assert installed == rule
    assert installed.getStats().getTtl() == ct.RL_TTL_MAX
    assert installed.getStats().getCounter() == 0


def test_write_config(mote):
    def write(prop, val=None):
        cp = ConfigPacket(net=1, src=SINK, dst=mote.myAddress, write=prop, val=val)
        assert mote.marshalPacket(cp) is False

    write(ConfigProperty.BEACON_PERIOD, bytearray([0, 20]))
    write(ConfigProperty.REPORT_PERIOD, bytearray([1, 0]))
    write(ConfigProperty.PACKET_TTL, bytearray([50]))
    write(ConfigProperty.RSSI_MIN, bytearray([30]))
    write(ConfigProperty.ADD_ALIAS, Addr(40).getArray())
    write(ConfigProperty.ADD_RULE, Entry.fromString("if (P.DST == 9) { DROP }").toByteArray())
    assert mote.beaconMax == 20
    assert mote.reportMax == 256
    assert mote.packetTtl == 50
    assert mote.rssiMin == 30
    assert mote.acceptedId == [Addr(40)]
    assert mote.flowTable[1] == Entry.fromString("if (P.DST == 9) { DROP }")

    write(ConfigProperty.REM_ALIAS, bytearray([0]))
    write(ConfigProperty.REM_RULE, bytearray([1]))
    assert mote.acceptedId == []
    assert len(mote.flowTable) == 1


def test_alias_is_accepted(mote):
    mote.marshalPacket(ConfigPacket(net=1, src=SINK, dst=mote.myAddress, write=ConfigProperty.ADD_ALIAS, val=Addr(40).getArray()))
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(40), payload=bytearray(b'x'))
    packet.setNxh(Addr(40))
    assert mote.rxRadioPacket(packet, 200)


def test_read_config(mote):
    cp = ConfigPacket(net=1, src=SINK, dst=mote.myAddress, read=ConfigProperty.BEACON_PERIOD)
    assert mote.marshalPacket(cp)
    assert cp.getParams() == bytearray([0, ct.CNT_BEACON_MAX])

    rule = ConfigPacket(net=1, src=SINK, dst=mote.myAddress, read=ConfigProperty.GET_RULE, val=bytearray([0]))
    assert mote.marshalPacket(rule)
    assert rule.getParams() == bytearray([0]) + mote.defaultRule().toByteArray()

    missing = ConfigPacket(net=1, src=SINK, dst=mote.myAddress, read=ConfigProperty.GET_RULE, val=bytearray([4]))
    assert not mote.marshalPacket(missing)


def test_config_reply_goes_to_the_sink(mote):
    attach(mote)
    mote.insertRule(Entry.fromString("if (P.DST == 1) { FORWARD_U 0.1 }"))
    cp = ConfigPacket(net=1, src=SINK, dst=mote.myAddress, read=ConfigProperty.MY_NET)
    cp.setNxh(mote.myAddress)
    mote.rxHandler(cp, 200)
    out, = sent(mote)
    assert out.getType() == ct.CONFIG
    assert out.getSrc() == mote.myAddress
    assert out.getDst() == SINK
    assert ConfigPacket(out.toByteArray()).getParams() == bytearray([1])


def test_add_function_by_name(mote):
    for cp in ConfigPacket.createFunctionPackets(1, SINK, mote.myAddress, 4, bytearray(b'count')):
        mote.marshalPacket(cp)
    assert mote.functions.get(4) is FunctionRegistry.catalog['count']
    mote.insertRule(Entry.fromString("if (P.TYP == 0) { FUNCTION 4 9 }"))
    mote.runFlowMatch(DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x')))
    assert mote.statusRegister[9] == 1

    mote.marshalPacket(ConfigPacket(net=1, src=SINK, dst=mote.myAddress, write=ConfigProperty.REM_FUNCTION, val=bytearray([4])))
    assert 4 not in mote.functions


def test_unknown_function_name_is_not_bound(mote):
    for cp in ConfigPacket.createFunctionPackets(1, SINK, mote.myAddress, 4, bytearray(b'no_such_function')):
        mote.marshalPacket(cp)
    assert 4 not in mote.functions


def test_timer_sends_beacons_and_reports(mote):
    attach(mote)
    mote.beaconMax = 1
    mote.reportMax = 2
    mote.timer()
    beacon, = sent(mote)
    assert beacon.getType() == ct.BEACON
    assert BeaconPacket(beacon.toByteArray()).getDistance() == 1
    mote.timer()
    packets = sent(mote)
    assert [p.getType() for p in packets] == [ct.BEACON, ct.REPORT]
    report = ReportPacket(packets[1].toByteArray())
    assert report.getNeighbors() == {SINK: 200}
    assert mote.neighborTable == {}


def test_inactive_mote_is_silent(mote):
    mote.beaconMax = 1
    mote.timer()
    assert sent(mote) == []


def test_sink_is_attached(sink):
    assert sink.isActive
    assert sink.sinkDistance == 0
    assert sink.getActualSinkAddress() == sink.myAddress
    beacon = sink.prepareBeacon()
    assert beacon.getSinkAddress() == sink.myAddress
    assert beacon.getDistance() == 0


def test_sink_sends_requests_to_the_controller(sink):
    packet = DataPacket(net=1, src=Addr(5), dst=Addr(9), payload=bytearray(b'x'))
    packet.setNxh(sink.myAddress)
    sink.rxHandler(packet, ct.RSSI_MAX)
    req = sink.txControllerQueue.get_nowait()
    assert isinstance(req, RequestPacket)
    assert req.getDst() == sink.myAddress
    assert sink.txQueue.empty()


@pytest.mark.parametrize("typ", [ct.REPORT, ct.REQUEST])
def test_sink_relays_control_traffic(sink, typ):
    packet = Packet(net=1, src=Addr(5), dst=sink.myAddress).setType(typ)
    packet.setPayloadValue(2, 0)
    sink.rxHandler(packet, 200)
    assert sink.txControllerQueue.get_nowait().getType() == typ
