import pytest
from sdwsn.data.addr import Addr
from sdwsn.data.node import Mote, Sink
from sdwsn.main import buildNetwork
from sdwsn.util.constants import Constants as ct

NET = 1


@pytest.fixture
def sink():
    return Sink(NET, Addr(ct.SINK_ADDR))


@pytest.fixture
def mote():
    return Mote(NET, Addr(2))


@pytest.fixture
def line():
    """sink 0.1 <-> 0.2 <-> 0.3 <-> 0.4, nothing started"""
    controller, medium, sink, motes = buildNetwork(3)
    return controller, medium, [sink] + motes


@pytest.fixture
def pump():
    """Move every queued packet one hop at a time until the network is idle.

    Runs the same steps as the node, medium and controller workers without
    starting any thread, so the outcome is deterministic.
    """
    def run(medium, controller, rounds=500):
        for _ in range(rounds):
            moved = False
            for node in list(medium.nodes.values()):
                while not node.txQueue.empty():
                    medium.deliver(node, node.txQueue.get_nowait())
                    moved = True
                while not node.ftQueue.empty():
                    node.rxQueue.put((node.ftQueue.get_nowait(), ct.RSSI_MAX))
                    moved = True
                while not node.rxQueue.empty():
                    node.rxHandler(*node.rxQueue.get_nowait())
                    moved = True
            for sink in medium.sinks:
                while not sink.txControllerQueue.empty():
                    medium.uplink(sink, sink.txControllerQueue.get_nowait())
                    moved = True
            while not controller.rxQueue.empty():
                controller.handlePacket(controller.rxQueue.get_nowait())
                moved = True
            while not controller.txQueue.empty():
                medium.downlink(controller.txQueue.get_nowait())
                moved = True
            if not moved:
                return
        raise AssertionError("network did not settle")
    return run
