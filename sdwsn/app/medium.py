#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
 * Copyright (C) 2022 ssdwsn
 *
 * This program is free software: you can redistribute it and/or modify
 * it under the terms of the GNU General Public License as published by
 * the Free Software Foundation, either version 3 of the License, or
 * (at your option) any later version.
 *
 * This program is distributed in the hope that it will be useful,
 * but WITHOUT ANY WARRANTY; without even the implied warranty of
 * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
 * GNU General Public License for more details.
 *
 * You should have received a copy of the GNU General Public License
 * along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""

from concurrent.futures import ThreadPoolExecutor
import threading
import queue
import logging
from sdwsn.openflow.packet import Packet
from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import SdwsnError
from sdwsn.util.utils import CustomFormatter

#logging----------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
ch.setFormatter(CustomFormatter())
logger.addHandler(ch)
#-----------------------------------

class Medium:
    """Wireless access medium
    A node transmission reaches every node in its range with the rssi of the link.
    Sinks are also bridged to the controller (packet-in/packet-out channel).
    """
    def __init__(self, controller=None):
        self.controller = controller
        # {node id: Node}
        self.nodes = {}
        # {from node id: {to node id: rssi}}
        self.links = {}
        self.sinks = []
        self.isStopped = threading.Event()
        self.pool = None

    def addNode(self, node):
        self.nodes[node.id] = node
        self.links.setdefault(node.id, {})
        if hasattr(node, 'txControllerQueue'):
            self.sinks.append(node)
        return node

    def addLink(self, frm, to, rssi:int, bidirectional:bool=True):
        """Put two nodes in range

        Args:
            frm (Node): transmitting node
            to (Node): receiving node
            rssi (int): signal strength at the receiver (0-255)
            bidirectional (bool, optional): add the reverse link too. Defaults to True.
        """
        self.links.setdefault(frm.id, {})[to.id] = rssi
        if bidirectional:
            self.links.setdefault(to.id, {})[frm.id] = rssi

    def removeLink(self, frm, to, bidirectional:bool=True):
        self.links.get(frm.id, {}).pop(to.id, None)
        if bidirectional:
            self.links.get(to.id, {}).pop(frm.id, None)

    def getNeighbors(self, node):
        """{Node: rssi} of the nodes in the range of node"""
        return {self.nodes[id]: rssi for id, rssi in self.links.get(node.id, {}).items() if id in self.nodes}

    def deliver(self, node, packet:Packet):
        """Radio transmission of a node

        Returns:
            int: number of nodes that accepted the packet
        """
        accepted = 0
        for neighbor, rssi in self.getNeighbors(node).items():
            if neighbor.rxRadioPacket(packet.clone(), rssi):
                accepted += 1
        return accepted

    def uplink(self, sink, packet:Packet):
        if self.controller:
            self.controller.receive(packet.toByteArray())

    def downlink(self, data):
        """Packet-out from the controller, handed to the sink it is addressed to"""
        try:
            packet = Packet(data)
        except SdwsnError as ex:
            logger.warning(f'Medium drops malformed packet-out: {ex}')
            return False
        for sink in self.sinks:
            if not packet.isSdnWisePacket() or packet.getNxh() == sink.myAddress:
                return sink.rxRadioPacket(packet, ct.RSSI_MAX)
        if self.sinks:
            return self.sinks[0].rxRadioPacket(packet, ct.RSSI_MAX)
        logger.warning('Medium has no sink for the controller packets')
        return False

    def start(self):
        self.isStopped.clear()
        workers = len(self.nodes) + len(self.sinks) + 1
        self.pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix='medium')
        for node in self.nodes.values():
            self.pool.submit(self.radioWorker, node)
        for sink in self.sinks:
            self.pool.submit(self.uplinkWorker, sink)
        if self.controller:
            self.pool.submit(self.downlinkWorker)

    def stop(self):
        self.isStopped.set()
        queues = [node.txQueue for node in self.nodes.values()] + [sink.txControllerQueue for sink in self.sinks]
        for q in queues:
            try:
                q.put_nowait(None)
            except queue.Full:
                # busy worker, it sees isStopped after the current packet
                pass
        if self.pool:
            # the downlink worker is released by the controller stop
            self.pool.shutdown(wait=False)
            self.pool = None

    def radioWorker(self, node):
        while not self.isStopped.is_set():
            packet = node.txQueue.get()
            if packet is None:
                break
            self.deliver(node, packet)

    def uplinkWorker(self, sink):
        while not self.isStopped.is_set():
            packet = sink.txControllerQueue.get()
            if packet is None:
                break
            self.uplink(sink, packet)

    def downlinkWorker(self):
        while not self.isStopped.is_set():
            data = self.controller.toSend()
            if data is None:
                break
            self.downlink(data)
