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

import time
import logging
from queue import Queue, Full
from threading import RLock
import networkx as nx
from sdwsn.util.constants import Constants as ct
from sdwsn.util.utils import CustomFormatter
from sdwsn.openflow.packet import ReportPacket

#logging----------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
ch.setFormatter(CustomFormatter())
logger.addHandler(ch)
#-----------------------------------

class Graph:
    """Network Graph (Statefull network topology view)"""
    def __init__(self, timeout:int=None, rssiResolution:int=None, lock:RLock=None):
        """Create a new controller's global view of the network
        lastModification: modification epoch, increased every time the topology changes
        lastCheck: last time the graph consistency has been checked
        changes: queue of topology change events consumed by the controller

        Args:
            timeout (int, optional): a node not reporting for this many seconds is removed. Defaults to ct.GRAPH_TIMEOUT.
            rssiResolution (int, optional): minimum variation of a link length to update the edge. Defaults to ct.RSSI_RESOLUTION.
            lock (RLock, optional): lock shared with the controller. Defaults to None.
        """
        self.graph = nx.MultiDiGraph()
        self.timeout = ct.GRAPH_TIMEOUT if timeout is None else timeout
        self.rssiResolution = ct.RSSI_RESOLUTION if rssiResolution is None else rssiResolution
        self.lock = lock if lock else RLock()
        self.lastModification = 0
        self.lastCheck = time.time()
        self.changes = Queue(ct.BUFFER_SIZE)

    def addNode(self, id:str):
        """Add new node to the graph

        Args:
            id (str): node id <net.addr>

        Returns:
            str: node id
        """
        with self.lock:
            self.graph.add_node(id)
            return id

    def setupNode(self, id:str, batt:int, now:float, net:int, addr):
        self.graph.nodes[id]["battery"] = batt
        self.graph.nodes[id]["lastSeen"] = now
        self.graph.nodes[id]["net"] = net
        self.graph.nodes[id]["nodeAddress"] = addr

    def updateNode(self, id:str, batt:int, now:float):
        self.graph.nodes[id]["battery"] = batt
        self.graph.nodes[id]["lastSeen"] = now

    def getNode(self, id:str):
        """Node attributes or None if the node is unknown"""
        with self.lock:
            if id in self.graph:
                return self.graph.nodes[id]
            return None

    def hasNode(self, id:str):
        with self.lock:
            return id in self.graph

    def getGraph(self):
        return self.graph

    def getLastModification(self):
        return self.lastModification

    def removeNode(self, id:str):
        # networkx drops the node edges too
        with self.lock:
            self.graph.remove_node(id)

    def addEdge(self, frm:str, to:str, length:int):
        """Add a directed edge

        Args:
            frm (str): from node id
            to (str): to node id
            length (int): link cost (255 - link quality)

        Returns:
            str: edge key <frm-to>
        """
        key = "{}-{}".format(frm, to)
        with self.lock:
            self.graph.add_edge(frm, to, key=key, length=length)
        return key

    def getEdge(self, frm:str, to:str):
        """Edge attributes or None if the edge is unknown"""
        key = "{}-{}".format(frm, to)
        with self.lock:
            if self.graph.has_edge(frm, to, key):
                return self.graph.edges[frm, to, key]
            return None

    def removeEdge(self, frm:str, to:str):
        with self.lock:
            self.graph.remove_edge(frm, to, key="{}-{}".format(frm, to))

    def updateEdge(self, frm:str, to:str, length:int):
        self.graph.edges[frm, to, "{}-{}".format(frm, to)]["length"] = length

    def updateMap(self, packet:ReportPacket, now:float=None):
        """Update the network global view every time a controller receives a report packet

        Args:
            packet (ReportPacket): report packet contains an information of a node and its neighbors
            now (float, optional): current timestamp (sec). Defaults to None.

        Returns:
            bool: modified? True/False
        """
        now = time.time() if now is None else now
        with self.lock:
            modified = self.checkConsistency(now)

            net = packet.getNet()
            batt = packet.getBattery()
            addr = packet.getSrc()
            nodeId = "{}.{}".format(net, addr)
            neighbors = [(packet.getNeighborAddress(i), packet.getLinkQuality(i)) for i in range(packet.getNeighborsSize())]

            if not self.hasNode(nodeId):
                self.addNode(nodeId)
                self.setupNode(nodeId, batt, now, net, addr)
                for ngAddr, quality in neighbors:
                    ngNodeId = "{}.{}".format(net, ngAddr)
                    if not self.hasNode(ngNodeId):
                        self.addNode(ngNodeId)
                        self.setupNode(ngNodeId, 0, now, net, ngAddr)
                    self.addEdge(ngNodeId, nodeId, ct.RSSI_MAX - quality)
                modified = True
            else:
                self.updateNode(nodeId, batt, now)
                oldEdges = set((frm, to) for frm, to in self.graph.in_edges(nodeId))
                for ngAddr, quality in neighbors:
                    ngNodeId = "{}.{}".format(net, ngAddr)
                    if not self.hasNode(ngNodeId):
                        self.addNode(ngNodeId)
                        self.setupNode(ngNodeId, 0, now, net, ngAddr)
                    newLen = ct.RSSI_MAX - quality
                    edge = self.getEdge(ngNodeId, nodeId)
                    if edge is not None:
                        oldEdges.discard((ngNodeId, nodeId))
                        if abs(edge["length"] - newLen) > self.rssiResolution:
                            self.updateEdge(ngNodeId, nodeId, newLen)
                            modified = True
                    else:
                        self.addEdge(ngNodeId, nodeId, newLen)
                        modified = True
                if oldEdges:
                    for frm, to in oldEdges:
                        self.removeEdge(frm, to)
                    modified = True

            if modified:
                self.lastModification += 1
                logger.debug('Graph modified (epoch %d) by report of %s', self.lastModification, nodeId)
                try:
                    self.changes.put_nowait(self.lastModification)
                except Full:
                    # nobody is consuming, the epoch counter still tracks the change
                    pass
        return modified

    def checkConsistency(self, now:float=None):
        """Check the consistency of the controller's network view with the data plane.
        A structured node is removed if (now - lastSeen > consistency timeout).
        The sweep runs at most once every timeout.

        Args:
            now (float, optional): current timestamp (sec). Defaults to None.

        Returns:
            bool: modified? True/False
        """
        now = time.time() if now is None else now
        modified = False
        with self.lock:
            if now - self.lastCheck > self.timeout:
                self.lastCheck = now
                toRmvList = []
                for id, data in self.graph.nodes(data=True):
                    if data.get("net", ct.THRES) < ct.THRES and data.get("lastSeen") is not None \
                        and not self.isAlive(self.timeout, data["lastSeen"], now):
                        toRmvList.append(id)
                for id in toRmvList:
                    logger.info('Node %s is not reporting, removed from the graph', id)
                    self.removeNode(id)
                    modified = True
        return modified

    def isAlive(self, timeout:int, last:float, now:float):
        return (now - last) < timeout
