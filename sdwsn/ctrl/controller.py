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
from expiringdict import ExpiringDict
from sdwsn.app.routing import Dijkstra
from sdwsn.ctrl.graph import Graph
from sdwsn.data.addr import Addr
from sdwsn.openflow.entry import Entry
from sdwsn.openflow.packet import Packet, ConfigPacket, ConfigProperty, OpenPathPacket, ReportPacket, RequestPacket, ResponsePacket
from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import SdwsnError, NoRouteError, QueryTimeoutError
from sdwsn.util.utils import mergeBytes, CustomFormatter

#logging----------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
ch.setFormatter(CustomFormatter())
logger.addHandler(ch)
#-----------------------------------

# properties whose replies are told apart by the requested index
INDEXED_PROPERTIES = (ConfigProperty.GET_RULE, ConfigProperty.GET_ALIAS, ConfigProperty.GET_FUNCTION)

class Controller:
    """Controller (network view, routing requests and node configuration)"""
    def __init__(self, inetAddress:tuple=None, networkGraph:Graph=None, sinkAddress:Addr=None):
        """Create a controller
        Args:
            inetAddress (tuple, optional): controller address (IP:Port). Defaults to None.
            networkGraph (Graph, optional): network view. Defaults to None.
            sinkAddress (Addr, optional): sink used until a sink registers. Defaults to None.
        """
        inetAddress = inetAddress or ('127.0.0.1', 9990)
        self.id = 'Controller-%s:%s'% (inetAddress[0], inetAddress[1])
        self.inetAddress = inetAddress
        self.isStopped = threading.Event()
        # guards the correlation caches
        self.cacheLock = threading.RLock()
        self.cacheCond = threading.Condition(self.cacheLock)
        self.requestCache = ExpiringDict(max_len=ct.CACHE_MAX_SIZE, max_age_seconds=ct.CACHE_EXP_TIME)
        self.configCache = ExpiringDict(max_len=ct.CACHE_MAX_SIZE, max_age_seconds=ct.CACHE_EXP_TIME)
        # Network View
        self.networkGraph = networkGraph if networkGraph else Graph()
        # guards the network view and the routing results, shared with the graph
        self.lock = self.networkGraph.lock
        # installed paths {(src id, dst id): list(Addr)}, repaired on topology changes
        self.flowPaths = {}
        self.sinkAddress = sinkAddress if sinkAddress else Addr(ct.SINK_ADDR)
        # packets from the sink (packet-in) and toward the sink (packet-out)
        self.rxQueue = queue.Queue(ct.BUFFER_SIZE)
        self.txQueue = queue.Queue(ct.BUFFER_SIZE)
        self.pool = None

    def start(self):
        """Run the controller workers"""
        self.isStopped.clear()
        self.pool = ThreadPoolExecutor(max_workers=3, thread_name_prefix='ctrl')
        self.pool.submit(self.packetInWorker)
        self.pool.submit(self.cacheSweepWorker)
        self.pool.submit(self.graphUpdateWorker)
        self.setupNetwork()
        logger.info(f'[{self.id}] is running ...')

    def stop(self):
        self.isStopped.set()
        if self.pool:
            for q in (self.rxQueue, self.networkGraph.changes, self.txQueue):
                try:
                    q.put_nowait(None)
                except queue.Full:
                    # the consumer is not blocked and polls isStopped
                    pass
            self.pool.shutdown(wait=True)
            self.pool = None
        logger.warning(f'CONTROLLER {self.id} has been terminated ...')

    def setupNetwork(self):
        pass

    def manageRoutingRequest(self, req:RequestPacket, data:Packet):
        raise NotImplementedError

    def graphUpdate(self, modification:int):
        logger.info(f'Graph update is received (modification {modification})')

    def receive(self, data):
        """Packet-in from the sink

        Returns:
            bool: the packet has been queued
        """
        try:
            packet = Packet(bytearray(data))
        except SdwsnError as ex:
            logger.warning(f'CONTROLLER drops malformed packet: {ex}')
            return False
        self.rxQueue.put(packet)
        return True

    def toSend(self, timeout:float=None):
        """Next packet-out for the sink (bytes), None when stopped or on timeout"""
        try:
            return self.txQueue.get(timeout=timeout)
        except queue.Empty:
            return None

    def packetInWorker(self):
        """Handle the packets received from the data plane"""
        while not self.isStopped.is_set():
            packet = self.rxQueue.get()
            if packet is None:
                break
            self.handlePacket(packet)

    def handlePacket(self, packet:Packet):
        try:
            logger.info(f'--------------->CONTROLLER receives {packet}')
            self.managePacket(packet)
        except NoRouteError as ex:
            logger.warning(f'CONTROLLER no route: {ex.message}')
        except (SdwsnError, ValueError, IndexError) as ex:
            logger.warning(f'CONTROLLER drops packet: {ex}')

    def cacheSweepWorker(self):
        """Drop the expired correlation entries"""
        while not self.isStopped.wait(ct.CACHE_SWEEP_PERIOD):
            self.sweepCaches()

    def sweepCaches(self):
        dropped = 0
        with self.cacheLock:
            for cache in (self.requestCache, self.configCache):
                for key in list(cache.keys()):
                    # an expired key is removed by the lookup
                    if key not in cache:
                        dropped += 1
        if dropped:
            logger.debug(f'CONTROLLER {dropped} expired cache entries dropped')
        return dropped

    def graphUpdateWorker(self):
        """Topology changes hand-off from the network graph"""
        while not self.isStopped.is_set():
            modification = self.networkGraph.changes.get()
            if modification is None:
                break
            self.graphUpdate(modification)

    def managePacket(self, packet:Packet):
        if not packet.isSdnWisePacket():
            return
        pt = packet.getType()
        if pt == ct.REPORT:
            with self.lock:
                self.networkGraph.updateMap(ReportPacket(packet.toByteArray()))
        elif pt == ct.REQUEST:
            req = RequestPacket(packet.toByteArray())
            data = self.putInRequestCache(req)
            if data is not None:
                with self.lock:
                    self.manageRoutingRequest(req, data)
        elif pt == ct.CONFIG:
            cp = ConfigPacket(packet.toByteArray())
            prop = cp.getConfigId()
            index = cp.getParams()[0] if prop in INDEXED_PROPERTIES and cp.getParams() else None
            key = self.configKey(cp.getNet(), cp.getSrc(), prop, index)
            with self.cacheCond:
                self.configCache[key] = cp
                self.cacheCond.notify_all()
        elif pt == ct.REG_PROXY:
            self.sinkAddress = packet.getSrc()
            logger.info(f'CONTROLLER sink {self.sinkAddress} registered')

    @staticmethod
    def configKey(net:int, addr:Addr, prop:ConfigProperty, index:int=None):
        if index is None:
            return f'{net} {addr} {prop.getValue()}'
        return f'{net} {addr} {prop.getValue()} {index}'

    def putInRequestCache(self, rp:RequestPacket):
        """Collect the fragments of a request

        Returns:
            Packet: the requested packet once every part arrived, None otherwise
        """
        if rp.getTotal() == 1:
            return Packet.build(rp.getReqPayload())
        key = f'{rp.getSrc()}.{rp.getId()}'
        with self.cacheLock:
            pending = self.requestCache.get(key)
            if pending is None:
                # the first fragment received tells how many parts to wait for
                pending = (rp.getTotal(), {})
                self.requestCache[key] = pending
            total, parts = pending
            parts[rp.getPart()] = rp
            if len(parts) < total:
                return None
            self.requestCache.pop(key, None)
        return Packet.build(RequestPacket.mergePackets(list(parts.values())))

    def sendNetworkPacket(self, packet:Packet):
        """Packet-out toward the data plane through the sink"""
        packet.setNxh(self.sinkAddress)
        logger.info(f'CONTROLLER-----> sends packet type ({packet.getTypeName()}) | {packet.getSrc()} --> {packet.getDst()} - Next Hop ({packet.getNxh()})')
        self.txQueue.put(bytes(packet.toByteArray()))

    def sendQuery(self, cp:ConfigPacket):
        """Send a read CONFIG packet and wait for the node reply

        Raises:
            QueryTimeoutError: no reply within ct.RESPONSE_TIMEOUT msec
        """
        prop = cp.getConfigId()
        index = cp.getParams()[0] if prop in INDEXED_PROPERTIES and cp.getParams() else None
        key = self.configKey(cp.getNet(), cp.getDst(), prop, index)
        with self.cacheCond:
            self.configCache.pop(key, None)
        self.sendNetworkPacket(cp)
        with self.cacheCond:
            self.cacheCond.wait_for(lambda: key in self.configCache, timeout=ct.RESPONSE_TIMEOUT / 1000)
            response = self.configCache.pop(key, None)
        if response is None:
            logger.error(f'CONTROLLER no reply to {prop.name} from {cp.getDst()}')
            raise QueryTimeoutError()
        return response

    def sendPath(self, net:int, dst:Addr, path:list):
        """send a OPEN_PATH packet to configure flow rules along a routing path
        """
        op = OpenPathPacket(net=net, src=self.sinkAddress, dst=dst, path=path)
        self.sendNetworkPacket(op)

    def getNodeValue(self, net:int, dst:Addr, prop:ConfigProperty):
        cp = ConfigPacket(net=net, src=self.sinkAddress, dst=dst, read=prop)
        res = self.sendQuery(cp).getParams()
        if prop.getSize() == 1:
            return res[0]
        return mergeBytes(res[0], res[1])

    def getNodeAddress(self, net:int, dst:Addr):
        return Addr(self.getNodeValue(net, dst, ConfigProperty.MY_ADDRESS))

    def getNodeNet(self, net:int, dst:Addr):
        return self.getNodeValue(net, dst, ConfigProperty.MY_NET)

    def getNodeBeaconPeriod(self, net:int, dst:Addr):
        return self.getNodeValue(net, dst, ConfigProperty.BEACON_PERIOD)

    def getNodeReportPeriod(self, net:int, dst:Addr):
        return self.getNodeValue(net, dst, ConfigProperty.REPORT_PERIOD)

    def getNodeEntryTtl(self, net:int, dst:Addr):
        return self.getNodeValue(net, dst, ConfigProperty.RULE_TTL)

    def getNodePacketTtl(self, net:int, dst:Addr):
        return self.getNodeValue(net, dst, ConfigProperty.PACKET_TTL)

    def getNodeRssiMin(self, net:int, dst:Addr):
        return self.getNodeValue(net, dst, ConfigProperty.RSSI_MIN)

    def getNodeRule(self, net:int, dst:Addr, index:int):
        """send a CONFIG packet to get an entry/rule of certain node's OF index

        Returns:
            Entry: the rule, None if the node has no rule at index
        """
        cp = ConfigPacket(net=net, src=self.sinkAddress, dst=dst, read=ConfigProperty.GET_RULE, val=bytearray([index]))
        try:
            params = self.sendQuery(cp).getParams()
        except QueryTimeoutError:
            return None
        if len(params) <= 1:
            return None
        return Entry(params[1:])

    def getNodeRules(self, net:int, dst:Addr):
        """send CONFIG packets to get all entries/rules of a node
        """
        rules = []
        while True:
            rule = self.getNodeRule(net, dst, len(rules))
            if rule is None:
                return rules
            rules.append(rule)

    def getNodeAlias(self, net:int, dst:Addr, index:int):
        cp = ConfigPacket(net=net, src=self.sinkAddress, dst=dst, read=ConfigProperty.GET_ALIAS, val=bytearray([index]))
        try:
            params = self.sendQuery(cp).getParams()
        except QueryTimeoutError:
            return None
        if len(params) < 3:
            return None
        return Addr(params[1:3])

    def getNodeAliases(self, net:int, dst:Addr):
        aliases = []
        while True:
            alias = self.getNodeAlias(net, dst, len(aliases))
            if alias is None:
                return aliases
            aliases.append(alias)

    def setNodeValue(self, net:int, dst:Addr, prop:ConfigProperty, val:bytearray=None):
        cp = ConfigPacket(net=net, src=self.sinkAddress, dst=dst, write=prop, val=val)
        self.sendNetworkPacket(cp)

    def setNodeAddress(self, net:int, dst:Addr, newAddress:Addr):
        self.setNodeValue(net, dst, ConfigProperty.MY_ADDRESS, newAddress.getArray())

    def setNodeNet(self, net:int, dst:Addr, newNet:int):
        self.setNodeValue(net, dst, ConfigProperty.MY_NET, bytearray([newNet]))

    def setNodeBeaconPeriod(self, net:int, dst:Addr, period:int):
        self.setNodeValue(net, dst, ConfigProperty.BEACON_PERIOD, bytearray(period.to_bytes(2, 'big')))

    def setNodeReportPeriod(self, net:int, dst:Addr, period:int):
        self.setNodeValue(net, dst, ConfigProperty.REPORT_PERIOD, bytearray(period.to_bytes(2, 'big')))

    def setNodeEntryTtl(self, net:int, dst:Addr, period:int):
        self.setNodeValue(net, dst, ConfigProperty.RULE_TTL, bytearray([period]))

    def setNodePacketTtl(self, net:int, dst:Addr, newTtl:int):
        self.setNodeValue(net, dst, ConfigProperty.PACKET_TTL, bytearray([newTtl]))

    def setNodeRssiMin(self, net:int, dst:Addr, newRssi:int):
        self.setNodeValue(net, dst, ConfigProperty.RSSI_MIN, bytearray([newRssi]))

    def addNodeAlias(self, net:int, dst:Addr, newAddr:Addr):
        self.setNodeValue(net, dst, ConfigProperty.ADD_ALIAS, newAddr.getArray())

    def removeNodeAlias(self, net:int, dst:Addr, index:int):
        self.setNodeValue(net, dst, ConfigProperty.REM_ALIAS, bytearray([index]))

    def addNodeRule(self, net:int, dst:Addr, entry:Entry):
        rp = ResponsePacket(net=net, src=self.sinkAddress, dst=dst, entry=entry)
        self.sendNetworkPacket(rp)

    def removeNodeRule(self, net:int, dst:Addr, index:int):
        self.setNodeValue(net, dst, ConfigProperty.REM_RULE, bytearray([index]))

    def resetNode(self, net:int, dst:Addr):
        self.setNodeValue(net, dst, ConfigProperty.RESET)

    def addNodeFunction(self, net:int, dst:Addr, id:int, name:str):
        """Bind a cataloged function to id on a node (sent in ADD_FUNCTION parts)"""
        for cp in ConfigPacket.createFunctionPackets(net, self.sinkAddress, dst, id, bytearray(name.encode('utf-8'))):
            self.sendNetworkPacket(cp)

    def removeNodeFunction(self, net:int, dst:Addr, id:int):
        self.setNodeValue(net, dst, ConfigProperty.REM_FUNCTION, bytearray([id]))

class DijkstraController(Controller):
    """Controller routing the requests on the shortest path"""
    def __init__(self, inetAddress:tuple=None, networkGraph:Graph=None, sinkAddress:Addr=None):
        super().__init__(inetAddress, networkGraph, sinkAddress)
        self.name = 'Dijkstra-ctrl'
        self.routingApp = Dijkstra(self.networkGraph.getGraph())

    def manageRoutingRequest(self, req:RequestPacket, data:Packet):
        """Install the path from the request source to the packet destination
        and send the packet back to the network

        Returns:
            list: installed path, None when there is nothing to route

        Raises:
            NoRouteError: the path has less than two nodes
        """
        if not data.isSdnWisePacket():
            logger.info(f'CONTROLLER no routing for a pass-through packet from {req.getSrc()}')
            return None
        net = data.getNet()
        src = f'{net}.{req.getSrc()}'
        dst = f'{net}.{data.getDst()}'
        if src == dst:
            return None
        with self.lock:
            if self.networkGraph.getNode(src) is None or self.networkGraph.getNode(dst) is None:
                logger.warning(f'CONTROLLER unknown route end {src} -> {dst}')
                return None
            path = self.routingApp.getRoute(src, dst, self.networkGraph.getLastModification())
        logger.info(f'Path: {[str(p) for p in path]}')
        if len(path) <= 1:
            raise NoRouteError(f'No route from {src} to {dst}')
        self.updatePath(net, src, dst, path)
        data.setSrc(req.getSrc())
        self.sendNetworkPacket(data)
        return path

    def updatePath(self, net:int, src:str, dst:str, path:list):
        """Record the path of a (src, dst) pair and open it from both ends"""
        with self.lock:
            self.flowPaths[(src, dst)] = list(path)
        self.sendPath(net, path[0], path)
        reverse = path[::-1]
        self.sendPath(net, reverse[0], reverse)

    def graphUpdate(self, modification:int):
        """Open again the installed paths that are no longer the shortest ones

        Returns:
            int: number of updated paths
        """
        super().graphUpdate(modification)
        updates = []
        with self.lock:
            for (src, dst), installed in list(self.flowPaths.items()):
                if self.networkGraph.getNode(src) is None:
                    logger.warning(f'CONTROLLER source {src} is not found')
                    continue
                path = self.routingApp.getRoute(src, dst, self.networkGraph.getLastModification())
                if len(path) > 1 and path != installed:
                    updates.append((src, dst, path))
        for src, dst, path in updates:
            logger.info(f'Path {src} -> {dst} changed: {[str(p) for p in path]}')
            self.updatePath(int(src.split('.', 1)[0]), src, dst, path)
        return len(updates)
