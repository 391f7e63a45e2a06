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

from sdwsn.data.addr import Addr
from sdwsn.data.neighbor import Neighbor
from sdwsn.data.function import FunctionRegistry, FunctionContext
from sdwsn.util.constants import Constants as ct
from sdwsn.util.utils import mergeBytes, compare, doOperation, CustomFormatter
from sdwsn.util.errors import SdwsnError, ActionError, FlowTableError, MalformedPacketError
from sdwsn.openflow.action import Action, ForwardUnicastAction
from sdwsn.openflow.window import Window
from sdwsn.openflow.entry import Entry
from sdwsn.openflow.stat import Stat
from sdwsn.openflow.packet import Packet, BeaconPacket, ReportPacket, RequestPacket, ConfigProperty, RegProxyPacket

#logging----------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
ch.setFormatter(CustomFormatter())
logger.addHandler(ch)
#-----------------------------------

class FlowTable(object):
    """Ordered list of flow table entries, the first matching entry wins"""
    def __init__(self, node):
        self.node = node
        self.entries = []

    def __len__(self):
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __setitem__(self, index, entry:Entry):
        self.entries[index] = entry
        logger.info(f"{self.node.id} SET rule ({entry}) at index {index}")

    def __iter__(self):
        return iter(list(self.entries))

    def addRule(self, entry:Entry):
        """Replace the entry with the same windows, otherwise append

        Returns:
            int: index of the entry
        """
        for i, rule in enumerate(self.entries):
            if rule == entry:
                self.entries[i] = entry
                logger.info(f"{self.node.id} UPDATE rule ({entry}) at index {i}")
                return i
        self.entries.append(entry)
        logger.info(f"{self.node.id} INSERT rule ({entry}) at index {len(self.entries) - 1}")
        return len(self.entries) - 1

    def removeRule(self, index:int):
        entry = self.entries.pop(index)
        logger.info(f"{self.node.id} REMOVE rule ({entry}) at index {index}")
        return entry

    def restoreDefault(self, entry:Entry):
        """Put the default route back at position 0"""
        if self.entries and self.entries[0] == entry:
            self.entries[0] = entry
        else:
            self.entries.insert(0, entry)

class Node:
    """Abstract Node (Flow Table Engine shared by motes and sinks)"""
    def __init__(self, net:int, addr:Addr):
        """Create a node

        Args:
            net (int): network id
            addr (Addr): node address
        """
        self.id = f'{net}.{addr}'
        #Sub net id
        self.myNet = net
        #The address of the node typeof(Addr) Ex. 0.1
        self.myAddress = addr
        #Requests count.
        self.requestId = 0
        #Accepted IDs (aliases of the node)
        self.acceptedId = []
        #Flow Table is a list of Entry
        self.flowTable = FlowTable(self)
        #Status Registers
        self.statusRegister = bytearray(ct.STATUS_LEN)
        #dictionary of neigbors {key=Addr:value=Neighbor}
        self.neighborTable = {}
        #Functions callable from FUNCTION actions
        self.functions = FunctionRegistry()
        self.functionBuffer = {}
        #A Mote becomes active after it receives a beacon message. A Sink is always active.
        self.isActive = False
        self.battery = 0xFF
        self.sinkDistance = ct.TTL_MAX + 1
        self.sinkRssi = 0
        #Timers
        self.cntBeacon = 0
        self.cntReport = 0
        self.cntUpdTable = 0
        self.beaconMax = ct.CNT_BEACON_MAX
        self.reportMax = ct.CNT_REPORT_MAX
        self.updTableMax = ct.CNT_UPDTABLE_MAX
        self.packetTtl = ct.TTL_MAX
        self.rssiMin = ct.RSSI_MIN
        #Queues
        self.rxQueue = queue.Queue(ct.BUFFER_SIZE)
        self.ftQueue = queue.Queue(ct.BUFFER_SIZE)
        self.txQueue = queue.Queue(ct.BUFFER_SIZE)
        self.lock = threading.RLock()
        self.isStopped = threading.Event()
        self.pool = None
        self.initFlowTable()
        self.initSpecific()

    def initSpecific(self):
        pass

    def reset(self):
        pass

    def defaultRule(self):
        """Route toward this node for requests, used until a sink is found"""
        toSink = Entry()
        toSink.addWindow(Window().setOperator(ct.EQUAL).setSize(ct.W_SIZE_2)
            .setLhsOperandType(ct.PACKET).setLhs(ct.DST_INDEX)
            .setRhsOperandType(ct.CONST).setRhs(self.myAddress.intValue()))
        toSink.addWindow(Window.fromString("P.TYP == %d" % ct.REQUEST))
        toSink.addAction(ForwardUnicastAction(nxtHop=self.myAddress))
        toSink.getStats().setPermanent()
        return toSink

    def initFlowTable(self):
        self.flowTable.restoreDefault(self.defaultRule())

    def start(self):
        """Run the node workers"""
        self.isStopped.clear()
        self.pool = ThreadPoolExecutor(max_workers=3, thread_name_prefix=self.id)
        self.pool.submit(self.rxWorker)
        self.pool.submit(self.ftWorker)
        self.pool.submit(self.timerWorker)
        logger.info(f'[{self.id}] is running ...')

    def stop(self):
        self.isStopped.set()
        for q in (self.rxQueue, self.ftQueue):
            try:
                q.put_nowait(None)
            except queue.Full:
                # a worker never waits on a full queue, it sees isStopped on its next loop
                pass
        if self.pool:
            self.pool.shutdown(wait=True)
            self.pool = None
        logger.info(f'[{self.id}] is stopped')

    def rxWorker(self):
        while not self.isStopped.is_set():
            item = self.rxQueue.get()
            if item is None:
                break
            try:
                self.rxHandler(*item)
            except Exception:
                logger.exception(f'{self.id} failed to handle a packet')

    def ftWorker(self):
        """Packets sent back to the flow table by a MATCH action"""
        while not self.isStopped.is_set():
            packet = self.ftQueue.get()
            if packet is None:
                break
            while not self.isStopped.is_set():
                try:
                    self.rxQueue.put((packet, ct.RSSI_MAX), timeout=ct.QUEUE_POLL)
                    break
                except queue.Full:
                    continue

    def timerWorker(self):
        while not self.isStopped.wait(ct.TIMER_TICK):
            try:
                self.timer()
            except Exception:
                logger.exception(f'{self.id} timer failed')

    def timer(self):
        with self.lock:
            if not self.isActive:
                return
            self.cntBeacon += 1
            self.cntReport += 1
            self.cntUpdTable += 1
            if self.cntBeacon >= self.beaconMax:
                self.cntBeacon = 0
                self.radioTx(self.prepareBeacon())
            if self.cntReport >= self.reportMax:
                self.cntReport = 0
                self.controllerTx(self.prepareReport())
            if self.cntUpdTable >= self.updTableMax:
                self.cntUpdTable = 0
                self.updateTable()

    def rxRadioPacket(self, packet:Packet, rssi:int):
        """Radio reception: keep the packets addressed to this node

        Returns:
            bool: the packet has been queued
        """
        if (not packet.isSdnWisePacket() or packet.getDst().isBroadcast()
                or self.isAcceptedIdAddress(packet.getNxh())):
            self.rxQueue.put((packet, rssi))
            return True
        return False

    def rxHandler(self, packet:Packet, rssi:int):
        with self.lock:
            try:
                if not packet.isSdnWisePacket():
                    self.runFlowMatch(packet)
                    return
                if packet.getLen() <= ct.DFLT_HDR_LEN or packet.getNet() != self.myNet or packet.getTtl() == 0:
                    logger.debug(f'{self.id} DROP {packet}')
                    return
                packet = Packet.build(packet.toByteArray())
                {
                    ct.DATA: lambda: self.rxData(packet),
                    ct.BEACON: lambda: self.rxBeacon(packet, rssi),
                    ct.REPORT: lambda: self.rxReport(packet),
                    ct.REQUEST: lambda: self.rxRequest(packet),
                    ct.RESPONSE: lambda: self.rxResponse(packet),
                    ct.OPEN_PATH: lambda: self.rxOpenPath(packet),
                    ct.CONFIG: lambda: self.rxConfig(packet)
                }.get(packet.getType(), lambda: self.runFlowMatch(packet))()
            except FlowTableError as ex:
                logger.error(f'{self.id} {ex.message}, resetting the routing state')
                self.recover()
            except (MalformedPacketError, IndexError, ValueError) as ex:
                logger.warning(f'{self.id} DROP malformed packet: {ex}')

    def recover(self):
        with self.lock:
            if len(self.flowTable):
                self.flowTable[0] = self.defaultRule()
            else:
                self.flowTable.restoreDefault(self.defaultRule())
            self.reset()

    def rxData(self, packet):
        if self.isAcceptedIdAddress(packet.getDst()):
            self.dataCallback(packet)
        elif self.isAcceptedIdAddress(packet.getNxh()):
            self.runFlowMatch(packet)

    def rxBeacon(self, packet:BeaconPacket, rssi:int):
        self.neighborTable[packet.getSrc()] = Neighbor(packet.getSrc(), rssi, packet.getBattery())

    def rxReport(self, packet):
        self.controllerTx(packet)

    def rxRequest(self, packet):
        self.controllerTx(packet)

    def rxResponse(self, packet):
        if self.isAcceptedIdAddress(packet.getDst()):
            rule = packet.getRule()
            rule.setStats(Stat())
            self.insertRule(rule)
        else:
            self.runFlowMatch(packet)

    def rxOpenPath(self, packet):
        if not self.isAcceptedIdAddress(packet.getDst()):
            self.runFlowMatch(packet)
            return
        path = packet.getPath()
        i = 0
        while i < len(path) and not self.isAcceptedIdAddress(path[i]):
            i += 1
        if i == len(path):
            logger.warning(f'{self.id} not on the open path {[str(p) for p in path]}')
            return
        windows = packet.getWindows()
        if i > 0:
            self.insertRule(self.pathRule(path[0], path[i-1], windows))
        if i < len(path) - 1:
            self.insertRule(self.pathRule(path[-1], path[i+1], windows))
            packet.setDst(path[i+1])
            packet.setNxh(path[i+1])
            self.radioTx(packet)

    @staticmethod
    def pathRule(dst:Addr, nxtHop:Addr, windows:list):
        rule = Entry()
        rule.addWindow(Window().setOperator(ct.EQUAL).setSize(ct.W_SIZE_2)
            .setLhsOperandType(ct.PACKET).setLhs(ct.DST_INDEX)
            .setRhsOperandType(ct.CONST).setRhs(dst.intValue()))
        for w in windows:
            rule.addWindow(w)
        rule.addAction(ForwardUnicastAction(nxtHop=nxtHop))
        return rule

    def rxConfig(self, packet):
        raise NotImplementedError

    def dataCallback(self, packet):
        raise NotImplementedError

    def controllerTx(self, packet):
        raise NotImplementedError

    def radioTx(self, packet):
        packet = packet.clone()
        packet.decrementTtl()
        self.txQueue.put(packet)
        logger.debug(f'{self.id} TX {packet}')

    def insertRule(self, rule:Entry):
        with self.lock:
            return self.flowTable.addRule(rule)

    def removeRule(self, index:int):
        """Remove the entry at index, the route toward the sink (index 0) is kept"""
        with self.lock:
            if index == 0:
                logger.warning(f'{self.id} cannot remove the rule at index 0')
                return None
            if index < len(self.flowTable):
                return self.flowTable.removeRule(index)
            return None

    def updateTable(self):
        """Age the entries, expired ones are removed"""
        with self.lock:
            resetNeeded = False
            for i in reversed(range(len(self.flowTable))):
                stats = self.flowTable[i].getStats()
                if stats.isPermanent():
                    continue
                stats.decrementTtl(ct.ENTRY_TTL_DECR)
                if stats.getTtl() == 0:
                    self.flowTable.removeRule(i)
                    if i == 0:
                        resetNeeded = True
            if resetNeeded:
                self.flowTable.restoreDefault(self.defaultRule())
                self.reset()

    def runFlowMatch(self, packet):
        """Run the actions of the first matching entry, ask the controller otherwise

        Returns:
            bool: a matching entry was found
        """
        with self.lock:
            for entry in self.flowTable:
                if self.matchRule(entry, packet):
                    for action in entry.getActions():
                        try:
                            self.runAction(action, packet)
                        except ActionError as ex:
                            logger.warning(f'{self.id} {action} aborted: {ex.message}')
                            break
                    entry.getStats().increaseCounter()
                    return True
            self.sendRequest(packet)
            return False

    def sendRequest(self, packet):
        rps = RequestPacket.createPackets(self.myNet, self.myAddress, self.getActualSinkAddress(), self.requestId, packet.toByteArray())
        self.requestId = (self.requestId + 1) % 256
        for rp in rps:
            self.controllerTx(rp)

    def matchRule(self, rule:Entry, packet):
        windows = rule.getWindows()
        if not windows:
            return False
        return all(self.matchWindow(w, packet) for w in windows)

    def matchWindow(self, window:Window, packet):
        size = window.getSize()
        lhs = self.getOperand(packet, size, window.getLhsOperandType(), window.getLhs())
        rhs = self.getOperand(packet, size, window.getRhsOperandType(), window.getRhs())
        return compare(window.getOperator(), lhs, rhs)

    def getOperand(self, packet, size:int, location:int, val:int):
        """Value of an operand, -1 when it is out of range"""
        if location == ct.NULL:
            return 0
        if location == ct.CONST:
            return val
        if location == ct.PACKET:
            data = packet.toByteArray()
        elif location == ct.STATUS:
            data = self.statusRegister
        else:
            return -1
        if size == ct.W_SIZE_1:
            return data[val] if val < len(data) else -1
        if val + 1 < len(data):
            return mergeBytes(data[val], data[val + 1])
        return -1

    def runAction(self, action, packet):
        typ = action.getType()
        if typ in (Action.FORWARD_U.value, Action.FORWARD_B.value):
            packet.setNxh(action.getNextHop())
            self.radioTx(packet)
        elif typ == Action.SET.value:
            self.runSetAction(action, packet)
        elif typ == Action.FUNCTION.value:
            callback = self.functions.get(action.getId())
            if callback:
                callback(FunctionContext(self), action.getArgs(), packet)
            else:
                logger.debug(f'{self.id} no function at position {action.getId()}')
        elif typ == Action.ASK.value:
            self.sendRequest(packet)
        elif typ == Action.MATCH.value:
            try:
                self.ftQueue.put_nowait(packet.clone())
            except queue.Full:
                logger.warning(f'{self.id} DROP {packet}, match queue is full')

    def runSetAction(self, action, packet):
        """Write lhs <op> rhs in the packet or in the status register

        Raises:
            ActionError: operand or result out of range
        """
        lhs = self.getOperand(packet, ct.W_SIZE_1, action.getLhsOperandType(), action.getLhs())
        rhs = self.getOperand(packet, ct.W_SIZE_1, action.getRhsOperandType(), action.getRhs())
        if lhs == -1 or rhs == -1:
            raise ActionError("Operands out of bound")
        res = doOperation(action.getOperator(), lhs, rhs) & 0xFF
        index = action.getRes()
        if action.getResLocation() == ct.PACKET:
            data = packet.toByteArray()
            if index >= len(data):
                raise ActionError("Result out of bound")
            data[index] = res
            try:
                packet.setArray(data)
            except MalformedPacketError as ex:
                raise ActionError(str(ex))
        else:
            if index >= len(self.statusRegister):
                raise ActionError("Result out of bound")
            self.statusRegister[index] = res

    def isAcceptedIdAddress(self, addr:Addr):
        return addr == self.myAddress or addr.isBroadcast() or addr in self.acceptedId

    def getActualSinkAddress(self):
        """Sink address of the route at position 0

        Raises:
            FlowTableError: missing or malformed route
        """
        try:
            return Addr(self.flowTable[0].getWindows()[0].getRhs())
        except IndexError:
            raise FlowTableError()

    def getNextHopVsSink(self):
        try:
            return self.flowTable[0].getActions()[0].getNextHop()
        except (IndexError, AttributeError):
            raise FlowTableError()

    def prepareBeacon(self):
        return BeaconPacket(net=self.myNet, src=self.myAddress, sink=self.getActualSinkAddress(),
                    distance=self.sinkDistance, battery=self.battery)

    def prepareReport(self):
        neighbors = {}
        for addr, neighbor in list(self.neighborTable.items())[:ct.MAX_NEIG]:
            neighbors[addr] = neighbor.getRssi()
        self.neighborTable.clear()
        return ReportPacket(net=self.myNet, src=self.myAddress, dst=self.getActualSinkAddress(),
                    distance=self.sinkDistance, battery=self.battery, neighbors=neighbors)

    def marshalPacket(self, packet):
        """Apply a config packet, read requests are answered in the same packet

        Returns:
            bool: the packet holds a reply to send back
        """
        try:
            prop = packet.getConfigId()
            value = packet.getParams()
            if packet.isWrite():
                self.execWriteConfig(prop, value)
                return False
            return self.execReadConfig(packet, prop, value)
        except (SdwsnError, ValueError, IndexError) as ex:
            logger.error(f'{self.id} invalid config packet: {ex}')
            return False

    def execWriteConfig(self, prop:ConfigProperty, value:bytearray):
        if prop == ConfigProperty.MY_ADDRESS:
            self.myAddress = Addr(value)
        elif prop == ConfigProperty.MY_NET:
            self.myNet = value[0]
        elif prop == ConfigProperty.PACKET_TTL:
            self.packetTtl = value[0]
        elif prop == ConfigProperty.RSSI_MIN:
            self.rssiMin = value[0]
        elif prop == ConfigProperty.BEACON_PERIOD:
            self.beaconMax = mergeBytes(value[0], value[1])
        elif prop == ConfigProperty.REPORT_PERIOD:
            self.reportMax = mergeBytes(value[0], value[1])
        elif prop == ConfigProperty.RULE_TTL:
            self.updTableMax = value[0]
        elif prop == ConfigProperty.ADD_ALIAS:
            alias = Addr(value)
            if alias not in self.acceptedId:
                self.acceptedId.append(alias)
        elif prop == ConfigProperty.REM_ALIAS:
            if value[0] < len(self.acceptedId):
                del self.acceptedId[value[0]]
        elif prop == ConfigProperty.ADD_RULE:
            rule = Entry(value)
            rule.setStats(Stat())
            self.insertRule(rule)
        elif prop == ConfigProperty.REM_RULE:
            self.removeRule(value[0])
        elif prop == ConfigProperty.RESET:
            self.reset()
        elif prop == ConfigProperty.ADD_FUNCTION:
            self.addFunctionPart(value)
        elif prop == ConfigProperty.REM_FUNCTION:
            self.functions.unbind(value[0])

    def addFunctionPart(self, value:bytearray):
        """Collect the ADD_FUNCTION parts, the complete payload names a cataloged function"""
        id, part, total = value[0], value[1], value[2]
        parts = self.functionBuffer.setdefault(id, {})
        parts[part] = bytes(value[3:])
        if len(parts) == total:
            del self.functionBuffer[id]
            name = b''.join(parts[p] for p in sorted(parts)).decode('utf-8')
            try:
                self.functions.bind(id, name)
            except KeyError:
                logger.warning(f'{self.id} unknown function {name}')

    def execReadConfig(self, packet, prop:ConfigProperty, value:bytearray):
        size = prop.getSize()
        if prop == ConfigProperty.MY_ADDRESS:
            packet.setParams(self.myAddress.getArray(), size)
        elif prop == ConfigProperty.MY_NET:
            packet.setParams(bytearray([self.myNet]), size)
        elif prop == ConfigProperty.PACKET_TTL:
            packet.setParams(bytearray([self.packetTtl]), size)
        elif prop == ConfigProperty.RSSI_MIN:
            packet.setParams(bytearray([self.rssiMin]), size)
        elif prop == ConfigProperty.BEACON_PERIOD:
            packet.setParams(self.beaconMax.to_bytes(2, 'big'), size)
        elif prop == ConfigProperty.REPORT_PERIOD:
            packet.setParams(self.reportMax.to_bytes(2, 'big'), size)
        elif prop == ConfigProperty.RULE_TTL:
            packet.setParams(bytearray([self.updTableMax]), size)
        elif prop == ConfigProperty.GET_ALIAS:
            if value[0] >= len(self.acceptedId):
                return False
            packet.setParams(bytearray([value[0]]) + self.acceptedId[value[0]].getArray(), -1)
        elif prop == ConfigProperty.GET_RULE:
            if value[0] >= len(self.flowTable):
                return False
            packet.setParams(bytearray([value[0]]) + self.flowTable[value[0]].toByteArray(), -1)
        elif prop == ConfigProperty.GET_FUNCTION:
            if value[0] not in self.functions:
                return False
            packet.setParams(bytearray([value[0]]), -1)
        else:
            return False
        return True

class Mote(Node):
    """Wireless Mote"""
    def initSpecific(self):
        self.reset()

    def reset(self):
        self.sinkDistance = self.packetTtl + 1
        self.sinkRssi = 0
        self.isActive = False

    def controllerTx(self, packet):
        packet.setNxh(self.getNextHopVsSink())
        self.radioTx(packet)

    def dataCallback(self, packet):
        callback = self.functions.get(1)
        if callback is None:
            logger.info(f'{self.id} DATA {bytes(packet.getData())}')
            packet.setSrc(self.myAddress)
            packet.setDst(self.getActualSinkAddress())
            packet.setTtl(self.packetTtl)
            self.runFlowMatch(packet)
        else:
            callback(FunctionContext(self), bytearray(), packet)

    def rxBeacon(self, packet:BeaconPacket, rssi:int):
        if rssi <= self.rssiMin:
            return
        if packet.getDistance() < self.sinkDistance and rssi > self.sinkRssi:
            self.isActive = True
            toSink = Entry()
            toSink.addWindow(Window().setOperator(ct.EQUAL).setSize(ct.W_SIZE_2)
                .setLhsOperandType(ct.PACKET).setLhs(ct.DST_INDEX)
                .setRhsOperandType(ct.CONST).setRhs(packet.getSinkAddress().intValue()))
            toSink.addWindow(Window.fromString("P.TYP == %d" % ct.REQUEST))
            toSink.addAction(ForwardUnicastAction(nxtHop=packet.getSrc()))
            self.flowTable[0] = toSink
            self.sinkDistance = packet.getDistance() + 1
            self.sinkRssi = rssi
        elif packet.getDistance() + 1 == self.sinkDistance and self.getNextHopVsSink() == packet.getSrc():
            self.flowTable[0].getStats().restoreTtl()
            self.flowTable[0].getWindows()[0].setRhs(packet.getSinkAddress().intValue())
        super().rxBeacon(packet, rssi)

    def rxConfig(self, packet):
        if packet.getDst() != self.myAddress:
            self.runFlowMatch(packet)
        elif self.marshalPacket(packet):
            packet.setSrc(self.myAddress)
            packet.setDst(self.getActualSinkAddress())
            packet.setTtl(self.packetTtl)
            self.runFlowMatch(packet)

class Sink(Node):
    """Sink/Gateway Node
    a node that communicate directly with the controller"""
    def __init__(self, net:int, addr:Addr, dpid:str=None, mac:str=None, port:int=None, isa:tuple=None):
        """Create a sink

        Args:
            dpid (str, optional): datapath id announced to the controller. Defaults to None.
            mac (str, optional): mac address announced to the controller. Defaults to None.
            port (int, optional): switch port. Defaults to None.
            isa (tuple, optional): (ip, port) of the sink. Defaults to None.
        """
        self.dpid = dpid or 'sink%d' % addr.intValue()
        self.mac = mac or '00:00:00:00:%02x:%02x' % (addr.getHigh(), addr.getLow())
        self.port = port or 0
        self.isa = isa or ('127.0.0.1', 0)
        # packets for the controller
        self.txControllerQueue = queue.Queue(ct.BUFFER_SIZE)
        super().__init__(net, addr)

    def initSpecific(self):
        self.sinkDistance = 0
        self.sinkRssi = ct.RSSI_MAX
        self.isActive = True

    def start(self):
        super().start()
        self.controllerTx(RegProxyPacket(net=self.myNet, src=self.myAddress, dPid=self.dpid,
                            mac=self.mac, port=self.port, isa=self.isa))

    def controllerTx(self, packet):
        self.txControllerQueue.put(packet)
        logger.debug(f'{self.id} C-TX {packet}')

    def dataCallback(self, packet):
        self.controllerTx(packet)

    def rxConfig(self, packet):
        if packet.getDst() != self.myAddress:
            self.runFlowMatch(packet)
        elif packet.getSrc() != self.myAddress:
            self.controllerTx(packet)
        elif self.marshalPacket(packet):
            self.controllerTx(packet)

    def getActualSinkAddress(self):
        return self.myAddress
