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
"""This code is a refactoring of the logic written in SDN-Wise implementation of OpenFlow protocol.
Ref:https://github.com/sdnwiselab/sdn-wise-java
@article{Anadiotis:2019,
    author    = {{Angelos-Christos} Anadiotis and Laura Galluccio and Sebastiano Milardo and Giacomo Morabito and Sergio Palazzo},
    title     = {{SD-WISE: A Software-Defined WIreless SEnsor network}},
    journal   = {Computer Networks},
    volume    = {159},
    pages     = {84 - 95},
    year      = {2019},
    doi       = {10.1016/j.comnet.2019.04.029},
    url       = {http://www.sciencedirect.com/science/article/pii/S1389128618312192},
}
"""

from enum import Enum
from math import ceil
from socket import inet_aton, inet_ntoa
import copy

from sdwsn.openflow.entry import Entry
from sdwsn.openflow.window import Window
from sdwsn.util.utils import mergeBytes, byteToStr
from sdwsn.util.errors import MalformedPacketError, PacketTooLongError
from sdwsn.data.addr import Addr
from sdwsn.util.constants import Constants as ct

class Packet(object):
    """Network packet: a 10 bytes header followed by the payload"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None):
        """Initiate a packet

        Args:
            data (bytearray, optional): array of bytes contains the packet header and payload. Defaults to None.
            net (int, optional): network id. Defaults to None.
            src (Addr, optional): source node address. Defaults to None.
            dst (Addr, optional): destination node address. Defaults to None.

        Raises:
            MalformedPacketError: data does not hold a valid packet
        """
        if data is not None:
            self.setArray(data)
        else:
            self.data = bytearray(ct.DFLT_HDR_LEN)
            self.data[ct.LEN_INDEX] = ct.DFLT_HDR_LEN
            self.setNet(0 if net is None else net)
            self.setSrc(Addr(0) if src is None else src)
            self.setDst(Addr(ct.BROADCAST_ADDR) if dst is None else dst)
            self.setNxh(self.getDst())
            self.setTtl(ct.TTL_MAX)

    @classmethod
    def decode(cls, data):
        return cls(data=data)

    @staticmethod
    def build(data):
        """Decode the bytes into the packet view matching the type byte"""
        packet = Packet(data=data)
        if not packet.isSdnWisePacket():
            return packet
        return {
            ct.DATA: DataPacket,
            ct.BEACON: BeaconPacket,
            ct.REPORT: ReportPacket,
            ct.REQUEST: RequestPacket,
            ct.RESPONSE: ResponsePacket,
            ct.OPEN_PATH: OpenPathPacket,
            ct.CONFIG: ConfigPacket,
            ct.REG_PROXY: RegProxyPacket
        }.get(packet.getType(), Packet)(data=packet.data)

    def setArray(self, data):
        data = bytearray(data)
        if len(data) == 0:
            raise MalformedPacketError("Empty packet")
        if len(data) > ct.MTU:
            raise MalformedPacketError("Packet length (%d) is greater than %d" % (len(data), ct.MTU))
        if data[ct.NET_INDEX] < ct.THRES:
            if len(data) < ct.DFLT_HDR_LEN:
                raise MalformedPacketError("Packet length (%d) is lower than the header length" % len(data))
            length = data[ct.LEN_INDEX]
            if length < ct.DFLT_HDR_LEN or length > len(data):
                raise MalformedPacketError("Invalid packet length field: %d" % length)
            self.data = data[:length]
        else:
            # pass-through frame, kept verbatim
            self.data = data
        return self

    @staticmethod
    def _checkByte(name, val):
        if not isinstance(val, int) or val < 0 or val > 0xFF:
            raise ValueError("Invalid %s: %r" % (name, val))

    @staticmethod
    def _checkAddr(name, val):
        if not isinstance(val, Addr):
            raise ValueError("Invalid %s address: %r" % (name, val))

    def getLen(self):
        if self.isSdnWisePacket():
            return self.data[ct.LEN_INDEX]
        return len(self.data)

    def setLen(self, val):
        if not isinstance(val, int) or val < ct.DFLT_HDR_LEN:
            raise ValueError("Invalid packet length: %r" % (val,))
        if val > ct.MTU:
            raise PacketTooLongError("Packet length (%d) is greater than %d" % (val, ct.MTU))
        if val > len(self.data):
            self.data.extend(bytearray(val - len(self.data)))
        else:
            del self.data[val:]
        self.data[ct.LEN_INDEX] = val
        return self

    def getNet(self):
        return self.data[ct.NET_INDEX]

    def setNet(self, val):
        self._checkByte("net", val)
        self.data[ct.NET_INDEX] = val
        return self

    def getSrc(self):
        return Addr(self.data[ct.SRC_INDEX:ct.SRC_INDEX + ct.SRC_LEN])

    def setSrc(self, val:Addr):
        self._checkAddr("source", val)
        self.data[ct.SRC_INDEX] = val.getHigh()
        self.data[ct.SRC_INDEX + 1] = val.getLow()
        return self

    def getDst(self):
        return Addr(self.data[ct.DST_INDEX:ct.DST_INDEX + ct.DST_LEN])

    def setDst(self, val:Addr):
        self._checkAddr("destination", val)
        self.data[ct.DST_INDEX] = val.getHigh()
        self.data[ct.DST_INDEX + 1] = val.getLow()
        return self

    def getType(self):
        return self.data[ct.TYP_INDEX]

    def getTypeName(self):
        return {
            ct.DATA: 'DATA',
            ct.BEACON: 'BEACON',
            ct.REPORT: 'REPORT',
            ct.REQUEST: 'REQUEST',
            ct.RESPONSE: 'RESPONSE',
            ct.OPEN_PATH: 'OPEN_PATH',
            ct.CONFIG: 'CONFIG',
            ct.REG_PROXY: 'REG_PROXY'
        }.get(self.data[ct.TYP_INDEX], str(self.data[ct.TYP_INDEX]))

    def setType(self, val):
        self._checkByte("type", val)
        self.data[ct.TYP_INDEX] = val
        return self

    def getTtl(self):
        return self.data[ct.TTL_INDEX]

    def setTtl(self, val):
        self._checkByte("ttl", val)
        self.data[ct.TTL_INDEX] = val
        return self

    def decrementTtl(self):
        if self.data[ct.TTL_INDEX] > 0:
            self.data[ct.TTL_INDEX] -= 1
        return self

    def getNxh(self):
        return Addr(self.data[ct.NXH_INDEX:ct.NXH_INDEX + ct.NXH_LEN])

    def setNxh(self, val:Addr):
        self._checkAddr("next hop", val)
        self.data[ct.NXH_INDEX] = val.getHigh()
        self.data[ct.NXH_INDEX + 1] = val.getLow()
        return self

    def getPayloadSize(self):
        return self.getLen() - ct.DFLT_HDR_LEN

    def getPayload(self):
        return bytearray(self.data[ct.DFLT_HDR_LEN:self.getLen()])

    def setPayload(self, payload):
        if ct.DFLT_HDR_LEN + len(payload) > ct.MTU:
            raise PacketTooLongError("Payload (%d) exceeds %d bytes" % (len(payload), ct.DFLT_PAYLOAD_LEN))
        self.data = self.data[:ct.DFLT_HDR_LEN] + bytearray(payload)
        self.data[ct.LEN_INDEX] = len(self.data)
        return self

    def getPayloadValue(self, index):
        if index < 0 or ct.DFLT_HDR_LEN + index >= self.getLen():
            raise IndexError("Payload index out of range: %d" % index)
        return self.data[ct.DFLT_HDR_LEN + index]

    def setPayloadValue(self, index, val):
        self._checkByte("payload value", val)
        if index < 0:
            raise IndexError("Payload index out of range: %d" % index)
        pos = ct.DFLT_HDR_LEN + index
        if pos >= ct.MTU:
            raise PacketTooLongError("Payload index (%d) exceeds %d bytes" % (index, ct.DFLT_PAYLOAD_LEN))
        if pos >= self.getLen():
            self.setLen(pos + 1)
        self.data[pos] = val
        return self

    def getPayloadFromTo(self, start, stop):
        if start < 0 or stop < start or ct.DFLT_HDR_LEN + stop > self.getLen():
            raise IndexError("Invalid payload slice [%d:%d]" % (start, stop))
        return bytearray(self.data[ct.DFLT_HDR_LEN + start:ct.DFLT_HDR_LEN + stop])

    def setPayloadFromTo(self, src, srcStart, payloadStart, length):
        """Copy length bytes of src (from srcStart) into the payload at payloadStart"""
        if srcStart < 0 or payloadStart < 0 or length < 0 or srcStart + length > len(src):
            raise IndexError("Invalid payload slice")
        end = ct.DFLT_HDR_LEN + payloadStart + length
        if end > ct.MTU:
            raise PacketTooLongError("Payload exceeds %d bytes" % ct.DFLT_PAYLOAD_LEN)
        if end > self.getLen():
            self.setLen(end)
        self.data[ct.DFLT_HDR_LEN + payloadStart:end] = src[srcStart:srcStart + length]
        return self

    def toByteArray(self):
        return bytearray(self.data[:self.getLen()])

    def encode(self):
        return bytes(self.toByteArray())

    def clone(self):
        return copy.deepcopy(self)

    def isSdnWisePacket(self):
        return self.data[ct.NET_INDEX] < ct.THRES

    def __eq__(self, other):
        if not isinstance(other, Packet):
            return NotImplemented
        return self.toByteArray() == other.toByteArray()

    __hash__ = None

    def __str__(self):
        if not self.isSdnWisePacket():
            return "RAW [%s]" % byteToStr(self.data)
        return "%s net:%d src:%s dst:%s nxh:%s ttl:%d len:%d [%s]" % (self.getTypeName(), self.getNet(), self.getSrc(),
            self.getDst(), self.getNxh(), self.getTtl(), self.getLen(), byteToStr(self.getPayload()))

class DataPacket(Packet):
    """Data Packet"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None, payload:bytearray=None):
        super().__init__(data=data, net=net, src=src, dst=dst)
        if data is None:
            self.setType(ct.DATA)
            if payload:
                self.setPayload(payload)

    def getData(self):
        return self.getPayload()

    def setData(self, payload:bytearray):
        return self.setPayload(payload)

class BeaconPacket(Packet):
    """Beacon Pakcet (the sink address travels in the next hop field)"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, sink:Addr=None, distance:int=None, battery:int=None):
        """Initiate a beacon packet

        Args:
            data (bytearray, optional): array of bytes contains the packet header and payload. Defaults to None.
            net (int, optional): network id. Defaults to None.
            src (Addr, optional): source node address. Defaults to None.
            sink (Addr, optional): address of the sink the source is attached to. Defaults to None.
            distance (int, optional): distance (hops) from the sink. Defaults to None.
            battery (int, optional): battery level. Defaults to None.
        """
        super().__init__(data=data, net=net, src=src, dst=Addr(ct.BROADCAST_ADDR))
        if data is None:
            self.setType(ct.BEACON)
            self.setSinkAddress(Addr(ct.BROADCAST_ADDR) if sink is None else sink)
            self.setDistance(0 if distance is None else distance)
            self.setBattery(0xFF if battery is None else battery)

    def getDistance(self):
        return self.getPayloadValue(ct.DIST_INDEX)

    def setDistance(self, val):
        return self.setPayloadValue(ct.DIST_INDEX, val)

    def getBattery(self):
        return self.getPayloadValue(ct.BATT_INDEX)

    def setBattery(self, val:int):
        return self.setPayloadValue(ct.BATT_INDEX, val)

    def getSinkAddress(self):
        return self.getNxh()

    def setSinkAddress(self, addr:Addr):
        return self.setNxh(addr)

class ReportPacket(BeaconPacket):
    """Report Packet (beacon fields followed by the neighbors list)"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None, distance:int=None, battery:int=None, neighbors:dict=None):
        """Initiate a report packet

        Args:
            dst (Addr, optional): sink address. Defaults to None.
            neighbors (dict, optional): {Addr: link quality}. Defaults to None.
        """
        super().__init__(data=data, net=net, src=src, sink=dst, distance=distance, battery=battery)
        if data is None:
            self.setType(ct.REPORT)
            self.setDst(Addr(ct.BROADCAST_ADDR) if dst is None else dst)
            self.setNeighborsSize(0)
            if neighbors:
                self.setNeighbors(neighbors)

    def getNeighborsSize(self):
        return self.getPayloadValue(ct.NEIGH_NUM_INDEX)

    def setNeighborsSize(self, size:int):
        if size > ct.MAX_NEIG:
            raise PacketTooLongError("Too many neighbors: %d" % size)
        self.setPayloadValue(ct.NEIGH_NUM_INDEX, size)
        self.setLen(ct.DFLT_HDR_LEN + ct.NEIGH_INDEX + size * ct.NEIGH_LEN)
        return self

    def getNeighborAddress(self, i:int):
        index = ct.NEIGH_INDEX + i * ct.NEIGH_LEN
        return Addr(self.getPayloadFromTo(index, index + 2))

    def getLinkQuality(self, i:int):
        return self.getPayloadValue(ct.NEIGH_INDEX + i * ct.NEIGH_LEN + 2)

    def getNeighbors(self):
        neighbors = {}
        for i in range(self.getNeighborsSize()):
            neighbors[self.getNeighborAddress(i)] = self.getLinkQuality(i)
        return neighbors

    def setNeighbors(self, neighbors:dict):
        self.setNeighborsSize(len(neighbors))
        for i, (addr, quality) in enumerate(neighbors.items()):
            index = ct.NEIGH_INDEX + i * ct.NEIGH_LEN
            self.setPayloadValue(index, addr.getHigh())
            self.setPayloadValue(index + 1, addr.getLow())
            self.setPayloadValue(index + 2, quality)
        return self

    def addNeighbor(self, addr:Addr, quality:int):
        neighbors = self.getNeighbors()
        neighbors[addr] = quality
        return self.setNeighbors(neighbors)

class RequestPacket(Packet):
    """Request Packet"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None, id:int=None, part:int=None, total:int=None, reqPayload:bytearray=None):
        """Generate a request packet (one fragment of an unmatched packet sent to the controller)

        Args:
            data (bytearray, optional): array of bytes contains the packet header and payload. Defaults to None.
            net (int, optional): network id. Defaults to None.
            src (Addr, optional): source node address. Defaults to None.
            dst (Addr, optional): destination node address. Defaults to None.
            id (int, optional): request id. Defaults to None.
            part (int, optional): fragment index (starting from 0). Defaults to None.
            total (int, optional): number of fragments. Defaults to None.
            reqPayload (bytearray, optional): fragment bytes. Defaults to None.
        """
        super().__init__(data=data, net=net, src=src, dst=dst)
        if data is None:
            self.setType(ct.REQUEST)
            self.setId(id or 0)
            self.setPart(part or 0)
            self.setTotal(total or 1)
            self.setReqPayload(reqPayload or bytearray())

    def getReqPayload(self):
        return self.getPayloadFromTo(ct.REQUEST_HDR_LEN, self.getPayloadSize())

    def setReqPayload(self, reqPayload:bytearray):
        self.setLen(ct.DFLT_HDR_LEN + ct.REQUEST_HDR_LEN)
        return self.setPayloadFromTo(reqPayload, 0, ct.REQUEST_HDR_LEN, len(reqPayload))

    def getReqPayloadSize(self):
        return self.getPayloadSize() - ct.REQUEST_HDR_LEN

    def getId(self):
        return self.getPayloadValue(ct.ID_INDEX)

    def setId(self, id:int):
        return self.setPayloadValue(ct.ID_INDEX, id)

    def getPart(self):
        return self.getPayloadValue(ct.PART_INDEX)

    def setPart(self, part:int):
        return self.setPayloadValue(ct.PART_INDEX, part)

    def getTotal(self):
        return self.getPayloadValue(ct.TOTAL_INDEX)

    def setTotal(self, total:int):
        return self.setPayloadValue(ct.TOTAL_INDEX, total)

    @staticmethod
    def createPackets(net:int, src:Addr, dst:Addr, id:int, data:bytearray):
        """Split data in as many request fragments as needed

        Raises:
            PacketTooLongError: data needs more than 255 fragments
        """
        size = ct.REQUEST_PAYLOAD_SIZE
        total = max(1, ceil(len(data) / size))
        if total > ct.REQUEST_PARTS_MAX:
            raise PacketTooLongError("Request needs %d fragments" % total)
        return [RequestPacket(net=net, src=src, dst=dst, id=id & 0xFF, part=p, total=total,
                    reqPayload=data[p*size:(p+1)*size]) for p in range(total)]

    @staticmethod
    def mergePackets(packets:list):
        """Concatenate the fragments payloads following their part index"""
        data = bytearray()
        for rp in sorted(packets, key=lambda p: p.getPart()):
            data.extend(rp.getReqPayload())
        return data

class ResponsePacket(Packet):
    """Response Packet (carries a flow table entry)"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None, entry:Entry=None):
        super().__init__(data=data, net=net, src=src, dst=dst)
        if data is None:
            self.setType(ct.RESPONSE)
            if entry:
                self.setRule(entry)

    def getRule(self):
        return Entry(self.getPayload())

    def setRule(self, entry:Entry):
        return self.setPayload(entry.toByteArray())

class OpenPathPacket(Packet):
    """Open Path Packet (extra matching windows followed by the path addresses)"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None, path:list=None, windows:list=None):
        """Initiate an open path packet

        Args:
            path (list, optional): list of Addr from the path source to the path destination. Defaults to None.
            windows (list, optional): extra windows added to every installed rule. Defaults to None.
        """
        super().__init__(data=data, net=net, src=src, dst=dst)
        if data is None:
            self.setType(ct.OPEN_PATH)
            self.setPayloadValue(ct.OP_WINS_SIZE_INDEX, 0)
            if windows:
                self.setWindows(windows)
            if path:
                self.setPath(path)

    def _pathIndex(self):
        return self.getPayloadValue(ct.OP_WINS_SIZE_INDEX) * ct.W_SIZE + 1

    def getPath(self):
        path = []
        payload = self.getPayload()
        for i in range(self._pathIndex(), len(payload) - 1, 2):
            path.append(Addr(payload[i:i+2]))
        return path

    def setPath(self, path:list):
        i = self._pathIndex()
        self.setLen(ct.DFLT_HDR_LEN + i)
        for addr in path:
            self.setPayloadValue(i, addr.getHigh())
            self.setPayloadValue(i + 1, addr.getLow())
            i += 2
        return self

    def getWindows(self):
        windows = []
        for i in range(self.getPayloadValue(ct.OP_WINS_SIZE_INDEX)):
            start = ct.OP_WINS_SIZE_INDEX + 1 + i * ct.W_SIZE
            windows.append(Window(self.getPayloadFromTo(start, start + ct.W_SIZE)))
        return windows

    def setWindows(self, windows:list):
        path = self.getPath()
        self.setLen(ct.DFLT_HDR_LEN + 1)
        self.setPayloadValue(ct.OP_WINS_SIZE_INDEX, len(windows))
        i = ct.OP_WINS_SIZE_INDEX + 1
        for w in windows:
            win = w.toByteArray()
            self.setPayloadFromTo(win, 0, i, len(win))
            i += len(win)
        return self.setPath(path)

class ConfigProperty(Enum):
    """Node configuration properties as (id, size of the value in bytes), -1 is a variable size"""
    RESET = (0, 0)
    MY_NET = (1, 1)
    MY_ADDRESS = (2, 2)
    PACKET_TTL = (3, 1)
    RSSI_MIN = (4, 1)
    BEACON_PERIOD = (5, 2)
    REPORT_PERIOD = (6, 2)
    RULE_TTL = (7, 1)
    ADD_ALIAS = (8, 2)
    REM_ALIAS = (9, 1)
    GET_ALIAS = (10, -1)
    ADD_RULE = (11, -1)
    REM_RULE = (12, 1)
    GET_RULE = (13, -1)
    ADD_FUNCTION = (14, -1)
    REM_FUNCTION = (15, 1)
    GET_FUNCTION = (16, -1)

    def getValue(self):
        return self.value[0]

    def getSize(self):
        return self.value[1]

    @classmethod
    def fromByte(cls, value:int):
        for prop in cls:
            if prop.getValue() == value:
                return prop
        raise ValueError("Unknown config property: %d" % value)

class ConfigPacket(Packet):
    """Configuration Packet"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dst:Addr=None, read:ConfigProperty=None, write:ConfigProperty=None, val:bytearray=None):
        """Initiate a configuration packet

        Args:
            data (bytearray, optional): array of bytes contains the packet header and payload. Defaults to None.
            net (int, optional): network id. Defaults to None.
            src (Addr, optional): source node address. Defaults to None.
            dst (Addr, optional): destination node address. Defaults to None.
            read (ConfigProperty, optional): read a configuration. Defaults to None.
            write (ConfigProperty, optional): write a configuration. Defaults to None.
            val (bytearray, optional): array of bytes contains the configuration value (or the index for GET_RULE/GET_ALIAS). Defaults to None.
        """
        super().__init__(data=data, net=net, src=src, dst=dst)
        if data is None:
            self.setType(ct.CONFIG)
            if read:
                self.setConfigId(read)
                if val:
                    self.setParams(val, -1)
            elif write:
                self.setConfigId(write).setWrite()
                if write.getSize() != 0:
                    self.setParams(val or bytearray(), write.getSize())

    def isWrite(self):
        return (self.getPayloadValue(ct.CNF_PATH_INDEX) >> ct.CNF_MASK_POS) == 1

    def setWrite(self):
        return self.setPayloadValue(ct.CNF_PATH_INDEX, self.getPayloadValue(ct.CNF_PATH_INDEX) | (1 << ct.CNF_MASK_POS))

    def getConfigId(self):
        return ConfigProperty.fromByte(self.getPayloadValue(ct.CNF_PATH_INDEX) & ct.CNF_MASK)

    def setConfigId(self, prop:ConfigProperty):
        if self.getPayloadSize() > 0:
            flag = self.getPayloadValue(ct.CNF_PATH_INDEX) & ~ct.CNF_MASK
        else:
            flag = 0
        return self.setPayloadValue(ct.CNF_PATH_INDEX, flag | prop.getValue())

    def getParams(self):
        return self.getPayloadFromTo(ct.CNF_HDR_LEN, self.getPayloadSize())

    def setParams(self, values, size:int):
        if size == -1:
            size = len(values)
        if len(values) < size:
            raise ValueError("Config value needs %d bytes" % size)
        self.setLen(ct.DFLT_HDR_LEN + ct.CNF_HDR_LEN)
        return self.setPayloadFromTo(values, 0, ct.CNF_HDR_LEN, size)

    @staticmethod
    def createFunctionPackets(net:int, src:Addr, dst:Addr, id:int, data:bytearray):
        """Split a function payload in ADD_FUNCTION packets ([id, part, total] + chunk)"""
        size = ct.FUNCTION_PAYLOAD_LEN
        total = max(1, ceil(len(data) / size))
        if total > ct.REQUEST_PARTS_MAX:
            raise PacketTooLongError("Function needs %d fragments" % total)
        return [ConfigPacket(net=net, src=src, dst=dst, write=ConfigProperty.ADD_FUNCTION,
                    val=bytearray([id, p, total]) + bytearray(data[p*size:(p+1)*size])) for p in range(total)]

class RegProxyPacket(Packet):
    """Register Proxy Packet (sent by a sink when it joins the controller)"""
    def __init__(self, data:bytearray=None, net:int=None, src:Addr=None, dPid:str=None, mac:str=None, port:int=None, isa:tuple=None):
        """Initiate a register proxy packet

        Args:
            dPid (str, optional): datapath id (up to 8 characters). Defaults to None.
            mac (str, optional): colon separated mac address. Defaults to None.
            port (int, optional): switch port. Defaults to None.
            isa (tuple, optional): (ip, tcp port) of the sink. Defaults to None.
        """
        super().__init__(data=data, net=net, src=src, dst=src)
        if data is None:
            self.setType(ct.REG_PROXY)
            self.setLen(ct.DFLT_HDR_LEN + ct.REG_HDR_LEN)
            self.setDpid(dPid or "")
            self.setMac(mac or "00:00:00:00:00:00")
            self.setPort(port or 0)
            self.setInetSocketAddress(isa or ("0.0.0.0", 0))

    def getDpid(self):
        return self.getPayloadFromTo(ct.REG_DPID_INDEX, ct.REG_MAC_INDEX).rstrip(b'\x00').decode('utf-8')

    def setDpid(self, dpid:str):
        tmp = dpid.encode('utf-8')[:ct.DPID_LEN]
        tmp = tmp + bytes(ct.DPID_LEN - len(tmp))
        return self.setPayloadFromTo(tmp, 0, ct.REG_DPID_INDEX, ct.DPID_LEN)

    def getMac(self):
        return ':'.join('{:02x}'.format(x) for x in self.getPayloadFromTo(ct.REG_MAC_INDEX, ct.REG_MAC_INDEX + ct.MAC_LEN))

    def setMac(self, mac:str):
        elements = mac.split(':')
        if len(elements) != ct.MAC_LEN:
            raise ValueError("Invalid MAC address: %s" % mac)
        return self.setPayloadFromTo(bytes(int(x, 16) for x in elements), 0, ct.REG_MAC_INDEX, ct.MAC_LEN)

    def getPort(self):
        return int.from_bytes(self.getPayloadFromTo(ct.REG_PORT_INDEX, ct.REG_PORT_INDEX + ct.PORT_LEN), 'big')

    def setPort(self, port:int):
        return self.setPayloadFromTo(port.to_bytes(ct.PORT_LEN, 'big'), 0, ct.REG_PORT_INDEX, ct.PORT_LEN)

    def getInetSocketAddress(self):
        ip = inet_ntoa(bytes(self.getPayloadFromTo(ct.REG_IP_INDEX, ct.REG_IP_INDEX + ct.IP_LEN)))
        return (ip, mergeBytes(self.getPayloadValue(ct.REG_TCP_INDEX), self.getPayloadValue(ct.REG_TCP_INDEX + 1)))

    def setInetSocketAddress(self, isa:tuple):
        self.setPayloadFromTo(inet_aton(isa[0]), 0, ct.REG_IP_INDEX, ct.IP_LEN)
        self.setPayloadValue(ct.REG_TCP_INDEX, (isa[1] >> 8) & 0xFF)
        return self.setPayloadValue(ct.REG_TCP_INDEX + 1, isa[1] & 0xFF)
