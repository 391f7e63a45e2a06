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

import logging
from sdwsn.util.utils import CustomFormatter

#logging----------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
ch.setFormatter(CustomFormatter())
logger.addHandler(ch)
#-----------------------------------

class FunctionContext(object):
    """Node operations a FUNCTION callback is allowed to use"""
    def __init__(self, node):
        self.node = node

    def getAddress(self):
        return self.node.myAddress

    def getNet(self):
        return self.node.myNet

    def getSinkAddress(self):
        return self.node.getActualSinkAddress()

    def getStatus(self, index:int):
        return self.node.statusRegister[index]

    def setStatus(self, index:int, val:int):
        self.node.statusRegister[index] = val & 0xFF

    def getFlowTable(self):
        """FlowTable of the node, rules are added with insertRule to keep the replace policy"""
        return self.node.flowTable

    def insertRule(self, entry):
        self.node.insertRule(entry)

    def getNeighborTable(self):
        """{Addr: Neighbor}"""
        return self.node.neighborTable

    def getAcceptedIds(self):
        return self.node.acceptedId

    def getRxQueue(self):
        """Intake queue of (packet, rssi) items"""
        return self.node.rxQueue

    def getTxQueue(self):
        return self.node.txQueue

    def radioTx(self, packet):
        self.node.radioTx(packet)

    def controllerTx(self, packet):
        self.node.controllerTx(packet)

    def runFlowMatch(self, packet):
        self.node.runFlowMatch(packet)

class FunctionRegistry(object):
    """Static table of node functions

    Callbacks are plain python callables `callback(context, args, packet)` declared
    with the `FunctionRegistry.register(name)` decorator. A node binds them to the
    1 byte ids referenced by FUNCTION actions.
    """
    catalog = {}

    def __init__(self):
        self.functions = {}

    @classmethod
    def register(cls, name:str):
        def decorator(callback):
            cls.catalog[name] = callback
            return callback
        return decorator

    def bind(self, id:int, callback):
        """Bind a callable, or the name of a cataloged callable, to an id

        Raises:
            KeyError: unknown function name
        """
        if isinstance(callback, str):
            callback = self.catalog[callback]
        self.functions[id] = callback
        logger.info('Function %s bound at position %d', getattr(callback, '__name__', callback), id)

    def unbind(self, id:int):
        return self.functions.pop(id, None)

    def get(self, id:int):
        return self.functions.get(id)

    def __contains__(self, id):
        return id in self.functions

    def __len__(self):
        return len(self.functions)

@FunctionRegistry.register("forward_to_sink")
def forwardToSink(context, args, packet):
    """Send the packet to the sink the node is attached to"""
    packet.setSrc(context.getAddress())
    packet.setDst(context.getSinkAddress())
    context.runFlowMatch(packet)

@FunctionRegistry.register("count")
def count(context, args, packet):
    """Increase the status register byte given as first argument"""
    index = args[0] if args else 0
    context.setStatus(index, context.getStatus(index) + 1)
