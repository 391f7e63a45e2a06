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

from sdwsn.util.constants import Constants as ct
from sdwsn.util.utils import mergeBytes

class Addr:
    """Node Address Object"""
    def __init__(self, addr):
        """Generate a node address (two bytes, written as <high>.<low>)

        Args:
            addr (int | bytearray | bytes | str | Addr): integer value, two bytes, "<high>.<low>" or "<int>" string
        """
        self.addr = bytearray(2)
        if isinstance(addr, Addr):
            self.addr[:] = addr.addr
        elif type(addr) is int:
            if addr < 0 or addr > 0xFFFF:
                raise ValueError("Address out of range: %s" % addr)
            self.addr[0] = addr >> 8
            self.addr[1] = addr & 0xff
        elif type(addr) is bytearray or type(addr) is bytes:
            self.addr[0] = addr[0]
            self.addr[1] = addr[1]
        elif type(addr) is str:
            tmp = addr.split('.')
            if len(tmp) == 2:
                self.addr[0] = int(tmp[0])
                self.addr[1] = int(tmp[1])
            else:
                self.addr[0] = int(tmp[0]) >> 8
                self.addr[1] = int(tmp[0]) & 0xff
        else:
            raise ValueError("Invalid address: %r" % (addr,))

    def getArray(self):
        return bytearray(self.addr)

    def getHigh(self):
        return self.addr[0]

    def getLow(self):
        return self.addr[1]

    def intValue(self):
        return mergeBytes(self.addr[0], self.addr[1])

    def isBroadcast(self):
        return self.intValue() == ct.BROADCAST_ADDR

    def __hash__(self):
        return hash(self.intValue())

    def __eq__(self, other):
        if not isinstance(other, Addr):
            return NotImplemented
        return (self.intValue() == other.intValue())

    def __ne__(self, other):
        return not (self == other)

    def __lt__(self, other):
        return (self.intValue() < other.intValue())

    def __repr__(self): return "Addr(%s)" % self

    def __str__(self) -> str: return "{}.{}".format(self.addr[0],self.addr[1])
