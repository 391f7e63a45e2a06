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

from sdwsn.data.addr import Addr
from sdwsn.util.constants import Constants as ct

class Neighbor:
    """Neigbor Node Information Object"""
    def __init__(self, addr:Addr=None, rssi:int=None, batt:int=None):
        """Generate neighbor node information object

        Args:
            addr (Addr, optional): address of the neigbor node. Defaults to None.
            rssi (int, optional): received signal strength of the neigbor node. Defaults to None.
            batt (int, optional): battery level advertised by the neigbor node. Defaults to None.
        """
        self.addr = Addr(ct.BROADCAST_ADDR) if addr is None else addr
        self.rssi = ct.RSSI_MAX if rssi is None else rssi
        self.batt = 0xFF if batt is None else batt

    def getAddr(self):
        return self.addr

    def getRssi(self):
        return self.rssi

    def getBatt(self):
        return self.batt

    def __eq__(self, other):
        if not isinstance(other, Neighbor):
            return NotImplemented
        return self.addr == other.addr

    def __hash__(self):
        return hash(self.addr)

    def __str__(self) -> str:
        return f'Addr: {self.addr} RSSI: {self.rssi} Batt: {self.batt}'
