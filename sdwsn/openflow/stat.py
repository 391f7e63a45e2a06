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

from sdwsn.util.constants import Constants as ct

class Stat(object):
    """Flow Table Entry's Statistics"""
    def __init__(self, stats:bytearray=None):
        """Initiate the statistical part of an entry

        Args:
            stats (bytearray, optional): array of bytes contains (TTL, COUNT). Defaults to None.
                TTL : remaining lifetime of the entry, values from 0 to 254. TTL = 255 means that the entry is installed permanently
                COUNT: number of packets matched by the entry (saturates at 255)
        """
        self.stats = bytearray(ct.ST_SIZE)
        if stats and len(stats) == ct.ST_SIZE:
            self.stats[:] = stats
        else:
            self.stats[ct.ST_TTL_INDEX] = ct.RL_TTL_MAX
            self.stats[ct.ST_COUNT_INDEX] = 0

    @classmethod
    def fromString(cls, val:str):
        frm = Stat()
        for stat in val.split(","):
            tmp = stat.split(":")
            lhs = tmp[0].strip()
            rhs = str(ct.RL_TTL_PERM) if tmp[1].strip() == "PERM" else tmp[1].strip()
            {
                "TTL": lambda: frm.setTtl(int(rhs)),
                "COUNT": lambda : frm.setCounter(int(rhs))
            }.get(lhs, lambda: None)()
        return frm

    def getCounter(self):
        return self.stats[ct.ST_COUNT_INDEX]

    def setCounter(self, count:int):
        self.stats[ct.ST_COUNT_INDEX] = min(count, 0xFF)

    def increaseCounter(self):
        if self.stats[ct.ST_COUNT_INDEX] < 0xFF:
            self.stats[ct.ST_COUNT_INDEX] += 1

    def getTtl(self):
        return self.stats[ct.ST_TTL_INDEX]

    def setTtl(self, ttl:int):
        self.stats[ct.ST_TTL_INDEX] = ttl

    def setPermanent(self):
        self.setTtl(ct.RL_TTL_PERM)

    def isPermanent(self):
        return self.getTtl() == ct.RL_TTL_PERM

    def restoreTtl(self):
        if not self.isPermanent():
            self.setTtl(ct.RL_TTL_MAX)

    def decrementTtl(self, val:int):
        """Age the entry, the ttl never drops below zero"""
        if not self.isPermanent():
            self.setTtl(max(self.getTtl() - val, 0))

    def toByteArray(self):
        return bytearray(self.stats)

    def __str__(self):
        if self.isPermanent():
            return f"TTL: PERM, COUNT: {self.getCounter()}"
        else:
            return f"TTL: {self.getTtl()}, COUNT: {self.getCounter()}"
