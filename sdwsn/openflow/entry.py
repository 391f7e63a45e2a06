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
from sdwsn.util.errors import MalformedPacketError, RuleSyntaxError
from sdwsn.openflow.window import Window
from sdwsn.openflow.stat import Stat
from sdwsn.openflow.action import AbstractAction

class Entry(object):
    """Flow Table Entry"""
    def __init__(self, entry:bytearray=None, windows:list=None, actions:list=None, stats:Stat=None):
        """Initiate a flow table entry (rule)

        Args:
            entry (bytearray, optional): array of bytes contains the match, action, stats of an entry. Defaults to None.
            windows (list, optional): first part of an entry for matching an arriving packet (can be one or more matching windows). Defaults to None.
            actions (list, optional): second part of an entry for performing instructions (can be one or more actions). Defaults to None.
            stats (Stat, optional): entry statistics. Defaults to None.
        """
        self.windows = list(windows) if windows else []
        self.actions = list(actions) if actions else []
        # the third part of an entry which contains the entry's statistics
        self.stats = stats if stats else Stat()
        if entry:
            self._parse(bytearray(entry))

    def _parse(self, entry:bytearray):
        # FlowEntry is [windows size]+[windows[]]+[size+Action+size+Action+..]+[stats[]]
        winLen = entry[0]
        if winLen % ct.W_SIZE or 1 + winLen + ct.ST_SIZE > len(entry):
            raise MalformedPacketError("Invalid flow entry windows length: %d" % winLen)
        i = 1
        while i < 1 + winLen:
            self.windows.append(Window(entry[i:i+ct.W_SIZE]))
            i += ct.W_SIZE
        end = len(entry) - ct.ST_SIZE
        while i < end:
            size = entry[i]
            i += 1
            if size == 0 or i + size > end:
                raise MalformedPacketError("Invalid flow entry action length: %d" % size)
            try:
                self.actions.append(AbstractAction.build(entry[i:i+size]))
            except RuleSyntaxError as ex:
                raise MalformedPacketError(str(ex))
            i += size
        self.stats = Stat(entry[end:])

    @staticmethod
    def fromString(val:str):
        """Parse a rule such as "if (P.DST == 5 && P.TYP == 3) { FORWARD_U 0.2; ASK }"

        Raises:
            RuleSyntaxError: malformed rule
        """
        val = val.upper().strip()
        if not val.startswith("IF") or '(' not in val or ')' not in val or '{' not in val or '}' not in val:
            raise RuleSyntaxError("Invalid rule: %s" % val)
        res = Entry()

        strWindows = val[val.find('(')+1:val.rfind(')')].strip()
        if strWindows:
            for w in strWindows.split('&&'):
                res.addWindow(Window.fromString(w.strip()))

        strActions = val[val.find('{')+1:val.rfind('}')].strip()
        for a in strActions.split(';'):
            if a.strip():
                res.addAction(AbstractAction.build(a.strip()))

        if '[' in val and ']' in val:
            res.setStats(Stat.fromString(val[val.find('[')+1:val.rfind(']')].strip()))
        return res

    def toByteArray(self):
        target = bytearray()
        target.append(len(self.windows) * ct.W_SIZE)
        for fw in self.windows:
            target.extend(fw.toByteArray())
        for a in self.actions:
            tmp = a.toByteArray()
            target.append(len(tmp))
            target.extend(tmp)
        target.extend(self.stats.toByteArray())
        return target

    def getWindows(self):
        return self.windows

    def setWindows(self, windows:list):
        self.windows = windows
        return self

    def addWindow(self, window:Window):
        self.windows.append(window)
        return self

    def getActions(self):
        return self.actions

    def setActions(self, actions:list):
        self.actions = actions
        return self

    def addAction(self, action:AbstractAction):
        self.actions.append(action)
        return self

    def getStats(self):
        return self.stats

    def setStats(self, stats:Stat):
        self.stats = stats
        return self

    def __eq__(self, other):
        if not isinstance(other, Entry):
            return NotImplemented
        return (self.windows == other.windows)

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash(tuple(self.windows))

    def __str__(self) -> str:
        return "if (%s) { %s } [%s]" %(' && '.join(str(w) for w in self.windows), '; '.join(str(a) for a in self.actions), self.stats)
