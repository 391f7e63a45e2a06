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

from sdwsn.util.utils import getBitRange, getCompOperatorFromString, setBitRange, mergeBytes, getOperandFromString, getCompOperatorToString, getNetworkPacketByteName
from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import RuleSyntaxError

class Window(object):
    """Matching Window"""
    def __init__(self, window:bytearray=None):
        """Initiate the matching part of a flow table entry

        Args:
            window (bytearray, optional): five bytes holding the matching expression. Defaults to None.
        """
        if window is not None:
            if len(window) != ct.W_SIZE:
                raise ValueError("A window is %d bytes long, got %d" % (ct.W_SIZE, len(window)))
            self.window = bytearray(window)
        else:
            self.window = bytearray(ct.W_SIZE)

    @classmethod
    def fromString(cls, val:str):
        """Parse an expression such as "P.DST == 5" or "R.3 > P.10"

        Raises:
            RuleSyntaxError: malformed expression or unknown operator
        """
        frm = Window()
        operands = val.strip().split(" ")
        if len(operands) != ct.W_LEN:
            raise RuleSyntaxError("Invalid window: %s" % val)
        lhs = operands[0]
        tmpLhs = getOperandFromString(lhs)
        frm.setLhsOperandType(tmpLhs[0])
        frm.setLhs(tmpLhs[1])

        frm.setOperator(getCompOperatorFromString(operands[1]))

        rhs = operands[2]
        tmpRhs = getOperandFromString(rhs)
        frm.setRhsOperandType(tmpRhs[0])
        frm.setRhs(tmpRhs[1])

        if lhs in ct.W_SIZE_2_OPTIONS or rhs in ct.W_SIZE_2_OPTIONS:
            frm.setSize(ct.W_SIZE_2)
        else:
            frm.setSize(ct.W_SIZE_1)
        return frm

    def getLhsOperandType(self):
        return getBitRange(self.window[ct.W_OP_INDEX], ct.W_LEFT_BIT, ct.W_LEFT_LEN)

    def getLhs(self):
        return mergeBytes(self.window[ct.W_LEFT_INDEX_H], self.window[ct.W_LEFT_INDEX_L])

    def getLhsToString(self):
        return self._operandToString(self.getLhsOperandType(), self.getLhs())

    def getRhsOperandType(self):
        return getBitRange(self.window[ct.W_OP_INDEX], ct.W_RIGHT_BIT, ct.W_RIGHT_LEN)

    def getRhs(self):
        return mergeBytes(self.window[ct.W_RIGHT_INDEX_H], self.window[ct.W_RIGHT_INDEX_L])

    def getRhsToString(self):
        return self._operandToString(self.getRhsOperandType(), self.getRhs())

    @staticmethod
    def _operandToString(location, value):
        return {
            ct.NULL: "0",
            ct.CONST: str(value),
            ct.PACKET: "P.%s"% getNetworkPacketByteName(value),
            ct.STATUS: "R.%s"% value
        }.get(location, "")

    def getOperator(self):
        return getBitRange(self.window[ct.W_OP_INDEX], ct.W_OP_BIT, ct.W_OP_LEN)

    def setOperator(self, val):
        self.window[ct.W_OP_INDEX] = setBitRange(self.window[ct.W_OP_INDEX], ct.W_OP_BIT, ct.W_OP_LEN, val)
        return self

    def setLhsOperandType(self, val):
        self.window[ct.W_OP_INDEX] = setBitRange(self.window[ct.W_OP_INDEX], ct.W_LEFT_BIT, ct.W_LEFT_LEN, val)
        return self

    def setLhs(self, val):
        self.window[ct.W_LEFT_INDEX_H] = (int(val) >> 8) & 0xff
        self.window[ct.W_LEFT_INDEX_L] = int(val) & 0xff
        return self

    def setRhsOperandType(self, val):
        self.window[ct.W_OP_INDEX] = setBitRange(self.window[ct.W_OP_INDEX], ct.W_RIGHT_BIT, ct.W_RIGHT_LEN, val)
        return self

    def setRhs(self, val):
        self.window[ct.W_RIGHT_INDEX_H] = (int(val) >> 8) & 0xff
        self.window[ct.W_RIGHT_INDEX_L] = int(val) & 0xff
        return self

    def getSize(self):
        return getBitRange(self.window[ct.W_OP_INDEX], ct.W_SIZE_BIT, ct.W_SIZE_LEN)

    def setSize(self, val):
        self.window[ct.W_OP_INDEX] = setBitRange(self.window[ct.W_OP_INDEX], ct.W_SIZE_BIT, ct.W_SIZE_LEN, val)
        return self

    def toByteArray(self):
        return bytearray(self.window)

    def __eq__(self, other):
        if not isinstance(other, Window):
            return NotImplemented
        return self.window == other.window

    def __hash__(self):
        return hash(bytes(self.window))

    def __str__(self):
        return '{} {} {}'.format(self.getLhsToString(), getCompOperatorToString(self.getOperator()), self.getRhsToString())
