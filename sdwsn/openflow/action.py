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
from sdwsn.util.utils import getBitRange, setBitRange, mergeBytes, getOperandFromString, getMathOperatorFromString, getMathOperatorToString, getNetworkPacketByteFromName, getNetworkPacketByteName
from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import RuleSyntaxError
from sdwsn.data.addr import Addr

class Action(Enum):
    """Action type

    Args:
        Enum (NULL): Null action
        Enum (FORWARD_U): Unicast forwarding action
        Enum (FORWARD_B): Broadcast forwarding action
        Enum (DROP): Drop a packet
        Enum (ASK): Request the controller to get the forwarding rule
        Enum (FUNCTION): Run a registered node function
        Enum (SET): Write the result of an operation in the packet or in the status register
        Enum (MATCH): Match the packet again against the flow table

    Returns:
        value: int value of the action
        name: name of the action
    """
    NULL = 0
    FORWARD_U = 1
    FORWARD_B = 2
    DROP = 3
    ASK = 4
    FUNCTION = 5
    SET = 6
    MATCH = 7

    def getValue(self):
        return self.value

class AbstractAction(object):
    """Abstract Action Type"""
    def __init__(self, actionType:Action=None, size:int=None, action:bytearray=None):
        """Initialte an abstract action

        Args:
            actionType (Action, optional): enum action type. Defaults to None.
            size (int, optional): number of value bytes of the action. Defaults to None.
            action (bytearray, optional): is array of bytes started with the actionType and follows with action values (instructions). Defaults to None.
        """
        if size is None:
            size = 0
        if action:
            self.action = bytearray(action)
            if len(self.action) < size + 1:
                raise RuleSyntaxError("%s action needs %d value bytes" % (actionType.name, size))
        else:
            self.action = bytearray(size+1)
            self.setType(actionType)

    def getType(self):
        return self.action[ct.AC_TYPE_INDEX]

    def getTypeName(self):
        return Action(self.getType()).name

    def setType(self, actionType:Action):
        self.action[ct.AC_TYPE_INDEX] = actionType.value

    def getValue(self, index:int=None):
        if index is None:
            return self.action[ct.AC_VALUE_INDEX:]
        return self.action[index + ct.AC_VALUE_INDEX]

    def setValue(self, index:int, actionValue:int):
        self.action[index + ct.AC_VALUE_INDEX] = actionValue & 0xff
        return self

    @staticmethod
    def build(data):
        """Build the concrete action out of its string or byte form

        Raises:
            RuleSyntaxError: unknown action type
        """
        if isinstance(data, str):
            switcher = {
             "FORWARD_U": (lambda : ForwardUnicastAction(strValue=data)),
             "FORWARD_B": (lambda : ForwardBroadcastAction()),
             "DROP": (lambda : DropAction()),
             "ASK": (lambda : AskAction()),
             "FUNCTION": (lambda : FunctionAction(strValue=data)),
             "SET": (lambda : SetAction(strValue=data)),
             "MATCH": (lambda : MatchAction())
            }
            key = data.strip().split(' ')[0]
        elif isinstance(data, (bytes, bytearray)) and len(data) > 0:
            switcher = {
             Action.FORWARD_U.value: (lambda : ForwardUnicastAction(action=data)),
             Action.FORWARD_B.value: (lambda : ForwardBroadcastAction(action=data)),
             Action.DROP.value: (lambda : DropAction(action=data)),
             Action.ASK.value: (lambda : AskAction(action=data)),
             Action.FUNCTION.value: (lambda : FunctionAction(action=data)),
             Action.SET.value: (lambda : SetAction(action=data)),
             Action.MATCH.value: (lambda : MatchAction(action=data))
            }
            key = data[ct.AC_TYPE_INDEX]
        else:
            raise RuleSyntaxError("No action type found: %r" % (data,))
        if key not in switcher:
            raise RuleSyntaxError("No action type found: %r" % (data,))
        return switcher[key]()

    def toByteArray(self):
        return bytearray(self.action)

    def __eq__(self, other):
        if not isinstance(other, AbstractAction):
            return NotImplemented
        return self.action == other.action

    def __hash__(self):
        return hash(bytes(self.action))

class SetAction(AbstractAction):
    """Set action type"""
    def __init__(self, action:bytearray=None, strValue:str=None):
        """Initate a set action

        Args:
            action (bytearray, optional): array of bytes contains the action instructions. Defaults to None.
            strValue (str, optional): action value expression, e.g. "SET P.10 = R.11 + 12" or "SET R.3 = 5". Defaults to None.
        """
        super().__init__(actionType = Action.SET, size = ct.SET_SIZE, action = action)
        if strValue:
            operands = strValue.strip().split(' ')
            if len(operands) not in (ct.SET_FULL_SET, ct.SET_HALF_SET) or operands[2] != "=":
                raise RuleSyntaxError("Invalid SET action: %s" % strValue)
            # Example: SET P.10 = R.11 + 12
            # Result (P.10) >> [2, 10]
            tmpRes = self.getResFromString(operands[ct.SET_RES])
            self.setResLocation(tmpRes[0])
            self.setRes(tmpRes[1])
            # Left-hand Operand (R.11) >> [3, 11]
            tmpLhs = getOperandFromString(operands[ct.SET_LHS])
            self.setLhsOperandType(tmpLhs[0])
            self.setLhs(tmpLhs[1])
            if len(operands) == ct.SET_FULL_SET:
                # Operator (+)
                self.setOperator(getMathOperatorFromString(operands[ct.SET_OP]))
                # Right-hand Operand (12) >> [1, 12]
                tmpRhs = getOperandFromString(operands[ct.SET_RHS])
                self.setRhsOperandType(tmpRhs[0])
                self.setRhs(tmpRhs[1])
            else:
                self.setRhsOperandType(ct.NULL)
                self.setRhs(0)

    @staticmethod
    def getResFromString(val):
        strVal = val.split(".")
        location = {
            "P": ct.PACKET,
            "R": ct.STATUS
        }.get(strVal[0])
        if location is None or len(strVal) != 2:
            raise RuleSyntaxError("The result of a SET must be in the packet or in the status register: %s" % val)
        if location == ct.PACKET:
            index = getNetworkPacketByteFromName(strVal[1])
        else:
            index = strVal[1]
        try:
            return [location, int(index)]
        except ValueError:
            raise RuleSyntaxError("Invalid SET result: %s" % val)

    def getRes(self):
        return mergeBytes(self.getValue(ct.SET_RES_INDEX_H), self.getValue(ct.SET_RES_INDEX_L))

    def setRes(self, val):
        self.setValue(ct.SET_RES_INDEX_H, int(val) >> 8)
        self.setValue(ct.SET_RES_INDEX_L, int(val))

    def getResLocation(self):
        return getBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_RES_BIT, ct.SET_RES_LEN) + 2

    def setResLocation(self, val):
        self.setValue(ct.SET_OP_INDEX, setBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_RES_BIT, ct.SET_RES_LEN, val - 2))

    def getResToString(self):
        if self.getResLocation() == ct.PACKET:
            return "P." + getNetworkPacketByteName(self.getRes())
        return "R." + str(self.getRes())

    def getLhs(self):
        return mergeBytes(self.getValue(ct.SET_LEFT_INDEX_H), self.getValue(ct.SET_LEFT_INDEX_L))

    def getLhsOperandType(self):
        return getBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_LEFT_BIT, ct.SET_LEFT_LEN)

    def setLhsOperandType(self, val):
        self.setValue(ct.SET_OP_INDEX, setBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_LEFT_BIT, ct.SET_LEFT_LEN, val))

    def setLhs(self, val):
        self.setValue(ct.SET_LEFT_INDEX_H, int(val) >> 8)
        self.setValue(ct.SET_LEFT_INDEX_L, int(val))

    def getRhs(self):
        return mergeBytes(self.getValue(ct.SET_RIGHT_INDEX_H), self.getValue(ct.SET_RIGHT_INDEX_L))

    def getRhsOperandType(self):
        return getBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_RIGHT_BIT, ct.SET_RIGHT_LEN)

    def setRhsOperandType(self, val):
        self.setValue(ct.SET_OP_INDEX, setBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_RIGHT_BIT, ct.SET_RIGHT_LEN, val))

    def setRhs(self, val):
        self.setValue(ct.SET_RIGHT_INDEX_H, int(val) >> 8)
        self.setValue(ct.SET_RIGHT_INDEX_L, int(val))

    def getOperator(self):
        return getBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_OP_BIT, ct.SET_OP_LEN)

    def setOperator(self, val):
        self.setValue(ct.SET_OP_INDEX, setBitRange(self.getValue(ct.SET_OP_INDEX), ct.SET_OP_BIT, ct.SET_OP_LEN, val))

    @staticmethod
    def _operandToString(location, value):
        return {
            ct.NULL: "",
            ct.CONST: str(value),
            ct.PACKET: "P." + getNetworkPacketByteName(value),
            ct.STATUS: "R." + str(value)
        }.get(location, "")

    def __str__(self):
        f = self.getResToString()
        l = self._operandToString(self.getLhsOperandType(), self.getLhs())
        if self.getRhsOperandType() == ct.NULL:
            return '{} {} = {}'.format(Action.SET.name, f, l)
        r = self._operandToString(self.getRhsOperandType(), self.getRhs())
        o = getMathOperatorToString(self.getOperator()).strip()
        return '{} {} = {} {} {}'.format(Action.SET.name, f, l, o, r)

class FunctionAction(AbstractAction):
    """Function action type"""
    def __init__(self, action:bytearray=None, strValue:str=None, id:int=None, args:bytearray=None):
        """Initiate a function action (id of a registered function followed by its arguments)

        Args:
            action (bytearray, optional): array of bytes contains the action instructions. Defaults to None.
            strValue (str, optional): action value expression, e.g. "FUNCTION 1 10 20". Defaults to None.
            id (int, optional): function id. Defaults to None.
            args (bytearray, optional): function arguments. Defaults to None.
        """
        super().__init__(actionType = Action.FUNCTION, size = ct.FN_SIZE, action = action)
        if strValue:
            tmp = strValue.strip().split(' ')
            try:
                values = [int(x) for x in tmp[1:]]
            except ValueError:
                raise RuleSyntaxError("Invalid FUNCTION action: %s" % strValue)
            if not values:
                raise RuleSyntaxError("FUNCTION action needs a function id: %s" % strValue)
            self.setId(values[0])
            self.setArgs(bytearray(values[1:]))
        elif id is not None:
            self.setId(id)
            self.setArgs(args or bytearray())

    def getId(self):
        return self.getValue(ct.FN_ID_INDEX)

    def setId(self, val:int):
        self.setValue(ct.FN_ID_INDEX, val)
        return self

    def getArgs(self):
        return self.action[ct.AC_VALUE_INDEX + ct.FN_ARGS_INDEX:]

    def setArgs(self, args:bytearray):
        self.action = self.action[:ct.AC_VALUE_INDEX + ct.FN_ARGS_INDEX] + bytearray(args)
        return self

    def __str__(self):
        return ' '.join([Action.FUNCTION.name, str(self.getId())] + [str(x) for x in self.getArgs()])

class MatchAction(AbstractAction):
    """Match action type"""
    def __init__(self, action:bytearray=None):
        """Initiate a match action

        Args:
            action (bytearray, optional): array of bytes contains the action instructions. Defaults to None.
        """
        super().__init__(actionType = Action.MATCH, size = ct.MATCH_SIZE, action = action)

    def __str__(self):
        return Action.MATCH.name

class DropAction(AbstractAction):
    """Drop action type"""
    def __init__(self, action:bytearray=None):
        super().__init__(actionType = Action.DROP, size = ct.DROP_SIZE, action = action)

    def __str__(self):
        return Action.DROP.name

class AskAction(AbstractAction):
    """Ask action type"""
    def __init__(self, action:bytearray=None):
        super().__init__(actionType = Action.ASK, size = ct.ASK_SIZE, action = action)

    def __str__(self):
        return Action.ASK.name

class ForwardAction(AbstractAction):
    """Forward action"""
    def getNextHop(self):
        return Addr(bytes([self.getValue(ct.FD_NXH_INDEX), self.getValue(ct.FD_NXH_INDEX + 1)]))

    def setNextHop(self, addr:Addr):
        self.setValue(ct.FD_NXH_INDEX, addr.getHigh())
        self.setValue(ct.FD_NXH_INDEX + 1, addr.getLow())
        return self

class ForwardUnicastAction(ForwardAction):
    """Forward-unicast action"""
    def __init__(self, action:bytearray=None, strValue:str=None, nxtHop:Addr=None):
        """Initiate a forward-unicast action

        Args:
            action (bytearray, optional): array of bytes contains the action instructions. Defaults to None.
            strValue (str, optional): action value expression. Defaults to None.
            nxtHop (Addr, optional): next forwarding unicast hop. Defaults to None.
        """
        super().__init__(actionType = Action.FORWARD_U, size = ct.FD_SIZE, action = action)
        if strValue:
            tmp = strValue.strip().split(' ')
            # Example: FORWARD_U 1.5
            if len(tmp) != 2:
                raise RuleSyntaxError("Invalid FORWARD_U action: %s" % strValue)
            try:
                self.setNextHop(Addr(tmp[1]))
            except ValueError:
                raise RuleSyntaxError("Invalid next hop: %s" % tmp[1])
        elif nxtHop:
            self.setNextHop(nxtHop)

    def __str__(self):
        return '{} {}'.format(Action.FORWARD_U.name, str(self.getNextHop()))

class ForwardBroadcastAction(ForwardAction):
    """Forwarding-broadcast action"""
    def __init__(self, action:bytearray=None):
        super().__init__(actionType = Action.FORWARD_B, size = ct.FD_SIZE, action = action)
        self.setNextHop(Addr(ct.BROADCAST_ADDR))

    def __str__(self):
        return Action.FORWARD_B.name
