"""
Addresses, operators and configuration loading
"""

import json
import pytest
from sdwsn.data.addr import Addr
from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import ActionError, RuleSyntaxError
from sdwsn.util.utils import compare, doOperation, getOperandFromString, loadConfig


@pytest.mark.parametrize("value", [258, "1.2", "258", bytearray([1, 2]), b'\x01\x02', Addr(258)])
def test_address_forms(value):
    addr = Addr(value)
    assert addr.intValue() == 258
    assert str(addr) == "1.2"
    assert addr.getHigh() == 1
    assert addr.getLow() == 2


def test_address_identity():
    assert Addr(ct.BROADCAST_ADDR).isBroadcast()
    assert Addr(1) == Addr("0.1")
    assert len({Addr(1), Addr("0.1"), Addr(2)}) == 2
    assert Addr(1) < Addr(2)
    with pytest.raises(ValueError):
        Addr(0x10000)
    with pytest.raises(ValueError):
        Addr(1.5)


def test_operands():
    assert getOperandFromString("P.DST") == [ct.PACKET, ct.DST_INDEX]
    assert getOperandFromString("R.12") == [ct.STATUS, 12]
    assert getOperandFromString("7") == [ct.CONST, 7]
    with pytest.raises(RuleSyntaxError):
        getOperandFromString("R.x")


def test_comparison_of_missing_operand():
    assert compare(ct.EQUAL, 3, 3)
    assert compare(ct.LESS_OR_EQUAL, 2, 3)
    assert not compare(ct.EQUAL, -1, -1)


def test_operations():
    assert doOperation(ct.SUB, 5, 7) == -2
    assert doOperation(ct.XOR, 6, 3) == 5
    assert doOperation(ct.MOD, 7, 4) == 3
    with pytest.raises(ActionError):
        doOperation(ct.DIV, 1, 0)
    with pytest.raises(ActionError):
        doOperation(42, 1, 1)


def test_load_config(tmp_path, monkeypatch):
    monkeypatch.setattr(ct, "RESPONSE_TIMEOUT", ct.RESPONSE_TIMEOUT)
    monkeypatch.setattr(ct, "CNT_BEACON_MAX", ct.CNT_BEACON_MAX)
    path = tmp_path / "sdwsn.json"
    path.write_text(json.dumps({"RESPONSE_TIMEOUT": 1000, "CNT_BEACON_MAX": 3, "NOT_A_CONSTANT": 1}))
    assert loadConfig(str(path)) == {"RESPONSE_TIMEOUT": 1000, "CNT_BEACON_MAX": 3}
    assert ct.RESPONSE_TIMEOUT == 1000
    assert not hasattr(ct, "NOT_A_CONSTANT")
