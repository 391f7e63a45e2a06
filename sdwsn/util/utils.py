from sdwsn.util.constants import Constants as ct
from sdwsn.util.errors import RuleSyntaxError, ActionError
import json
import logging

def getOperandFromString(val:str):
    """Parse an operand expression (P.<byte>, R.<index> or a constant)

    Args:
        val (str): operand expression

    Returns:
        list: [location, value]
    """
    tmp = []
    strVal = val.split(".")
    switcherLh = {
        "P": ct.PACKET,
        "R": ct.STATUS
    }
    tmp.append(switcherLh.get(strVal[0], ct.CONST))
    try:
        if tmp[0] == ct.PACKET:
            tmp.append(int(getNetworkPacketByteFromName(strVal[1])))
        elif tmp[0] == ct.CONST:
            tmp.append(int(strVal[0]))
        else: tmp.append(int(strVal[1]))
    except (ValueError, IndexError):
        raise RuleSyntaxError("Invalid operand: %s" % val)
    return tmp

def getNetworkPacketByteFromName(val):
    return {
        "NET": ct.NET_INDEX,
        "LEN": ct.LEN_INDEX,
        "DST": ct.DST_INDEX,
        "SRC": ct.SRC_INDEX,
        "TYP": ct.TYP_INDEX,
        "TTL": ct.TTL_INDEX,
        "NXH": ct.NXH_INDEX
    }.get(val, val)

def getNetworkPacketByteName(val):
    return {
        ct.NET_INDEX : "NET",
        ct.LEN_INDEX : "LEN",
        ct.DST_INDEX : "DST",
        ct.SRC_INDEX : "SRC",
        ct.TYP_INDEX : "TYP",
        ct.TTL_INDEX : "TTL",
        ct.NXH_INDEX : "NXH"
    }.get(val, str(val))

def getCompOperatorFromString(val):
    op = {
        "==" : ct.EQUAL,
        "!=" : ct.NOT_EQUAL,
        ">"  : ct.GREATER,
        "<"  : ct.LESS,
        ">=" : ct.GREATER_OR_EQUAL,
        "<=" : ct.LESS_OR_EQUAL
    }.get(val)
    if op is None:
        raise RuleSyntaxError("Unknown comparison operator: %s" % val)
    return op

def getMathOperatorFromString(val):
    op = {
        "+"  : ct.ADD,
        "-"  : ct.SUB,
        "*"  : ct.MUL,
        "/"  : ct.DIV,
        "%"  : ct.MOD,
        "&"  : ct.AND,
        "|"  : ct.OR,
        "^"  : ct.XOR
    }.get(val)
    if op is None:
        raise RuleSyntaxError("Unknown math operator: %s" % val)
    return op

def getCompOperatorToString(val):
    return {
        ct.EQUAL : "==",
        ct.NOT_EQUAL : "!=",
        ct.GREATER : ">",
        ct.LESS : "<",
        ct.GREATER_OR_EQUAL : ">=",
        ct.LESS_OR_EQUAL : "<="
    }.get(val, "")

def getMathOperatorToString(val):
    return {
        ct.ADD : " + ",
        ct.SUB : " - ",
        ct.MUL : " * ",
        ct.DIV : " / ",
        ct.MOD : " % ",
        ct.AND : " & ",
        ct.OR : " | ",
        ct.XOR : " ^ "
    }.get(val, "")

def compare(op, val1, val2):
    if val1 == -1 or val2 == -1:
        return False
    else:
        return{
        ct.EQUAL : val1 == val2,
        ct.NOT_EQUAL : val1 != val2,
        ct.GREATER : val1 > val2,
        ct.LESS : val1 < val2,
        ct.GREATER_OR_EQUAL : val1 >= val2,
        ct.LESS_OR_EQUAL : val1 <= val2
        }.get(op, False)

def doOperation(op, val1, val2):
    """Apply a SET math operator on two operands

    Raises:
        ActionError: division by zero or unknown operator
    """
    if op in (ct.DIV, ct.MOD) and val2 == 0:
        raise ActionError("Division by zero")
    switcher = {
        ct.ADD : lambda: val1 + val2,
        ct.SUB : lambda: val1 - val2,
        ct.MUL : lambda: val1 * val2,
        ct.DIV : lambda: val1 // val2,
        ct.MOD : lambda: val1 % val2,
        ct.AND : lambda: val1 & val2,
        ct.OR : lambda: val1 | val2,
        ct.XOR : lambda: val1 ^ val2
    }
    if op not in switcher:
        raise ActionError("Unknown math operator: %s" % op)
    return switcher[op]()

def setBitRange(val:int=None, start:int=None, len:int=None, newVal:int=None):
    mask = ((1 << len) - 1) << start
    return (val & ~mask) | ((newVal << start) & mask)

def getBitRange(b:int=None, s:int=None, n:int=None):
    mask = ((1 << n) - 1) << s
    return (b & mask) >> s

def mergeBytes(high=None, low=None):
    return (high << 8) | low

def byteToStr(val:bytearray):
    return ' '.join('{:02x}'.format(x) for x in val)

def loadConfig(path:str):
    """Override Constants with the values found in a json file

    Args:
        path (str): json file with {"CONSTANT_NAME": value} items

    Returns:
        dict: the applied values
    """
    with open(path) as f:
        config = json.load(f)
    applied = {}
    for key, value in config.items():
        if hasattr(ct, key):
            setattr(ct, key, value)
            applied[key] = value
    return applied

class CustomFormatter(logging.Formatter):

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    format = "%(asctime)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"

    FORMATS = {
        logging.DEBUG: grey + format + reset,
        logging.INFO: grey + format + reset,
        logging.WARNING: yellow + format + reset,
        logging.ERROR: red + format + reset,
        logging.CRITICAL: bold_red + format + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)
