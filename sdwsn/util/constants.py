class Constants:

    # Flow Table Entry Constans
    NULL = 0
    CONST = 1
    PACKET = 2
    STATUS = 3

    # Window Constants
    W_SIZE = 5 #in bytes
    W_SIZE_1 = 0 #one byte operands
    W_SIZE_2 = 1 #two bytes operands
    #indexes
    W_LEFT_BIT = 3
    W_LEFT_INDEX_H = 1
    W_LEFT_INDEX_L = 2
    W_LEFT_LEN = 2
    W_OP_BIT = 5
    W_OP_INDEX = 0
    W_OP_LEN = 3
    W_RIGHT_BIT = 1
    W_RIGHT_INDEX_H = 3
    W_RIGHT_INDEX_L = 4
    W_RIGHT_LEN = W_LEFT_LEN
    W_SIZE_BIT = 0
    W_SIZE_LEN = 1
    W_LEN = 3
    W_SIZE_2_OPTIONS = ['P.SRC', 'P.DST', 'P.NXH']
    # comparison operators
    EQUAL = 0
    NOT_EQUAL = 1
    GREATER = 2
    LESS = 3
    GREATER_OR_EQUAL = 4
    LESS_OR_EQUAL = 5
    # math operators
    ADD = 0
    SUB = 1
    MUL = 2
    DIV = 3
    MOD = 4
    AND = 5
    OR = 6
    XOR = 7

    # Node Constants
    CNT_BEACON_MAX = 10
    CNT_REPORT_MAX = 2 * CNT_BEACON_MAX
    CNT_UPDTABLE_MAX = 6
    RSSI_MIN = 0
    RSSI_MAX = 255
    STATUS_LEN = 1024
    ENTRY_TTL_DECR = 5 #ttl decrement applied on every table update
    TIMER_TICK = 1 #node timer period (in sec)
    # Packet Constants
    DFLT_HDR_LEN = 10
    MTU = 116
    DFLT_PAYLOAD_LEN = MTU - DFLT_HDR_LEN
    # Buffering
    BUFFER_SIZE = 100 #queue size (packets)
    QUEUE_POLL = 0.1 #blocked queue operations recheck the stop flag (in sec)
    # Indexes
    NET_INDEX = 0
    LEN_INDEX = 1
    DST_INDEX = 2
    DST_LEN = 2
    SRC_INDEX = 4
    SRC_LEN = 2
    TYP_INDEX = 6
    TTL_INDEX = 7
    NXH_INDEX = 8
    NXH_LEN = 2
    PLD_INDEX = 10
    # Types
    DATA = 0
    BEACON = 1
    REPORT = 2
    REQUEST = 3
    RESPONSE = 4
    OPEN_PATH = 5
    CONFIG = 6
    REG_PROXY = 7
    TTL_MAX = 100 # packets max time to live value (number of hops)
    THRES = 63 # net ids from THRES up are not structured packets
    BROADCAST_ADDR = 0xFFFF
    # Beacon Packet
    DIST_INDEX = 0
    BATT_INDEX = 1
    BEACON_HDR_LEN = 2
    # Report Packet
    NEIGH_NUM_INDEX = 2
    NEIGH_INDEX = 3
    NEIGH_LEN = 3
    MAX_NEIG = (DFLT_PAYLOAD_LEN - NEIGH_INDEX) // NEIGH_LEN
    # Config Packet
    CNF_PATH_INDEX = 0
    CNF_MASK_POS = 7
    CNF_MASK = 0x7F
    CNF_HDR_LEN = 1
    # Function Config Packet
    FUNCTION_HDR_LEN = 4
    FUNCTION_PAYLOAD_LEN = DFLT_PAYLOAD_LEN - FUNCTION_HDR_LEN
    # Open Path Packet
    OP_WINS_SIZE_INDEX = 0
    # Reg Proxy Packet
    REG_DPID_INDEX = 0
    DPID_LEN = 8
    REG_MAC_INDEX = REG_DPID_INDEX + DPID_LEN
    MAC_LEN = 6
    REG_PORT_INDEX = REG_MAC_INDEX + MAC_LEN
    PORT_LEN = 8
    REG_IP_INDEX = REG_PORT_INDEX + PORT_LEN
    IP_LEN = 4
    REG_TCP_INDEX = REG_IP_INDEX + IP_LEN
    TCP_LEN = 2
    REG_HDR_LEN = REG_TCP_INDEX + TCP_LEN
    # Request Packet
    ID_INDEX = 0
    PART_INDEX = 1
    TOTAL_INDEX = 2
    REQUEST_HDR_LEN = 3
    REQUEST_PAYLOAD_SIZE = DFLT_PAYLOAD_LEN - REQUEST_HDR_LEN
    REQUEST_PARTS_MAX = 255

    # Stats Constans
    ST_SIZE = 2
    ST_TTL_INDEX = 0
    ST_COUNT_INDEX = 1
    RL_TTL_PERM = 255
    RL_TTL_MAX = 254

    # Actions Constants
    AC_TYPE_INDEX = 0
    AC_VALUE_INDEX = 1

    # Set Action Constans
    # indexes
    SET_LEFT_BIT = 1
    SET_LEFT_INDEX_H = 3
    SET_LEFT_INDEX_L = 4
    SET_LEFT_LEN = 2
    SET_OP_BIT = 3
    SET_OP_INDEX = 0
    SET_OP_LEN = 3
    SET_RES_BIT = 0
    SET_RES_INDEX_H = 1
    SET_RES_INDEX_L = 2
    SET_RES_LEN = 1
    SET_RIGHT_BIT = 6
    SET_RIGHT_INDEX_H = 5
    SET_RIGHT_INDEX_L = 6
    SET_RIGHT_LEN = SET_LEFT_LEN
    # string parsing
    SET_FULL_SET = 6
    SET_HALF_SET = 4
    SET_RES = 1
    SET_LHS = 3
    SET_OP = 4
    SET_RHS = 5
    # size
    SET_SIZE = 7

    # Match, Drop and Ask Actions Constants
    MATCH_SIZE = 0
    DROP_SIZE = 0
    ASK_SIZE = 0

    # Function Action Constants
    FN_ID_INDEX = 0
    FN_ARGS_INDEX = 1
    FN_SIZE = 1

    # Forward Action Constants
    FD_NXH_INDEX = 0
    FD_SIZE = 2

    # Controller Constants
    CACHE_MAX_SIZE = 1000
    CACHE_EXP_TIME = 5 # in sec
    CACHE_SWEEP_PERIOD = 1 # in sec
    RESPONSE_TIMEOUT = 300 # in msec
    GRAPH_TIMEOUT = 30 # in sec
    RSSI_RESOLUTION = 30
    SINK_ADDR = 1
