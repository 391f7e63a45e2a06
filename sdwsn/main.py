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

from optparse import OptionParser
import signal
import time
import logging
from sdwsn.data.node import Mote, Sink
from sdwsn.data.addr import Addr
from sdwsn.ctrl.controller import DijkstraController
from sdwsn.app.medium import Medium
from sdwsn.openflow.packet import DataPacket
from sdwsn.util.constants import Constants as ct
from sdwsn.util.utils import CustomFormatter, loadConfig

#logging----------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
ch = logging.StreamHandler()
ch.setLevel(logging.DEBUG)
ch.setFormatter(CustomFormatter())
logger.addHandler(ch)
#-----------------------------------

VERSION = "1.0"

NET = 1
LINK_RSSI = 200

def version(*_args):
    "Print sdwsn version and exit"
    logger.info( "%s\n" % VERSION )
    exit()

def parseArgs():
    """Parse Command-Line"""
    desc = ("The %prog utility runs a sdwsn network in process:\n"
            "a sink, a line of motes and a shortest path controller.")

    usage = ('%prog [options]\n'
                '(type %prog -h for details)')

    opts = OptionParser(description=desc, usage=usage)
    opts.add_option('-c', '--config', type=str, default=None, help='Config File (json {"CONSTANT": value})')
    opts.add_option('-m', '--motes', type=int, default=3, help='number of motes in the line')
    opts.add_option('-d', '--duration', type=float, default=60, help='running time (in sec)')
    opts.add_option('-q', '--quit', action='store_true', default=False, help='build the network and exit')
    opts.add_option('--version', action='callback', callback=version,
                    help='prints the version and exits')

    options, args = opts.parse_args()
    if args:
        opts.print_help()
        exit()
    return options, args

def buildNetwork(motes:int):
    """Line topology: sink 0.1 <-> mote 0.2 <-> mote 0.3 ...

    Returns:
        tuple: (controller, medium, sink, list of motes)
    """
    sink = Sink(NET, Addr(ct.SINK_ADDR))
    controller = DijkstraController(sinkAddress=sink.myAddress)
    medium = Medium(controller)
    medium.addNode(sink)
    prev = sink
    nodes = []
    for i in range(motes):
        mote = medium.addNode(Mote(NET, Addr(ct.SINK_ADDR + i + 1)))
        medium.addLink(prev, mote, LINK_RSSI)
        nodes.append(mote)
        prev = mote
    return controller, medium, sink, nodes

def run(options):
    controller, medium, sink, motes = buildNetwork(options.motes)
    logger.info(f'network: {sink.id} + {[m.id for m in motes]}')
    if options.quit:
        return
    stopped = []
    signal.signal(signal.SIGINT, lambda *args: stopped.append(True))
    controller.start()
    medium.start()
    sink.start()
    for mote in motes:
        mote.start()
    try:
        deadline = time.time() + options.duration
        sent = False
        while not stopped and time.time() < deadline:
            time.sleep(ct.TIMER_TICK)
            # halfway through, the farthest mote sends a packet to the first one
            if not sent and len(motes) > 1 and time.time() > deadline - options.duration / 2:
                src, dst = motes[-1], motes[0]
                packet = DataPacket(net=NET, src=src.myAddress, dst=dst.myAddress, payload=bytearray(b'hello'))
                packet.setNxh(src.myAddress)
                src.rxRadioPacket(packet, ct.RSSI_MAX)
                sent = True
    finally:
        for mote in motes:
            mote.stop()
        sink.stop()
        controller.stop()
        medium.stop()
        logger.info(f'graph: {controller.networkGraph.getGraph().number_of_nodes()} nodes, '
                    f'{controller.networkGraph.getGraph().number_of_edges()} edges, '
                    f'{controller.routingApp.computations} route computations')

def main():
    logger.info('*********** start ************')
    options, args = parseArgs()
    if options.config:
        logger.info(f'config: {loadConfig(options.config)}')
    run(options)

if __name__ == '__main__':
    main()
