import networkx as nx
from sdwsn.data.addr import Addr

class Routing:

    def __init__(self, graph:nx.MultiDiGraph):
        self.graph = graph
        self.initial = None
        # Computed path Cache dict of calculated route {str(node id), list(Addr)}
        self.results = {}
        self.lastSource = ""
        self.lastModification = -1
        # number of single source computations (a cache hit does not count)
        self.computations = 0

    def getNode(self, id:str):
        if id in self.graph:
            return self.graph.nodes[id]
        return None

    def setSource(self, src:str):
        self.initial = src

    def getResults(self):
        return self.results

    def clear(self):
        self.results.clear()
        self.lastSource = ""
        self.lastModification = -1

class Dijkstra(Routing):
    """Shortest paths over the link lengths (255 - link quality)"""
    def __init__(self, graph:nx.MultiDiGraph, weight:str="length"):
        super().__init__(graph)
        self.weight = weight
        self.paths = {}

    def dijkstra(self):
        """Single source shortest paths from the current source

        Returns:
            tuple: (distances dict, paths dict) keyed by node id
        """
        self.computations += 1
        return nx.single_source_dijkstra(self.graph, self.initial, weight=self.weight)

    def getRoute(self, src:str, dst:str, modification:int):
        """Path of node addresses from src to dst, empty if there is none

        A new computation runs only when the source or the graph modification
        epoch changed since the last one, otherwise the cached result is used.

        Args:
            src (str): source node id <net.addr>
            dst (str): destination node id <net.addr>
            modification (int): graph modification epoch

        Returns:
            list: list of Addr from src to dst
        """
        if src == dst or self.getNode(src) is None or self.getNode(dst) is None:
            return []
        p = None
        if self.lastSource != src or self.lastModification != modification:
            self.results.clear()
            self.setSource(src)
            _, self.paths = self.dijkstra()
            self.lastSource = src
            self.lastModification = modification
        else:
            p = self.results.get(dst)
        if p is None:
            p = [self.nodeAddress(id) for id in self.paths.get(dst, [])]
            self.results[dst] = p
        return list(p)

    def nodeAddress(self, id:str):
        addr = self.graph.nodes[id].get("nodeAddress")
        if addr is None:
            addr = Addr(id.split('.', 1)[1])
        return addr
