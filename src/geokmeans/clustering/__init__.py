from geokmeans.clustering.driver import ClusteringResult, reseed_empty, run
from geokmeans.clustering.node import CentroidNode
from geokmeans.clustering.partition import Partition

__all__ = ["CentroidNode", "ClusteringResult", "Partition", "reseed_empty", "run"]
