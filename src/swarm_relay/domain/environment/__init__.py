"""Static world geometry: beacons and the per-tick proximity index."""
from .beacons import Beacon, BeaconId, BeaconRegistry, BEACON_A, BEACON_B
from .proximity import ProximityIndex

__all__ = ["Beacon", "BeaconId", "BeaconRegistry", "BEACON_A", "BEACON_B", "ProximityIndex"]
