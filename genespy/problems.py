"""
Example problems.

Objective functions and cost-matrix helpers for the bundled example runs:
the Beale function for real-valued genomes and the travel cost of a tour
for permutation genomes (used with SCX).
"""

import math
from typing import Dict, List, Sequence, Any, Hashable


def beale(genome: Sequence[float], data: Any = None) -> float:
    """
    Beale function of the first two genes (global minimum 0 at (3, 0.5)).
    """
    x, y = genome[0], genome[1]
    return (
        (1.5 - x + x * y) ** 2
        + (2.25 - x + x * y ** 2) ** 2
        + (2.625 - x + x * y ** 3) ** 2
    )


def travel_cost(genome: Sequence[Hashable], data: Dict) -> float:
    """
    Cost of travelling from data['start'] through the genome's nodes in order.

    Args:
        genome: Visiting order (without the start node)
        data: Dict with 'cost' (cost[u][v]), 'start', and 'circuit'
            (add the edge back to the start when True)

    Returns:
        Total tour cost
    """
    matrix = data['cost']
    start = data['start']

    total = matrix[start][genome[0]]
    for i in range(len(genome) - 1):
        total += matrix[genome[i]][genome[i + 1]]

    if data.get('circuit', False):
        total += matrix[genome[-1]][start]

    return total


def haversine_distance(
    lat_from: float,
    long_from: float,
    lat_to: float,
    long_to: float,
    sphere_radius: float = 6371000.0
) -> float:
    """
    Great-circle distance between two points given in degrees.

    Returns:
        Distance in the unit of sphere_radius (meters by default)
    """
    lat_from = math.radians(lat_from)
    long_from = math.radians(long_from)
    lat_to = math.radians(lat_to)
    long_to = math.radians(long_to)

    lat_delta = lat_to - lat_from
    long_delta = long_to - long_from

    angle = 2.0 * math.asin(math.sqrt(
        math.sin(lat_delta / 2.0) ** 2
        + math.cos(lat_from) * math.cos(lat_to) * math.sin(long_delta / 2.0) ** 2
    ))

    return angle * sphere_radius


def geographic_distance_matrix(locations: Sequence[Dict]) -> Dict[Hashable, Dict[Hashable, float]]:
    """
    Symmetric haversine cost matrix keyed by location id.

    Args:
        locations: Dicts with 'id', 'latitude' and 'longitude'

    Returns:
        matrix[id_from][id_to] -> meters
    """
    matrix = {loc['id']: {} for loc in locations}

    for i, origin in enumerate(locations):
        matrix[origin['id']][origin['id']] = 0.0
        for target in locations[i + 1:]:
            distance = haversine_distance(
                origin['latitude'], origin['longitude'],
                target['latitude'], target['longitude']
            )
            matrix[origin['id']][target['id']] = distance
            matrix[target['id']][origin['id']] = distance

    return matrix


def euclidean_distance_matrix(points: Dict[Hashable, Sequence[float]]) -> Dict[Hashable, Dict[Hashable, float]]:
    """
    Symmetric Euclidean cost matrix.

    Args:
        points: Mapping node id -> coordinates

    Returns:
        matrix[id_from][id_to] -> distance
    """
    ids = list(points)
    matrix = {node: {} for node in ids}

    for i, a in enumerate(ids):
        matrix[a][a] = 0.0
        for b in ids[i + 1:]:
            distance = math.dist(points[a], points[b])
            matrix[a][b] = distance
            matrix[b][a] = distance

    return matrix


def tour_nodes(locations: Sequence[Dict], start: Hashable) -> List[Hashable]:
    """Ids of every location except the start, in input order."""
    return [loc['id'] for loc in locations if loc['id'] != start]
