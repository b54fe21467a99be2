from __future__ import annotations

import dataclasses
from typing import Iterable, List

from models import Coordinates, Deal
from utils import distance_miles


def annotate(deals: Iterable[Deal], origin: Coordinates) -> List[Deal]:
    """Return copies of `deals` with `distance` set, nearest first.

    The input records are left untouched; equal distances keep input order.
    """
    annotated = [
        dataclasses.replace(deal, distance=distance_miles(origin, deal.coordinates))
        for deal in deals
    ]
    return sorted(annotated, key=lambda d: d.distance)
