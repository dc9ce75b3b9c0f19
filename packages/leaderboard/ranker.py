from typing import List, Sequence, Tuple, Union
from packages.config.constants import PODIUM_SIZE
from .models import Metric, RankedToken, Standings, TokenRecord

def rank(records: Sequence[TokenRecord], metric: Union[Metric, str]) -> List[TokenRecord]:
    # sorted() is stable and keeps input order for ties even with reverse=True
    metric = Metric(metric)
    return sorted(records, key=lambda r: r.metric_value(metric), reverse=True)

def split_podium(ranked: Sequence[TokenRecord], size: int = PODIUM_SIZE) -> Tuple[List[TokenRecord], List[TokenRecord]]:
    return list(ranked[:size]), list(ranked[size:])

def standings(records: Sequence[TokenRecord], metric: Union[Metric, str]) -> Standings:
    metric = Metric(metric)
    ranked = [RankedToken(rank=i, token=t) for i, t in enumerate(rank(records, metric), 1)]
    return Standings(metric=metric, podium=ranked[:PODIUM_SIZE], rest=ranked[PODIUM_SIZE:])
