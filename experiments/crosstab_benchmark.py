from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from src.crosstab import Aggregators, CrossTab, sum_of, total_of
from src.pivot import RecordSet, by_field

GARMENT_ATTRIBUTES: Dict[str, Sequence[Any]] = {
    "color": ["blau", "gruen", "ocker", "orange", "maron", "rubin", "jasmin"],
    "size": [32, 34, 36, 38, 40, 42, 44],
    "collection": [
        "02", "02/03", "03", "03/04", "04", "04/05", "05", "05/06", "06", "06/07", "07", "07/08",
        "08", "08/09", "09", "09/10", "10", "10/11", "11", "11/12", "12", "12/13", "13",
    ],
    "fabric": ["jeans", "silk", "cotton", "kashmir", "leather"],
    "sales": [1, 3, 7, 10, 15, 20, 30, 40],
    "name": [
        "Sputnik", "Bella", "Corso", "Chelsea", "Cupido", "Dave", "Jaguar", "Lisette",
        "Maverick", "Pride", "Scott", "Superking", "Arlette", "Bastos", "Astra", "Belga",
    ],
}


@dataclass(frozen=True)
class BenchmarkResult:
    records: int
    elapsed: float
    table: CrossTab


def generate_garments(count: int, seed: Optional[int] = None) -> List[Dict[str, Any]]:
    """Random garment records drawn uniformly from `GARMENT_ATTRIBUTES`."""
    if count < 0:
        raise ValueError("Record count must be non-negative.")
    rng = np.random.default_rng(seed)
    picks = {attr: rng.integers(0, len(values), size=count) for attr, values in GARMENT_ATTRIBUTES.items()}
    garments: List[Dict[str, Any]] = []
    for idx in tqdm(range(count), desc="Generating garments", leave=False):
        garments.append({attr: GARMENT_ATTRIBUTES[attr][int(picks[attr][idx])] for attr in GARMENT_ATTRIBUTES})
    return garments


def run_crosstab_benchmark(count: int = 100_000, seed: Optional[int] = None) -> BenchmarkResult:
    """Time pivot(color) -> pivot(name) -> sales-sum cross-tab over random garments."""
    if count < 1:
        raise ValueError("Benchmark needs at least one garment to tabulate.")
    garments = RecordSet(generate_garments(count, seed))
    print(f"[benchmark] Generated {len(garments)} garments; pivoting by color and name.")

    start = time.perf_counter()
    grouped = garments.pivot(by_field("color"), "color").pivot(by_field("name"), "name")
    aggregators = Aggregators(cell=sum_of("sales"), row_total=total_of, col_total=total_of)
    table = grouped.crosstab("sales sum", aggregators=aggregators)
    elapsed = time.perf_counter() - start

    print(f"[benchmark] Cross-tab of {count} garments built in {elapsed:.3f}s.")
    return BenchmarkResult(records=count, elapsed=elapsed, table=table)
