"""Smoke evaluation harness for the lunch deals API.

Posts a set of origins to a running server and checks the result contract:
distance ordering, price invariant, and the nearest deal per origin.

Usage:
  python run_eval.py --base http://localhost:3001 --out eval/report_v1
"""

from __future__ import annotations

import argparse
import csv
import json
import math
import statistics
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Iterable

import requests


DEFAULT_ORIGINS: list[dict[str, Any]] = [
  {'oid': 'dtla', 'lat': 34.0407, 'lng': -118.2468},
  {'oid': 'hollywood', 'lat': 34.0928, 'lng': -118.3287},
  {'oid': 'santa-monica', 'lat': 34.0195, 'lng': -118.4912},
  {'oid': 'sf-soma', 'lat': 37.7817, 'lng': -122.4006},
  {'oid': 'nyc-midtown', 'lat': 40.7549, 'lng': -73.9817},
  {'oid': 'seattle', 'lat': 47.6062, 'lng': -122.3321},
]


def load_jsonl(path: Path) -> list[dict[str, Any]]:
  with path.open('r', encoding='utf-8') as fh:
    return [json.loads(line) for line in fh if line.strip()]


def is_non_decreasing(values: list[float]) -> bool:
  return all(a <= b for a, b in zip(values, values[1:]))


@dataclass
class EvalResult:
  oid: str
  count: int
  latency_ms: float
  sorted_ok: bool
  prices_ok: bool
  nearest_name: str = ''
  nearest_miles: float = float('nan')
  median_miles: float = float('nan')
  source: str = ''
  error: str | None = None


def evaluate_origin(base_url: str, origin: dict[str, Any], timeout: float) -> EvalResult:
  url = f"{base_url}/api/deals"
  started = time.perf_counter()
  response = requests.post(url, json={'lat': origin['lat'], 'lng': origin['lng']}, timeout=timeout)
  latency_ms = (time.perf_counter() - started) * 1000

  if not response.ok:
    snippet = response.text[:200]
    return EvalResult(
      oid=origin['oid'],
      count=0,
      latency_ms=latency_ms,
      sorted_ok=False,
      prices_ok=False,
      error=f"HTTP {response.status_code}: {snippet}",
    )

  try:
    data = response.json()
  except ValueError as exc:
    return EvalResult(
      oid=origin['oid'],
      count=0,
      latency_ms=latency_ms,
      sorted_ok=False,
      prices_ok=False,
      error=f"invalid json: {exc}",
    )

  deals: list[dict[str, Any]] = data.get('deals') or []
  distances = [float(d.get('distance') or 0.0) for d in deals]
  prices_ok = all(
    float(d.get('discounted_price', 0.0)) <= float(d.get('original_price', 0.0))
    for d in deals
  )
  nearest = deals[0] if deals else {}

  return EvalResult(
    oid=origin['oid'],
    count=len(deals),
    latency_ms=latency_ms,
    sorted_ok=is_non_decreasing(distances),
    prices_ok=prices_ok,
    nearest_name=str(nearest.get('restaurant_name') or ''),
    nearest_miles=distances[0] if distances else float('nan'),
    median_miles=statistics.median(distances) if distances else float('nan'),
    source=str(data.get('source') or ''),
    error=None if data.get('count') == len(deals) else 'count does not match deals',
  )


def _fmt(value: float, digits: int = 2) -> str:
  return f'{value:.{digits}f}' if math.isfinite(value) else 'nan'


def main() -> None:
  parser = argparse.ArgumentParser(description='Smoke evaluation for the lunch deals API')
  parser.add_argument('--base', default='http://localhost:3001', help='API base URL')
  parser.add_argument('--origins', help='Optional JSONL of {oid, lat, lng} origins')
  parser.add_argument('--concurrency', type=int, default=2, help='Number of worker threads')
  parser.add_argument('--out', default='eval/report_v1', help='Output directory for reports')
  parser.add_argument('--timeout', type=float, default=30.0, help='Request timeout in seconds')
  args = parser.parse_args()

  base_url = args.base.rstrip('/')
  out_dir = Path(args.out)
  out_dir.mkdir(parents=True, exist_ok=True)

  origins = DEFAULT_ORIGINS
  if args.origins:
    origins_path = Path(args.origins)
    if not origins_path.exists():
      raise FileNotFoundError(f'origins file not found: {origins_path}')
    origins = load_jsonl(origins_path)

  results: list[EvalResult] = []

  def task(origin: dict[str, Any]) -> EvalResult:
    try:
      return evaluate_origin(base_url, origin, args.timeout)
    except requests.RequestException as exc:
      return EvalResult(
        oid=origin['oid'],
        count=0,
        latency_ms=float('nan'),
        sorted_ok=False,
        prices_ok=False,
        error=str(exc),
      )

  workers = max(1, args.concurrency)
  with ThreadPoolExecutor(max_workers=workers) as executor:
    futures = [executor.submit(task, origin) for origin in origins]
    for future in as_completed(futures):
      results.append(future.result())

  results.sort(key=lambda item: item.oid)

  metrics_path = out_dir / 'metrics.csv'
  with metrics_path.open('w', newline='', encoding='utf-8') as fh:
    writer = csv.writer(fh)
    writer.writerow([
      'oid',
      'count',
      'latency_ms',
      'sorted_ok',
      'prices_ok',
      'nearest_name',
      'nearest_miles',
      'median_miles',
      'source',
      'error',
    ])
    for item in results:
      writer.writerow([
        item.oid,
        item.count,
        _fmt(item.latency_ms, 1),
        item.sorted_ok,
        item.prices_ok,
        item.nearest_name,
        _fmt(item.nearest_miles),
        _fmt(item.median_miles),
        item.source,
        item.error or '',
      ])

  ok = [item for item in results if not item.error]
  latencies = [item.latency_ms for item in ok if math.isfinite(item.latency_ms)]

  def rate(values: Iterable[bool]) -> float:
    values = list(values)
    return sum(1 for v in values if v) / len(values) if values else 0.0

  summary = {
    'origins': len(results),
    'errors': len(results) - len(ok),
    'sorted_rate': rate(item.sorted_ok for item in ok),
    'price_invariant_rate': rate(item.prices_ok for item in ok),
    'latency_median_ms': statistics.median(latencies) if latencies else None,
    'results': [asdict(item) for item in results],
  }
  summary_path = out_dir / 'summary.json'
  with summary_path.open('w', encoding='utf-8') as fh:
    json.dump(summary, fh, indent=2, default=str)

  print(f'Evaluation finished. Metrics written to {metrics_path}')


if __name__ == '__main__':
  main()
