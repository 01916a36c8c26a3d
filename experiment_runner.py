"""
CLI to benchmark the Dijkstra engine across generated graphs and seeds.

Reads experiments/experiments.yml, builds seeded random graphs, runs a batch
of random source/target queries per graph (plain or traced) and produces
summary metrics per run and per experiment. Traced queries use the settings
in trace_config.yml.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence
import csv
from concurrent.futures import ProcessPoolExecutor, as_completed
import random
import time

from algorithms import Outcome
from config import TraceConfig, load_trace_config
from dijkstra_engine import SimpleDijkstraEngine
from graph_builder import build_random_graph


@dataclass(frozen=True)
class ExperimentConfig:
    name: str
    nodes: int
    degree: int
    max_weight: int
    queries: int
    traced: bool = False


@dataclass(frozen=True)
class Config:
    seed: int
    seed_count: int
    experiments: Sequence[ExperimentConfig]


RUN_FIELDS = [
    "experiment",
    "seed",
    "nodes",
    "degree",
    "traced",
    "queries",
    "found",
    "exhausted",
    "avg_distance",
    "avg_path_nodes",
    "avg_frontier_pops",
    "avg_relaxed",
    "avg_events",
    "duration_sec",
]

AGGREGATE_FIELDS = [
    "experiment",
    "nodes",
    "degree",
    "traced",
    "runs",
    "avg_found_ratio",
    "avg_distance",
    "avg_frontier_pops",
    "avg_relaxed",
    "avg_events",
]


def load_config(path: Path) -> Config:
    import yaml  # type: ignore

    data = yaml.safe_load(path.read_text())
    experiments = [
        ExperimentConfig(
            name=exp["name"],
            nodes=int(exp["nodes"]),
            degree=int(exp["degree"]),
            max_weight=int(exp["max_weight"]),
            queries=int(exp["queries"]),
            traced=bool(exp.get("traced", False)),
        )
        for exp in data["experiments"]
    ]
    return Config(
        seed=int(data["seed"]),
        seed_count=int(data["seed_count"]),
        experiments=experiments,
    )


def run_experiments(
    config_path: Path,
    runs_csv: Path | None = None,
    aggregates_csv: Path | None = None,
    max_workers: int | None = None,
    use_processes: bool = True,
    trace_config: Path | None = None,
) -> List[Dict[str, object]]:
    cfg = load_config(config_path)
    trace_cfg = load_trace_config(trace_config) if trace_config else TraceConfig()
    start = time.time()

    tasks: List[tuple[ExperimentConfig, int]] = []
    for exp in cfg.experiments:
        for offset in range(cfg.seed_count):
            tasks.append((exp, cfg.seed + offset))

    print(f"[run] queued {len(tasks)} tasks")

    results: List[Dict[str, object]] = []
    if tasks:
        if use_processes:
            try:
                with ProcessPoolExecutor(max_workers=max_workers) as executor:
                    future_to_task = {
                        executor.submit(_run_task, asdict(exp), seed, trace_cfg): (exp.name, seed)
                        for exp, seed in tasks
                    }
                    for future in as_completed(future_to_task):
                        exp_name, seed = future_to_task[future]
                        try:
                            res = future.result()
                            results.append(res)
                            print(f"[run] completed experiment={exp_name} seed={seed} duration={res['duration_sec']:.2f}s")
                        except Exception as exc:
                            print(f"[run] failed experiment={exp_name} seed={seed}: {exc}")
            except (PermissionError, NotImplementedError, OSError) as exc:
                print(f"[run] process pool unavailable ({exc}), falling back to sequential execution")
                use_processes = False
                results = []
        else:
            print("[run] using sequential execution")

        if not use_processes:
            for exp, seed in tasks:
                res = _run_task(asdict(exp), seed, trace_cfg)
                results.append(res)
                print(f"[run] completed experiment={exp.name} seed={seed} duration={res['duration_sec']:.2f}s")

    # Completion order is nondeterministic under the process pool.
    results.sort(key=lambda r: (str(r["experiment"]), int(r["seed"])))

    if runs_csv:
        write_results_csv(results, runs_csv)
    if aggregates_csv:
        write_aggregates_csv(aggregate_by_experiment(results), aggregates_csv)

    elapsed = time.time() - start
    print(f"[run] completed {len(results)} total runs in {elapsed:.2f}s")
    return results


def aggregate_by_experiment(results: Iterable[Mapping[str, object]]) -> Dict[str, Dict[str, object]]:
    """
    Average per-run metrics for each experiment across its seeds.
    """
    grouped: Dict[str, List[Mapping[str, object]]] = {}
    for res in results:
        grouped.setdefault(str(res["experiment"]), []).append(res)

    aggregated: Dict[str, Dict[str, object]] = {}
    for name, runs in grouped.items():
        n = len(runs)
        metrics = [run["metrics"] for run in runs]

        def mean(key: str) -> float:
            return sum(float(m[key]) for m in metrics) / n  # type: ignore[index]

        found_ratios = [
            float(m["found"]) / float(m["queries"]) if m["queries"] else 0.0  # type: ignore[index]
            for m in metrics
        ]
        first = runs[0]
        aggregated[name] = {
            "experiment": name,
            "nodes": first["nodes"],
            "degree": first["degree"],
            "traced": first["traced"],
            "runs": float(n),
            "avg_found_ratio": sum(found_ratios) / n,
            "avg_distance": mean("avg_distance"),
            "avg_frontier_pops": mean("avg_frontier_pops"),
            "avg_relaxed": mean("avg_relaxed"),
            "avg_events": mean("avg_events"),
        }
    return aggregated


def _run_task(exp_dict: Dict[str, object], seed: int, trace_cfg: TraceConfig) -> Dict[str, object]:
    start_run = time.time()
    exp = ExperimentConfig(**exp_dict)  # type: ignore[arg-type]
    res = _run_single(exp, seed, trace_cfg)
    res["duration_sec"] = time.time() - start_run
    return res


def _run_single(exp: ExperimentConfig, seed: int, trace_cfg: TraceConfig) -> Dict[str, object]:
    graph = build_random_graph(exp.nodes, exp.degree, exp.max_weight, seed=seed)
    engine = SimpleDijkstraEngine(config=trace_cfg)
    rng = random.Random(seed)
    names = list(graph.keys())

    found = 0
    exhausted = 0
    distances: List[float] = []
    path_nodes: List[int] = []
    pops: List[int] = []
    relaxed: List[int] = []
    events: List[int] = []

    for _ in range(exp.queries if names else 0):
        source = rng.choice(names)
        target = rng.choice(names)
        if exp.traced:
            traced = engine.shortest_path_traced(graph, source, target)
            result = traced.result
            events.append(len(traced.events))
        else:
            result = engine.shortest_path(graph, source, target)

        if result.outcome is Outcome.FOUND:
            found += 1
            distances.append(result.distance)
            path_nodes.append(len(result.path))
        else:
            exhausted += 1
        pops.append(engine.last_frontier_pops)
        relaxed.append(engine.last_relaxed)

    return {
        "experiment": exp.name,
        "seed": seed,
        "nodes": exp.nodes,
        "degree": exp.degree,
        "traced": exp.traced,
        "metrics": {
            "queries": found + exhausted,
            "found": found,
            "exhausted": exhausted,
            "avg_distance": _mean(distances),
            "avg_path_nodes": _mean(path_nodes),
            "avg_frontier_pops": _mean(pops),
            "avg_relaxed": _mean(relaxed),
            "avg_events": _mean(events),
        },
    }


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def write_results_csv(results: Iterable[Mapping[str, object]], path: Path) -> None:
    """
    Write per-run results to CSV for downstream analysis.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RUN_FIELDS)
        writer.writeheader()
        for res in results:
            metrics = res.get("metrics", {})
            row = {key: res.get(key) for key in ("experiment", "seed", "nodes", "degree", "traced")}
            row.update({key: metrics.get(key, 0.0) for key in RUN_FIELDS[5:-1]})  # type: ignore[union-attr]
            row["duration_sec"] = res.get("duration_sec", 0.0)
            writer.writerow(row)


def write_aggregates_csv(aggregated: Mapping[str, Mapping[str, object]], path: Path) -> None:
    """
    Write aggregated metrics by experiment to CSV.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=AGGREGATE_FIELDS)
        writer.writeheader()
        for row in aggregated.values():
            writer.writerow({key: row.get(key, "") for key in AGGREGATE_FIELDS})


def main() -> None:
    config_path = Path(__file__).parent / "experiments" / "experiments.yml"
    trace_config = Path(__file__).parent / "trace_config.yml"
    out_dir = Path(__file__).parent / "experiments" / "results"
    runs_csv = out_dir / "runs.csv"
    aggregates_csv = out_dir / "aggregates.csv"

    results = run_experiments(
        config_path, runs_csv=runs_csv, aggregates_csv=aggregates_csv, trace_config=trace_config
    )
    for name, row in aggregate_by_experiment(results).items():
        print(f"{name}: {row}")
    print(f"Wrote runs to {runs_csv} and aggregates to {aggregates_csv}")


if __name__ == "__main__":
    main()
