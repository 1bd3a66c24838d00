from __future__ import annotations

import argparse
import csv
import json
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from gridproj.core.projection_evaluator import EvaluatorConfig, ProjectionEvaluator
from gridproj.core.projections import RandomLinearProjection
from gridproj.core.state_space import BoxStateSpace
from gridproj.utils.metrics import summarize_cells


def _parse_dims(spec: str) -> list[int]:
    """Parse "2,3,5" or an inclusive "start:stop:step" range."""
    s = spec.strip()
    if ":" in s:
        parts = s.split(":")
        if len(parts) != 3:
            raise ValueError("range must be start:stop:step")
        start, stop, step = (int(p) for p in parts)
        if step <= 0:
            raise ValueError("step must be > 0")
        values = list(range(start, stop + 1, step))
    else:
        values = [int(x) for x in s.split(",") if x.strip()]
    if not values:
        raise ValueError(f"no dims in {spec!r}")
    return values


@dataclass(frozen=True, slots=True)
class Row:
    from_dim: int
    to_dim: int
    low: float
    high: float
    extent_samples: int
    dimension_splits: float
    seed: int
    proj_seed: int
    cell_dims: str
    eval_samples: int
    n_cells: int
    max_per_cell: int
    mean_per_cell: float
    span_by_axis: str


def run_calibration(
    *,
    from_dim: int,
    to_dim: int,
    low: float,
    high: float,
    cfg: EvaluatorConfig,
    seed: int,
    proj_seed: int,
    eval_samples: int,
) -> Row:
    space = BoxStateSpace(np.full(from_dim, low), np.full(from_dim, high), name=f"box{from_dim}", seed=seed)
    strategy = RandomLinearProjection(from_dim, to_dim, rng=np.random.default_rng(int(proj_seed)))
    ev = ProjectionEvaluator(strategy, space, cfg)
    ev.setup()

    coords = [ev.compute_state_coordinates(space.sample_uniform()) for _ in range(int(eval_samples))]
    summary = summarize_cells(coords)

    return Row(
        from_dim=int(from_dim),
        to_dim=int(to_dim),
        low=float(low),
        high=float(high),
        extent_samples=int(cfg.extent_samples),
        dimension_splits=float(cfg.dimension_splits),
        seed=int(seed),
        proj_seed=int(proj_seed),
        cell_dims=json.dumps([float(c) for c in ev.cell_dimensions]),
        eval_samples=int(summary.n),
        n_cells=int(summary.n_cells),
        max_per_cell=int(summary.max_per_cell),
        mean_per_cell=float(summary.mean_per_cell),
        span_by_axis=json.dumps(summary.span_by_axis),
    )


def main() -> int:
    ap = argparse.ArgumentParser(description="Infer grid cell sizes for random projections of a box space")

    ap.add_argument("--from-dim", type=int, default=10)
    ap.add_argument(
        "--to-dims",
        type=str,
        default="2,3",
        help="projection output dims, list (2,3) or inclusive range (start:stop:step)",
    )
    ap.add_argument("--low", type=float, default=-1.0)
    ap.add_argument("--high", type=float, default=1.0)

    ap.add_argument("--extent-samples", type=int, default=100)
    ap.add_argument("--splits", type=float, default=20.0)

    ap.add_argument("--seed", type=int, default=0, help="state sampler seed")
    ap.add_argument("--proj-seed", type=int, default=0)
    ap.add_argument("--eval-samples", type=int, default=1000)

    ap.add_argument("--out", type=str, default="outputs/cells/cell_inference.csv")
    args = ap.parse_args()

    to_dims = _parse_dims(args.to_dims)
    if any(d <= 0 for d in to_dims):
        raise ValueError("to dims must be > 0")

    cfg = EvaluatorConfig(extent_samples=int(args.extent_samples), dimension_splits=float(args.splits))

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    rows: list[Row] = []
    for to_dim in to_dims:
        row = run_calibration(
            from_dim=int(args.from_dim),
            to_dim=int(to_dim),
            low=float(args.low),
            high=float(args.high),
            cfg=cfg,
            seed=int(args.seed),
            proj_seed=int(args.proj_seed),
            eval_samples=int(args.eval_samples),
        )
        rows.append(row)
        print(f"rp{int(to_dim)}: cells={row.cell_dims} occupied={row.n_cells} max/cell={row.max_per_cell}")

    fieldnames = list(Row.__annotations__.keys())
    write_header = not out_path.exists()
    with out_path.open("a", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        if write_header:
            w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fieldnames})

    print("Wrote:", out_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
