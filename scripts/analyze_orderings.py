"""Pairwise similarity and position tables across participant orderings."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import argparse

import pandas as pd

from order_reconciliation.consensus import build_position_index, calculate_consensus
from order_reconciliation.evaluation import calculate_order_diff
from order_reconciliation.evaluation.metrics import mean, population_std
from order_reconciliation.ordering import Ordering, non_empty
from order_reconciliation.reconciler import participant_labels
from order_reconciliation.utils.io import load_orderings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Analyze agreement between participant orderings")
    parser.add_argument("orderings", type=Path)
    parser.add_argument("--out-dir", type=Path, default=Path("results/analysis"))
    parser.add_argument("--no-figures", action="store_true")
    return parser.parse_args(argv)


def similarity_matrix(orderings: list[Ordering]) -> pd.DataFrame:
    """Symmetric participant x participant similarity scores (0-100)."""
    labels = participant_labels(orderings)
    matrix = pd.DataFrame(100, index=labels, columns=labels, dtype=int)
    for i, left in enumerate(orderings):
        for j in range(i + 1, len(orderings)):
            score = calculate_order_diff(left.items, orderings[j].items).similarity_score
            matrix.iat[i, j] = score
            matrix.iat[j, i] = score
    return matrix


def position_table(orderings: list[Ordering]) -> pd.DataFrame:
    """One row per item: consensus rank, mean/std of positions and per-participant positions."""
    consensus = calculate_consensus(orderings)
    index = build_position_index(orderings)
    labels = participant_labels(orderings)

    rows = []
    for rank, item in enumerate(consensus):
        row = {"item": item, "consensus_rank": rank}
        for label, ordering in zip(labels, orderings):
            row[label] = ordering.items.index(item) if item in ordering.items else None
        rows.append(row)

    df = pd.DataFrame(rows, columns=["item", "consensus_rank", *labels])
    df["mean_position"] = [mean(index[item]) for item in consensus]
    df["position_std"] = [population_std(index[item]) for item in consensus]
    return df


def _save_heatmap(matrix: pd.DataFrame, out_dir: Path) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(3.5 + 0.3 * len(matrix), 2.5 + 0.3 * len(matrix)))
    image = ax.imshow(matrix.to_numpy(), vmin=0, vmax=100, cmap="viridis")
    ax.set_xticks(range(len(matrix.columns)), labels=list(matrix.columns), rotation=45, ha="right")
    ax.set_yticks(range(len(matrix.index)), labels=list(matrix.index))
    ax.set_title("Pairwise order similarity")
    fig.colorbar(image, ax=ax)
    fig.savefig(out_dir / "similarity_heatmap.png", dpi=300, bbox_inches="tight")
    plt.close(fig)


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    args = parse_args(argv)
    orderings = non_empty(load_orderings(args.orderings))
    if not orderings:
        print("No non-empty orderings found.")
        return

    args.out_dir.mkdir(parents=True, exist_ok=True)
    matrix = similarity_matrix(orderings)
    matrix.to_csv(args.out_dir / "similarity_matrix.csv")
    position_table(orderings).to_csv(args.out_dir / "position_table.csv", index=False)

    if not args.no_figures:
        _save_heatmap(matrix, args.out_dir)
    print(f"Analysis artifacts written to {args.out_dir}")


if __name__ == "__main__":
    main()
