import json
import sys
from pathlib import Path

import pandas as pd

HOVER_ANGLE = 999.0


def load_flightpath(path) -> pd.DataFrame:
    with open(path, "r") as file:
        records = json.load(file)
    return pd.DataFrame(
        records,
        columns=["orderNo", "fromLongitude", "fromLatitude", "angle", "toLongitude", "toLatitude"],
    )


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per order: number of moves, hovers among them, and straight-line
    distance flown (degrees). Orders keep their flight order.
    """
    if df.empty:
        return pd.DataFrame(columns=["orderNo", "moves", "hovers", "distance"])

    df = df.assign(
        hover=df["angle"] == HOVER_ANGLE,
        distance=((df["toLongitude"] - df["fromLongitude"]) ** 2
                  + (df["toLatitude"] - df["fromLatitude"]) ** 2) ** 0.5,
    )
    summary = (
        df.groupby("orderNo", sort=False)
        .agg(moves=("angle", "size"), hovers=("hover", "sum"), distance=("distance", "sum"))
        .reset_index()
    )
    summary["hovers"] = summary["hovers"].astype(int)
    return summary


def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    if len(argv) != 1:
        print("usage: summarize_flightpath.py resultfiles/flightpath-YYYY-MM-DD.json")
        return 2

    path = Path(argv[0])
    summary = summarize(load_flightpath(path))

    print(f"\n--- Flight path summary: {path.name} ---")
    print(f"Orders flown: {len(summary)}")
    print(f"Total moves: {int(summary['moves'].sum()) if len(summary) else 0}\n")
    for row in summary.itertuples(index=False):
        print(f"  {row.orderNo}: {row.moves} moves, {row.hovers} hovers, {row.distance:.5f} deg")
    return 0


if __name__ == "__main__":
    sys.exit(main())
