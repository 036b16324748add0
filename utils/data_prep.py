"""
SST-5 loading helpers.

The fine-grained Stanford Sentiment Treebank files are in fastText format,
one sentence per line:
    __label__4<TAB>a gorgeous , witty , seductive movie .

Label strategy (unchanged from the treebank):
  1 = very negative, 2 = negative, 3 = neutral, 4 = positive, 5 = very positive

CLI (quick profile of the three splits):
    python utils/data_prep.py --sst_dir data/sst
"""

import argparse
import csv
import os
import sys

import pandas as pd

LABEL_PREFIX = "__label__"


def read_sst(path: str) -> pd.DataFrame:
    """Return a DataFrame with columns: label (int 1..5), text (str)."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"SST-5 file not found: {path}")

    df = pd.read_csv(
        path,
        sep="\t",
        header=None,
        names=["label", "text"],
        quoting=csv.QUOTE_NONE,
        encoding="utf-8",
        dtype=str,
    )
    df = df.dropna(subset=["label", "text"])
    df["label"] = df["label"].str.replace(LABEL_PREFIX, "", regex=False).astype(int)
    df["text"] = df["text"].str.strip()
    df = df[df["text"].str.len() > 0].reset_index(drop=True)

    bad = set(df["label"].unique()) - {1, 2, 3, 4, 5}
    if bad:
        raise ValueError(f"Unexpected labels in {path}: {sorted(bad)}")
    return df


def profile_print(name: str, df: pd.DataFrame) -> None:
    print(f"\n=== {name} ===")
    print(f"Rows: {len(df):,}")
    print("Label counts:")
    print(df["label"].value_counts().sort_index().to_string())
    print("Sample:", df["text"].iloc[0] if len(df) else "-")


def parse_args():
    p = argparse.ArgumentParser(description="Profile the SST-5 splits.")
    p.add_argument("--sst_dir", default="data/sst", help="Directory with sst_{train,dev,test}.txt")
    return p.parse_args()


def main():
    args = parse_args()
    for split in ("train", "dev", "test"):
        path = os.path.join(args.sst_dir, f"sst_{split}.txt")
        profile_print(split, read_sst(path))


if __name__ == "__main__":
    sys.exit(main())
