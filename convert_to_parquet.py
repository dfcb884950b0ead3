"""
Convert a resident export to the Parquet file read by the dashboard.

Reads a CSV or Excel export of the residents table and writes a
streamlined Parquet file containing only the columns the dashboard needs.

Usage:
    python convert_to_parquet.py --input residents.csv --output residents.parquet
    python convert_to_parquet.py --input residents.xlsx --sheet residents
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import pandas as pd

from constants import OPTIONAL_COLUMNS, REQUIRED_COLUMNS

EXCEL_SUFFIXES = ('.xlsx', '.xls')
STATUS_COLUMNS = ['sex', 'civil_status', 'employment_status']


def read_export(input_path: str | Path, sheet_name: str | int = 0) -> pd.DataFrame:
    """Read a CSV or Excel export, keeping the required and known optional columns."""
    input_path = Path(input_path)
    if input_path.suffix.lower() in EXCEL_SUFFIXES:
        df = pd.read_excel(input_path, sheet_name=sheet_name)
    else:
        df = pd.read_csv(input_path, dtype={'barangay_code': str})

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Export is missing required columns: {', '.join(missing)}")

    keep = REQUIRED_COLUMNS + [col for col in OPTIONAL_COLUMNS if col in df.columns]
    return df[keep]


def clean_export(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows without a barangay and normalise column types for Parquet."""
    df = df[df['barangay_code'].notna() & (df['barangay_code'].astype(str).str.strip() != '')].copy()

    # PSGC codes may arrive as numbers from Excel
    df['barangay_code'] = df['barangay_code'].astype(str).str.strip()
    for col in STATUS_COLUMNS:
        df[col] = df[col].where(df[col].isna(), df[col].astype(str).str.strip().str.lower())
    df['birthdate'] = pd.to_datetime(df['birthdate'], errors='coerce')
    for col in OPTIONAL_COLUMNS:
        if col in df.columns:
            df[col] = df[col].where(df[col].isna(), df[col].astype(str))
    return df


def convert_to_parquet(
    input_path: str | Path,
    output_path: str | Path,
    sheet_name: str | int = 0,
) -> bool:
    """Convert a resident export to Parquet.

    Returns
    -------
    bool
        True if successful, False otherwise (details on stderr).
    """
    print(f"Input:  {input_path}")
    print(f"Output: {output_path}")

    try:
        df = read_export(input_path, sheet_name)
        print(f"✓ Loaded {len(df):,} rows")

        df = clean_export(df)
        print(f"✓ After dropping rows without a barangay: {len(df):,} rows")

        df.to_parquet(output_path, engine='pyarrow', compression='snappy', index=False)

        size_mb = os.path.getsize(output_path) / (1024 * 1024)
        print(f"✓ Parquet file written ({size_mb:.2f} MB)")
        return True

    except FileNotFoundError:
        print(f"✗ Error: export file not found: {input_path}", file=sys.stderr)
        return False
    except ValueError as e:
        print(f"✗ Error reading export: {e}", file=sys.stderr)
        return False


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description='Convert a resident export (CSV or Excel) to Parquet'
    )
    parser.add_argument('--input', required=True, help='Input CSV or Excel file path')
    parser.add_argument(
        '--output',
        help='Output Parquet file path (defaults to the input name with .parquet)',
    )
    parser.add_argument('--sheet', default=0, help='Excel sheet name (Excel input only)')
    args = parser.parse_args(argv)

    output = args.output or str(Path(args.input).with_suffix('.parquet'))
    success = convert_to_parquet(args.input, output, args.sheet)

    if success:
        print("✓ All done! The Parquet file can now be used by the dashboard.")
    else:
        print("✗ Conversion failed. Please check the error messages above.")
    return 0 if success else 1


if __name__ == '__main__':
    sys.exit(main())
