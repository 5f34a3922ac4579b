"""
Saving extracted records to disk.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

import pandas as pd

logger = logging.getLogger(__name__)


def default_output_filename(ticker: str, suffix: str = "json") -> str:
    """Dated file name for a ticker, e.g. 'GOOG_20231023.json'."""
    return f"{ticker.upper()}_{pd.Timestamp.now().strftime('%Y%m%d')}.{suffix}"


def save_to_disk(filename: str, data: Any, output_dir: Union[str, Path] = "out") -> Path:
    """
    Write data to a file in the output folder.

    Strings are written as is; anything else is written as indented JSON.

    Args:
        filename: File name inside the output folder
        data: Record or text to write
        output_dir: Folder to write to, created if missing

    Returns:
        Path of the written file
    """
    out_folder = Path(output_dir)
    if not out_folder.exists():
        logger.info(f"Creating output folder {out_folder}")
        out_folder.mkdir(parents=True, exist_ok=True)

    file_path = out_folder / filename
    text = data if isinstance(data, str) else json.dumps(data, indent=2)
    file_path.write_text(text, encoding='utf-8')

    logger.info(f"Saved {file_path} to disk")
    return file_path


def save_valuation_csv(
    valuation_measures: List[dict],
    ticker: str,
    output_dir: Union[str, Path] = "out"
) -> Path:
    """
    Save every Valuation Measures column as one CSV row.

    Args:
        valuation_measures: Records returned by extract_valuation_measures
        ticker: Stock ticker, used for the file name
        output_dir: Folder to write to, created if missing

    Returns:
        Path of the written CSV
    """
    df = pd.DataFrame(valuation_measures)
    df.insert(0, 'ticker', ticker.upper())

    csv_text = df.to_csv(index=False)
    filename = default_output_filename(ticker, suffix="valuation.csv")
    path = save_to_disk(filename, csv_text, output_dir)

    logger.info(f"Saved {len(df)} valuation columns for {ticker.upper()}")
    return path
