import json
import os
from typing import Any, Dict, List

import pandas as pd

from src.utils.logging_utils import get_logger

LOGGER = get_logger(__name__)


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .txt, .json, .jsonl and .parquet formats.
    Returns a list of records shaped {"id": str, "lines": list[str]}.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = os.path.splitext(os.path.basename(file_path))[0]

    def _normalize_lines(value: Any) -> List[str]:
        if isinstance(value, str):
            return value.strip("\n").splitlines()
        if hasattr(value, "tolist"):
            value = value.tolist()
        if isinstance(value, (list, tuple)):
            return [str(line) for line in value]
        return []

    def _normalize_record(record: Dict[str, Any], index: int) -> Dict[str, Any]:
        raw = record.get("lines")
        if raw is None:
            raw = record.get("puzzle", "")
        return {
            "id": str(record.get("id") or f"{stem}-{index}"),
            "lines": _normalize_lines(raw),
        }

    # Case 1: Parquet File (Binary)
    if file_path.endswith(".parquet"):
        df = pd.read_parquet(file_path)
        records = df.to_dict(orient="records")
        return [_normalize_record(r, i) for i, r in enumerate(records)]

    # Case 2: JSON File (array or object)
    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, list):
            return [_normalize_record(p, i) for i, p in enumerate(payload) if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [_normalize_record(payload, 0)]
        return []

    # Case 3: JSONL File
    if file_path.endswith(".jsonl"):
        data = []
        with open(file_path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f):
                if not line.strip():
                    continue
                try:
                    obj = json.loads(line)
                except json.JSONDecodeError:
                    LOGGER.warning("Skipping malformed JSON on line %d of %s", lineno + 1, file_path)
                    continue
                if isinstance(obj, dict):
                    data.append(_normalize_record(obj, len(data)))
        return data

    # Case 4: Plain text, puzzles separated by blank lines
    data = []
    block: List[str] = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                block.append(line.strip())
                continue
            if block:
                data.append({"id": f"{stem}-{len(data)}", "lines": block})
                block = []
    if block:
        data.append({"id": f"{stem}-{len(data)}", "lines": block})
    return data
