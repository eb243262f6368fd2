from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from contract.artifacts import RESULT_FILE_SPECS

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from report.annotations import Annotation
    from report.summary import RunSummary


def _to_dict(obj: object) -> object:
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return obj


def _write_jsonl(path: Path, records: Sequence[object]) -> None:
    with path.open("wb") as f:
        for rec in records:
            payload = _to_dict(rec)
            f.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")


def _write_json(path: Path, obj: object) -> None:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(payload, option=opts))


def write_results(
    out_dir: Path, summary: RunSummary, annotations: Sequence[Annotation]
) -> dict[str, Path]:
    """Write the summary and annotations to ``out_dir``.

    Returns:
        Mapping of result name to written file path
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {name: out_dir / spec.filename for name, spec in RESULT_FILE_SPECS.items()}
    _write_json(paths["summary"], summary)
    _write_jsonl(paths["annotations"], annotations)
    return paths


__all__ = ["write_results"]
