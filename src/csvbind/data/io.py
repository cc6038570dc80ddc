from __future__ import annotations
import dataclasses, json, pathlib
from typing import Any, Dict, Iterable, List

def record_to_dict(rec: Any) -> Dict[str, Any]:
    """Plain dict view of an imported record (dataclass, pydantic model or plain object)."""
    if dataclasses.is_dataclass(rec) and not isinstance(rec, type):
        return dataclasses.asdict(rec)
    if hasattr(rec, "model_dump"):
        return rec.model_dump()
    return {k: _plain(v) for k, v in vars(rec).items() if not k.startswith("_")}

def _plain(v: Any) -> Any:
    if v is None or isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    if hasattr(v, "__dict__") or dataclasses.is_dataclass(v):
        return record_to_dict(v)
    return v

def jsonl_lines(records: Iterable[Any]) -> List[str]:
    return [json.dumps(record_to_dict(r), ensure_ascii=False, default=str) for r in records]

def jsonl_write(path: str, records: Iterable[Any]) -> int:
    p = pathlib.Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    lines = jsonl_lines(records)
    with p.open("w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    return len(lines)
