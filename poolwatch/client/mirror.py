# poolwatch/client/mirror.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

# 로컬 미러 키 (데이터셋당 JSON 문서 하나)
DAILY_MIRROR_KEY = "pool-readings-data"
WEEKLY_MIRROR_KEY = "pool-weekly-readings-data"


class LocalMirror:
    """
    원격 저장 결과와 무관하게 편집 직후 항상 기록되는 로컬 JSON 사본.
    깨진 JSON 은 로그만 남기고 무시 (기본값 사용).
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        p = self.path_for(key)
        if not p.exists():
            return None
        try:
            return json.loads(p.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse saved data ({p.name}): {e}")
            return None

    def write(self, key: str, value: Any) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        p = self.path_for(key)
        tmp = p.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(value, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, p)
