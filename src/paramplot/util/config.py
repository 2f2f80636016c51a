"""
どこで: `paramplot.util.config`。
何を: `configs/default.yaml` とルート `config.yaml` を読み込み、辞書として返す（フェイルソフト）。
なぜ: 実行時の既定値（FPS やスクリプト制限など）をコード外で調整できるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        logger.debug("failed to load %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def find_project_root(start: Path | None = None) -> Path:
    """プロジェクトルートを推定して返す。

    - `start`（既定はカレントディレクトリ）から上位へ辿り、`.git`・`pyproject.toml`・`configs/`
      のいずれかを持つもっとも近いディレクトリを返す。
    - 見つからない場合は `start` 自身を返す。
    """
    cur = (start or Path.cwd()).resolve()
    for parent in [cur] + list(cur.parents):
        if (
            (parent / ".git").exists()
            or (parent / "pyproject.toml").exists()
            or (parent / "configs").exists()
        ):
            return parent
    return cur


def load_config(root: Path | None = None) -> Dict[str, Any]:
    """構成を読み込んで辞書で返す（フェイルソフト）。

    優先順:
    1) `configs/default.yaml`（ベース）
    2) ルート `config.yaml`（ベースに上書き）

    - いずれも存在しない/不正な場合は空辞書を返す。
    - ネストした辞書のディープマージは行わず、トップレベルのみ上書き。
    """
    project_root = root if root is not None else find_project_root()
    base: Dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        base.update(_safe_load_yaml(default_path))

    root_config_path = project_root / "config.yaml"
    if root_config_path.exists():
        base.update(_safe_load_yaml(root_config_path))

    return base


def config_section(name: str, root: Path | None = None) -> Dict[str, Any]:
    """トップレベルの 1 セクションを辞書で返す（無い/不正なら空辞書）。"""
    section = load_config(root).get(name)
    return section if isinstance(section, dict) else {}


__all__ = ["find_project_root", "load_config", "config_section"]
