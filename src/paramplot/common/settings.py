"""
どこで: `paramplot.common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

優先順: 環境変数 > `configs/default.yaml`/`config.yaml` の `script:` セクション > 既定値。
"""

from __future__ import annotations

from dataclasses import dataclass

from ..util.config import config_section
from .env import env_bool, env_float, env_int


@dataclass
class _Settings:
    # スクリプトエンジン
    SCRIPT_TIME_LIMIT: float | None = None
    SCRIPT_MEMORY_LIMIT: int | None = None

    # コントロール
    PRESERVE_CONTROL_VALUES: bool = True

    # サンプリング（addParametricGraph の num_points 上限）
    MAX_NUM_POINTS: int = 100_000

    # 診断
    REPORT_COERCIONS: bool = True
    MIRROR_SCRIPT_OUTPUT: bool = True
    DIAGNOSTICS_MAX_ENTRIES: int = 1000


_settings = _Settings()


def _positive_or_none(value: object, cast: type) -> float | int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        v = cast(value)
    except (TypeError, ValueError):
        return None
    return v if v > 0 else None


def reload_from_env() -> None:
    """環境変数（と設定ファイル）から設定を再読込。

    - bool は `env_bool`、int は `env_int`、float は `env_float` を使用。
    - 制限値は 0 以下を「無制限（None）」とみなす。
    """
    script_cfg = config_section("script")

    # スクリプトエンジン（未設定なら設定ファイル）
    time_limit = env_float("PARAMPLOT_SCRIPT_TIME_LIMIT")
    if time_limit is None:
        time_limit = script_cfg.get("time_limit")
    _settings.SCRIPT_TIME_LIMIT = _positive_or_none(time_limit, float)

    memory_limit = env_int("PARAMPLOT_SCRIPT_MEMORY_LIMIT")
    if memory_limit is None:
        memory_limit = script_cfg.get("memory_limit")
    _settings.SCRIPT_MEMORY_LIMIT = _positive_or_none(memory_limit, int)

    # コントロール
    _settings.PRESERVE_CONTROL_VALUES = env_bool("PARAMPLOT_PRESERVE_CONTROL_VALUES", True)

    # サンプリング
    _settings.MAX_NUM_POINTS = (
        env_int("PARAMPLOT_MAX_NUM_POINTS", 100_000, min_value=1) or 100_000
    )

    # 診断
    _settings.REPORT_COERCIONS = env_bool("PARAMPLOT_REPORT_COERCIONS", True)
    _settings.MIRROR_SCRIPT_OUTPUT = env_bool("PARAMPLOT_MIRROR_SCRIPT_OUTPUT", True)
    _settings.DIAGNOSTICS_MAX_ENTRIES = (
        env_int("PARAMPLOT_DIAGNOSTICS_MAX_ENTRIES", 1000, min_value=1) or 1000
    )


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
