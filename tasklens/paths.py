"""実行時パス解決（配布/開発 共通）。

設定・DB・ログなどの可変データはアプリルート配下に集約する。

方針:
- TASKLENS_HOME があれば最優先
- PyInstaller(frozen) の場合: exe のあるフォルダをアプリルートとする
- 通常実行の場合: CWD をアプリルートとする（run.py と相性が良い）
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


def get_app_root_dir() -> Path:
    """アプリのルートディレクトリを返す。

    優先順位:
    1) 環境変数 TASKLENS_HOME
    2) PyInstaller 実行（sys.frozen=True）なら exe のあるフォルダ
    3) それ以外はカレントディレクトリ
    """

    # --- 1) 明示指定（開発/テスト向け） ---
    env_home = os.getenv("TASKLENS_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()

    # --- 2) PyInstaller (frozen) ---
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent

    # --- 3) 通常実行 ---
    return Path.cwd().resolve()


def get_config_dir() -> Path:
    """設定ディレクトリ（config/）を返す。作成はしない（設定ファイルは任意のため）。"""

    return get_app_root_dir() / "config"


def get_data_dir() -> Path:
    """データディレクトリ（data/）を返し、存在しなければ作成する。"""

    data_dir = get_app_root_dir() / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_default_config_file_path() -> Path:
    """既定の設定ファイルパス（config/setting.toml）を返す。"""

    return get_config_dir() / "setting.toml"


def get_default_database_url() -> str:
    """既定のDB URL（data/tasklens.db の SQLite）を返す。"""

    return f"sqlite:///{get_data_dir() / 'tasklens.db'}"


def resolve_path_under_app_root(path: str | Path) -> Path:
    """相対パスをアプリルート基準の絶対パスに解決する。

    - 絶対パスはそのまま返す
    - 相対パスは app_root / path として解決する
    """

    p = Path(path)
    if p.is_absolute():
        return p
    return (get_app_root_dir() / p).resolve()
