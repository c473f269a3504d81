"""
API ルーター群

tasklens の REST API エンドポイントを定義するルーターモジュール群。
FastAPI の APIRouter を使用して各エンドポイントを実装する。

含まれるルーター:
- tasks: タスクCRUD（一覧の絞り込み/並び替え、依存関係の置き換え）
- dependencies: 依存関係一覧とクリティカルパス付きMermaid定義
- dashboard: ダッシュボード集計
- quick_memos: クイックメモ
- export: CSVエクスポート
"""
