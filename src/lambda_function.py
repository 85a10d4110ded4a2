import base64
import json
from typing import Optional

from services.config import (
    get_event_workers,
    get_face_api_key,
    get_face_api_secret,
    get_face_detect_url,
    get_line_channel_access_token,
    get_line_channel_secret,
    get_users_table_name,
)
from services.face_detection import FaceDetector
from services.line_event_handler import LineEventDispatcher
from services.line_service import get_line_service
from services.user_state import get_user_state_repository
from utils.line_signature_verifier import verify_line_signature

# ウォームスタート時に再利用するため、ディスパッチャーはモジュールレベルで保持する
_dispatcher: Optional[LineEventDispatcher] = None


def build_dispatcher() -> LineEventDispatcher:
    """設定値から各クライアントを作成し、ディスパッチャーを組み立てる"""
    return LineEventDispatcher(
        line_service=get_line_service(get_line_channel_access_token()),
        face_detector=FaceDetector(
            api_key=get_face_api_key(),
            api_secret=get_face_api_secret(),
            endpoint=get_face_detect_url()
        ),
        user_repository=get_user_state_repository(get_users_table_name()),
        max_workers=get_event_workers()
    )


def get_dispatcher() -> LineEventDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher()
    return _dispatcher


def extract_body(event: dict) -> bytes:
    """API Gateway のイベントから生のリクエストボディをバイト列で取得

    Raises:
        ValueError: isBase64Encoded なのにボディが base64 として不正な場合
    """
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        return base64.b64decode(body, validate=True)
    return body.encode('utf-8')


def handler(event, context):
    """Lambda ハンドラー関数

    署名が無効なリクエストには何も返さず、返信もしない。
    """
    try:
        # LINE からのリクエストの署名を検証
        headers = event.get('headers') or {}
        signature = headers.get('X-Line-Signature') or headers.get('x-line-signature')

        if not signature:
            print("署名ヘッダーが無いリクエストを無視しました")
            return None

        try:
            raw_body = extract_body(event)
        except ValueError:
            print("ボディを復元できないリクエストを無視しました")
            return None

        # 署名はデコード前のバイト列そのものに対して検証する
        if not verify_line_signature(get_line_channel_secret(), signature, raw_body):
            print("署名が無効なリクエストを無視しました")
            return None

        body = json.loads(raw_body)

        # 各イベントを処理し、完了レスポンスを返す
        return get_dispatcher().dispatch(body.get('events') or [])
    except Exception as e:
        print(f"Webhook 処理エラー: {e}")
        return {
            'statusCode': 500,
            'body': json.dumps({'error': str(e)}, ensure_ascii=False),
            'headers': {'Content-Type': 'application/json'}
        }
