"""LINE Messaging API の呼び出し（返信・コンテンツ取得）"""
import base64
from typing import Dict, List

from linebot.v3.messaging import (
    ApiClient,
    Configuration,
    MessagingApi,
    MessagingApiBlob,
    ReplyMessageRequest,
    TextMessage,
)

from services.exceptions import FetchError, ReplyError
from services.result_formatter import MAX_REPLY_MESSAGES


class LineService:
    """LINE Messaging API のクライアントをまとめたサービス"""

    def __init__(self, messaging_api: MessagingApi, blob_api: MessagingApiBlob):
        self.messaging_api = messaging_api
        self.blob_api = blob_api

    def get_content_base64(self, message_id: str) -> str:
        """メッセージのコンテンツ（画像など）を base64 形式で取得

        Args:
            message_id: メッセージ ID

        Returns:
            base64 エンコードされたコンテンツ

        Raises:
            FetchError: コンテンツの取得に失敗した場合
        """
        try:
            content = self.blob_api.get_message_content(message_id=message_id)
        except Exception as e:
            print(f"コンテンツ取得エラー (message_id={message_id}): {e}")
            raise FetchError(f"コンテンツの取得に失敗しました: {e}") from e

        return base64.b64encode(bytes(content)).decode('ascii')

    def reply_messages(self, reply_token: str, messages: List[Dict]) -> None:
        """リプライトークンを使ってメッセージを返信する

        Args:
            reply_token: リプライトークン（1 回のみ使用可能）
            messages: {'type': 'text', 'text': ...} 形式のメッセージ（1〜5 件）

        Raises:
            ReplyError: 返信に失敗した場合
        """
        if not 1 <= len(messages) <= MAX_REPLY_MESSAGES:
            raise ReplyError(f"返信できるメッセージは 1〜{MAX_REPLY_MESSAGES} 件です: {len(messages)} 件")

        request = ReplyMessageRequest(
            reply_token=reply_token,
            messages=[TextMessage(text=message['text']) for message in messages]
        )

        try:
            self.messaging_api.reply_message(request)
        except Exception as e:
            print(f"返信エラー: {e}")
            raise ReplyError(f"返信に失敗しました: {e}") from e


def get_line_service(access_token: str) -> LineService:
    """チャネルアクセストークンから LineService を作成"""
    api_client = ApiClient(Configuration(access_token=access_token))
    return LineService(MessagingApi(api_client), MessagingApiBlob(api_client))
