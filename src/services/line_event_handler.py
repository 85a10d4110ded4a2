"""LINE Webhook のイベント処理（顔診断・フォロー状態の更新）"""
import json
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

from services.exceptions import ReplyError
from services.face_detection import FaceDetector
from services.line_service import LineService
from services.result_formatter import create_error_messages, create_face_analysis_messages
from services.user_state import UserStateRepository

ERROR_TEXT = 'An error occurred, please wait and try again'
PROMPT_TEXT = 'Please send a photo to diagnose!'

# 呼び出し元（Lambda ランタイム）に返す完了レスポンス
COMPLETION_RESPONSE = {
    'statusCode': 200,
    'body': json.dumps({})
}


class LineEventDispatcher:
    """Webhook で受け取ったイベントを種類ごとのハンドラーに振り分ける"""

    def __init__(
        self,
        line_service: LineService,
        face_detector: FaceDetector,
        user_repository: UserStateRepository,
        max_workers: int = 5
    ):
        self.line_service = line_service
        self.face_detector = face_detector
        self.user_repository = user_repository
        self.max_workers = max_workers

    def dispatch(self, events: List[Dict]) -> Dict:
        """イベントを 1 件ずつ並行に処理し、完了レスポンスを返す

        Lambda はハンドラーが戻った時点でプロセスを凍結するため、
        すべてのイベントの返信（またはユーザー状態の更新）を待ってから返す。

        Args:
            events: Webhook リクエストボディの events

        Returns:
            完了レスポンス
        """
        if not events:
            return COMPLETION_RESPONSE

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self.handle_event, event) for event in events]

        for future in futures:
            error = future.exception()
            if error is not None:
                print(f"イベント処理中の予期しないエラー: {error}")

        return COMPLETION_RESPONSE

    def handle_event(self, event: Dict) -> Dict:
        """イベントの種類に応じて処理する

        Args:
            event: LINE Webhook のイベントオブジェクト

        Returns:
            処理結果を含む辞書
        """
        event_type = event.get('type')
        message = event.get('message') or {}

        if event_type == 'message' and message.get('type') == 'image':
            return self.handle_image_message(event)
        elif event_type in ('follow', 'unfollow'):
            return self.handle_follow_event(event)
        else:
            return self.handle_other_event(event)

    def handle_image_message(self, event: Dict) -> Dict:
        """画像メッセージから顔を診断して返信する

        どの段階で失敗しても、固定のエラーメッセージで必ず返信する。
        """
        message_id = event['message'].get('id')

        try:
            # 送信された画像を base64 形式で取得
            content = self.line_service.get_content_base64(message_id)
            # 画像から顔を検出する
            faces = self.face_detector.detect(content)
            # 顔の検出結果をメッセージオブジェクトに変換
            messages = create_face_analysis_messages(faces)
            success = True
        except Exception as e:
            print(f"顔診断エラー (message_id={message_id}): {e}")
            messages = create_error_messages(ERROR_TEXT)
            success = False

        result = self._reply(event, messages)
        result['success'] = result['success'] and success
        return result

    def handle_follow_event(self, event: Dict) -> Dict:
        """フォロー / フォロー解除に応じてユーザー状態を更新する

        書き込みに失敗してもログに残すだけで、Webhook には成功として返す。
        """
        event_type = event.get('type')
        user_id = (event.get('source') or {}).get('userId')
        is_following = event_type == 'follow'

        try:
            self.user_repository.update_user(user_id, is_following)
        except Exception as e:
            print(f"ユーザー状態の更新に失敗しました (user_id={user_id}): {e}")
            return {
                'success': False,
                'message': f'ユーザー状態の更新に失敗: {str(e)}',
                'user_id': user_id
            }

        return {
            'success': True,
            'message': f'{event_type} イベントでユーザー状態を更新しました',
            'user_id': user_id,
            'is_blocked': not is_following
        }

    def handle_other_event(self, event: Dict) -> Dict:
        """画像以外のメッセージ・未対応のイベントには写真を送るよう促す"""
        print(f"未対応のイベントタイプ: {event.get('type')}")
        return self._reply(event, create_error_messages(PROMPT_TEXT))

    def _reply(self, event: Dict, messages: List[Dict]) -> Dict:
        reply_token = event.get('replyToken')

        if not reply_token:
            print(f"リプライトークンが無いため返信しません: {event.get('type')}")
            return {
                'success': False,
                'message': 'リプライトークンがありません',
                'messages': messages
            }

        try:
            self.line_service.reply_messages(reply_token, messages)
        except ReplyError as e:
            # リプライトークンは 1 回しか使えないため再送しない
            print(f"LINE への返信に失敗しました: {e}")
            return {
                'success': False,
                'message': f'LINE への返信に失敗: {str(e)}',
                'messages': messages
            }

        return {
            'success': True,
            'message': f'{len(messages)} 件のメッセージを返信しました',
            'messages': messages
        }
