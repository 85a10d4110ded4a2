"""
ユーザー状態サービス
フォロー / フォロー解除に応じてユーザーのブロック状態を DynamoDB に保存する
"""
import os
import time
from typing import Dict

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from services.exceptions import StateWriteError

# DynamoDB クライアント
dynamodb = boto3.resource('dynamodb', region_name=os.environ.get('AWS_REGION', 'ap-northeast-1'))


class UserStateRepository:
    """ユーザーのフォロー状態を管理"""

    def __init__(self, table):
        """
        Args:
            table: DynamoDB の Table リソース（パーティションキーは userId）
        """
        self.table = table

    def update_user(self, user_id: str, is_following: bool) -> Dict:
        """ユーザーのフォロー情報を更新する

        レコードが存在しない場合は作成し、存在する場合は isBlocked と
        timestamp だけを上書きする。その他の属性は変更しない。

        Args:
            user_id: LINE ユーザー ID
            is_following: フォローイベントなら True、フォロー解除イベントなら False

        Returns:
            書き込んだ属性

        Raises:
            StateWriteError: DynamoDB への書き込みに失敗した場合
        """
        if not user_id:
            raise StateWriteError("ユーザー ID がありません")

        fields = {
            'isBlocked': not is_following,
            # 書き込み時点のエポックミリ秒
            'timestamp': int(time.time() * 1000)
        }

        try:
            self.table.update_item(
                Key={'userId': user_id},
                UpdateExpression='SET isBlocked = :is_blocked, #timestamp = :timestamp',
                ExpressionAttributeNames={'#timestamp': 'timestamp'},
                ExpressionAttributeValues={
                    ':is_blocked': fields['isBlocked'],
                    ':timestamp': fields['timestamp']
                }
            )
        except (BotoCoreError, ClientError) as e:
            print(f"ユーザー状態の書き込みエラー (user_id={user_id}): {e}")
            raise StateWriteError(f"ユーザー状態の書き込みに失敗しました: {e}") from e

        return fields


def get_user_state_repository(table_name: str) -> UserStateRepository:
    """UserStateRepository インスタンスを作成するファクトリ関数"""
    return UserStateRepository(dynamodb.Table(table_name))
