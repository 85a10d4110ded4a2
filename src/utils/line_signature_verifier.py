"""LINE Channel Secret による署名検証"""
import base64
import hashlib
import hmac
from typing import Union


def compute_line_signature(channel_secret: str, body: Union[str, bytes]) -> str:
    """リクエストボディから X-Line-Signature と同じ形式の署名を計算

    Args:
        channel_secret: LINE チャネルの Channel Secret
        body: リクエストボディ（生の文字列またはバイト列）

    Returns:
        HMAC-SHA256 ダイジェストを base64 エンコードした文字列
    """
    if isinstance(body, str):
        body = body.encode('utf-8')

    digest = hmac.new(
        channel_secret.encode('utf-8'),
        body,
        hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode('utf-8')


def verify_line_signature(
    channel_secret: str,
    signature: str,
    body: Union[str, bytes]
) -> bool:
    """LINE Webhook リクエストの署名を検証

    LINE プラットフォームから送信されたリクエストであることを検証する。
    署名はパース前のリクエストボディそのものに対して計算する必要がある。

    Args:
        channel_secret: LINE チャネルの Channel Secret
        signature: リクエストヘッダーの X-Line-Signature
        body: リクエストボディ（生の文字列またはバイト列）

    Returns:
        署名が有効な場合は True、無効な場合は False
    """
    if not signature:
        return False

    computed_signature = compute_line_signature(channel_secret, body)

    # 署名を比較（タイミング攻撃を防ぐため hmac.compare_digest を使用）
    return hmac.compare_digest(
        computed_signature.encode('utf-8'),
        signature.encode('utf-8')
    )
