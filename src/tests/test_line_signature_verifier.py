"""LINE 署名検証ロジックのユニットテスト"""
import base64
import hashlib
import hmac
from utils.line_signature_verifier import compute_line_signature, verify_line_signature


def make_signature(channel_secret: str, body: str) -> str:
    return base64.b64encode(hmac.new(
        channel_secret.encode('utf-8'),
        body.encode('utf-8'),
        hashlib.sha256
    ).digest()).decode('utf-8')


class TestVerifyLineSignature:
    """verify_line_signature 関数のテストクラス"""

    def test_valid_signature(self):
        """正しい署名で検証が成功することを確認"""
        channel_secret = "test_secret_12345"
        body = '{"destination":"U123","events":[{"type":"follow"}]}'

        signature = make_signature(channel_secret, body)

        result = verify_line_signature(channel_secret, signature, body)
        assert result is True

    def test_invalid_signature(self):
        """誤った署名で検証が失敗することを確認"""
        channel_secret = "test_secret_12345"
        body = '{"events":[]}'

        result = verify_line_signature(channel_secret, "invalid_signature_hash", body)
        assert result is False

    def test_wrong_channel_secret(self):
        """異なる Channel Secret で検証が失敗することを確認"""
        body = '{"events":[]}'
        signature = make_signature("wrong_secret_67890", body)

        result = verify_line_signature("test_secret_12345", signature, body)
        assert result is False

    def test_tampered_body(self):
        """リクエストボディが改ざんされた場合に検証が失敗することを確認"""
        channel_secret = "test_secret_12345"
        original_body = '{"events":[{"type":"follow"}]}'
        tampered_body = '{"events":[{"type":"unfollow"}]}'

        signature = make_signature(channel_secret, original_body)

        result = verify_line_signature(channel_secret, signature, tampered_body)
        assert result is False

    def test_single_byte_mutation(self):
        """ボディを 1 バイトでも変えると検証が失敗することを確認"""
        channel_secret = "test_secret_12345"
        body = b'{"events":[{"type":"message"}]}'
        signature = compute_line_signature(channel_secret, body)

        for i in range(len(body)):
            mutated = body[:i] + bytes([body[i] ^ 0x01]) + body[i + 1:]
            assert verify_line_signature(channel_secret, signature, mutated) is False

    def test_whitespace_changes_signature(self):
        """パース後に再シリアライズしたボディでは検証が失敗することを確認"""
        channel_secret = "test_secret_12345"
        raw_body = '{"events": [], "destination": "U123"}'
        reserialized_body = '{"events":[],"destination":"U123"}'

        signature = make_signature(channel_secret, raw_body)

        assert verify_line_signature(channel_secret, signature, raw_body) is True
        assert verify_line_signature(channel_secret, signature, reserialized_body) is False

    def test_bytes_and_str_body_match(self):
        """文字列とバイト列のボディで同じ署名になることを確認"""
        channel_secret = "test_secret_12345"
        body = '{"text":"こんにちは！😀"}'

        assert compute_line_signature(channel_secret, body) == \
            compute_line_signature(channel_secret, body.encode('utf-8'))

    def test_empty_signature(self):
        """署名が空の場合に検証が失敗することを確認"""
        result = verify_line_signature("test_secret_12345", "", '{"events":[]}')
        assert result is False

    def test_empty_body(self):
        """空のリクエストボディでも検証が正しく動作することを確認"""
        channel_secret = "test_secret_12345"
        signature = make_signature(channel_secret, "")

        result = verify_line_signature(channel_secret, signature, "")
        assert result is True

    def test_non_ascii_signature(self):
        """ASCII 以外の文字を含む署名でも例外にならず検証が失敗することを確認"""
        result = verify_line_signature("test_secret_12345", "署名", '{"events":[]}')
        assert result is False
