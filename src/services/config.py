"""Parameter Store と環境変数から設定値を取得する共通モジュール"""
import os
import boto3

DEFAULT_FACE_DETECT_URL = 'https://api-us.faceplusplus.com/facepp/v3/detect'

ssm = boto3.client('ssm', region_name=os.environ.get('AWS_REGION', 'ap-northeast-1'))


def get_required_env(name: str) -> str:
    """必須の環境変数を取得

    Raises:
        ValueError: 環境変数が設定されていない場合
    """
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"環境変数 {name} が設定されていません")
    return value


def get_parameter(name: str, with_decryption: bool = False) -> str:
    """Parameter Store からパラメータを取得

    Args:
        name: パラメータ名
        with_decryption: 復号化するかどうか

    Returns:
        パラメータの値
    """
    response = ssm.get_parameter(
        Name=name,
        WithDecryption=with_decryption
    )
    return response['Parameter']['Value']


def get_line_channel_secret() -> str:
    """LINE Channel Secret を取得"""
    param_name = get_required_env('PARAM_LINE_CHANNEL_SECRET')
    return get_parameter(param_name, with_decryption=True)


def get_line_channel_access_token() -> str:
    """LINE チャネルアクセストークンを取得"""
    param_name = get_required_env('PARAM_LINE_CHANNEL_ACCESS_TOKEN')
    return get_parameter(param_name, with_decryption=True)


def get_face_api_key() -> str:
    """顔検出 API の API Key を取得"""
    param_name = get_required_env('PARAM_FACE_API_KEY')
    return get_parameter(param_name, with_decryption=True)


def get_face_api_secret() -> str:
    """顔検出 API の API Secret を取得"""
    param_name = get_required_env('PARAM_FACE_API_SECRET')
    return get_parameter(param_name, with_decryption=True)


def get_face_detect_url() -> str:
    return os.environ.get('FACE_DETECT_URL') or DEFAULT_FACE_DETECT_URL


def get_users_table_name() -> str:
    return get_required_env('USERS_TABLE_NAME')


def get_event_workers() -> int:
    """イベントを並行処理するスレッド数を取得

    Raises:
        ValueError: EVENT_WORKERS が 1 以上の整数でない場合
    """
    value = os.environ.get('EVENT_WORKERS') or '5'
    try:
        workers = int(value)
    except ValueError:
        workers = 0
    if workers < 1:
        raise ValueError(f"環境変数 EVENT_WORKERS は 1 以上の整数にしてください: {value}")
    return workers
