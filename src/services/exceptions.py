"""顔診断ボットの例外定義"""


class FaceBotError(Exception):
    """顔診断ボットの基底例外"""


class FetchError(FaceBotError):
    """LINE からのコンテンツ取得に失敗"""


class AnalysisError(FaceBotError):
    """顔検出 API での解析に失敗"""


class ReplyError(FaceBotError):
    """LINE への返信に失敗"""


class StateWriteError(FaceBotError):
    """ユーザー状態の書き込みに失敗"""
