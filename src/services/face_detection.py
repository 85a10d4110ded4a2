"""
顔検出サービス（Face++ Detect API）
base64 画像を送信し、検出された顔の属性を取得する
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

from services.exceptions import AnalysisError

RETURN_ATTRIBUTES = 'gender,age,beauty'


@dataclass(frozen=True)
class DetectedFace:
    """検出された 1 つの顔

    顔検出 API は大きい順に 5 人分までしか属性を返さないため、
    属性が無い顔では age 以降の値が None になる。
    """
    rectangle_left: float
    age: Optional[int] = None
    gender_raw: Optional[str] = None
    beauty_male: Optional[float] = None
    beauty_female: Optional[float] = None


def parse_face(face: Dict) -> DetectedFace:
    """API レスポンスの顔オブジェクトを DetectedFace に変換"""
    attributes = face.get('attributes') or {}
    beauty = attributes.get('beauty') or {}

    return DetectedFace(
        rectangle_left=face['face_rectangle']['left'],
        age=(attributes.get('age') or {}).get('value'),
        gender_raw=(attributes.get('gender') or {}).get('value'),
        beauty_male=beauty.get('male_score'),
        beauty_female=beauty.get('female_score')
    )


class FaceDetector:
    """顔検出 API のクライアント"""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        endpoint: str,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.endpoint = endpoint
        self.session = session or requests.Session()

    def detect(self, image_base64: str) -> List[DetectedFace]:
        """画像から顔を検出する

        Args:
            image_base64: base64 エンコードされた画像

        Returns:
            検出された顔のリスト（顔が無ければ空リスト）

        Raises:
            AnalysisError: 通信に失敗した場合、または API がエラーを返した場合
        """
        form = {
            'api_key': self.api_key,
            'api_secret': self.api_secret,
            'image_base64': image_base64,
            'return_attributes': RETURN_ATTRIBUTES
        }

        try:
            response = self.session.post(self.endpoint, data=form)
        except requests.RequestException as e:
            print(f"顔検出 API 通信エラー: {e}")
            raise AnalysisError(f"顔検出 API との通信に失敗しました: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            print(f"顔検出 API レスポンス解析エラー (status={response.status_code}): {e}")
            raise AnalysisError(f"顔検出 API のレスポンスが不正です: {e}") from e

        # HTTP ステータスに関わらず error_message があればエラーとして扱う
        if isinstance(body, dict) and body.get('error_message'):
            print(f"顔検出 API エラー: {body['error_message']}")
            raise AnalysisError(body['error_message'])

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            print(f"顔検出 API HTTP エラー: {e}")
            raise AnalysisError(f"顔検出 API がエラーを返しました: {e}") from e

        try:
            return [parse_face(face) for face in body.get('faces', [])]
        except (AttributeError, KeyError, TypeError) as e:
            raise AnalysisError(f"顔検出結果の形式が不正です: {e}") from e
