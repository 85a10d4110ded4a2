"""顔の検出結果から返信メッセージオブジェクトを生成する"""
import math
from typing import Dict, List

from services.face_detection import DetectedFace

# 1 つのリプライトークンで返信できるメッセージ数の上限
MAX_REPLY_MESSAGES = 5

NO_FACE_TEXT = 'Could not detect a face in the photo.'
TOO_MANY_FACES_TEXT = 'Detected 6 or more faces; diagnosis supports at most 5 people.'

MALE_LABEL = 'Male'
FEMALE_LABEL = 'Female'


def create_text_message(text: str) -> Dict:
    return {'type': 'text', 'text': text}


def create_error_messages(text: str) -> List[Dict]:
    """1 件だけのエラーメッセージを生成"""
    return [create_text_message(text)]


def round_half_up(value: float) -> int:
    # round() は偶数丸めなので使わない
    return int(math.floor(value + 0.5))


def create_face_message(face: DetectedFace, index: int, show_position: bool) -> Dict:
    """1 人分の診断結果メッセージを生成

    Args:
        face: 検出された顔
        index: 左から数えた位置（0 始まり）
        show_position: 「左から何人目」を表示するかどうか
    """
    is_male = face.gender_raw == 'Male'
    gender = MALE_LABEL if is_male else FEMALE_LABEL
    beauty = face.beauty_male if is_male else face.beauty_female

    lines = []
    if show_position:
        lines.append(f"From the left, person {index + 1}")
    lines.append(f"Age: {face.age}")
    lines.append(f"Gender: {gender}")
    lines.append(f"Beauty score: {round_half_up(beauty)} (out of 100)")

    return create_text_message('\n'.join(lines))


def create_face_analysis_messages(faces: List[DetectedFace]) -> List[Dict]:
    """顔の解析結果のメッセージオブジェクトのリストを生成

    顔が 0 人、または返信できるメッセージ数（5 件）を超える場合は
    エラーメッセージを 1 件だけ返す。それ以外は左にいる人から順に
    1 人 1 件のメッセージを返す。

    Args:
        faces: 検出された顔のリスト

    Returns:
        メッセージオブジェクトのリスト
    """
    if not faces:
        return create_error_messages(NO_FACE_TEXT)

    if len(faces) > MAX_REPLY_MESSAGES:
        return create_error_messages(TOO_MANY_FACES_TEXT)

    # sorted は安定ソートなので、left が同じ顔は元の順序を保つ
    sorted_faces = sorted(faces, key=lambda face: face.rectangle_left)
    show_position = len(faces) > 1

    return [
        create_face_message(face, index, show_position)
        for index, face in enumerate(sorted_faces)
    ]
