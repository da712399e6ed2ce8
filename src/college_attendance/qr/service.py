from __future__ import annotations

import base64
import io
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

import qrcode

from ..core.constants import DEFAULT_QR_TOKEN_TTL_MINUTES
from ..core.exceptions import ValidationError
from .model import QRCheck, QRToken
from .repository import QRTokenRepository

logger = logging.getLogger(__name__)


class QRService:
    """Issues and checks the rotating check-in tokens shown as QR codes."""

    def __init__(
        self,
        tokens: QRTokenRepository,
        *,
        clock: Callable[[], datetime],
        ttl_minutes: int = DEFAULT_QR_TOKEN_TTL_MINUTES,
    ):
        self._tokens = tokens
        self._clock = clock
        self._ttl = timedelta(minutes=int(ttl_minutes))

    def generate_token(self, teacher_id: int, lesson_id: int) -> QRToken:
        # One live token per teacher and lesson.
        self._tokens.delete_for_lesson(teacher_id, lesson_id)

        issued = self._tokens.create(
            token=secrets.token_hex(32),
            teacher_id=int(teacher_id),
            lesson_id=int(lesson_id),
            expires_at=self._clock() + self._ttl,
        )
        logger.info("qr token issued: teacher=%s lesson=%s", teacher_id, lesson_id)
        return issued

    def qr_data_url(self, token: str) -> str:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(token)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")

    def validate_token(self, token: Optional[str]) -> QRCheck:
        if not token:
            return QRCheck(valid=False, message="Токен не передан")

        record = self._tokens.get(str(token).strip())
        if not record:
            return QRCheck(valid=False, message="QR-код недействителен")
        if record.is_expired(self._clock()):
            return QRCheck(valid=False, message="Срок действия QR-кода истёк")
        return QRCheck(valid=True, message="OK", token=record)

    def require_valid(self, token: Optional[str]) -> QRToken:
        check = self.validate_token(token)
        if not check.valid:
            raise ValidationError(check.message)
        return check.token
