"""
QR codes for attendance check-in and project labels, rendered as SVG data URLs.
"""
import base64
import io
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

import qrcode
import qrcode.image.svg

from crewbook.core.config import settings
from crewbook.schemas import Project
from crewbook.schemas.qr import AttendanceQR, QRAttendanceData
from crewbook.utils.validation import as_utc

logger = logging.getLogger(__name__)


def _svg_data_url(data: str, box_size: int = 10) -> str:
    factory = qrcode.image.svg.SvgImage
    img = qrcode.make(data, image_factory=factory, box_size=box_size)
    stream = io.BytesIO()
    img.save(stream)
    return "data:image/svg+xml;base64," + base64.b64encode(stream.getvalue()).decode()


class QRService:

    def __init__(
        self,
        validity_hours: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.validity_hours = (
            validity_hours if validity_hours is not None else settings.QR_VALIDITY_HOURS
        )
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate_attendance_qr(self, project_id: str, location: str) -> AttendanceQR:
        now = as_utc(self._clock())
        data = QRAttendanceData(
            id=str(uuid.uuid4()),
            project_id=project_id,
            date=now.date(),
            location=location,
            valid_until=now + timedelta(hours=self.validity_hours),
        )
        image = _svg_data_url(data.model_dump_json(by_alias=True))
        return AttendanceQR(data=data, image=image)

    def validate_qr_data(self, text: str) -> QRAttendanceData | None:
        """Decoded attendance payload, or None if malformed or expired."""
        try:
            data = QRAttendanceData.model_validate(json.loads(text))
        except (ValueError, TypeError) as e:
            logger.info("Rejected QR payload: %s", e)
            return None

        if as_utc(data.valid_until) < as_utc(self._clock()):
            return None
        return data

    def generate_project_qr(self, project: Project) -> str:
        payload = json.dumps({
            "type": "project",
            "id": project.id,
            "name": project.name,
            "timestamp": as_utc(self._clock()).isoformat(),
        })
        return _svg_data_url(payload, box_size=8)

    def attach_project_qr(self, project: Project) -> Project:
        return project.model_copy(update={"qr_code": self.generate_project_qr(project)})
