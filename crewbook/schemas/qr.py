import datetime as dt

from crewbook.schemas.common import CamelModel


class QRAttendanceData(CamelModel):
    """Payload encoded in an attendance QR code."""
    id: str
    project_id: str
    date: dt.date
    location: str
    valid_until: dt.datetime


class AttendanceQR(CamelModel):
    data: QRAttendanceData
    image: str                   # data:image/svg+xml;base64,...
