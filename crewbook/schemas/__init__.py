from crewbook.schemas.attendance import AttendanceCreate, AttendanceRecord
from crewbook.schemas.integrity import CleanupReport, IntegrityReport
from crewbook.schemas.material import Material, MaterialCreate
from crewbook.schemas.overtime import OvertimeCreate, OvertimeRecord
from crewbook.schemas.payroll import PayrollRecord, PayrollWorker
from crewbook.schemas.project import Project, ProjectCreate
from crewbook.schemas.transaction import Transaction, TransactionCreate
from crewbook.schemas.worker import Worker, WorkerCreate

__all__ = [
    "AttendanceCreate", "AttendanceRecord",
    "CleanupReport", "IntegrityReport",
    "Material", "MaterialCreate",
    "OvertimeCreate", "OvertimeRecord",
    "PayrollRecord", "PayrollWorker",
    "Project", "ProjectCreate",
    "Transaction", "TransactionCreate",
    "Worker", "WorkerCreate",
]
