from __future__ import annotations

from dataclasses import dataclass

from .assessments.mysql_assessment_repository import MySQLAssessmentRepository
from .assessments.service import AssessmentService
from .database.connection import DBConfig, DatabaseConnection
from .thresholds.manager import ThresholdTableManager
from .thresholds.mysql_threshold_repository import MySQLThresholdRepository
from .thresholds.service import GradeSettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    thresholds_repo: MySQLThresholdRepository
    assessments_repo: MySQLAssessmentRepository

    threshold_manager: ThresholdTableManager
    grade_settings_service: GradeSettingsService
    assessment_service: AssessmentService


def build_container(*, db_config: dict, load_thresholds: bool = True) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    thresholds_repo = MySQLThresholdRepository(conn)
    assessments_repo = MySQLAssessmentRepository(conn)

    # One manager per process; both services share it so a table update applies to the next submission.
    threshold_manager = ThresholdTableManager()
    grade_settings_service = GradeSettingsService(thresholds_repo, threshold_manager)
    assessment_service = AssessmentService(assessments_repo, threshold_manager)

    if load_thresholds:
        grade_settings_service.load()

    return Container(
        conn=conn,
        thresholds_repo=thresholds_repo,
        assessments_repo=assessments_repo,
        threshold_manager=threshold_manager,
        grade_settings_service=grade_settings_service,
        assessment_service=assessment_service,
    )
