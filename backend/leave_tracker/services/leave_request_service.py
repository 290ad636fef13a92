"""
Leave request lifecycle.

A request is created Pending and moves once, to Approved or Rejected. Only
Pending requests can be edited or deleted. Every check runs before anything
is uploaded or written, so a refused operation leaves no trace.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from leave_tracker.core.exceptions import (
    CollaboratorError,
    LeaveTrackerError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    StateTransitionError,
    ValidationError,
)
from leave_tracker.core.validation import require_non_empty_list, require_non_empty_text
from leave_tracker.database.store import DocumentStore, Kind
from leave_tracker.integrations.google_drive import GoogleDriveClient
from leave_tracker.schemas.attachment import UploadedFile
from leave_tracker.schemas.employee import EmployeeRecord
from leave_tracker.schemas.leave_request import (
    APPROVED,
    PENDING,
    REJECTED,
    AttachmentPayload,
    BulkDeleteFailure,
    BulkDeleteResult,
    LeaveRequestDraft,
    LeaveRequestEdit,
    LeaveRequestRecord,
    LeaveRequestResult,
    QuotaCheck,
)
from leave_tracker.schemas.leave_type import LeaveTypeRecord
from leave_tracker.schemas.user import Actor
from leave_tracker.services import attachment_service, report_service
from leave_tracker.services.ledger_service import LeaveLedger, quota_warning
from leave_tracker.utils.dates import calculate_days
from leave_tracker.utils.generator import generate_record_id

logger = logging.getLogger(__name__)

QUOTA_APPROVAL = "approval"
QUOTA_ADVISORY = "advisory"
QUOTA_SUBMISSION = "submission"


class LeaveRequestService:
    def __init__(
        self,
        store: DocumentStore,
        drive: Optional[GoogleDriveClient] = None,
        quota_policy: str = QUOTA_APPROVAL,
    ):
        self.store = store
        self.drive = drive
        self.quota_policy = quota_policy

    # ─── READ ─────────────────────────────────────────────────────────────

    def list_requests(
        self,
        search: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[LeaveRequestRecord]:
        return report_service.filter_requests(
            self.store.get_all(Kind.leave_requests),
            search=search,
            employee_id=employee_id,
            status=status,
            start=start,
            end=end,
        )

    def get(self, request_id: str) -> LeaveRequestRecord:
        record = self.store.get_by_id(Kind.leave_requests, request_id)
        if record is None:
            raise NotFoundError("Leave request not found")
        return record

    def check_quota(self, employee_id: str, leave_type_id: str, requested_days: int) -> QuotaCheck:
        return self._ledger().check_quota(employee_id, leave_type_id, requested_days)

    # ─── TRANSITIONS ──────────────────────────────────────────────────────

    def create(self, draft: LeaveRequestDraft, actor: Actor) -> LeaveRequestResult:
        content = self._validate_draft(draft)
        employee, leave_type = self._resolve_references(draft)
        days = draft.approved_days or calculate_days(draft.start_date, draft.end_date)
        quota, warning = self._submission_quota(employee, leave_type, days)

        uploaded = self._upload(draft.attachment, content)
        record = LeaveRequestRecord(
            id=generate_record_id("LR"),
            employee_id=employee.id,
            employee_name=employee.name,
            designation=employee.designation,
            department=employee.department,
            leave_type_id=leave_type.id,
            leave_type_name=leave_type.name,
            start_date=draft.start_date,
            end_date=draft.end_date,
            approved_days=days,
            comments=draft.comments.strip(),
            status=PENDING,
            timestamp=datetime.now(timezone.utc),
            done_by=actor.id,
            attachment_file_id=uploaded.file_id if uploaded else None,
            attachment_url=uploaded.web_view_link if uploaded else None,
            attachment_file_name=draft.attachment.file_name if uploaded else None,
        )
        self._save(record, uploaded)

        logger.info("Leave request %s submitted for %s by %s", record.id, employee.name, actor.name)
        return LeaveRequestResult(request=record, quota=quota, warning=warning)

    def edit(self, request_id: str, draft: LeaveRequestEdit, actor: Actor) -> LeaveRequestResult:
        current = self.get(request_id)
        if current.status != PENDING:
            raise StateTransitionError("Cannot edit a request that is not pending")

        content = self._validate_draft(draft)
        employee, leave_type = self._resolve_references(draft)
        days = draft.approved_days or calculate_days(draft.start_date, draft.end_date)
        quota, warning = self._submission_quota(employee, leave_type, days)

        uploaded = self._upload(draft.attachment, content)
        attachment = {
            "attachment_file_id": current.attachment_file_id,
            "attachment_url": current.attachment_url,
            "attachment_file_name": current.attachment_file_name,
        }
        if uploaded:
            attachment = {
                "attachment_file_id": uploaded.file_id,
                "attachment_url": uploaded.web_view_link,
                "attachment_file_name": draft.attachment.file_name,
            }
        elif draft.remove_attachment:
            attachment = dict.fromkeys(attachment)

        # submission timestamp and submitter stay as they were
        record = current.model_copy(
            update={
                "employee_id": employee.id,
                "employee_name": employee.name,
                "designation": employee.designation,
                "department": employee.department,
                "leave_type_id": leave_type.id,
                "leave_type_name": leave_type.name,
                "start_date": draft.start_date,
                "end_date": draft.end_date,
                "approved_days": days,
                "comments": draft.comments.strip(),
                **attachment,
            }
        )
        self._save(record, uploaded)

        previous_file_id = attachment_service.attachment_file_id(current)
        if previous_file_id and (uploaded or draft.remove_attachment):
            attachment_service.discard_attachment(self.drive, previous_file_id)

        logger.info("Leave request %s edited by %s", record.id, actor.name)
        return LeaveRequestResult(request=record, quota=quota, warning=warning)

    def approve(self, request_id: str, actor: Actor) -> LeaveRequestRecord:
        record = self._pending_for_decision(request_id, actor)

        if self.quota_policy == QUOTA_APPROVAL:
            ledger = self._ledger()
            if record.leave_type_id in ledger.leave_types:
                quota = ledger.check_quota(record.employee_id, record.leave_type_id, record.approved_days)
                if not quota.within_limit:
                    raise QuotaExceededError(
                        quota_warning(record.employee_name, record.leave_type_name, quota),
                        quota.model_dump(),
                    )

        return self._decide(record, APPROVED, actor)

    def reject(self, request_id: str, actor: Actor) -> LeaveRequestRecord:
        record = self._pending_for_decision(request_id, actor)
        return self._decide(record, REJECTED, actor)

    def delete(self, request_id: str) -> None:
        record = self.get(request_id)
        if record.status != PENDING:
            raise StateTransitionError("Cannot delete a request that is not pending")

        self.store.delete(Kind.leave_requests, record.id)
        logger.info("Leave request %s deleted", record.id)
        attachment_service.discard_attachment(self.drive, attachment_service.attachment_file_id(record))

    def bulk_delete(self, request_ids: list[str]) -> BulkDeleteResult:
        """Delete one by one. Earlier deletions stand when a later one fails."""
        result = BulkDeleteResult(deleted=[], failed=[])
        for request_id in require_non_empty_list(request_ids, "Select at least one leave request to delete"):
            try:
                self.delete(request_id)
            except LeaveTrackerError as exc:
                result.failed.append(BulkDeleteFailure(id=request_id, detail=exc.message))
            else:
                result.deleted.append(request_id)
        return result

    # ─── HELPERS ──────────────────────────────────────────────────────────

    def _ledger(self) -> LeaveLedger:
        return LeaveLedger(
            self.store.get_all(Kind.leave_requests),
            self.store.get_all(Kind.leave_types),
        )

    def _validate_draft(self, draft: LeaveRequestDraft) -> Optional[bytes]:
        """Checks that need no lookups. Returns the decoded attachment, if any."""
        require_non_empty_text(draft.employee_id, "Employee")
        require_non_empty_text(draft.leave_type_id, "Leave type")
        if draft.end_date < draft.start_date:
            raise ValidationError("End date cannot be before start date")

        if draft.attachment is None:
            return None
        attachment_service.validate_attachment(draft.attachment.file_name, draft.attachment.mime_type)
        try:
            content = draft.attachment.decode()
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        attachment_service.validate_attachment(draft.attachment.file_name, draft.attachment.mime_type, len(content))
        return content

    def _resolve_references(self, draft: LeaveRequestDraft) -> tuple[EmployeeRecord, LeaveTypeRecord]:
        employee = self.store.get_by_id(Kind.employees, draft.employee_id)
        if employee is None:
            raise ValidationError("Selected employee does not exist")
        leave_type = self.store.get_by_id(Kind.leave_types, draft.leave_type_id)
        if leave_type is None:
            raise ValidationError("Selected leave type does not exist")
        return employee, leave_type

    def _submission_quota(
        self,
        employee: EmployeeRecord,
        leave_type: LeaveTypeRecord,
        days: int,
    ) -> tuple[QuotaCheck, Optional[str]]:
        quota = self.check_quota(employee.id, leave_type.id, days)
        warning = quota_warning(employee.name, leave_type.name, quota)
        if warning and self.quota_policy == QUOTA_SUBMISSION:
            raise QuotaExceededError(warning, quota.model_dump())
        return quota, warning

    def _upload(self, attachment: Optional[AttachmentPayload], content: Optional[bytes]) -> Optional[UploadedFile]:
        if attachment is None:
            return None
        drive = attachment_service.require_drive(self.drive)
        return drive.upload(content, attachment.file_name, attachment.mime_type.lower())

    def _save(self, record: LeaveRequestRecord, uploaded: Optional[UploadedFile]) -> None:
        try:
            self.store.put(Kind.leave_requests, record)
        except CollaboratorError:
            if uploaded:
                attachment_service.discard_attachment(self.drive, uploaded.file_id)
            raise

    def _pending_for_decision(self, request_id: str, actor: Actor) -> LeaveRequestRecord:
        if not actor.is_admin:
            raise PermissionDeniedError("Only the Admin can approve or reject leave requests")
        record = self.get(request_id)
        if record.status != PENDING:
            raise StateTransitionError(f"Leave request is already {record.status.lower()}")
        return record

    def _decide(self, record: LeaveRequestRecord, status: str, actor: Actor) -> LeaveRequestRecord:
        decided = record.model_copy(
            update={
                "status": status,
                "updated_by": actor.id,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self.store.put(Kind.leave_requests, decided)
        logger.info("Leave request %s %s by %s", record.id, status.lower(), actor.name)
        return decided
