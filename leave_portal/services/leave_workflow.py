"""
Leave request lifecycle as seen by the portal.

    apply()            -> PENDING
    approve(id)        PENDING -> APPROVED
    reject(id, reason) PENDING -> REJECTED

APPROVED and REJECTED are terminal. The portal never decides whether a
transition is allowed; it validates the form, sends one request and lets
the leave API accept or refuse it. After every accepted mutation the list
is fetched again; the local snapshot is never patched in place.
"""
import logging
from datetime import date
from typing import List, Optional

from leave_portal.core.exceptions import AppException, FormValidationError, UpstreamError
from leave_portal.models.leave_request import LeaveAction
from leave_portal.schemas.leave import LeaveApplication, LeaveApproval, LeaveRecord
from leave_portal.services.api_client import LeaveApiClient, parse_body
from leave_portal.store import actions as a
from leave_portal.store.state import Store

logger = logging.getLogger(__name__)


class LeaveScope:
    MINE = "mine"   # GET /api/leaves/my-leaves
    ALL = "all"     # GET /api/leaves/all (approver view)
    PENDING = "pending"  # GET /api/leaves/pending


class LeaveWorkflow:
    def __init__(self, client: LeaveApiClient, store: Store):
        self.client = client
        self.store = store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def refresh(self, scope: str) -> List[LeaveRecord]:
        """Fetches the list for `scope` and replaces the snapshot wholesale."""
        self.store.dispatch(a.LeavesPending(scope=scope))
        try:
            if scope == LeaveScope.MINE:
                raw = await self.client.my_leaves()
            elif scope == LeaveScope.PENDING:
                raw = await self.client.pending_leaves()
            else:
                raw = await self.client.all_leaves()
            if not isinstance(raw, list):
                raise UpstreamError("Failed to load leaves", upstream_status=502)
            leaves = [parse_body(LeaveRecord, item, "Failed to load leaves") for item in raw]
        except AppException as e:
            self.store.dispatch(a.LeavesRejected(scope=scope, error=e.message))
            raise
        self.store.dispatch(a.LeavesFulfilled(scope=scope, leaves=leaves))
        return leaves

    async def _refetch_after_mutation(self, scope: str) -> None:
        # The mutation already succeeded; a failed refetch only leaves a list stale.
        # Every other cached scope may hold the changed leave too.
        cached = sorted(s for s in self.store.state.leave.snapshots if s != scope)
        for each in [scope] + cached:
            try:
                await self.refresh(each)
            except AppException as e:
                logger.warning(f"Refetch of '{each}' leaves failed after mutation: {e.message}")

    @staticmethod
    def _accepted_record(body) -> Optional[LeaveRecord]:
        """The mutation went through even if its echoed record is malformed."""
        try:
            return parse_body(LeaveRecord, body, "Unexpected response from leave service")
        except UpstreamError:
            return None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    @staticmethod
    def validate_application(
        from_date: Optional[date],
        to_date: Optional[date],
        subject: Optional[str],
        reason: Optional[str],
    ) -> LeaveApplication:
        if not from_date:
            raise FormValidationError("From date is required", field="fromDate")
        if not to_date:
            raise FormValidationError("To date is required", field="toDate")
        if to_date < from_date:
            raise FormValidationError("To date cannot be before from date", field="toDate")
        if not subject or not subject.strip():
            raise FormValidationError("Subject is required", field="subject")
        if not reason or not reason.strip():
            raise FormValidationError("Reason is required", field="reason")
        return LeaveApplication(
            from_date=from_date, to_date=to_date, subject=subject.strip(), reason=reason.strip()
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    async def _submit(self, call, refetch_scope: str):
        self.store.dispatch(a.SubmitStarted())
        error = None
        try:
            result = await call()
        except AppException as e:
            error = e.message
            raise
        finally:
            self.store.dispatch(a.SubmitFinished(error=error))
        await self._refetch_after_mutation(refetch_scope)
        return result

    async def apply(
        self,
        from_date: Optional[date],
        to_date: Optional[date],
        subject: Optional[str],
        reason: Optional[str],
    ) -> Optional[LeaveRecord]:
        application = self.validate_application(from_date, to_date, subject, reason)
        created = await self._submit(
            lambda: self.client.apply_leave(application.to_api()), LeaveScope.MINE
        )
        record = self._accepted_record(created)
        logger.info(f"Leave applied for {application.from_date} to {application.to_date}")
        return record

    async def approve(self, leave_id: str) -> Optional[LeaveRecord]:
        approval = LeaveApproval(leave_id=leave_id, action=LeaveAction.APPROVE, rejection_reason="")
        updated = await self._submit(
            lambda: self.client.process_leave(approval.to_api()), LeaveScope.ALL
        )
        logger.info(f"Leave {leave_id} approved")
        return self._accepted_record(updated)

    async def reject(self, leave_id: str, rejection_reason: Optional[str]) -> Optional[LeaveRecord]:
        if not rejection_reason or not rejection_reason.strip():
            raise FormValidationError("Rejection reason is required", field="rejectionReason")
        approval = LeaveApproval(
            leave_id=leave_id, action=LeaveAction.REJECT, rejection_reason=rejection_reason.strip()
        )
        updated = await self._submit(
            lambda: self.client.process_leave(approval.to_api()), LeaveScope.ALL
        )
        logger.info(f"Leave {leave_id} rejected")
        return self._accepted_record(updated)
