"""
Admin screens built on ListController

Each screen adds its own mutations and form checks on top of the shared
list behaviour. Form checks run before any request is made.
"""

from typing import Any, Dict, Optional, Type

from skillswap.api_client import SkillSwapAPIClient
from skillswap.endpoints import (
    ADMIN_USERS_PATH,
    EndpointSpec,
    HELP_SUPPORT,
    RECRUITMENT,
    REPORTS,
    SUPPORT_STATISTICS_PATH,
    VIDEOS_PATH,
    VISITORS,
)
from skillswap.exceptions import NetworkError, SkillSwapError, ValidationError
from skillswap.list_controller import ListController
from skillswap.logging_config import logger


def _require_text(value: Optional[str], message: str, field: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message, field=field)
    return value.strip()


class AdminScreen:
    """A list screen: one endpoint, one controller"""

    endpoint: EndpointSpec

    def __init__(self, api: SkillSwapAPIClient):
        self.api = api
        self.controller = ListController(self.endpoint, api)

    async def load(self) -> None:
        await self.controller.refresh()

    async def apply_filter(self, **partial: Any) -> None:
        await self.controller.apply_filter(**partial)


class HelpSupportScreen(AdminScreen):
    """Help & Support inbox with reply/status actions and counters"""

    endpoint = HELP_SUPPORT
    message_statuses = ("pending", "replied", "resolved")

    def __init__(self, api: SkillSwapAPIClient):
        super().__init__(api)
        self.stats: Dict[str, int] = {"total": 0, "pending": 0, "replied": 0, "resolved": 0}

    async def load(self) -> None:
        await super().load()
        await self.fetch_stats()

    async def apply_filter(self, **partial: Any) -> None:
        await super().apply_filter(**partial)
        await self.fetch_stats()

    async def fetch_stats(self, keep_previous: bool = True) -> Dict[str, int]:
        """
        Refresh counters.

        With keep_previous a failure is logged and the last known numbers are
        returned; otherwise the error propagates.
        """
        try:
            data = await self.api.get_json(SUPPORT_STATISTICS_PATH, fallback="Failed to fetch statistics")
        except SkillSwapError as e:
            logger.log_error_with_context(e, context="support statistics")
            if not keep_previous:
                raise
            return self.stats

        if isinstance(data, dict):
            for key in self.stats:
                value = data.get(key)
                if isinstance(value, int) and not isinstance(value, bool):
                    self.stats[key] = value
        return self.stats

    async def reply(self, message_id: str, text: str) -> Any:
        reply = _require_text(text, "Reply message is required", "reply")
        result = await self.controller.mutate_item(
            message_id, "reply", body={"reply": reply}, fallback="Failed to send reply. Please try again."
        )
        await self.fetch_stats()
        return result

    async def update_status(self, message_id: str, status: str) -> Any:
        if status not in self.message_statuses:
            raise ValidationError("Invalid status value", field="status")
        result = await self.controller.mutate_item(
            message_id, "status", method="PATCH", body={"status": status}, fallback="Failed to update status"
        )
        await self.fetch_stats()
        return result


class ReportsScreen(AdminScreen):
    """User reports, tabbed by report type"""

    endpoint = REPORTS

    async def set_type(self, report_type: str) -> None:
        await self.controller.apply_filter(extra={"type": report_type})

    async def resolve(self, report_id: str) -> Any:
        return await self.controller.mutate_item(report_id, "resolve")

    async def find_report(self, report_id: str, report_type: str) -> Dict[str, Any]:
        """Look a report up by id across every page of one type tab"""
        await self.controller.apply_filter(status="all", extra={"type": report_type})
        await self.controller.load_all()
        if self.controller.error:
            raise SkillSwapError(self.controller.error, code="FETCH_ERROR")
        for report in self.controller.items:
            if report.get(self.endpoint.id_field) == report_id:
                return report
        raise ValidationError(f"Report '{report_id}' not found", field="id")

    async def delete_video(self, report: Dict[str, Any]) -> Any:
        """Delete the reported video, then resolve the report"""
        video_id = report.get("videoId")
        if not video_id:
            raise ValidationError("This report has no video to delete", field="videoId")
        return await self._delete_then_resolve(
            report, f"{VIDEOS_PATH}/{video_id}", "Failed to delete video"
        )

    async def delete_account(self, report: Dict[str, Any]) -> Any:
        """Delete the reported user account, then resolve the report"""
        user_id = report.get("reportedUserId")
        if not user_id:
            raise ValidationError("This report has no account to delete", field="reportedUserId")
        return await self._delete_then_resolve(
            report, f"{ADMIN_USERS_PATH}/{user_id}", "Failed to delete user account"
        )

    async def _delete_then_resolve(self, report: Dict[str, Any], path: str, fallback: str) -> Any:
        report_id = report.get(self.endpoint.id_field)
        if not report_id:
            raise ValidationError("Report id is missing", field="id")

        self.controller.request.mutation_error = ""
        try:
            await self.api.send("DELETE", path, fallback=fallback)
        except SkillSwapError as e:
            self.controller.request.mutation_error = fallback if isinstance(e, NetworkError) else e.message
            logger.log_error_with_context(e, context=f"DELETE {path}")
            raise

        logger.info(f"DELETE {path} succeeded, resolving report {report_id}")
        return await self.resolve(report_id)


class RecruitmentScreen(AdminScreen):
    """Recruitment applications: approve into an employee, or reject"""

    endpoint = RECRUITMENT

    async def approve(self, application_id: str, employee_id: str, password: str) -> Any:
        if not (employee_id and employee_id.strip()) or not password:
            raise ValidationError("Please provide both Employee ID and Password", field="employeeId")
        return await self.controller.mutate_item(
            application_id,
            "approve",
            body={"employeeId": employee_id.strip(), "password": password},
            fallback="Failed to approve application",
        )

    async def reject(self, application_id: str, reason: str) -> Any:
        rejection_reason = _require_text(reason, "Please provide a rejection reason", "rejectionReason")
        return await self.controller.mutate_item(
            application_id,
            "reject",
            body={"rejectionReason": rejection_reason},
            fallback="Failed to reject application",
        )


class VisitorsScreen(AdminScreen):
    """Anonymous visitor log, narrowed by date window"""

    endpoint = VISITORS


SCREENS: Dict[str, Type[AdminScreen]] = {
    "messages": HelpSupportScreen,
    "reports": ReportsScreen,
    "applications": RecruitmentScreen,
    "visitors": VisitorsScreen,
}


def open_screen(name: str, api: SkillSwapAPIClient) -> AdminScreen:
    try:
        screen_cls = SCREENS[name]
    except KeyError:
        raise KeyError(f"Unknown screen '{name}'. Available: {', '.join(SCREENS)}") from None
    return screen_cls(api)
