"""Business services."""

from enque_desk.services.agent_service import AgentService
from enque_desk.services.auth_service import AuthService
from enque_desk.services.automation_service import AutomationService
from enque_desk.services.canned_reply_service import CannedReplyService
from enque_desk.services.category_service import CategoryService
from enque_desk.services.company_service import CompanyService
from enque_desk.services.health_service import HealthService
from enque_desk.services.microsoft_auth_service import MicrosoftAuthService
from enque_desk.services.notification_service import NotificationService
from enque_desk.services.report_service import ReportService
from enque_desk.services.team_service import TeamService
from enque_desk.services.ticket_service import TicketService
from enque_desk.services.user_service import UserService
from enque_desk.services.workspace_service import WorkspaceService

__all__ = [
    "AgentService",
    "AuthService",
    "AutomationService",
    "CannedReplyService",
    "CategoryService",
    "CompanyService",
    "HealthService",
    "MicrosoftAuthService",
    "NotificationService",
    "ReportService",
    "TeamService",
    "TicketService",
    "UserService",
    "WorkspaceService",
]
