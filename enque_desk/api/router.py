from fastapi import APIRouter

from enque_desk.api.routes.activities import router as activity_router
from enque_desk.api.routes.agents import router as agent_router
from enque_desk.api.routes.auth import router as auth_router
from enque_desk.api.routes.automations import router as automation_router
from enque_desk.api.routes.canned_replies import router as canned_reply_router
from enque_desk.api.routes.categories import router as category_router
from enque_desk.api.routes.companies import router as company_router
from enque_desk.api.routes.global_signature import router as global_signature_router
from enque_desk.api.routes.health import router as health_router
from enque_desk.api.routes.logs import router as logs_router
from enque_desk.api.routes.microsoft import router as microsoft_router
from enque_desk.api.routes.notifications import router as notification_router
from enque_desk.api.routes.reports import router as report_router
from enque_desk.api.routes.session import router as session_router
from enque_desk.api.routes.teams import router as team_router
from enque_desk.api.routes.tickets import router as ticket_router
from enque_desk.api.routes.users import router as user_router
from enque_desk.api.routes.workflows import router as workflow_router
from enque_desk.api.routes.workspaces import router as workspace_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(microsoft_router, tags=["auth"])
api_router.include_router(session_router, tags=["auth"])
api_router.include_router(workspace_router, tags=["workspaces"])
api_router.include_router(ticket_router, tags=["tickets"])
api_router.include_router(agent_router, tags=["agents"])
api_router.include_router(team_router, tags=["teams"])
api_router.include_router(company_router, tags=["companies"])
api_router.include_router(user_router, tags=["users"])
api_router.include_router(category_router, tags=["categories"])
api_router.include_router(canned_reply_router, tags=["canned-replies"])
api_router.include_router(global_signature_router, tags=["global-signature"])
api_router.include_router(automation_router, tags=["automations"])
api_router.include_router(workflow_router, tags=["workflows"])
api_router.include_router(notification_router, tags=["notifications"])
api_router.include_router(activity_router, tags=["activities"])
api_router.include_router(report_router, tags=["reports"])
api_router.include_router(logs_router, tags=["logs"])
